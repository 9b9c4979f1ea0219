"""BenchmarkRunner — runs every (model, case) pair and scores the transcripts."""

import asyncio
import time
import uuid
from collections.abc import Sequence

from verifaible_bench.config.domain.config import BenchConfig
from verifaible_bench.config.domain.model import ModelConfig
from verifaible_bench.core.errors import BenchError
from verifaible_bench.dataset.domain.case import TestCase
from verifaible_bench.dataset.domain.loader import TestSetLoader
from verifaible_bench.evaluation.domain.errors import RunSelectionError
from verifaible_bench.evaluation.domain.observer import BenchmarkObserver
from verifaible_bench.evaluation.domain.prompt import build_user_prompt
from verifaible_bench.evaluation.domain.run import BenchmarkRun
from verifaible_bench.evaluation.domain.summary import RunSummary
from verifaible_bench.scoring.domain.engine import score_session
from verifaible_bench.session.domain.factory import SessionFactory
from verifaible_bench.session.domain.result import SessionStatus


class BenchmarkRunner:
    """Runs the benchmark matrix: loads cases, runs sessions, scores results.

    The runner receives a loader and a session factory rather than building
    them, so tests can swap in fakes without touching the orchestration.
    """

    def __init__(
        self,
        config: BenchConfig,
        dataset_loader: TestSetLoader,
        session_factory: SessionFactory,
        observer: BenchmarkObserver,
    ) -> None:
        self._config = config
        self._dataset_loader = dataset_loader
        self._session_factory = session_factory
        self._observer = observer

    async def run(
        self,
        models: Sequence[str] | None = None,
        case_ids: Sequence[str] | None = None,
    ) -> RunSummary:
        """Execute every selected (model, case) run and return a RunSummary.

        Runs execute concurrently, bounded by execution.max_concurrent. A
        failed session is recorded unscored and does not stop the others.

        Raises:
            RunSelectionError: if a filter names an unknown model or case.
            DatasetLoadError: if the test set cannot be loaded.
        """
        run_id = str(uuid.uuid4())
        selected_models = self._select_models(names=models)
        load_result = self._dataset_loader.load(config=self._config.dataset)
        cases = _select_cases(cases=load_result.cases, case_ids=case_ids)

        self._observer.benchmark_started(
            run_id=run_id,
            total_cases=len(cases),
            model_names=[model.name for model in selected_models],
            max_concurrent=self._config.execution.max_concurrent,
        )
        started_at = time.monotonic()

        results: list[BenchmarkRun] = []
        sem = asyncio.Semaphore(self._config.execution.max_concurrent)
        completed_by_model: dict[str, int] = {model.name: 0 for model in selected_models}

        try:
            async with asyncio.TaskGroup() as tg:
                for model in selected_models:
                    for case in cases:
                        tg.create_task(
                            self._run_one(
                                sem=sem,
                                run_id=run_id,
                                model=model,
                                case=case,
                                results=results,
                                completed_by_model=completed_by_model,
                                total_per_model=len(cases),
                            )
                        )
        except* BenchError as eg:
            raise eg.exceptions[0]

        results.sort(key=lambda r: (r.model, r.case.id))

        self._observer.benchmark_completed(
            run_id=run_id,
            total_runs=len(results),
            failed_runs=sum(1 for r in results if r.failed),
            elapsed_seconds=time.monotonic() - started_at,
        )

        return RunSummary(
            run_id=run_id,
            dataset_sha256=load_result.sha256,
            config_name=self._config.name,
            runs=results,
        )

    async def _run_one(
        self,
        sem: asyncio.Semaphore,
        run_id: str,
        model: ModelConfig,
        case: TestCase,
        results: list[BenchmarkRun],
        completed_by_model: dict[str, int],
        total_per_model: int,
    ) -> None:
        """Run one session under the semaphore, score it, and record it."""
        async with sem:
            self._observer.run_started(run_id=run_id, model=model.name, case_id=case.id)
            session = self._session_factory.create(model=model, case_id=case.id)
            transcript = await session.run(prompt=build_user_prompt(case))

        if transcript.status is SessionStatus.FAILED:
            score = None
            self._observer.run_failed(
                run_id=run_id,
                model=model.name,
                case_id=case.id,
                reason=transcript.error or "unknown error",
            )
        else:
            score = score_session(case=case, transcript=transcript)
            self._observer.run_completed(
                run_id=run_id,
                model=model.name,
                case_id=case.id,
                status=transcript.status.value,
                total_score=score.total_score,
            )

        results.append(
            BenchmarkRun(
                run_id=run_id,
                model=model.name,
                case=case,
                transcript=transcript,
                score=score,
            )
        )
        # Single-threaded event loop: no await between read and write.
        completed_by_model[model.name] += 1
        self._observer.benchmark_progress(
            run_id=run_id,
            model=model.name,
            completed=completed_by_model[model.name],
            total=total_per_model,
        )

    def _select_models(self, names: Sequence[str] | None) -> list[ModelConfig]:
        if not names:
            return list(self._config.models)
        known = {model.name for model in self._config.models}
        unknown = [name for name in names if name not in known]
        if unknown:
            raise RunSelectionError(kind="model", unknown=unknown)
        wanted = set(names)
        return [model for model in self._config.models if model.name in wanted]


def _select_cases(cases: list[TestCase], case_ids: Sequence[str] | None) -> list[TestCase]:
    if not case_ids:
        return cases
    known = {case.id for case in cases}
    unknown = [case_id for case_id in case_ids if case_id not in known]
    if unknown:
        raise RunSelectionError(kind="case", unknown=unknown)
    wanted = set(case_ids)
    return [case for case in cases if case.id in wanted]
