"""Offline re-scoring of persisted runs with the current scoring engine."""

from verifaible_bench.dataset.domain.case import TestCase
from verifaible_bench.evaluation.domain.errors import RunSelectionError
from verifaible_bench.evaluation.domain.run import BenchmarkRun
from verifaible_bench.scoring.domain.engine import score_session


def rescore_runs(runs: list[BenchmarkRun], cases: list[TestCase]) -> list[BenchmarkRun]:
    """Score every run again against the given cases.

    Each run takes the case with its id from ``cases``, so corrected expected
    answers apply. Failed runs stay unscored.

    Raises:
        RunSelectionError: listing every run whose case id is not in cases.
    """
    by_id = {case.id: case for case in cases}
    missing = sorted({run.case.id for run in runs if run.case.id not in by_id})
    if missing:
        raise RunSelectionError(kind="case", unknown=missing)

    rescored: list[BenchmarkRun] = []
    for run in runs:
        case = by_id[run.case.id]
        score = None if run.failed else score_session(case=case, transcript=run.transcript)
        rescored.append(run.model_copy(update={"case": case, "score": score}))
    return rescored
