"""StructlogBenchmarkObserver — production observer that delegates to structlog."""

import structlog


class StructlogBenchmarkObserver:
    """Logs benchmark events to structlog.

    Does NOT inherit from BenchmarkObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def benchmark_started(
        self,
        run_id: str,
        total_cases: int,
        model_names: list[str],
        max_concurrent: int,
    ) -> None:
        self._log.info(
            "benchmark.started",
            run_id=run_id,
            total_cases=total_cases,
            model_names=model_names,
            max_concurrent=max_concurrent,
        )

    def benchmark_completed(
        self, run_id: str, total_runs: int, failed_runs: int, elapsed_seconds: float
    ) -> None:
        self._log.info(
            "benchmark.completed",
            run_id=run_id,
            total_runs=total_runs,
            failed_runs=failed_runs,
            elapsed_seconds=round(elapsed_seconds, 2),
        )

    def benchmark_progress(self, run_id: str, model: str, completed: int, total: int) -> None:
        self._log.info(
            "benchmark.progress",
            run_id=run_id,
            model=model,
            completed=completed,
            total=total,
            percent=round(100.0 * completed / total, 1) if total else 0.0,
        )

    def run_started(self, run_id: str, model: str, case_id: str) -> None:
        self._log.info("benchmark.run.started", run_id=run_id, model=model, case_id=case_id)

    def run_completed(
        self, run_id: str, model: str, case_id: str, status: str, total_score: int
    ) -> None:
        self._log.info(
            "benchmark.run.completed",
            run_id=run_id,
            model=model,
            case_id=case_id,
            status=status,
            total_score=total_score,
        )

    def run_failed(self, run_id: str, model: str, case_id: str, reason: str) -> None:
        self._log.error(
            "benchmark.run.failed",
            run_id=run_id,
            model=model,
            case_id=case_id,
            reason=reason,
        )
