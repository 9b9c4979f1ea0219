"""Observer port for the evaluation domain — defines events in domain language."""

from typing import Protocol


class BenchmarkObserver(Protocol):
    """Observer port emitting structured events during a benchmark run.

    Implementations may log to structlog, render progress, or record for tests.
    """

    def benchmark_started(
        self,
        run_id: str,
        total_cases: int,
        model_names: list[str],
        max_concurrent: int,
    ) -> None: ...

    def benchmark_completed(
        self, run_id: str, total_runs: int, failed_runs: int, elapsed_seconds: float
    ) -> None: ...

    def benchmark_progress(self, run_id: str, model: str, completed: int, total: int) -> None: ...

    def run_started(self, run_id: str, model: str, case_id: str) -> None: ...

    def run_completed(
        self, run_id: str, model: str, case_id: str, status: str, total_score: int
    ) -> None: ...

    def run_failed(self, run_id: str, model: str, case_id: str, reason: str) -> None: ...
