"""CompositeBenchmarkObserver — fans out all events to a list of observers."""

from verifaible_bench.evaluation.domain.observer import BenchmarkObserver


class CompositeBenchmarkObserver:
    """Delegates every observer event to each observer in order.

    Does NOT inherit from BenchmarkObserver (structural typing via Protocol).
    """

    def __init__(self, observers: list[BenchmarkObserver]) -> None:
        self._observers = observers

    def benchmark_started(
        self,
        run_id: str,
        total_cases: int,
        model_names: list[str],
        max_concurrent: int,
    ) -> None:
        for obs in self._observers:
            obs.benchmark_started(
                run_id=run_id,
                total_cases=total_cases,
                model_names=model_names,
                max_concurrent=max_concurrent,
            )

    def benchmark_completed(
        self, run_id: str, total_runs: int, failed_runs: int, elapsed_seconds: float
    ) -> None:
        for obs in self._observers:
            obs.benchmark_completed(
                run_id=run_id,
                total_runs=total_runs,
                failed_runs=failed_runs,
                elapsed_seconds=elapsed_seconds,
            )

    def benchmark_progress(self, run_id: str, model: str, completed: int, total: int) -> None:
        for obs in self._observers:
            obs.benchmark_progress(run_id=run_id, model=model, completed=completed, total=total)

    def run_started(self, run_id: str, model: str, case_id: str) -> None:
        for obs in self._observers:
            obs.run_started(run_id=run_id, model=model, case_id=case_id)

    def run_completed(
        self, run_id: str, model: str, case_id: str, status: str, total_score: int
    ) -> None:
        for obs in self._observers:
            obs.run_completed(
                run_id=run_id,
                model=model,
                case_id=case_id,
                status=status,
                total_score=total_score,
            )

    def run_failed(self, run_id: str, model: str, case_id: str, reason: str) -> None:
        for obs in self._observers:
            obs.run_failed(run_id=run_id, model=model, case_id=case_id, reason=reason)
