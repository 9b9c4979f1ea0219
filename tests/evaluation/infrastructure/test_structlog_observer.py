"""Tests for the structlog observers' event names and fields."""

from structlog.testing import capture_logs

from verifaible_bench.evaluation.infrastructure.observer import StructlogBenchmarkObserver
from verifaible_bench.session.infrastructure.observer import StructlogSessionObserver


class TestStructlogBenchmarkObserver:
    def test_run_failed_logged_as_error(self) -> None:
        observer = StructlogBenchmarkObserver()

        with capture_logs() as logs:
            observer.run_failed(run_id="r", model="m", case_id="c", reason="timeout")

        assert logs[0]["event"] == "benchmark.run.failed"
        assert logs[0]["log_level"] == "error"
        assert logs[0]["reason"] == "timeout"

    def test_completed_rounds_elapsed(self) -> None:
        observer = StructlogBenchmarkObserver()

        with capture_logs() as logs:
            observer.benchmark_completed(
                run_id="r", total_runs=4, failed_runs=1, elapsed_seconds=12.3456
            )

        assert logs[0]["event"] == "benchmark.completed"
        assert logs[0]["elapsed_seconds"] == 12.35


class TestStructlogSessionObserver:
    def test_tool_call_failed_is_a_warning(self) -> None:
        observer = StructlogSessionObserver()

        with capture_logs() as logs:
            observer.session_tool_call_failed(
                model="m", case_id="c", tool="web_fetch", reason="Tool error: 502"
            )

        assert logs[0]["event"] == "tool.call_failed"
        assert logs[0]["log_level"] == "warning"
        assert logs[0]["tool"] == "web_fetch"
