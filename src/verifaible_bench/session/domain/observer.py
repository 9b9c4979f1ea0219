"""SessionObserver port — domain events emitted by the orchestration loop."""

from typing import Protocol


class SessionObserver(Protocol):
    """Observer port for session events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def session_started(self, model: str, case_id: str) -> None: ...

    def session_round_started(self, model: str, case_id: str, round_index: int) -> None: ...

    def session_tool_calls_recovered(self, model: str, case_id: str, count: int) -> None: ...

    def session_tool_call_completed(
        self, model: str, case_id: str, tool: str, duration_ms: int
    ) -> None: ...

    def session_tool_call_failed(
        self, model: str, case_id: str, tool: str, reason: str
    ) -> None: ...

    def session_completed(
        self,
        model: str,
        case_id: str,
        status: str,
        round_trips: int,
        tool_call_count: int,
        duration_ms: int,
    ) -> None: ...

    def session_failed(self, model: str, case_id: str, reason: str) -> None: ...
