"""Structlog implementation of the SessionObserver port."""

import structlog


class StructlogSessionObserver:
    """Delegates session events to structlog.

    Satisfies the SessionObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def session_started(self, model: str, case_id: str) -> None:
        self._log.info("session.started", model=model, case_id=case_id)

    def session_round_started(self, model: str, case_id: str, round_index: int) -> None:
        self._log.debug(
            "session.round_started", model=model, case_id=case_id, round_index=round_index
        )

    def session_tool_calls_recovered(self, model: str, case_id: str, count: int) -> None:
        self._log.info(
            "session.tool_calls_recovered", model=model, case_id=case_id, count=count
        )

    def session_tool_call_completed(
        self, model: str, case_id: str, tool: str, duration_ms: int
    ) -> None:
        self._log.debug(
            "tool.call_completed",
            model=model,
            case_id=case_id,
            tool=tool,
            duration_ms=duration_ms,
        )

    def session_tool_call_failed(
        self, model: str, case_id: str, tool: str, reason: str
    ) -> None:
        self._log.warning(
            "tool.call_failed", model=model, case_id=case_id, tool=tool, reason=reason
        )

    def session_completed(
        self,
        model: str,
        case_id: str,
        status: str,
        round_trips: int,
        tool_call_count: int,
        duration_ms: int,
    ) -> None:
        self._log.info(
            "session.completed",
            model=model,
            case_id=case_id,
            status=status,
            round_trips=round_trips,
            tool_call_count=tool_call_count,
            duration_ms=duration_ms,
        )

    def session_failed(self, model: str, case_id: str, reason: str) -> None:
        self._log.error("session.failed", model=model, case_id=case_id, reason=reason)
