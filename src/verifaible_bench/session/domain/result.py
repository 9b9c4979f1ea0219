"""SessionResult — the full transcript of one agent session."""

from collections.abc import Iterator
from enum import StrEnum

from pydantic import BaseModel

from verifaible_bench.provider.domain.usage import TokenUsage
from verifaible_bench.session.domain.turn import ToolCallRecord, Turn

MAX_ROUNDS_ANSWER = "[Max round-trips exceeded]"


class SessionStatus(StrEnum):
    COMPLETED = "completed"
    MAX_ROUNDS_EXCEEDED = "max_rounds_exceeded"
    FAILED = "failed"


class SessionResult(BaseModel, frozen=True):
    """Immutable transcript handed to the scoring engine and the result writer."""

    model: str
    case_id: str
    status: SessionStatus
    answer: str
    turns: list[Turn]
    usage: TokenUsage
    round_trips: int
    tool_call_count: int
    duration_ms: int
    error: str | None = None

    def tool_calls(self) -> Iterator[ToolCallRecord]:
        """Every tool call of the session, in dispatch order."""
        for turn in self.turns:
            yield from turn.tool_calls
