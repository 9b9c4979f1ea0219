"""ToolCallRecord and Turn value objects — the per-round log of a session."""

from pydantic import BaseModel, Field

from verifaible_bench.provider.domain.usage import TokenUsage

TOOL_ERROR_PREFIX = "Tool error:"


class ToolCallRecord(BaseModel, frozen=True):
    """One dispatched tool call and the text that was returned to the model."""

    call_id: str
    name: str
    arguments: dict[str, object]  # empty when the arguments JSON did not parse
    arguments_json: str
    result_text: str  # after truncation, exactly what the model saw
    duration_ms: int
    is_error: bool = False
    recovered: bool = False  # recovered from text by the fallback extractor


class Turn(BaseModel, frozen=True):
    """One provider round. Reasoning is kept verbatim and never scored."""

    index: int
    text: str
    reasoning: str | None = None
    tool_calls: list[ToolCallRecord] = Field(default_factory=list)
    usage: TokenUsage = Field(default_factory=TokenUsage)
