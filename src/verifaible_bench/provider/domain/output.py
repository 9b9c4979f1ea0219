"""TurnOutput — one provider response as a tagged list of output items."""

import json
import uuid
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from verifaible_bench.provider.domain.usage import TokenUsage


class TextOutput(BaseModel, frozen=True):
    type: Literal["text"] = "text"
    text: str


class ToolCallOutput(BaseModel, frozen=True):
    type: Literal["tool_call"] = "tool_call"
    call_id: str = Field(min_length=1)
    name: str
    arguments_json: str


class ReasoningOutput(BaseModel, frozen=True):
    type: Literal["reasoning"] = "reasoning"
    text: str


OutputItem = Annotated[
    TextOutput | ToolCallOutput | ReasoningOutput, Field(discriminator="type")
]


class TurnOutput(BaseModel, frozen=True):
    """Canonical provider response, in the order the provider emitted items."""

    response_id: str | None = None
    items: list[OutputItem] = Field(default_factory=list)
    usage: TokenUsage = Field(default_factory=TokenUsage)

    @property
    def text(self) -> str:
        return "\n".join(item.text for item in self.items if isinstance(item, TextOutput))

    @property
    def reasoning(self) -> str | None:
        parts = [item.text for item in self.items if isinstance(item, ReasoningOutput)]
        return "\n".join(parts) if parts else None

    @property
    def tool_calls(self) -> list[ToolCallOutput]:
        return [item for item in self.items if isinstance(item, ToolCallOutput)]


def new_call_id() -> str:
    """Generate a call id for tool calls the provider left unnamed."""
    return f"call_{uuid.uuid4().hex[:24]}"


def arguments_json_text(arguments: Any) -> str:
    """Tool-call arguments as JSON text.

    Some backends send the arguments as an object instead of a string; those
    are serialized. Missing arguments become "{}".
    """
    if arguments is None or arguments == "":
        return "{}"
    if isinstance(arguments, str):
        return arguments
    return json.dumps(arguments, ensure_ascii=False)
