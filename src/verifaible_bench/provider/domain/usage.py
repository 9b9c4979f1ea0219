"""TokenUsage value object — token counts for one or more provider rounds."""

from pydantic import BaseModel, Field


class TokenUsage(BaseModel, frozen=True):
    """Immutable token counts; add two values with ``+`` to accumulate."""

    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    def __add__(self, other: "TokenUsage") -> "TokenUsage":
        return TokenUsage(
            input_tokens=self.input_tokens + other.input_tokens,
            output_tokens=self.output_tokens + other.output_tokens,
        )
