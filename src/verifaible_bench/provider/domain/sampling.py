"""SamplingParams — per-request generation settings."""

from pydantic import BaseModel, Field


class SamplingParams(BaseModel, frozen=True):
    temperature: float | None = Field(default=None, ge=0.0)
    max_output_tokens: int | None = Field(default=None, ge=1)
