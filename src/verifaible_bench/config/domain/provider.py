"""Provider configuration models — one entry per LLM backend endpoint."""

from typing import Literal

from pydantic import BaseModel, Field

type ProviderType = Literal["responses", "chat_completions"]


class RetryConfig(BaseModel, frozen=True):
    """Bounded exponential backoff applied to every provider call."""

    max_attempts: int = Field(default=5, ge=1)
    initial_backoff_seconds: float = Field(default=15.0, ge=0)
    backoff_multiplier: float = Field(default=2.0, ge=1)
    max_backoff_seconds: float = Field(default=120.0, ge=0)


class ProviderConfig(BaseModel, frozen=True):
    type: ProviderType
    base_url: str = Field(min_length=1)
    api_key: str = Field(min_length=1)
    headers: dict[str, str] = Field(default_factory=dict)
    retry: RetryConfig = Field(default_factory=RetryConfig)
