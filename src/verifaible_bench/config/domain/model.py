"""Model configuration — a model under test and the provider that serves it."""

from pydantic import BaseModel, Field


class ModelConfig(BaseModel, frozen=True):
    name: str = Field(min_length=1)
    provider: str = Field(min_length=1)
