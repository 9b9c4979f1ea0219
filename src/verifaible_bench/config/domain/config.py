"""Top-level BenchConfig aggregate — the root configuration object."""

from pydantic import BaseModel, Field, model_validator

from verifaible_bench.config.domain.dataset import DatasetConfig
from verifaible_bench.config.domain.execution import ExecutionConfig
from verifaible_bench.config.domain.model import ModelConfig
from verifaible_bench.config.domain.provider import ProviderConfig
from verifaible_bench.config.domain.session import SessionConfig
from verifaible_bench.config.domain.tools import ToolServiceConfig

type ProviderName = str


class BenchConfig(BaseModel, frozen=True):
    """Root configuration aggregate for a verifaible-bench run."""

    name: str = Field(min_length=1)
    version: str = Field(min_length=1)
    dataset: DatasetConfig
    providers: dict[ProviderName, ProviderConfig] = Field(min_length=1)
    models: list[ModelConfig] = Field(min_length=1)
    session: SessionConfig = Field(default_factory=SessionConfig)
    tools: ToolServiceConfig = Field(default_factory=ToolServiceConfig)
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)

    @model_validator(mode="after")
    def _unique_model_names(self) -> "BenchConfig":
        names = [model.name for model in self.models]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"duplicate model name(s): {', '.join(duplicates)}")
        return self
