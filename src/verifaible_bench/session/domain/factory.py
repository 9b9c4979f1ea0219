"""SessionFactory Protocol — structural interface for constructing Session instances."""

from typing import Protocol

from verifaible_bench.config.domain.model import ModelConfig
from verifaible_bench.session.domain.session import Session


class SessionFactory(Protocol):
    """Constructs a fresh Session for a given (model, case) pair."""

    def create(self, model: ModelConfig, case_id: str) -> Session: ...
