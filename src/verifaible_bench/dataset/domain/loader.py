"""TestSetLoader Protocol — structural interface for loading benchmark cases."""

from typing import Protocol

from verifaible_bench.config.domain.dataset import DatasetConfig
from verifaible_bench.dataset.domain.load_result import TestSetLoadResult


class TestSetLoader(Protocol):
    """Loads benchmark cases from the test set described by DatasetConfig."""

    def load(self, config: DatasetConfig) -> TestSetLoadResult: ...
