"""Error types raised by dataset infrastructure."""

from verifaible_bench.core.errors import BenchError


class DatasetLoadError(BenchError):
    """Raised when the test set file cannot be read or contains invalid cases."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to load test set: {reason}")
