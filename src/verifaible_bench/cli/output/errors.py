"""Error types raised when reading persisted benchmark output."""

from pathlib import Path

from verifaible_bench.core.errors import BenchError


class RunsFileError(BenchError):
    """Raised when a runs JSONL file is missing or holds invalid records."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to read runs file {path}: {reason}")
