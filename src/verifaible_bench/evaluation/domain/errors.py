"""Error types raised when selecting which runs to execute."""

from verifaible_bench.core.errors import BenchError


class RunSelectionError(BenchError):
    """Raised when a model or case filter names something that does not exist."""

    def __init__(self, kind: str, unknown: list[str]) -> None:
        self.unknown = unknown
        super().__init__(f"Failed to select runs: unknown {kind}: {', '.join(unknown)}")
