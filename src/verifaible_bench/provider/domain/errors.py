"""Error types raised by the provider domain."""

from verifaible_bench.core.errors import BenchError


class ConversationOrderError(BenchError):
    """Raised when an append would break the tool-call / tool-result pairing."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to append conversation item: {reason}")
