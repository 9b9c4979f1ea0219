"""Error types raised by tool infrastructure."""

from verifaible_bench.core.errors import BenchError


class ToolServiceError(BenchError):
    """Raised when a remote tool endpoint fails or returns a non-2xx response."""

    def __init__(self, service: str, reason: str) -> None:
        super().__init__(f"Failed to call {service}: {reason}")
