"""Error types raised by provider infrastructure."""

from verifaible_bench.core.errors import BenchError


class ProviderTransportError(BenchError):
    """Raised when a provider call fails for good: retries exhausted or non-retryable."""

    def __init__(self, reason: str, retriable: bool = False) -> None:
        super().__init__(f"Failed to call provider: {reason}", retriable=retriable)


class ProviderTypeNotSupportedError(BenchError):
    """Raised when a provider type in config is not a known wire protocol."""

    def __init__(self, provider_type: str) -> None:
        super().__init__(
            f"Failed to create provider adapter: unsupported provider type '{provider_type}'"
        )
