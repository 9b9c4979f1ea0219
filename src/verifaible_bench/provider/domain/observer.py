"""ProviderObserver port — domain events emitted at the provider boundary."""

from typing import Protocol


class ProviderObserver(Protocol):
    """Observer port for provider adapter events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def provider_retry_scheduled(
        self,
        model: str,
        attempt: int,
        max_attempts: int,
        reason: str,
        backoff_seconds: float,
    ) -> None: ...

    def provider_request_failed(self, model: str, attempts: int, reason: str) -> None: ...
