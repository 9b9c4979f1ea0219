"""Structlog implementation of the ProviderObserver port."""

import structlog


class StructlogProviderObserver:
    """Delegates provider events to structlog.

    Satisfies the ProviderObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def provider_retry_scheduled(
        self,
        model: str,
        attempt: int,
        max_attempts: int,
        reason: str,
        backoff_seconds: float,
    ) -> None:
        self._log.warning(
            "provider.retry_scheduled",
            model=model,
            attempt=attempt,
            max_attempts=max_attempts,
            reason=reason,
            backoff_seconds=backoff_seconds,
        )

    def provider_request_failed(self, model: str, attempts: int, reason: str) -> None:
        self._log.error(
            "provider.request_failed",
            model=model,
            attempts=attempts,
            reason=reason,
        )
