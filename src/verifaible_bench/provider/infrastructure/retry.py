"""Bounded exponential-backoff retry for provider calls."""

import asyncio
from collections.abc import Awaitable, Callable

import httpx
import openai

from verifaible_bench.config.domain.provider import RetryConfig
from verifaible_bench.provider.domain.observer import ProviderObserver
from verifaible_bench.provider.infrastructure.errors import ProviderTransportError

RETRYABLE_STATUS_CODES = frozenset({408, 409, 429, 500, 502, 503, 504})

# litellm's exception classes subclass these openai ones.
_RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    openai.APIConnectionError,
    openai.RateLimitError,
    openai.InternalServerError,
    httpx.TransportError,
)


def is_retryable(exc: Exception) -> bool:
    """True for rate limiting, timeouts, connection failures and 5xx responses."""
    if isinstance(exc, _RETRYABLE_EXCEPTIONS):
        return True
    status_code = getattr(exc, "status_code", None)
    return isinstance(status_code, int) and status_code in RETRYABLE_STATUS_CODES


def backoff_seconds(policy: RetryConfig, attempt: int) -> float:
    """Delay before retry number ``attempt`` (1-based), capped at the policy maximum."""
    delay = policy.initial_backoff_seconds * policy.backoff_multiplier ** (attempt - 1)
    return min(delay, policy.max_backoff_seconds)


async def call_with_retry[T](
    operation: Callable[[], Awaitable[T]],
    policy: RetryConfig,
    model: str,
    observer: ProviderObserver,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Run operation, retrying retryable failures up to policy.max_attempts times.

    Raises:
        ProviderTransportError: on a non-retryable failure (immediately) or when
            the final attempt fails.
    """
    for attempt in range(1, policy.max_attempts + 1):
        try:
            return await operation()
        except Exception as exc:
            reason = f"{type(exc).__name__}: {exc}"
            if not is_retryable(exc):
                observer.provider_request_failed(model=model, attempts=attempt, reason=reason)
                raise ProviderTransportError(reason=reason) from exc
            if attempt == policy.max_attempts:
                observer.provider_request_failed(model=model, attempts=attempt, reason=reason)
                raise ProviderTransportError(
                    reason=f"giving up after {attempt} attempts: {reason}",
                    retriable=True,
                ) from exc

            delay = backoff_seconds(policy=policy, attempt=attempt)
            observer.provider_retry_scheduled(
                model=model,
                attempt=attempt,
                max_attempts=policy.max_attempts,
                reason=reason,
                backoff_seconds=delay,
            )
            await sleep(delay)

    raise AssertionError("unreachable: max_attempts >= 1")
