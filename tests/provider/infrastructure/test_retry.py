"""Tests for bounded exponential-backoff retry."""

import httpx
import pytest

from tests.provider.fake_observer import FakeProviderObserver
from verifaible_bench.config.domain.provider import RetryConfig
from verifaible_bench.provider.infrastructure.errors import ProviderTransportError
from verifaible_bench.provider.infrastructure.retry import (
    backoff_seconds,
    call_with_retry,
    is_retryable,
)


class StatusError(Exception):
    def __init__(self, status_code: int) -> None:
        super().__init__(f"status {status_code}")
        self.status_code = status_code


class FlakyOperation:
    """Raises the scripted exceptions in order, then returns the value."""

    def __init__(self, failures: list[Exception], value: str = "ok") -> None:
        self._failures = list(failures)
        self._value = value
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self._failures:
            raise self._failures.pop(0)
        return self._value


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


_POLICY = RetryConfig(
    max_attempts=4, initial_backoff_seconds=15, backoff_multiplier=2, max_backoff_seconds=40
)


class TestBackoff:
    def test_exponential_and_capped(self) -> None:
        assert [backoff_seconds(_POLICY, attempt) for attempt in (1, 2, 3, 4)] == [15, 30, 40, 40]


class TestIsRetryable:
    @pytest.mark.parametrize("status", [408, 409, 429, 500, 502, 503, 504])
    def test_retryable_status_codes(self, status: int) -> None:
        assert is_retryable(StatusError(status))

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 422])
    def test_client_errors_are_final(self, status: int) -> None:
        assert not is_retryable(StatusError(status))

    def test_transport_errors_retry(self) -> None:
        assert is_retryable(httpx.ReadTimeout("slow"))

    def test_plain_errors_are_final(self) -> None:
        assert not is_retryable(ValueError("bad"))


class TestCallWithRetry:
    async def test_succeeds_after_transient_failures(self) -> None:
        operation = FlakyOperation([StatusError(429), StatusError(503)])
        observer = FakeProviderObserver()
        sleep = RecordingSleep()

        result = await call_with_retry(
            operation=operation, policy=_POLICY, model="m", observer=observer, sleep=sleep
        )

        assert result == "ok"
        assert operation.calls == 3
        assert sleep.delays == [15, 30]
        assert [e.attempt for e in observer.retries] == [1, 2]
        assert observer.retries[0].max_attempts == 4
        assert observer.failures == []

    async def test_gives_up_after_max_attempts(self) -> None:
        operation = FlakyOperation([StatusError(500)] * 4)
        observer = FakeProviderObserver()
        sleep = RecordingSleep()

        with pytest.raises(ProviderTransportError, match="giving up after 4 attempts") as exc_info:
            await call_with_retry(
                operation=operation, policy=_POLICY, model="m", observer=observer, sleep=sleep
            )

        assert exc_info.value.retriable is True
        assert operation.calls == 4
        assert sleep.delays == [15, 30, 40]
        assert observer.failures[0].attempts == 4

    async def test_non_retryable_fails_immediately(self) -> None:
        operation = FlakyOperation([StatusError(401)])
        observer = FakeProviderObserver()
        sleep = RecordingSleep()

        with pytest.raises(ProviderTransportError, match="status 401") as exc_info:
            await call_with_retry(
                operation=operation, policy=_POLICY, model="m", observer=observer, sleep=sleep
            )

        assert exc_info.value.retriable is False
        assert operation.calls == 1
        assert sleep.delays == []
        assert observer.retries == []
