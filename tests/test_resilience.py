"""Tests for async retry with exponential backoff."""

from unittest.mock import AsyncMock, patch

import pytest

from devpulse.resilience import retry_async


class _Flaky:
    __name__ = "flaky"

    def __init__(self, failures: int, exc: type[Exception] = ConnectionError):
        self.failures = failures
        self.exc = exc
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc(f"failure {self.calls}")
        return "ok"


class TestRetryAsync:
    @pytest.mark.asyncio
    async def test_succeeds_first_time(self):
        flaky = _Flaky(0)
        with patch("devpulse.resilience.asyncio.sleep", new=AsyncMock()) as sleep:
            assert await retry_async()(flaky)() == "ok"
        assert flaky.calls == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self):
        flaky = _Flaky(2)
        with patch("devpulse.resilience.asyncio.sleep", new=AsyncMock()):
            assert await retry_async(max_attempts=3)(flaky)() == "ok"
        assert flaky.calls == 3

    @pytest.mark.asyncio
    async def test_exhausted_reraises_last_error(self):
        flaky = _Flaky(10)
        with patch("devpulse.resilience.asyncio.sleep", new=AsyncMock()):
            with pytest.raises(ConnectionError, match="failure 3"):
                await retry_async(max_attempts=3)(flaky)()
        assert flaky.calls == 3

    @pytest.mark.asyncio
    async def test_exponential_backoff_capped(self):
        flaky = _Flaky(10)
        decorated = retry_async(max_attempts=5, base_delay=1.0, max_delay=3.0)(flaky)
        with patch("devpulse.resilience.asyncio.sleep", new=AsyncMock()) as sleep:
            with pytest.raises(ConnectionError):
                await decorated()
        assert [c.args[0] for c in sleep.await_args_list] == [1.0, 2.0, 3.0, 3.0]

    @pytest.mark.asyncio
    async def test_unlisted_exception_not_retried(self):
        flaky = _Flaky(1, exc=KeyError)
        decorated = retry_async(exceptions=(ConnectionError,))(flaky)
        with patch("devpulse.resilience.asyncio.sleep", new=AsyncMock()):
            with pytest.raises(KeyError):
                await decorated()
        assert flaky.calls == 1

    @pytest.mark.asyncio
    async def test_should_retry_predicate(self):
        flaky = _Flaky(1)
        decorated = retry_async(should_retry=lambda e: False)(flaky)
        with patch("devpulse.resilience.asyncio.sleep", new=AsyncMock()) as sleep:
            with pytest.raises(ConnectionError):
                await decorated()
        assert flaky.calls == 1
        sleep.assert_not_awaited()

    def test_preserves_name(self):
        async def fetch_thing():
            return 1

        assert retry_async()(fetch_thing).__name__ == "fetch_thing"
