"""Tests for retry with backoff."""

from unittest.mock import patch

import httpx
import pytest

from servers.event_finder.resilience.retry import backoff_delay, retry_once, retry_with_backoff


class TestBackoffDelay:
    def test_grows_exponentially_without_jitter(self):
        delays = [backoff_delay(n, base_delay=0.1, max_delay=10.0, jitter=False) for n in range(3)]
        assert delays == pytest.approx([0.1, 0.2, 0.4])

    def test_capped_at_max_delay(self):
        assert backoff_delay(10, base_delay=1.0, max_delay=5.0, jitter=False) == 5.0

    def test_jitter_stays_within_half_to_one_and_a_half(self):
        for _ in range(20):
            delay = backoff_delay(0, base_delay=1.0, max_delay=10.0, jitter=True)
            assert 0.5 <= delay <= 1.5


class TestRetryWithBackoff:
    """Retrying upstream calls that fail in transit."""

    @pytest.mark.asyncio
    async def test_returns_on_success(self):
        @retry_with_backoff(max_attempts=3)
        async def success():
            return "ok"

        assert await success() == "ok"

    @pytest.mark.asyncio
    async def test_retries_on_failure(self):
        """A flaky upstream is retried until it answers."""
        call_count = 0

        @retry_with_backoff(max_attempts=3, base_delay=0.01)
        async def fail_then_succeed():
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise ValueError("retry me")
            return "ok"

        result = await fail_then_succeed()
        assert result == "ok"
        assert call_count == 3

    @pytest.mark.asyncio
    async def test_raises_after_max_attempts(self):
        @retry_with_backoff(max_attempts=3, base_delay=0.01)
        async def always_fail():
            raise ValueError("always fails")

        with pytest.raises(ValueError, match="always fails"):
            await always_fail()

    @pytest.mark.asyncio
    async def test_does_not_retry_other_exceptions(self):
        """Only retryable exceptions are retried."""
        call_count = 0

        @retry_with_backoff(
            max_attempts=3, base_delay=0.01, retryable_exceptions=(httpx.TransportError,)
        )
        async def bad_status():
            nonlocal call_count
            call_count += 1
            raise ValueError("not retryable")

        with pytest.raises(ValueError):
            await bad_status()
        assert call_count == 1

    @pytest.mark.asyncio
    async def test_retries_transport_errors(self):
        call_count = 0

        @retry_with_backoff(
            max_attempts=2, base_delay=0.01, retryable_exceptions=(httpx.TransportError,)
        )
        async def flaky():
            nonlocal call_count
            call_count += 1
            if call_count == 1:
                raise httpx.ConnectError("connection refused")
            return "ok"

        assert await flaky() == "ok"
        assert call_count == 2

    @pytest.mark.asyncio
    async def test_sleeps_between_attempts_only(self):
        """No delay after the final failure."""
        delays = []

        async def mock_sleep(delay):
            delays.append(delay)

        @retry_with_backoff(max_attempts=4, base_delay=0.1, jitter=False)
        async def fail():
            raise ValueError("fail")

        with patch("asyncio.sleep", mock_sleep):
            with pytest.raises(ValueError):
                await fail()

        assert delays == pytest.approx([0.1, 0.2, 0.4])


class TestRetryOnce:
    """Ad hoc retry around a single call, as the geocoder uses it."""

    @pytest.mark.asyncio
    async def test_retries_and_succeeds(self):
        call_count = 0

        async def fail_then_succeed():
            nonlocal call_count
            call_count += 1
            if call_count < 2:
                raise ValueError("retry")
            return "ok"

        result = await retry_once(fail_then_succeed, max_attempts=3, base_delay=0.01)
        assert result == "ok"
        assert call_count == 2

    @pytest.mark.asyncio
    async def test_raises_after_exhaustion(self):
        async def always_fail():
            raise ValueError("always fails")

        with pytest.raises(ValueError):
            await retry_once(always_fail, max_attempts=2, base_delay=0.01)

    @pytest.mark.asyncio
    async def test_passes_args_and_kwargs(self):
        async def add(a, b, multiplier=1):
            return (a + b) * multiplier

        result = await retry_once(add, 2, 3, multiplier=2)
        assert result == 10
