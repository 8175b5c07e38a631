"""Unit tests for the per-client rate limiter."""

import pytest

from src.interfaces.api.rate_limit import ClientRateLimiter


class FakeMonotonic:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestClientRateLimiter:
    @pytest.mark.asyncio
    async def test_allows_up_to_the_limit_then_rejects(self):
        clock = FakeMonotonic()
        limiter = ClientRateLimiter(max_requests=10, window_seconds=900, clock=clock)

        for _ in range(10):
            assert await limiter.try_acquire("10.0.0.1") == 0.0

        retry_after = await limiter.try_acquire("10.0.0.1")
        assert retry_after == pytest.approx(90.0)

    @pytest.mark.asyncio
    async def test_clients_have_separate_budgets(self):
        limiter = ClientRateLimiter(
            max_requests=1, window_seconds=60, clock=FakeMonotonic()
        )

        assert await limiter.try_acquire("a") == 0.0
        assert await limiter.try_acquire("b") == 0.0
        assert await limiter.try_acquire("a") > 0

    @pytest.mark.asyncio
    async def test_tokens_refill_over_time(self):
        clock = FakeMonotonic()
        limiter = ClientRateLimiter(max_requests=2, window_seconds=60, clock=clock)

        await limiter.try_acquire("a")
        await limiter.try_acquire("a")
        assert await limiter.try_acquire("a") > 0

        clock.now += 30
        assert await limiter.try_acquire("a") == 0.0

    @pytest.mark.asyncio
    async def test_disabled_limiter_always_allows(self):
        limiter = ClientRateLimiter(max_requests=1, window_seconds=60, enabled=False)

        for _ in range(5):
            assert await limiter.try_acquire("a") == 0.0
        assert limiter.is_enabled is False

    @pytest.mark.parametrize(
        ("max_requests", "window_seconds"), [(0, 60), (-1, 60), (10, 0)]
    )
    def test_rejects_invalid_parameters(self, max_requests, window_seconds):
        with pytest.raises(ValueError):
            ClientRateLimiter(max_requests=max_requests, window_seconds=window_seconds)
