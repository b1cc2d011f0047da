"""Tests for src/ratelimit/limiter.py — per-caller window limiter."""

import pytest

from src.ratelimit.limiter import RateLimiter
from src.ratelimit.models import RateLimitEntry
from src.ratelimit.store import InMemoryRateLimitStore


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryRateLimitStore()


@pytest.fixture
def limiter(store, clock):
    return RateLimiter(store=store, limit=20, window_seconds=3600, clock=clock)


class TestCheck:

    async def test_first_request_allowed(self, limiter):
        result = await limiter.check("caller-1")
        assert result.allowed is True
        assert result.remaining == 19
        assert result.limit == 20

    async def test_full_window_then_denied(self, limiter):
        remaining = [(await limiter.check("caller-1")).remaining for _ in range(20)]
        assert remaining == list(range(19, -1, -1))

        result = await limiter.check("caller-1")
        assert result.allowed is False
        assert result.remaining == 0

    async def test_denial_does_not_increment(self, limiter, store):
        for _ in range(25):
            await limiter.check("caller-1")
        entry = await store.get("caller-1")
        assert entry.count == 20

    async def test_denied_reports_reset(self, limiter, clock):
        for _ in range(20):
            await limiter.check("caller-1")
        clock.now += 600
        result = await limiter.check("caller-1")
        assert result.allowed is False
        assert result.reset_seconds == 3000.0

    async def test_different_callers_independent(self, limiter):
        for _ in range(20):
            await limiter.check("caller-a")
        assert (await limiter.check("caller-a")).allowed is False
        assert (await limiter.check("caller-b")).allowed is True

    async def test_window_expiry_resets_count(self, limiter, clock):
        for _ in range(21):
            await limiter.check("caller-1")

        clock.now += 3601
        result = await limiter.check("caller-1")
        assert result.allowed is True
        assert result.remaining == 19

    async def test_window_boundary_is_exclusive(self, limiter, clock):
        """Exactly one window later the old window still applies."""
        for _ in range(20):
            await limiter.check("caller-1")
        clock.now += 3600
        assert (await limiter.check("caller-1")).allowed is False

    async def test_window_restarts_at_new_request_time(self, limiter, store, clock):
        await limiter.check("caller-1")
        clock.now += 5000
        await limiter.check("caller-1")
        entry = await store.get("caller-1")
        assert entry == RateLimitEntry(count=1, window_start=clock.now)

    def test_invalid_limit(self, store):
        with pytest.raises(ValueError):
            RateLimiter(store=store, limit=0)


class TestReset:

    async def test_reset_clears_state(self, limiter):
        for _ in range(3):
            await limiter.check("caller-1")
        await limiter.reset("caller-1")
        result = await limiter.check("caller-1")
        assert result.remaining == 19

    async def test_reset_unknown_caller(self, limiter):
        await limiter.reset("nobody")


class TestSweep:

    async def test_expired_entries_purged(self, store, clock):
        limiter = RateLimiter(store=store, limit=5, window_seconds=60, sweep_seconds=30, clock=clock)
        await limiter.check("old")
        clock.now += 61
        await limiter.check("new")
        assert len(store) == 1
        assert await store.get("old") is None

    async def test_no_sweep_before_interval(self, store, clock):
        limiter = RateLimiter(store=store, limit=5, window_seconds=60, sweep_seconds=300, clock=clock)
        await limiter.check("old")
        clock.now += 61
        await limiter.check("new")
        assert len(store) == 2


class TestInMemoryStore:

    async def test_get_missing(self, store):
        assert await store.get("x") is None

    async def test_put_get_delete(self, store):
        await store.put("x", RateLimitEntry(count=2, window_start=10.0))
        assert (await store.get("x")).count == 2
        await store.delete("x")
        assert await store.get("x") is None

    async def test_purge_expired(self, store):
        await store.put("old", RateLimitEntry(count=1, window_start=10.0))
        await store.put("fresh", RateLimitEntry(count=1, window_start=100.0))
        assert await store.purge_expired(50.0) == 1
        assert await store.get("fresh") is not None
