"""Per-caller request limiting with a resetting fixed window.

A caller's window opens on its first request and lasts `window_seconds`.
Within it at most `limit` requests are admitted; denied requests do not
count. Once the window has elapsed the next request opens a fresh one.

Returns the metadata used for the response headers:
- X-RateLimit-Limit
- X-RateLimit-Remaining
- Retry-After (on denial)
"""

import time
from typing import Callable

from src.ratelimit.models import RateLimitEntry, RateLimitResult
from src.ratelimit.store import RateLimitStore

DEFAULT_LIMIT = 20
DEFAULT_WINDOW_SECONDS = 3600


class RateLimiter:

    def __init__(
        self,
        store: RateLimitStore,
        limit: int = DEFAULT_LIMIT,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        sweep_seconds: float = 300,
        clock: Callable[[], float] = time.time,
    ):
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self.store = store
        self.limit = limit
        self.window_seconds = window_seconds
        self._sweep_seconds = sweep_seconds
        self._clock = clock
        self._last_sweep = clock()

    async def check(self, caller_id: str) -> RateLimitResult:
        """Admit or deny one request from `caller_id`.

        Admission is recorded before returning, so a later upstream failure
        does not give the quota back.
        """
        now = self._clock()
        await self._maybe_sweep(now)

        entry = await self.store.get(caller_id)

        if entry is None or now - entry.window_start > self.window_seconds:
            await self.store.put(caller_id, RateLimitEntry(count=1, window_start=now))
            return RateLimitResult(
                allowed=True,
                limit=self.limit,
                remaining=self.limit - 1,
                reset_seconds=float(self.window_seconds),
            )

        reset = round(max(0.0, entry.window_start + self.window_seconds - now), 1)

        if entry.count >= self.limit:
            return RateLimitResult(allowed=False, limit=self.limit, remaining=0, reset_seconds=reset)

        entry.count += 1
        await self.store.put(caller_id, entry)
        return RateLimitResult(
            allowed=True,
            limit=self.limit,
            remaining=self.limit - entry.count,
            reset_seconds=reset,
        )

    async def reset(self, caller_id: str) -> None:
        """Clear rate limit state for a caller."""
        await self.store.delete(caller_id)

    async def _maybe_sweep(self, now: float) -> None:
        if now - self._last_sweep < self._sweep_seconds:
            return
        self._last_sweep = now
        await self.store.purge_expired(now - self.window_seconds)
