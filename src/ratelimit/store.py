"""Rate limit store abstraction + in-memory implementation."""

from abc import ABC, abstractmethod

from src.ratelimit.models import RateLimitEntry


class RateLimitStore(ABC):
    """Abstract mapping of caller id → RateLimitEntry."""

    @abstractmethod
    async def get(self, caller_id: str) -> RateLimitEntry | None:
        """Return the caller's entry, or None if unseen."""
        ...

    @abstractmethod
    async def put(self, caller_id: str, entry: RateLimitEntry) -> None:
        ...

    @abstractmethod
    async def delete(self, caller_id: str) -> None:
        ...

    async def purge_expired(self, cutoff: float) -> int:
        """Drop entries whose window started before `cutoff`.

        Returns the number of entries removed. Backends that expire entries
        on their own can keep this no-op.
        """
        return 0

    async def close(self) -> None:
        """Cleanup resources. Override if the store holds connections."""
        pass


class InMemoryRateLimitStore(RateLimitStore):
    """Process-local dict store. Each worker process counts independently."""

    def __init__(self):
        self._entries: dict[str, RateLimitEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, caller_id: str) -> RateLimitEntry | None:
        return self._entries.get(caller_id)

    async def put(self, caller_id: str, entry: RateLimitEntry) -> None:
        self._entries[caller_id] = entry

    async def delete(self, caller_id: str) -> None:
        self._entries.pop(caller_id, None)

    async def purge_expired(self, cutoff: float) -> int:
        expired = [k for k, e in self._entries.items() if e.window_start < cutoff]
        for key in expired:
            del self._entries[key]
        return len(expired)
