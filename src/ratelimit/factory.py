"""Factory for the rate limiter and its store backend."""

from src.config.settings import get_settings
from src.ratelimit.limiter import RateLimiter
from src.ratelimit.store import InMemoryRateLimitStore, RateLimitStore

_limiter: RateLimiter | None = None


def get_rate_limiter() -> RateLimiter:
    """Get the rate limiter singleton. Used as a FastAPI dependency."""
    global _limiter
    if _limiter is not None:
        return _limiter

    settings = get_settings()
    _limiter = RateLimiter(
        store=_build_store(),
        limit=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
        sweep_seconds=settings.rate_limit_sweep_seconds,
    )
    return _limiter


def _build_store() -> RateLimitStore:
    settings = get_settings()
    backend = settings.rate_limit_backend

    if backend == "memory":
        return InMemoryRateLimitStore()

    if backend == "dynamodb":
        # Lazy import to avoid boto3 dependency when not needed
        from src.ratelimit.dynamodb_store import DynamoDBRateLimitStore
        return DynamoDBRateLimitStore(
            table_name=settings.dynamodb_table_name,
            region=settings.aws_region,
            window_seconds=settings.rate_limit_window_seconds,
        )

    raise ValueError(f"Unknown rate limit backend: {backend}")


async def close_rate_limiter() -> None:
    """Release the store and drop the singleton on shutdown."""
    global _limiter
    if _limiter is not None:
        await _limiter.store.close()
        _limiter = None
