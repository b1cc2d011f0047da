"""Rate limit data types."""

from dataclasses import dataclass


@dataclass
class RateLimitEntry:
    count: int
    window_start: float  # epoch seconds


@dataclass
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    reset_seconds: float
