"""Rate limit infrastructure adapters.

Exports:
    RedisStorage: Redis sorted-set storage driven by an atomic Lua script.
    SlidingWindowRateLimiter: Fail-closed adapter implementing RateLimitProtocol.
    build_rate_limit_rules: Rule map built from settings.
"""

from src.infrastructure.rate_limit.config import build_rate_limit_rules
from src.infrastructure.rate_limit.redis_storage import RedisStorage
from src.infrastructure.rate_limit.sliding_window_adapter import (
    SlidingWindowRateLimiter,
)

__all__ = [
    "RedisStorage",
    "SlidingWindowRateLimiter",
    "build_rate_limit_rules",
]
