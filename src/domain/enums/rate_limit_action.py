"""Rate limited actions.

Each action owns an independent keyspace in the rate limit store, so login
attempts never consume password reset budget and vice versa.
"""

from enum import Enum


class RateLimitAction(str, Enum):
    """Action guarded by the sliding window rate limiter.

    The value doubles as the key prefix in Redis.
    """

    LOGIN = "auth:login"
    PASSWORD_RESET = "auth:reset"
