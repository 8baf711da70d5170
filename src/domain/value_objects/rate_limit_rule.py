"""Rate limit rule value object.

Immutable configuration for a sliding-window log limiter: at most
``max_requests`` accepted requests per identifier within any rolling
``window_seconds`` interval.

Usage:
    from src.domain.value_objects import RateLimitRule
    from src.domain.enums import RateLimitAction

    rule = RateLimitRule(
        action=RateLimitAction.LOGIN,
        max_requests=5,
        window_seconds=900,
    )
"""

from dataclasses import dataclass

from src.domain.enums.rate_limit_action import RateLimitAction


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitRule:
    """Sliding window rule (value object).

    Sliding Window Log:
        - Every accepted request is recorded with its timestamp
        - Records older than the window are discarded on each check
        - A request is accepted only while fewer than max_requests remain
        - Denied requests are not recorded

    Raises:
        ValueError: If max_requests or window_seconds is not positive.
    """

    action: RateLimitAction
    """Keyspace this rule governs.

    The action value is the Redis key prefix:
        - auth:login:{ip}:{email}
        - auth:reset:{ip}:{email}
    """

    max_requests: int
    """Accepted requests allowed inside one window.

    Typical values:
        - 5 for login (per 15 minutes)
        - 3 for password reset (per hour)
    """

    window_seconds: int
    """Length of the rolling window in seconds."""

    enabled: bool = True
    """Whether this rule is active.

    Disabled rules always allow requests.
    """

    def __post_init__(self) -> None:
        """Validate rule configuration after initialization.

        Raises:
            ValueError: If any numeric field is invalid.
        """
        if self.max_requests <= 0:
            raise ValueError(
                f"max_requests must be positive, got {self.max_requests}"
            )
        if self.window_seconds <= 0:
            raise ValueError(
                f"window_seconds must be positive, got {self.window_seconds}"
            )

    @property
    def window_ms(self) -> int:
        """Window length in milliseconds (Redis scores are milliseconds)."""
        return self.window_seconds * 1000


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitResult:
    """Outcome of a rate limit check.

    A denial is a successful check with allowed=False, not an error.
    """

    allowed: bool
    """Whether the request is allowed."""

    retry_after: int = 0
    """Whole seconds until a request would be accepted (>= 1 when denied)."""

    remaining: int = 0
    """Requests still accepted in the current window."""

    limit: int = 0
    """Configured max_requests."""

    reset_seconds: int = 0
    """Seconds until the oldest recorded request leaves the window."""
