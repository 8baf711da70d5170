"""Rate limit protocol (port) for sliding-window rate limiting.

Following hexagonal architecture:
- Domain defines the PORT (this protocol)
- Infrastructure provides ADAPTERS (SlidingWindowRateLimiter)
- Application layer uses the protocol (doesn't know about specific adapters)

Usage:
    result = await rate_limit.check(
        action=RateLimitAction.LOGIN,
        identifier=f"{ip}:{email}",
    )
    match result:
        case Success(value=decision) if not decision.allowed:
            return Failure(LoginError(code=ErrorCode.RATE_LIMITED, ...))
"""

from typing import Protocol

from src.core.result import Result
from src.domain.enums import RateLimitAction
from src.domain.errors import RateLimitError
from src.domain.value_objects import RateLimitResult


class RateLimitProtocol(Protocol):
    """Protocol for sliding-window rate limiters.

    Fail-Closed Design:
        check() MUST answer allowed=False when the store is unreachable,
        slow or erroring. An unavailable limiter never lets traffic through.

    Keyspaces:
        Each RateLimitAction has its own window, so exhausting login attempts
        never consumes password reset quota.
    """

    async def check(
        self,
        *,
        action: RateLimitAction,
        identifier: str,
    ) -> Result[RateLimitResult, RateLimitError]:
        """Record one attempt if it fits in the window.

        Denied attempts are not recorded.

        Args:
            action: Keyspace (auth:login, auth:reset).
            identifier: Caller key within the keyspace (e.g. "ip:email").

        Returns:
            Result[RateLimitResult, RateLimitError]: Always Success for
                check(); allowed=False with retry_after >= 1 when denied or
                when the store is unavailable.
        """
        ...

    async def reset(
        self,
        *,
        action: RateLimitAction,
        identifier: str,
    ) -> Result[None, RateLimitError]:
        """Forget every recorded attempt for one identifier.

        Returns:
            Result[None, RateLimitError]: Failure if the store is unreachable.
        """
        ...
