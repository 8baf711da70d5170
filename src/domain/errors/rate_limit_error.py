"""Rate limit error types.

Used when the rate limit store itself fails (Redis errors, Lua failures,
timeouts). A denied request is NOT an error: it is a successful check that
returns allowed=False.

Usage:
    from src.domain.errors import RateLimitError

    return Failure(RateLimitError(
        code=ErrorCode.RATE_LIMIT_CHECK_FAILED,
        message="Rate limit check timed out",
    ))
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitError(DomainError):
    """Rate limit store failure.

    The limiter adapter converts these into denials (fail closed) for
    check() and surfaces them directly only from reset().

    Attributes:
        code: RATE_LIMIT_CHECK_FAILED or RATE_LIMIT_RESET_FAILED.
        message: Human-readable message.
        details: Additional context (action, identifier).
    """

    pass
