"""Rate limit rules built from application settings.

One rule per RateLimitAction:
    - auth:login: 5 per 15 minutes per ip:email (defaults)
    - auth:reset: 3 per hour per ip:email (defaults)

Usage:
    from src.infrastructure.rate_limit.config import build_rate_limit_rules

    rules = build_rate_limit_rules(settings)
"""

from src.core.config import Settings
from src.domain.enums import RateLimitAction
from src.domain.value_objects import RateLimitRule


def build_rate_limit_rules(settings: Settings) -> dict[RateLimitAction, RateLimitRule]:
    """Create the rule map for SlidingWindowRateLimiter.

    Args:
        settings: Application settings.

    Returns:
        dict[RateLimitAction, RateLimitRule]: Rule per action.
    """
    return {
        RateLimitAction.LOGIN: RateLimitRule(
            action=RateLimitAction.LOGIN,
            max_requests=settings.login_rate_limit_max_requests,
            window_seconds=settings.login_rate_limit_window_seconds,
        ),
        RateLimitAction.PASSWORD_RESET: RateLimitRule(
            action=RateLimitAction.PASSWORD_RESET,
            max_requests=settings.reset_rate_limit_max_requests,
            window_seconds=settings.reset_rate_limit_window_seconds,
        ),
    }
