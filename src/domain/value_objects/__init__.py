"""Domain value objects.

Immutable value objects that enforce business constraints.
"""

from src.domain.value_objects.client_context import ClientContext
from src.domain.value_objects.email import Email, normalize_email
from src.domain.value_objects.lockout_policy import (
    INDEFINITE_LOCK_UNTIL,
    LockoutPolicy,
    LockoutTier,
)
from src.domain.value_objects.password import Password
from src.domain.value_objects.provider_user import (
    MigrationOptions,
    ProviderUser,
    ProviderUserPage,
)
from src.domain.value_objects.rate_limit_rule import RateLimitResult, RateLimitRule
from src.domain.value_objects.session_claims import IssuedSessionToken, SessionClaims

__all__ = [
    "ClientContext",
    "Email",
    "INDEFINITE_LOCK_UNTIL",
    "IssuedSessionToken",
    "LockoutPolicy",
    "LockoutTier",
    "MigrationOptions",
    "Password",
    "ProviderUser",
    "ProviderUserPage",
    "RateLimitResult",
    "RateLimitRule",
    "SessionClaims",
    "normalize_email",
]
