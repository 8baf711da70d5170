"""Error classes shared by every layer.

Error Types:
- ValidationError: Input failed validation (password policy, bad window)
- NotFoundError: Resource does not exist
- ConflictError: Resource is in a state that forbids the operation
- AuthenticationError: Credentials, token or session rejected
- AuthorizationError: Caller lacks the required role
- UpstreamError: External identity provider failed or misbehaved
- IntegrityError: Tamper-evident data failed verification

Usage:
    from src.core.errors import ValidationError
    from src.core.enums import ErrorCode
    from src.core.result import Failure

    return Failure(ValidationError(
        code=ErrorCode.PASSWORD_TOO_WEAK,
        message="Password must contain a digit",
        field="new_password",
    ))
"""

from dataclasses import dataclass

from src.core.errors.domain_error import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationError(DomainError):
    """Input validation failure.

    Attributes:
        field: Field name that failed validation.
    """

    field: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class NotFoundError(DomainError):
    """Resource not found.

    Attributes:
        resource_type: Type of resource (Account, Token, ...).
        resource_id: Identifier that was looked up.
    """

    resource_type: str
    resource_id: str


@dataclass(frozen=True, slots=True, kw_only=True)
class ConflictError(DomainError):
    """Resource conflict (token already used, account never migrated).

    Attributes:
        resource_type: Type of resource in conflict.
        conflicting_field: Field whose state causes the conflict.
    """

    resource_type: str
    conflicting_field: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthenticationError(DomainError):
    """Authentication failure (bad credentials, invalid or expired token)."""

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthorizationError(DomainError):
    """Authorization failure.

    Attributes:
        required_permission: Role or permission that was required.
    """

    required_permission: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class UpstreamError(DomainError):
    """External identity provider failure.

    Attributes:
        provider_name: Name of the upstream provider.
        is_transient: True when retrying later may succeed (5xx, timeout, 429).
        retry_after: Suggested retry delay in seconds, when the provider sent one.
    """

    provider_name: str
    is_transient: bool = True
    retry_after: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class IntegrityError(DomainError):
    """Tamper-evident data failed verification.

    Never auto-repaired; surfaced to an operator.

    Attributes:
        broken_at_id: Identifier of the first entry that failed verification.
        total_entries: Number of entries examined.
    """

    broken_at_id: str | None = None
    total_entries: int = 0
