"""Authentication DTOs (Data Transfer Objects).

Response/result dataclasses for authentication command and query handlers.
These carry data from handlers back to the presentation layer.

DTOs:
    - LoginResult: Result from Login command
    - SessionValidation: Result from ValidateSession query
    - AuthenticatedActor: Caller identity resolved from a session token
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from src.domain.enums import AccountRole


@dataclass(frozen=True, kw_only=True)
class LoginResult:
    """Response from successful login.

    Attributes:
        account_id: Authenticated account.
        session_id: Newly created session.
        session_token: Raw signed token (set as a cookie, never stored).
        expires_at: Session expiry.
        role: Role encoded in the token.
        must_change_password: Client should force a password change.
    """

    account_id: UUID
    session_id: UUID
    session_token: str
    expires_at: datetime
    role: AccountRole
    must_change_password: bool = False


@dataclass(frozen=True, kw_only=True)
class SessionValidation:
    """Outcome of validate_session.

    A rejected token is a normal outcome (valid=False with a reason), not a
    failure of the query.

    Attributes:
        valid: Whether the token and its session are usable.
        account_id: Session owner (valid only).
        session_id: Session id (valid only).
        expires_at: Session expiry (valid only).
        role: Role claim (valid only).
        reason: Rejection reason code (invalid only).
    """

    valid: bool
    account_id: UUID | None = None
    session_id: UUID | None = None
    expires_at: datetime | None = None
    role: str | None = None
    reason: str | None = None


@dataclass(frozen=True, kw_only=True)
class AuthenticatedActor:
    """Caller identity attached to admin commands and queries.

    Attributes:
        account_id: Caller's account.
        role: Caller's role (from the validated session).
        session_id: Session the caller authenticated with.
        email: Caller's email, when loaded.
    """

    account_id: UUID
    role: str
    session_id: UUID | None = None
    email: str | None = None

    @property
    def actor_id(self) -> str:
        """Identifier written to audit entries and provenance fields."""
        return str(self.account_id)

    @property
    def is_admin(self) -> bool:
        return self.role == AccountRole.ADMIN.value
