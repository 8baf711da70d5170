"""Authentication commands (CQRS write operations).

Commands represent user intent to change system state.
All commands are immutable (frozen=True) and use keyword-only arguments (kw_only=True).

Pattern:
- Commands are data containers (no logic)
- Handlers execute business logic
- Handlers return Result types
"""

from dataclasses import dataclass, field
from uuid import UUID

from src.domain.value_objects import ClientContext


@dataclass(frozen=True, kw_only=True)
class Login:
    """Verify credentials and open a session.

    Attributes:
        email: Submitted email (normalized by the handler).
        password: Submitted password (plain text, never stored or logged).
        client: Request origin (IP, User-Agent, application tag).

    Example:
        >>> command = Login(
        ...     email="user@example.com",
        ...     password="SecurePass123!",
        ...     client=ClientContext(ip_address="203.0.113.7"),
        ... )
        >>> result = await handler.handle(command)
    """

    email: str
    password: str
    client: ClientContext = field(default_factory=ClientContext)


@dataclass(frozen=True, kw_only=True)
class RevokeSession:
    """Revoke one session.

    Attributes:
        session_id: Session to revoke.
        account_id: Owner of the session (audited as the resource owner).
        revoked_by: Acting account id or "system".
        reason: Why the session is revoked.
        is_logout: True when the owner revokes their own session.
        client: Request origin.
    """

    session_id: UUID
    account_id: UUID
    revoked_by: str
    reason: str = "logout"
    is_logout: bool = True
    client: ClientContext = field(default_factory=ClientContext)


@dataclass(frozen=True, kw_only=True)
class ActivateAccount:
    """Set the first local password using an activation token.

    Attributes:
        token: Raw activation token from the invitation link.
        new_password: Password to set (must satisfy the password policy).
        client: Request origin.
    """

    token: str
    new_password: str
    client: ClientContext = field(default_factory=ClientContext)


@dataclass(frozen=True, kw_only=True)
class RequestPasswordReset:
    """Ask for a password reset link.

    Always succeeds to the caller so account existence is not revealed.

    Attributes:
        email: Submitted email.
        client: Request origin.
    """

    email: str
    client: ClientContext = field(default_factory=ClientContext)


@dataclass(frozen=True, kw_only=True)
class ResetPassword:
    """Replace the local password using a reset token.

    Attributes:
        token: Raw password reset token.
        new_password: New password (must satisfy the password policy).
        client: Request origin.
    """

    token: str
    new_password: str
    client: ClientContext = field(default_factory=ClientContext)
