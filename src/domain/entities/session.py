"""Session domain entity.

Pure business logic, no framework dependencies.

A session is the durable half of an issued session token: the token carries
the session id (``sid``) and the server keeps the SHA-256 of the raw token, so
a leaked database row cannot be replayed and a revoked row invalidates the
token before its expiry.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID


@dataclass(slots=True, kw_only=True)
class Session:
    """Authenticated session.

    Business Rules:
        - Valid iff not revoked and now < expires_at
        - Revocation is immediate and permanent
        - The raw token is never stored, only its hash

    Attributes:
        id: Session identifier (carried as the sid claim).
        account_id: Owning account.
        token_hash: SHA-256 hex digest of the raw session token.
        expires_at: Hard expiry.
        user_agent: User-Agent at login.
        ip_address: Client IP at login.
        application: Calling application tag.
        created_at: When the session was issued.
        last_active_at: Last successful validation.
        revoked_at: When the session was revoked.
        revoked_by: Actor who revoked it (account id or "system").
        revoked_reason: Why it was revoked.

    Example:
        >>> session = Session(
        ...     id=uuid7(),
        ...     account_id=account.id,
        ...     token_hash=sha256_hex(token),
        ...     expires_at=datetime.now(UTC) + timedelta(hours=8),
        ... )
        >>> session.is_active()
        True
    """

    id: UUID
    account_id: UUID
    token_hash: str
    expires_at: datetime

    user_agent: str | None = None
    ip_address: str | None = None
    application: str | None = None

    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    last_active_at: datetime | None = None

    revoked_at: datetime | None = None
    revoked_by: str | None = None
    revoked_reason: str | None = None

    @property
    def is_revoked(self) -> bool:
        """True once the session has been revoked."""
        return self.revoked_at is not None

    def is_expired(self, now: datetime | None = None) -> bool:
        """True when the hard expiry has passed."""
        return (now or datetime.now(UTC)) >= self.expires_at

    def is_active(self, now: datetime | None = None) -> bool:
        """Check if the session is usable (not revoked, not expired)."""
        return not self.is_revoked and not self.is_expired(now)

    def revoke(self, *, revoked_by: str, reason: str) -> None:
        """Revoke this session.

        Args:
            revoked_by: Actor performing the revocation.
            reason: Why, e.g. "logout", "password_reset", "migration_rollback".
        """
        if self.is_revoked:
            return
        self.revoked_at = datetime.now(UTC)
        self.revoked_by = revoked_by
        self.revoked_reason = reason
