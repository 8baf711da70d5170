"""Single-use token entity (activation and password reset).

Only a keyed hash of the token is stored. Consumption happens in the
repository as one conditional UPDATE so two concurrent requests can never
both succeed.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from src.domain.enums import TokenPurpose


@dataclass(slots=True, kw_only=True)
class SingleUseToken:
    """Activation or password reset token.

    Attributes:
        id: Token record identifier.
        account_id: Account the token acts on.
        purpose: ACTIVATION or PASSWORD_RESET.
        token_hash: Keyed SHA-256 of the raw token.
        expires_at: Hard expiry.
        requested_ip: IP that requested the token, when known.
        used_at: When the token was consumed (or superseded).
        used_ip: IP that consumed it, or "superseded".
        created_at: When the token was issued.
    """

    id: UUID
    account_id: UUID
    purpose: TokenPurpose
    token_hash: str
    expires_at: datetime
    requested_ip: str | None = None
    used_at: datetime | None = None
    used_ip: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def is_used(self) -> bool:
        return self.used_at is not None

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.now(UTC)) >= self.expires_at

    def is_valid(self, now: datetime | None = None) -> bool:
        """Unused and unexpired."""
        return not self.is_used() and not self.is_expired(now)
