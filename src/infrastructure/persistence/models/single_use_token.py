"""Single-use token database model (activation and password reset)."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseMutableModel, UTCDateTime


class SingleUseToken(BaseMutableModel):
    """Activation / password reset token.

    The raw token is never stored: token_hash is an HMAC-SHA256 keyed with the
    server-side salt. used_at doubles as the consumption guard.

    Indexes:
        - ix_single_use_tokens_token_hash (unique)
        - idx_single_use_tokens_account_purpose: superseding prior tokens
    """

    __tablename__ = "single_use_tokens"

    account_id: Mapped[UUID] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        comment="Account the token acts on",
    )
    purpose: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="TokenPurpose value",
    )
    token_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
        comment="Keyed SHA-256 of the raw token",
    )
    requested_ip: Mapped[str | None] = mapped_column(
        String(45),
        nullable=True,
        comment="IP that requested the token",
    )
    expires_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        comment="Hard expiry",
    )
    used_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime,
        nullable=True,
        comment="When the token was consumed or superseded",
    )
    used_ip: Mapped[str | None] = mapped_column(
        String(45),
        nullable=True,
        comment="IP that consumed the token ('superseded' when replaced)",
    )

    __table_args__ = (
        Index("idx_single_use_tokens_account_purpose", "account_id", "purpose"),
    )
