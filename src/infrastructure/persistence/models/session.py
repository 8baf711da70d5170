"""Session database model.

Durable half of a signed session token. Only the SHA-256 of the token is
stored.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseMutableModel, UTCDateTime


class Session(BaseMutableModel):
    """Session model.

    Session Lifecycle:
        1. Created on successful login
        2. last_active_at touched on each successful validation
        3. Revoked on logout, password reset, cohort move or rollback
        4. Expires at expires_at (default 8 hours after issue)

    Indexes:
        - ix_sessions_token_hash (unique)
        - idx_sessions_account_created: login history per account
    """

    __tablename__ = "sessions"

    account_id: Mapped[UUID] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Owning account",
    )
    token_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
        comment="SHA-256 hex of the session token",
    )
    user_agent: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="User-Agent at login (client-supplied, unbounded)",
    )
    ip_address: Mapped[str | None] = mapped_column(
        String(45),
        nullable=True,
        comment="Client IP at login",
    )
    application: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Calling application tag (client-supplied, unbounded)",
    )
    expires_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        comment="Hard expiry",
    )
    last_active_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime,
        nullable=True,
        comment="Last successful validation",
    )
    revoked_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime,
        nullable=True,
        comment="When the session was revoked",
    )
    revoked_by: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Actor that revoked the session",
    )
    revoked_reason: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Why the session was revoked",
    )

    __table_args__ = (
        Index("idx_sessions_account_created", "account_id", "created_at"),
    )
