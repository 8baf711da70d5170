"""Account database model.

Stores credentials, lockout state and migration provenance for every account
regardless of which back-end verifies its password.

Security:
    - password_hash is NULL for PROVIDER-mode and pending accounts
    - failed_login_attempts is only ever incremented by a single UPDATE
    - rows are never deleted (status DEACTIVATED instead)
"""

from datetime import datetime
from typing import Any

from sqlalchemy import Boolean, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseMutableModel, JSONType, UTCDateTime


class Account(BaseMutableModel):
    """Account model.

    Fields:
        id, created_at, updated_at: From BaseMutableModel
        email: Normalized email (unique)
        first_name, last_name, phone: Profile
        role: Role value (AccountRole)
        status: Lifecycle status (AccountStatus)
        auth_mode: Credential mode (AuthMode)
        password_hash: Bcrypt hash (nullable)
        failed_login_attempts, locked_until: Lockout state
        must_change_password, password_changed_at: Credential lifecycle
        last_login_at, last_login_ip: Last successful login
        provider_user_id: Upstream identity (unique, nullable)
        provider_metadata: Sanitized upstream metadata
        migrated_at, migrated_by, migration_notes: Migration provenance

    Indexes:
        - ix_accounts_email (unique): login lookups
        - ix_accounts_provider_user_id (unique): idempotent imports
        - idx_accounts_auth_mode_last_login: cohort candidate selection
        - idx_accounts_migrated_at: rollback windows
    """

    __tablename__ = "accounts"

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Normalized email (trimmed, lowercase)",
    )
    first_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Given name",
    )
    last_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Family name",
    )
    phone: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
        comment="Primary phone number",
    )
    role: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default="member",
        comment="AccountRole value",
    )
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default="pending_activation",
        index=True,
        comment="AccountStatus value",
    )
    auth_mode: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default="provider",
        comment="Credential mode: provider, local or migrating",
    )
    password_hash: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Bcrypt hash (NULL unless local/migrating and activated)",
    )

    failed_login_attempts: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Consecutive failed logins (reset on success)",
    )
    locked_until: Mapped[datetime | None] = mapped_column(
        UTCDateTime,
        nullable=True,
        comment="Lock expiry (far future for indefinite locks)",
    )

    must_change_password: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Force a password change after next login",
    )
    password_changed_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime,
        nullable=True,
        comment="When the local password was last set",
    )
    last_login_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime,
        nullable=True,
        comment="Last successful login",
    )
    last_login_ip: Mapped[str | None] = mapped_column(
        String(45),
        nullable=True,
        comment="IP address of the last successful login",
    )

    provider_user_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        unique=True,
        index=True,
        comment="Identifier at the external identity provider",
    )
    provider_metadata: Mapped[dict[str, Any] | None] = mapped_column(
        JSONType,
        nullable=True,
        comment="Sanitized provider metadata snapshot",
    )
    migrated_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime,
        nullable=True,
        comment="When the account left provider mode",
    )
    migrated_by: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Actor that migrated the account",
    )
    migration_notes: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Cohort or rollback notes",
    )

    __table_args__ = (
        Index("idx_accounts_auth_mode_last_login", "auth_mode", "last_login_at"),
        Index("idx_accounts_migrated_at", "migrated_at"),
    )
