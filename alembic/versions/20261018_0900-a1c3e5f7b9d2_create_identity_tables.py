"""create_identity_tables

Revision ID: a1c3e5f7b9d2
Revises:
Create Date: 2026-10-18 09:00:00.000000+00:00

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "a1c3e5f7b9d2"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(mutable: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]
    if mutable:
        columns.append(
            sa.Column(
                "updated_at",
                sa.DateTime(timezone=True),
                server_default=sa.text("now()"),
                nullable=False,
            )
        )
    return columns


def upgrade() -> None:
    """Create accounts, sessions, single_use_tokens, audit_events and
    migration_cohorts tables."""
    op.create_table(
        "accounts",
        *_timestamps(),
        # Profile
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column(
            "role", sa.String(length=32), nullable=False, comment="AccountRole value"
        ),
        sa.Column(
            "status",
            sa.String(length=32),
            nullable=False,
            comment="AccountStatus value",
        ),
        # Credentials
        sa.Column(
            "auth_mode",
            sa.String(length=16),
            nullable=False,
            comment="Credential mode: provider, local or migrating",
        ),
        sa.Column("password_hash", sa.String(length=255), nullable=True),
        sa.Column(
            "failed_login_attempts",
            sa.Integer(),
            nullable=False,
            server_default="0",
        ),
        sa.Column("locked_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "must_change_password",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        sa.Column("password_changed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_login_ip", sa.String(length=45), nullable=True),
        # Provenance
        sa.Column("provider_user_id", sa.String(length=255), nullable=True),
        sa.Column(
            "provider_metadata",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=True,
        ),
        sa.Column("migrated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("migrated_by", sa.String(length=255), nullable=True),
        sa.Column("migration_notes", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_accounts_email", "accounts", ["email"], unique=True)
    op.create_index(
        "ix_accounts_provider_user_id", "accounts", ["provider_user_id"], unique=True
    )
    op.create_index("ix_accounts_status", "accounts", ["status"])
    op.create_index(
        "idx_accounts_auth_mode_last_login", "accounts", ["auth_mode", "last_login_at"]
    )
    op.create_index("idx_accounts_migrated_at", "accounts", ["migrated_at"])

    op.create_table(
        "sessions",
        *_timestamps(),
        sa.Column("account_id", sa.Uuid(), nullable=False),
        sa.Column(
            "token_hash",
            sa.String(length=64),
            nullable=False,
            comment="SHA-256 hex of the session token",
        ),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("ip_address", sa.String(length=45), nullable=True),
        sa.Column("application", sa.Text(), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_active_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("revoked_by", sa.String(length=255), nullable=True),
        sa.Column("revoked_reason", sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_sessions_account_id", "sessions", ["account_id"])
    op.create_index("ix_sessions_token_hash", "sessions", ["token_hash"], unique=True)
    op.create_index(
        "idx_sessions_account_created", "sessions", ["account_id", "created_at"]
    )

    op.create_table(
        "single_use_tokens",
        *_timestamps(),
        sa.Column("account_id", sa.Uuid(), nullable=False),
        sa.Column(
            "purpose",
            sa.String(length=32),
            nullable=False,
            comment="TokenPurpose value",
        ),
        sa.Column("token_hash", sa.String(length=64), nullable=False),
        sa.Column("requested_ip", sa.String(length=45), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("used_ip", sa.String(length=45), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="CASCADE"),
    )
    op.create_index(
        "ix_single_use_tokens_token_hash",
        "single_use_tokens",
        ["token_hash"],
        unique=True,
    )
    op.create_index(
        "idx_single_use_tokens_account_purpose",
        "single_use_tokens",
        ["account_id", "purpose"],
    )

    op.create_table(
        "audit_events",
        *_timestamps(mutable=False),
        sa.Column(
            "sequence",
            sa.BigInteger(),
            nullable=False,
            comment="Position in the hash chain (1-based)",
        ),
        sa.Column("actor_id", sa.String(length=255), nullable=False),
        sa.Column("actor_email", sa.String(length=255), nullable=True),
        sa.Column("actor_role", sa.String(length=32), nullable=True),
        sa.Column("ip_address", sa.String(length=45), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("resource_type", sa.String(length=64), nullable=False),
        sa.Column("resource_id", sa.String(length=255), nullable=True),
        sa.Column(
            "previous_state", postgresql.JSONB(astext_type=sa.Text()), nullable=True
        ),
        sa.Column("new_state", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("metadata", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("hash", sa.String(length=64), nullable=False),
        sa.Column("previous_hash", sa.String(length=64), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("sequence"),
    )
    op.create_index("ix_audit_events_actor_id", "audit_events", ["actor_id"])
    op.create_index("ix_audit_events_action", "audit_events", ["action"])
    op.create_index(
        "idx_audit_events_resource", "audit_events", ["resource_type", "resource_id"]
    )
    op.create_index("idx_audit_events_timestamp", "audit_events", ["timestamp"])

    # Append-only: block UPDATE and DELETE at the database level
    op.execute(
        "CREATE RULE audit_events_no_update AS ON UPDATE TO audit_events "
        "DO INSTEAD NOTHING"
    )
    op.execute(
        "CREATE RULE audit_events_no_delete AS ON DELETE TO audit_events "
        "DO INSTEAD NOTHING"
    )

    op.create_table(
        "migration_cohorts",
        *_timestamps(),
        sa.Column("cohort", sa.String(length=16), nullable=False),
        sa.Column(
            "target_size",
            sa.Integer(),
            nullable=True,
            comment="Cumulative local-mode target (NULL = all eligible)",
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_by", sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("cohort"),
    )


def downgrade() -> None:
    """Drop all identity tables."""
    op.drop_table("migration_cohorts")

    op.execute("DROP RULE IF EXISTS audit_events_no_delete ON audit_events")
    op.execute("DROP RULE IF EXISTS audit_events_no_update ON audit_events")
    op.drop_index("idx_audit_events_timestamp", table_name="audit_events")
    op.drop_index("idx_audit_events_resource", table_name="audit_events")
    op.drop_index("ix_audit_events_action", table_name="audit_events")
    op.drop_index("ix_audit_events_actor_id", table_name="audit_events")
    op.drop_table("audit_events")

    op.drop_index(
        "idx_single_use_tokens_account_purpose", table_name="single_use_tokens"
    )
    op.drop_index("ix_single_use_tokens_token_hash", table_name="single_use_tokens")
    op.drop_table("single_use_tokens")

    op.drop_index("idx_sessions_account_created", table_name="sessions")
    op.drop_index("ix_sessions_token_hash", table_name="sessions")
    op.drop_index("ix_sessions_account_id", table_name="sessions")
    op.drop_table("sessions")

    op.drop_index("idx_accounts_migrated_at", table_name="accounts")
    op.drop_index("idx_accounts_auth_mode_last_login", table_name="accounts")
    op.drop_index("ix_accounts_status", table_name="accounts")
    op.drop_index("ix_accounts_provider_user_id", table_name="accounts")
    op.drop_index("ix_accounts_email", table_name="accounts")
    op.drop_table("accounts")
