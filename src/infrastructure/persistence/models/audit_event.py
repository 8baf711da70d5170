"""Audit event database model (append-only hash chain).

Rows are never updated or deleted by the application. The UNIQUE constraint
on sequence is the last line of defence against two writers extending the
chain from the same predecessor.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import BigInteger, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseModel, JSONType, UTCDateTime


class AuditEvent(BaseModel):
    """Audit event model.

    Fields:
        id: Event id (random UUID4, part of the hash input)
        created_at: Row insert time (not hashed)
        sequence: Chain position (unique, starts at 1)
        actor_id, actor_email, actor_role: Who
        ip_address, user_agent: From where
        action, resource_type, resource_id: What
        previous_state, new_state, metadata: Payloads (canonical JSON values)
        timestamp: Hashed event time (UTC, milliseconds)
        hash, previous_hash: Chain links
    """

    __tablename__ = "audit_events"

    sequence: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer(), "sqlite"),
        nullable=False,
        unique=True,
        comment="Position in the hash chain (1-based)",
    )
    actor_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Acting account id or 'system'",
    )
    actor_email: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Actor email at the time of the event",
    )
    actor_role: Mapped[str | None] = mapped_column(
        String(32),
        nullable=True,
        comment="Actor role at the time of the event",
    )
    ip_address: Mapped[str | None] = mapped_column(
        String(45),
        nullable=True,
        comment="Client IP",
    )
    user_agent: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Client User-Agent",
    )
    action: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
        comment="AuditAction value",
    )
    resource_type: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Kind of resource affected",
    )
    resource_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Affected resource id",
    )
    previous_state: Mapped[dict[str, Any] | None] = mapped_column(
        JSONType,
        nullable=True,
        comment="State before the change",
    )
    new_state: Mapped[dict[str, Any] | None] = mapped_column(
        JSONType,
        nullable=True,
        comment="State after the change",
    )
    event_metadata: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata",
        JSONType,
        nullable=True,
        comment="Action-specific context",
    )
    timestamp: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        comment="Hashed event time (UTC, millisecond precision)",
    )
    hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="SHA-256 hex of this entry",
    )
    previous_hash: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
        comment="Hash of the preceding entry (NULL for the first)",
    )

    __table_args__ = (
        Index("idx_audit_events_resource", "resource_type", "resource_id"),
        Index("idx_audit_events_timestamp", "timestamp"),
    )
