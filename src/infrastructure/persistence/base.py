"""Base model, column types and mixins for all database entities.

This module provides:
- UTCDateTime: timezone-aware DateTime that always returns UTC
- BaseModel: Base class for ALL models (provides id, created_at)
- TimestampMixin: Internal mixin that adds updated_at
- BaseMutableModel: Base for mutable models (combines above)

Domain entities never inherit from these classes; repositories map between
the two.

Architecture:
    BaseModel (id, created_at)
        ↑
        ├── BaseMutableModel (+ updated_at via TimestampMixin)
        │   ├── AccountModel
        │   ├── SessionModel
        │   ├── SingleUseTokenModel
        │   └── MigrationCohortModel
        │
        └── AuditEventModel (immutable, no updated_at)

PostgreSQL is the production target; SQLite (aiosqlite) is used in tests, so
types stay dialect-agnostic: Uuid, UTCDateTime and JSON with a JSONB variant.
"""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID as PythonUUID

from sqlalchemy import JSON, DateTime, Uuid, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator
from uuid_extensions import uuid7

JSONType = JSON().with_variant(JSONB(), "postgresql")
"""JSON column type (JSONB on PostgreSQL)."""


class UTCDateTime(TypeDecorator[datetime]):
    """Timezone-aware DateTime normalized to UTC.

    SQLite drops tzinfo on the way back; this restores it so domain
    comparisons against datetime.now(UTC) never mix naive and aware values.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(
        self, value: datetime | None, dialect: Dialect
    ) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(
        self, value: datetime | None, dialect: Dialect
    ) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)


class BaseModel(DeclarativeBase):
    """Base class for all database models (mutable and immutable).

    Provides common fields that ALL database models need:
    - id: UUID primary key (UUIDv7 unless the caller supplies one)
    - created_at: Timestamp when record was created (UTC)
    """

    __abstract__ = True

    id: Mapped[PythonUUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid7,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        """String representation for debugging.

        Returns:
            str: String showing class name and ID.
        """
        return f"<{self.__class__.__name__}(id={self.id})>"

    def to_dict(self) -> dict[str, Any]:
        """Convert model to dictionary (for debugging/logging).

        Returns:
            dict: Dictionary representation of the model.
        """
        return {
            "id": str(self.id),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class TimestampMixin:
    """Mixin for mutable models that track updates.

    Note:
        Use BaseMutableModel instead of mixing TimestampMixin + BaseModel manually.
    """

    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def to_dict(self) -> dict[str, Any]:
        """Extend BaseModel.to_dict() to include updated_at.

        Returns:
            dict: Dictionary representation including updated_at.
        """
        data: dict[str, Any] = super().to_dict()  # type: ignore[misc]
        data["updated_at"] = self.updated_at.isoformat() if self.updated_at else None
        return data


class BaseMutableModel(TimestampMixin, BaseModel):
    """Base class for mutable database models.

    Provides:
        - id: UUID primary key (from BaseModel)
        - created_at: Timestamp when created (from BaseModel)
        - updated_at: Timestamp when last updated (from TimestampMixin)

    When NOT to use:
        Append-only tables (the audit log) use BaseModel directly.
    """

    __abstract__ = True
