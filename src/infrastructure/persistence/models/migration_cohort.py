"""Migration cohort database model."""

from datetime import datetime

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseMutableModel, UTCDateTime


class MigrationCohort(BaseMutableModel):
    """Rollout cohort progress.

    Rows are created lazily from Settings.migration_cohort_targets the first
    time a cohort is advanced or progress is read.
    """

    __tablename__ = "migration_cohorts"

    cohort: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        unique=True,
        comment="RolloutCohort value",
    )
    target_size: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Cumulative local-mode target (NULL = all eligible)",
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime,
        nullable=True,
        comment="When the cohort was completed",
    )
    completed_by: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Admin that completed the cohort",
    )
