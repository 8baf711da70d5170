"""Migration cohort entity."""

from dataclasses import dataclass
from datetime import UTC, datetime

from src.domain.enums import RolloutCohort


@dataclass(slots=True, kw_only=True)
class MigrationCohort:
    """Progress record for one rollout cohort.

    Business Rules:
        - Cohorts complete in RolloutCohort order
        - target_size is cumulative: the cohort is satisfied once that many
          accounts are in LOCAL mode overall
        - target_size None (final cohort) means every eligible account

    Attributes:
        cohort: Cohort name.
        target_size: Cumulative LOCAL-mode target, or None for all.
        completed_at: When the cohort was marked complete.
        completed_by: Admin who completed it.
    """

    cohort: RolloutCohort
    target_size: int | None
    completed_at: datetime | None = None
    completed_by: str | None = None

    def is_complete(self) -> bool:
        return self.completed_at is not None

    def remaining(self, current_local_count: int) -> int | None:
        """Accounts still needed to reach the target (None when unbounded)."""
        if self.target_size is None:
            return None
        return max(self.target_size - current_local_count, 0)

    def mark_complete(self, completed_by: str) -> None:
        if self.completed_at is None:
            self.completed_at = datetime.now(UTC)
            self.completed_by = completed_by
