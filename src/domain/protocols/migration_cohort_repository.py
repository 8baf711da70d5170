"""MigrationCohortRepository protocol (port)."""

from typing import Protocol

from src.domain.entities import MigrationCohort
from src.domain.enums import RolloutCohort


class MigrationCohortRepository(Protocol):
    """Cohort progress persistence port."""

    async def find(self, cohort: RolloutCohort) -> MigrationCohort | None:
        ...

    async def list_all(self) -> list[MigrationCohort]:
        """Every stored cohort in rollout order."""
        ...

    async def upsert(self, cohort: MigrationCohort) -> None:
        """Insert or update a cohort record."""
        ...
