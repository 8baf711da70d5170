"""MigrationCohortRepository - SQLAlchemy implementation."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import MigrationCohort
from src.domain.enums import RolloutCohort
from src.infrastructure.persistence.models.migration_cohort import (
    MigrationCohort as MigrationCohortModel,
)


class MigrationCohortRepository:
    """SQLAlchemy implementation of MigrationCohortRepository protocol.

    Attributes:
        session: SQLAlchemy async session for database operations.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find(self, cohort: RolloutCohort) -> MigrationCohort | None:
        """Find the progress record of one cohort.

        Args:
            cohort: Cohort name.

        Returns:
            MigrationCohort if a record exists, None otherwise.
        """
        stmt = (
            select(MigrationCohortModel)
            .where(MigrationCohortModel.cohort == cohort.value)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        cohort_model = result.scalar_one_or_none()

        if cohort_model is None:
            return None

        return self._to_domain(cohort_model)

    async def list_all(self) -> list[MigrationCohort]:
        """All stored cohort records in rollout order."""
        stmt = select(MigrationCohortModel).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        order = {cohort: index for index, cohort in enumerate(RolloutCohort.ordered())}
        cohorts = [self._to_domain(model) for model in result.scalars().all()]
        return sorted(cohorts, key=lambda item: order[item.cohort])

    async def upsert(self, cohort: MigrationCohort) -> None:
        """Create or update a cohort record.

        Args:
            cohort: Domain cohort entity.
        """
        stmt = select(MigrationCohortModel).where(
            MigrationCohortModel.cohort == cohort.cohort.value
        )
        result = await self.session.execute(stmt)
        cohort_model = result.scalar_one_or_none()

        if cohort_model is None:
            self.session.add(
                MigrationCohortModel(
                    cohort=cohort.cohort.value,
                    target_size=cohort.target_size,
                    completed_at=cohort.completed_at,
                    completed_by=cohort.completed_by,
                )
            )
        else:
            cohort_model.target_size = cohort.target_size
            cohort_model.completed_at = cohort.completed_at
            cohort_model.completed_by = cohort.completed_by

        await self.session.commit()

    def _to_domain(self, cohort_model: MigrationCohortModel) -> MigrationCohort:
        return MigrationCohort(
            cohort=RolloutCohort(cohort_model.cohort),
            target_size=cohort_model.target_size,
            completed_at=cohort_model.completed_at,
            completed_by=cohort_model.completed_by,
        )
