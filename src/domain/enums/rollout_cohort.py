"""Gradual rollout cohorts.

Cohorts advance strictly in declaration order. Targets are cumulative counts
of local-mode accounts, configured in Settings.migration_cohort_targets.
"""

from enum import Enum


class RolloutCohort(str, Enum):
    """Named stage of the provider-to-local rollout."""

    PILOT = "pilot"
    WAVE1 = "wave1"
    WAVE2 = "wave2"
    FINAL = "final"

    @classmethod
    def ordered(cls) -> list["RolloutCohort"]:
        """Cohorts in rollout order."""
        return [cls.PILOT, cls.WAVE1, cls.WAVE2, cls.FINAL]

    def predecessors(self) -> list["RolloutCohort"]:
        """Cohorts that must be complete before this one may advance."""
        order = self.ordered()
        return order[: order.index(self)]
