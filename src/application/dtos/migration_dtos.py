"""Migration and rollback DTOs.

DTOs:
    - ItemError: One failed item inside a batch
    - MapOutcome: Result of mapping one provider user
    - BatchMapResult: Tally of a map/migrate run
    - CohortAdvanceResult: Result from AdvanceCohort command
    - CohortStatus: One cohort inside MigrationProgress
    - MigrationProgress: Result from GetMigrationProgress query
    - RollbackResult: Result from RollbackAccounts command
    - RecentlyMigratedAccount: Row of ListRecentlyMigrated
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID


class MapAction(str, Enum):
    """What map_account did with one provider user."""

    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"


@dataclass(frozen=True, kw_only=True)
class ItemError:
    """Per-item failure inside a batch.

    Attributes:
        item_id: Provider user id or account id.
        message: What went wrong.
    """

    item_id: str
    message: str


@dataclass(frozen=True, kw_only=True)
class MapOutcome:
    """Result of mapping one provider user onto an account.

    Attributes:
        action: created, updated or skipped.
        provider_user_id: Upstream identifier.
        account_id: Local account (None when skipped).
        reason: Why the user was skipped.
    """

    action: MapAction
    provider_user_id: str
    account_id: UUID | None = None
    reason: str | None = None


@dataclass(kw_only=True)
class BatchMapResult:
    """Tally of a batch import. One failure never aborts the batch.

    Attributes:
        created: Accounts created.
        updated: Existing accounts updated.
        skipped: Users skipped (no email).
        failed: Users that raised an error.
        errors: Per-item errors.
    """

    created: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    errors: list[ItemError] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.created + self.updated + self.skipped + self.failed

    def record(self, outcome: MapOutcome) -> None:
        """Count one mapping outcome."""
        match outcome.action:
            case MapAction.CREATED:
                self.created += 1
            case MapAction.UPDATED:
                self.updated += 1
            case MapAction.SKIPPED:
                self.skipped += 1

    def record_failure(self, item_id: str, message: str) -> None:
        self.failed += 1
        self.errors.append(ItemError(item_id=item_id, message=message))


@dataclass(frozen=True, kw_only=True)
class CohortAdvanceResult:
    """Result of one cohort advance call.

    Attributes:
        cohort: Cohort advanced.
        migrated: Accounts moved to local credentials by this call.
        failed: Accounts that could not be moved.
        activation_tokens_issued: Activation notifications sent.
        cohort_complete: Whether the cohort is now complete.
        local_count: LOCAL-mode accounts after the call.
        target_size: Cohort target (None = all eligible).
        errors: Per-account errors.
    """

    cohort: str
    migrated: int
    failed: int
    activation_tokens_issued: int
    cohort_complete: bool
    local_count: int
    target_size: int | None
    errors: list[ItemError] = field(default_factory=list)


@dataclass(frozen=True, kw_only=True)
class CohortStatus:
    """State of one cohort."""

    cohort: str
    target_size: int | None
    completed_at: datetime | None
    completed_by: str | None


@dataclass(frozen=True, kw_only=True)
class MigrationProgress:
    """Counts per credential mode plus cohort status.

    Attributes:
        total: All accounts.
        provider: Accounts in PROVIDER mode.
        local: Accounts in LOCAL mode.
        migrating: Accounts in MIGRATING mode.
        percent_complete: local / total * 100, rounded to one decimal.
        current_cohort: First incomplete cohort (None when all are done).
        cohorts: Every cohort in rollout order.
    """

    total: int
    provider: int
    local: int
    migrating: int
    percent_complete: float
    current_cohort: str | None
    cohorts: list[CohortStatus]


@dataclass(kw_only=True)
class RollbackResult:
    """Tally of a rollback run.

    Attributes:
        reverted: Accounts returned to provider credentials.
        failed: Accounts that could not be rolled back.
        errors: Per-account errors.
    """

    reverted: int = 0
    failed: int = 0
    errors: list[ItemError] = field(default_factory=list)


@dataclass(frozen=True, kw_only=True)
class RecentlyMigratedAccount:
    """Rollback candidate.

    Attributes:
        account_id: Account identifier.
        email: Account email.
        auth_mode: Current credential mode.
        migrated_at: When the account left PROVIDER mode.
        migrated_by: Who moved it.
        hours_since_migration: Whole hours elapsed since migrated_at.
    """

    account_id: UUID
    email: str
    auth_mode: str
    migrated_at: datetime
    migrated_by: str | None
    hours_since_migration: int
