"""Migration and rollback commands (CQRS write operations).

Every command carries the acting administrator; handlers reject actors
without the admin role.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID

from src.application.dtos.auth_dtos import AuthenticatedActor
from src.domain.enums import RolloutCohort
from src.domain.value_objects import MigrationOptions


class MigrationMode(str, Enum):
    """Scope of an import from the identity provider."""

    SINGLE = "single"
    BATCH = "batch"
    ALL = "all"


class RollbackMode(str, Enum):
    """Scope of a rollback."""

    SINGLE = "single"
    WINDOW = "window"


@dataclass(frozen=True, kw_only=True)
class MigrateAccounts:
    """Import provider users into the local account store.

    Attributes:
        actor: Acting administrator.
        mode: single (provider_user_id), batch (provider_user_ids) or all.
        provider_user_id: User to import in single mode.
        provider_user_ids: Users to import in batch mode.
        options: How users are mapped onto accounts.
    """

    actor: AuthenticatedActor
    mode: MigrationMode
    provider_user_id: str | None = None
    provider_user_ids: list[str] = field(default_factory=list)
    options: MigrationOptions = field(default_factory=MigrationOptions)


@dataclass(frozen=True, kw_only=True)
class AdvanceCohort:
    """Move the next batch of accounts of a cohort to local credentials.

    Attributes:
        actor: Acting administrator.
        cohort: Cohort to advance.
        batch_size: Maximum accounts moved by this call (None = configured).
    """

    actor: AuthenticatedActor
    cohort: RolloutCohort
    batch_size: int | None = None


@dataclass(frozen=True, kw_only=True)
class RollbackAccounts:
    """Return migrated accounts to provider credentials.

    Attributes:
        actor: Acting administrator.
        mode: single (account_id) or window ([start, end)).
        reason: Recorded in migration notes and the audit log.
        account_id: Account to roll back in single mode.
        start: Inclusive window start in window mode.
        end: Exclusive window end in window mode.
    """

    actor: AuthenticatedActor
    mode: RollbackMode
    reason: str
    account_id: UUID | None = None
    start: datetime | None = None
    end: datetime | None = None
