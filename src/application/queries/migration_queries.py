"""Migration and audit queries (CQRS read operations)."""

from dataclasses import dataclass

from src.application.dtos.auth_dtos import AuthenticatedActor


@dataclass(frozen=True, kw_only=True)
class ListRecentlyMigrated:
    """Accounts migrated within the last hours_back hours (rollback candidates).

    Attributes:
        actor: Acting administrator.
        hours_back: Look-back window in hours.
    """

    actor: AuthenticatedActor
    hours_back: int = 24


@dataclass(frozen=True, kw_only=True)
class GetMigrationProgress:
    """Credential mode counts and cohort status."""

    actor: AuthenticatedActor


@dataclass(frozen=True, kw_only=True)
class VerifyAuditChain:
    """Walk the whole audit chain and report the first broken entry."""

    actor: AuthenticatedActor
