"""Application DTOs (Data Transfer Objects).

Result dataclasses returned by command and query handlers.
"""

from src.application.dtos.auth_dtos import (
    AuthenticatedActor,
    LoginResult,
    SessionValidation,
)
from src.application.dtos.migration_dtos import (
    BatchMapResult,
    CohortAdvanceResult,
    CohortStatus,
    ItemError,
    MapAction,
    MapOutcome,
    MigrationProgress,
    RecentlyMigratedAccount,
    RollbackResult,
)

__all__ = [
    "AuthenticatedActor",
    "BatchMapResult",
    "CohortAdvanceResult",
    "CohortStatus",
    "ItemError",
    "LoginResult",
    "MapAction",
    "MapOutcome",
    "MigrationProgress",
    "RecentlyMigratedAccount",
    "RollbackResult",
    "SessionValidation",
]
