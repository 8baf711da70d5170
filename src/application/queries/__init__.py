"""Queries (CQRS read operations)."""

from src.application.queries.migration_queries import (
    GetMigrationProgress,
    ListRecentlyMigrated,
    VerifyAuditChain,
)
from src.application.queries.session_queries import ValidateSession

__all__ = [
    "GetMigrationProgress",
    "ListRecentlyMigrated",
    "ValidateSession",
    "VerifyAuditChain",
]
