"""Admin API handlers.

Handler functions for migration, rollback and audit endpoints.
Routes are registered via ROUTE_REGISTRY in routes/registry.py.
All handlers require a session with the admin role.
"""

from src.presentation.routers.api.v1.admin.audit import get_audit_verification
from src.presentation.routers.api.v1.admin.migrations import (
    advance_cohort,
    create_migration,
    get_progress,
)
from src.presentation.routers.api.v1.admin.rollbacks import (
    create_rollback,
    list_candidates,
)

__all__ = [
    "advance_cohort",
    "create_migration",
    "create_rollback",
    "get_audit_verification",
    "get_progress",
    "list_candidates",
]
