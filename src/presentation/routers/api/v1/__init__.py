"""API v1 routers.

All routes are generated from the Route Metadata Registry at startup.
See routes/registry.py for the complete route catalog.

Resources:
    /api/v1/sessions                     - Login, validation, logout
    /api/v1/activations                  - Account activation
    /api/v1/password-resets              - Password reset

Admin Resources:
    /api/v1/admin/migrations             - Provider import and cohorts
    /api/v1/admin/rollbacks              - Rollback to provider credentials
    /api/v1/admin/audit/verification     - Audit chain verification
"""

from fastapi import APIRouter

from src.core.config import settings
from src.presentation.routers.api.v1.routes.generator import (
    register_routes_from_registry,
)
from src.presentation.routers.api.v1.routes.registry import ROUTE_REGISTRY

v1_router = APIRouter(prefix=settings.api_v1_prefix)
register_routes_from_registry(v1_router, ROUTE_REGISTRY)

__all__ = [
    "v1_router",
]
