"""Compliance tests for the API route registry.

Tests cover:
- Every registry entry is mounted on the app under /api/v1
- Paths, methods and operation ids are unique
- Admin paths carry the ADMIN auth policy and document 401/403
- Public credential routes explain why they are public
- OpenAPI schema lists every registered operation
"""

import pytest
from fastapi.routing import APIRoute

from src.core.config import settings
from src.main import app
from src.presentation.routers.api.v1.routes.metadata import AuthLevel
from src.presentation.routers.api.v1.routes.registry import ROUTE_REGISTRY

EXPECTED_ROUTES = {
    ("POST", "/sessions"),
    ("POST", "/sessions/validate"),
    ("DELETE", "/sessions/current"),
    ("POST", "/activations"),
    ("POST", "/password-resets"),
    ("POST", "/password-resets/confirm"),
    ("POST", "/admin/migrations"),
    ("POST", "/admin/migrations/cohorts"),
    ("GET", "/admin/migrations/progress"),
    ("POST", "/admin/rollbacks"),
    ("GET", "/admin/rollbacks/candidates"),
    ("GET", "/admin/audit/verification"),
}


@pytest.mark.api
class TestRouteRegistry:
    def test_registry_matches_expected_routes(self):
        registered = {(m.method.value, m.path) for m in ROUTE_REGISTRY}

        assert registered == EXPECTED_ROUTES

    def test_every_entry_is_mounted(self):
        mounted = {
            (method, route.path)
            for route in app.routes
            if isinstance(route, APIRoute)
            for method in route.methods
        }

        for metadata in ROUTE_REGISTRY:
            key = (metadata.method.value, settings.api_v1_prefix + metadata.path)
            assert key in mounted, key

    def test_operation_ids_unique(self):
        operation_ids = [m.operation_id for m in ROUTE_REGISTRY]

        assert None not in operation_ids
        assert len(set(operation_ids)) == len(operation_ids)

    @pytest.mark.parametrize(
        "metadata",
        [m for m in ROUTE_REGISTRY if m.path.startswith("/admin/")],
        ids=lambda m: m.operation_id,
    )
    def test_admin_routes_require_admin(self, metadata):
        assert metadata.auth_policy.level == AuthLevel.ADMIN
        statuses = {error.status for error in metadata.errors}
        assert {401, 403} <= statuses

    @pytest.mark.parametrize(
        "metadata",
        [m for m in ROUTE_REGISTRY if m.auth_policy.level == AuthLevel.PUBLIC],
        ids=lambda m: m.operation_id,
    )
    def test_public_routes_have_rationale(self, metadata):
        assert metadata.auth_policy.rationale

    def test_logout_requires_session(self):
        logout = next(m for m in ROUTE_REGISTRY if m.path == "/sessions/current")

        assert logout.auth_policy.level == AuthLevel.AUTHENTICATED

    def test_openapi_lists_operations(self):
        schema = app.openapi()

        operation_ids = {
            operation["operationId"]
            for path_item in schema["paths"].values()
            for operation in path_item.values()
        }
        assert {m.operation_id for m in ROUTE_REGISTRY} <= operation_ids
