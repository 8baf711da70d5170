"""Route generator for the API Route Registry.

Converts declarative RouteMetadata entries into FastAPI routes at
application startup.

Usage:
    from src.presentation.routers.api.v1.routes.registry import ROUTE_REGISTRY
    from src.presentation.routers.api.v1.routes.generator import (
        register_routes_from_registry,
    )

    v1_router = APIRouter(prefix="/api/v1")
    register_routes_from_registry(v1_router, ROUTE_REGISTRY)
"""

from typing import Any

from fastapi import APIRouter, Depends

from src.presentation.routers.api.middleware.auth_dependencies import (
    get_current_actor,
    require_admin_role,
)
from src.presentation.routers.api.v1.errors.problem_details import ProblemDetails
from src.presentation.routers.api.v1.routes.metadata import (
    AuthLevel,
    AuthPolicy,
    ErrorSpec,
    RouteMetadata,
)


def register_routes_from_registry(
    router: APIRouter,
    registry: list[RouteMetadata],
) -> None:
    """Generate FastAPI routes from registry metadata.

    Args:
        router: FastAPI APIRouter to register routes on
        registry: RouteMetadata entries to convert into routes
    """
    for metadata in registry:
        router.add_api_route(
            path=metadata.path,
            endpoint=metadata.handler,
            methods=[metadata.method.value],
            response_model=metadata.response_model,
            status_code=metadata.status_code,
            tags=list(metadata.tags),
            summary=metadata.summary,
            description=metadata.description or None,
            operation_id=metadata.operation_id,
            responses=_build_responses(metadata.errors) or None,
            dependencies=_build_dependencies(metadata.auth_policy),
        )


def _build_dependencies(auth_policy: AuthPolicy) -> list[Any]:
    """Build FastAPI dependencies from auth policy.

    Auth policy mapping:
        PUBLIC: No dependencies
        AUTHENTICATED: Depends(get_current_actor) - requires a valid session
        ADMIN: Depends(require_admin_role) - valid session with admin role

    Endpoints that need the actor also declare it as a parameter; FastAPI
    resolves the dependency once per request.
    """
    match auth_policy.level:
        case AuthLevel.PUBLIC:
            return []
        case AuthLevel.AUTHENTICATED:
            return [Depends(get_current_actor)]
        case AuthLevel.ADMIN:
            return [Depends(require_admin_role)]
        case _:
            # Unknown auth level - fail closed
            msg = f"Unknown auth level: {auth_policy.level}"
            raise ValueError(msg)


def _build_responses(errors: list[ErrorSpec]) -> dict[int | str, dict[str, Any]]:
    """Build OpenAPI responses dict from error specifications."""
    return {
        error.status: {"description": error.description, "model": ProblemDetails}
        for error in errors
    }
