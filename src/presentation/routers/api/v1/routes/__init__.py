"""API Route Registry package.

The registry is the single source of truth for all v1 routes; FastAPI
routes, auth dependencies and OpenAPI metadata are generated from it.

Modules:
    metadata: Core types (RouteMetadata, AuthPolicy, ErrorSpec)
    registry: ROUTE_REGISTRY - List of all route specifications
    generator: register_routes_from_registry() - Generate FastAPI routes
"""

from src.presentation.routers.api.v1.routes.metadata import (
    AuthLevel,
    AuthPolicy,
    ErrorSpec,
    HTTPMethod,
    RouteMetadata,
)

__all__ = [
    "AuthLevel",
    "AuthPolicy",
    "ErrorSpec",
    "HTTPMethod",
    "RouteMetadata",
]
