"""Route metadata types for the API Route Registry.

The registry is the single source of truth for all API routes: FastAPI
routes, auth dependencies and OpenAPI metadata are generated from it.

Core types:
    RouteMetadata: Complete route specification (method, path, handler, auth)
    HTTPMethod: HTTP method enum (GET, POST, DELETE)
    AuthPolicy: Authentication policy (PUBLIC, AUTHENTICATED, ADMIN)
    ErrorSpec: Error response specification for OpenAPI

Usage:
    from src.presentation.routers.api.v1.routes.metadata import (
        AuthLevel,
        AuthPolicy,
        HTTPMethod,
        RouteMetadata,
    )

    metadata = RouteMetadata(
        method=HTTPMethod.POST,
        path="/sessions",
        handler=create_session,
        resource="sessions",
        tags=["Sessions"],
        summary="Create session",
        response_model=SessionCreateResponse,
        status_code=201,
        auth_policy=AuthPolicy(level=AuthLevel.PUBLIC),
    )
"""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel


class HTTPMethod(str, Enum):
    """HTTP methods used by the API."""

    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"


class AuthLevel(str, Enum):
    """Authentication levels for routes.

    Attributes:
        PUBLIC: No session required (login, activation, validation)
        AUTHENTICATED: Requires a valid session
        ADMIN: Requires a valid session with the admin role
    """

    PUBLIC = "public"
    AUTHENTICATED = "authenticated"
    ADMIN = "admin"


@dataclass(frozen=True, kw_only=True)
class AuthPolicy:
    """Authentication policy for a route.

    Attributes:
        level: Authentication level.
        rationale: Optional note on why a sensitive route is public.
    """

    level: AuthLevel
    rationale: str | None = None


@dataclass(frozen=True, kw_only=True)
class ErrorSpec:
    """Error response specification for OpenAPI documentation.

    Attributes:
        status: HTTP status code (e.g., 400, 404, 423)
        description: Human-readable error description
    """

    status: int
    description: str


@dataclass(frozen=True, kw_only=True)
class RouteMetadata:
    """Complete specification for an API route.

    Attributes:
        method: HTTP method.
        path: URL path relative to /api/v1.
        handler: Async endpoint function.
        resource: Resource category (e.g., "sessions").
        tags: OpenAPI tags.
        summary: Short endpoint description.
        description: Detailed endpoint description.
        operation_id: Stable operation ID for client generation.
        response_model: Pydantic model for the success response.
        status_code: Success status.
        errors: Possible error responses (documented as ProblemDetails).
        auth_policy: Who may call the route.
    """

    method: HTTPMethod
    path: str
    handler: Callable[..., Awaitable[Any]]
    resource: str
    tags: Sequence[str]
    summary: str
    description: str = ""
    operation_id: str | None = None
    response_model: type[BaseModel] | None = None
    status_code: int = 200
    errors: list[ErrorSpec] = field(default_factory=list)
    auth_policy: AuthPolicy = field(
        default_factory=lambda: AuthPolicy(level=AuthLevel.AUTHENTICATED)
    )
