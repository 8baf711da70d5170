"""Session authentication dependencies.

FastAPI dependencies that read the session token (HttpOnly cookie first,
then an Authorization: Bearer header), validate it against the durable
session store and expose the caller as an AuthenticatedActor.

Usage:
    # Protected route (requires a valid session)
    @router.get("/protected")
    async def protected_route(actor: CurrentActor):
        return {"account_id": str(actor.account_id)}

    # Admin-only route
    @router.get("/admin/thing")
    async def admin_route(actor: AdminActor):
        ...
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.application.dtos.auth_dtos import AuthenticatedActor
from src.application.queries.handlers.validate_session_handler import (
    ValidateSessionHandler,
)
from src.core.config import settings
from src.core.container import get_validate_session_handler
from src.core.result import Failure, Success
from src.domain.value_objects import ClientContext

APPLICATION_HEADER = "X-Client-Application"

# auto_error=False: the cookie is the primary carrier
bearer_scheme = HTTPBearer(auto_error=False)


def client_context(request: Request) -> ClientContext:
    """Client IP, User-Agent and calling application of the request."""
    return ClientContext(
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
        application=request.headers.get(APPLICATION_HEADER),
    )


async def get_session_token(
    request: Request,
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
) -> str | None:
    """Raw session token from the cookie or the Bearer header, if any."""
    cookie_token = request.cookies.get(settings.session_cookie_name)
    if cookie_token:
        return cookie_token
    if credentials is not None:
        return credentials.credentials
    return None


async def get_current_actor(
    token: Annotated[str | None, Depends(get_session_token)],
    handler: Annotated[
        ValidateSessionHandler, Depends(get_validate_session_handler)
    ],
) -> AuthenticatedActor:
    """Get the authenticated caller.

    Raises:
        HTTPException 401: If no token is sent, or the token or its session
            is invalid, revoked or expired.
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    match await handler.authenticate(token):
        case Success(value=verified):
            return AuthenticatedActor(
                account_id=verified.claims.account_id,
                role=verified.claims.role,
                session_id=verified.claims.session_id,
            )
        case Failure(error=error):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=error.message,
                headers={"WWW-Authenticate": "Bearer"},
            )


async def require_admin_role(
    actor: Annotated[AuthenticatedActor, Depends(get_current_actor)],
) -> AuthenticatedActor:
    """Reject non-admin callers before the route runs.

    Raises:
        HTTPException 403: If the caller is not an administrator.
    """
    if not actor.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator role required",
        )
    return actor


# Type aliases for cleaner route signatures
CurrentActor = Annotated[AuthenticatedActor, Depends(get_current_actor)]
AdminActor = Annotated[AuthenticatedActor, Depends(require_admin_role)]
Client = Annotated[ClientContext, Depends(client_context)]
