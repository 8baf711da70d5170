"""Sessions resource router.

Endpoints:
    POST   /api/v1/sessions          - Create session (login), sets cookie
    POST   /api/v1/sessions/validate - Validate a session token
    DELETE /api/v1/sessions/current  - Delete current session (logout)

Routes are registered through the route registry, not decorators.
"""

from datetime import UTC, datetime

from fastapi import Depends, Request, Response, status
from fastapi.responses import JSONResponse

from src.application.commands.auth_commands import Login, RevokeSession
from src.application.commands.handlers.login_handler import LoginHandler
from src.application.commands.handlers.revoke_session_handler import (
    RevokeSessionHandler,
)
from src.application.queries.handlers.validate_session_handler import (
    ValidateSessionHandler,
)
from src.application.queries.session_queries import ValidateSession
from src.core.config import settings
from src.core.container import (
    get_login_handler,
    get_revoke_session_handler,
    get_validate_session_handler,
)
from src.core.result import Failure, Success
from src.presentation.routers.api.middleware.auth_dependencies import (
    Client,
    CurrentActor,
)
from src.presentation.routers.api.v1.errors import ErrorResponseBuilder
from src.schemas.auth_schemas import (
    SessionCreateRequest,
    SessionCreateResponse,
    SessionValidateRequest,
    SessionValidateResponse,
)


async def create_session(
    request: Request,
    response: Response,
    data: SessionCreateRequest,
    client: Client,
    handler: LoginHandler = Depends(get_login_handler),
) -> SessionCreateResponse | JSONResponse:
    """Create a new session (login).

    POST /api/v1/sessions -> 201 Created

    The signed token is set as an HttpOnly cookie. Invalid credentials,
    inactive accounts and unknown emails all produce the same 401.

    Returns:
        SessionCreateResponse on success.
        JSONResponse with ProblemDetails on failure (401/423/429).
    """
    result = await handler.handle(
        Login(email=data.email, password=data.password, client=client)
    )

    match result:
        case Success(value=login):
            set_session_cookie(response, login.session_token, login.expires_at)
            return SessionCreateResponse.from_result(login)
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)


async def validate_session(
    data: SessionValidateRequest,
    handler: ValidateSessionHandler = Depends(get_validate_session_handler),
) -> SessionValidateResponse:
    """Validate a session token for an external caller.

    POST /api/v1/sessions/validate -> 200 OK

    No session is required: the token in the body is the credential.
    Rejected tokens return valid=false with a reason code, never an error
    status.
    """
    result = await handler.handle(ValidateSession(token=data.token))
    match result:
        case Success(value=validation):
            return SessionValidateResponse.from_validation(validation)
        case _:
            return SessionValidateResponse(valid=False, reason="token_invalid")


async def delete_current_session(
    actor: CurrentActor,
    client: Client,
    handler: RevokeSessionHandler = Depends(get_revoke_session_handler),
) -> Response:
    """Delete the current session (logout).

    DELETE /api/v1/sessions/current -> 204 No Content

    Idempotent: an already revoked session still returns 204.
    """
    if actor.session_id is not None:
        await handler.handle(
            RevokeSession(
                session_id=actor.session_id,
                account_id=actor.account_id,
                revoked_by=actor.actor_id,
                client=client,
            )
        )

    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    clear_session_cookie(response)
    return response


def set_session_cookie(response: Response, token: str, expires_at: datetime) -> None:
    """Set the HttpOnly session cookie (Secure outside development)."""
    max_age = max(int((expires_at - datetime.now(UTC)).total_seconds()), 0)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=max_age,
        expires=expires_at,
        path="/",
        domain=settings.session_cookie_domain,
        secure=not settings.is_development,
        httponly=True,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        domain=settings.session_cookie_domain,
        secure=not settings.is_development,
        httponly=True,
        samesite="lax",
    )
