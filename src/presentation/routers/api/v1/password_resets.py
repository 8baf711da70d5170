"""Password resets resource router.

Endpoints:
    POST /api/v1/password-resets         - Request a reset email
    POST /api/v1/password-resets/confirm - Set a new password with a token
"""

from fastapi import Depends, Request
from fastapi.responses import JSONResponse

from src.application.commands.auth_commands import RequestPasswordReset, ResetPassword
from src.application.commands.handlers.request_password_reset_handler import (
    RequestPasswordResetHandler,
)
from src.application.commands.handlers.reset_password_handler import (
    ResetPasswordHandler,
)
from src.core.container import (
    get_request_password_reset_handler,
    get_reset_password_handler,
)
from src.core.result import Failure, Success
from src.presentation.routers.api.middleware.auth_dependencies import Client
from src.presentation.routers.api.v1.errors import ErrorResponseBuilder
from src.schemas.auth_schemas import (
    PasswordResetConfirmRequest,
    PasswordResetConfirmResponse,
    PasswordResetCreateRequest,
    PasswordResetCreateResponse,
)


async def create_password_reset(
    data: PasswordResetCreateRequest,
    client: Client,
    handler: RequestPasswordResetHandler = Depends(
        get_request_password_reset_handler
    ),
) -> PasswordResetCreateResponse:
    """Request a password reset.

    POST /api/v1/password-resets -> 202 Accepted

    Always returns the same response to prevent email enumeration.
    """
    await handler.handle(RequestPasswordReset(email=data.email, client=client))
    return PasswordResetCreateResponse()


async def confirm_password_reset(
    request: Request,
    data: PasswordResetConfirmRequest,
    client: Client,
    handler: ResetPasswordHandler = Depends(get_reset_password_handler),
) -> PasswordResetConfirmResponse | JSONResponse:
    """Set a new password.

    POST /api/v1/password-resets/confirm -> 200 OK

    Every active session of the account is revoked.
    """
    result = await handler.handle(
        ResetPassword(token=data.token, new_password=data.new_password, client=client)
    )

    match result:
        case Success(value=revoked):
            return PasswordResetConfirmResponse(sessions_revoked=revoked)
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)
