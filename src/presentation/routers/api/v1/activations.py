"""Activations resource router.

Endpoints:
    POST /api/v1/activations - Activate a migrated account with a new password
"""

from fastapi import Depends, Request
from fastapi.responses import JSONResponse

from src.application.commands.auth_commands import ActivateAccount
from src.application.commands.handlers.activate_account_handler import (
    ActivateAccountHandler,
)
from src.core.container import get_activate_account_handler
from src.core.result import Failure, Success
from src.presentation.routers.api.middleware.auth_dependencies import Client
from src.presentation.routers.api.v1.errors import ErrorResponseBuilder
from src.schemas.auth_schemas import ActivationCreateRequest, ActivationCreateResponse


async def create_activation(
    request: Request,
    data: ActivationCreateRequest,
    client: Client,
    handler: ActivateAccountHandler = Depends(get_activate_account_handler),
) -> ActivationCreateResponse | JSONResponse:
    """Activate an account.

    POST /api/v1/activations -> 201 Created

    Consumes the single-use activation token and sets the first local
    password. Weak passwords give 400, unknown tokens 404, used tokens 409
    and expired tokens 401.
    """
    result = await handler.handle(
        ActivateAccount(token=data.token, new_password=data.new_password, client=client)
    )

    match result:
        case Success():
            return ActivationCreateResponse()
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)
