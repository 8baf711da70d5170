"""Rollback admin handlers.

Handlers:
    create_rollback  - Return accounts to provider credentials
    list_candidates  - Recently migrated accounts
"""

from fastapi import Depends, Query, Request
from fastapi.responses import JSONResponse

from src.application.commands.handlers.migration_handlers import (
    RollbackAccountsHandler,
)
from src.application.commands.migration_commands import RollbackAccounts
from src.application.queries.handlers.migration_query_handlers import (
    ListRecentlyMigratedHandler,
)
from src.application.queries.migration_queries import ListRecentlyMigrated
from src.core.container import (
    get_list_recently_migrated_handler,
    get_rollback_accounts_handler,
)
from src.core.result import Failure, Success
from src.presentation.routers.api.middleware.auth_dependencies import AdminActor
from src.presentation.routers.api.v1.errors import ErrorResponseBuilder
from src.schemas.migration_schemas import (
    RollbackCandidateListResponse,
    RollbackCandidateResponse,
    RollbackCreateRequest,
    RollbackCreateResponse,
)


async def create_rollback(
    request: Request,
    data: RollbackCreateRequest,
    actor: AdminActor,
    handler: RollbackAccountsHandler = Depends(get_rollback_accounts_handler),
) -> RollbackCreateResponse | JSONResponse:
    """Roll accounts back to provider credentials.

    POST /api/v1/admin/rollbacks -> 200 OK

    Sessions of reverted accounts are revoked.
    """
    result = await handler.handle(
        RollbackAccounts(
            actor=actor,
            mode=data.mode,
            reason=data.reason,
            account_id=data.account_id,
            start=data.start,
            end=data.end,
        )
    )

    match result:
        case Success(value=rollback):
            return RollbackCreateResponse.model_validate(rollback)
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)


async def list_candidates(
    request: Request,
    actor: AdminActor,
    hours_back: int = Query(24, ge=1, le=720, description="Look-back window"),
    handler: ListRecentlyMigratedHandler = Depends(
        get_list_recently_migrated_handler
    ),
) -> RollbackCandidateListResponse | JSONResponse:
    """List rollback candidates.

    GET /api/v1/admin/rollbacks/candidates -> 200 OK
    """
    result = await handler.handle(
        ListRecentlyMigrated(actor=actor, hours_back=hours_back)
    )

    match result:
        case Success(value=accounts):
            return RollbackCandidateListResponse(
                candidates=[
                    RollbackCandidateResponse.model_validate(a) for a in accounts
                ],
                total_count=len(accounts),
            )
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)
