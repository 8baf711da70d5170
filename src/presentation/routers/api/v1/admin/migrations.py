"""Migration admin handlers.

Handlers:
    create_migration - Import provider users into local accounts
    advance_cohort   - Move the next batch of a cohort to local credentials
    get_progress     - Credential mode counts and cohort status

All handlers require a session with the admin role.
"""

from fastapi import Depends, Request
from fastapi.responses import JSONResponse

from src.application.commands.handlers.migration_handlers import (
    AdvanceCohortHandler,
    MigrateAccountsHandler,
)
from src.application.commands.migration_commands import (
    AdvanceCohort,
    MigrateAccounts,
)
from src.application.queries.handlers.migration_query_handlers import (
    GetMigrationProgressHandler,
)
from src.application.queries.migration_queries import GetMigrationProgress
from src.core.container import (
    get_advance_cohort_handler,
    get_migrate_accounts_handler,
    get_migration_progress_handler,
)
from src.core.result import Failure, Success
from src.domain.value_objects import MigrationOptions
from src.presentation.routers.api.middleware.auth_dependencies import AdminActor
from src.presentation.routers.api.v1.errors import ErrorResponseBuilder
from src.schemas.migration_schemas import (
    CohortAdvanceRequest,
    CohortAdvanceResponse,
    MigrationCreateRequest,
    MigrationCreateResponse,
    MigrationProgressResponse,
)


async def create_migration(
    request: Request,
    data: MigrationCreateRequest,
    actor: AdminActor,
    handler: MigrateAccountsHandler = Depends(get_migrate_accounts_handler),
) -> MigrationCreateResponse | JSONResponse:
    """Import provider users.

    POST /api/v1/admin/migrations -> 200 OK

    Per-user failures are tallied; they never fail the request.
    """
    options = MigrationOptions(
        set_auth_mode=data.set_auth_mode,
        require_password_reset=data.require_password_reset,
        default_role=data.default_role,
        migrated_by=actor.actor_id,
        notes=data.notes,
    )
    result = await handler.handle(
        MigrateAccounts(
            actor=actor,
            mode=data.mode,
            provider_user_id=data.provider_user_id,
            provider_user_ids=data.provider_user_ids,
            options=options,
        )
    )

    match result:
        case Success(value=batch):
            return MigrationCreateResponse.model_validate(batch)
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)


async def advance_cohort(
    request: Request,
    data: CohortAdvanceRequest,
    actor: AdminActor,
    handler: AdvanceCohortHandler = Depends(get_advance_cohort_handler),
) -> CohortAdvanceResponse | JSONResponse:
    """Advance a rollout cohort.

    POST /api/v1/admin/migrations/cohorts -> 200 OK
    """
    result = await handler.handle(
        AdvanceCohort(actor=actor, cohort=data.cohort, batch_size=data.batch_size)
    )

    match result:
        case Success(value=advance):
            return CohortAdvanceResponse.model_validate(advance)
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)


async def get_progress(
    request: Request,
    actor: AdminActor,
    handler: GetMigrationProgressHandler = Depends(get_migration_progress_handler),
) -> MigrationProgressResponse | JSONResponse:
    """Get migration progress.

    GET /api/v1/admin/migrations/progress -> 200 OK
    """
    result = await handler.handle(GetMigrationProgress(actor=actor))

    match result:
        case Success(value=progress):
            return MigrationProgressResponse.model_validate(progress)
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)
