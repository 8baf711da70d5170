"""Migration handler dependency factories.

Request-scoped handler instances for the provider-to-local migration:
- Import (single, batch, all)
- Cohort advance and progress
- Rollback and recently-migrated listing
- Audit chain verification

Authorization is enforced by the handlers (admin role), not here.
"""

from datetime import timedelta
from typing import TYPE_CHECKING

from fastapi import Depends

from src.core.config import settings
from src.core.container.infrastructure import (
    get_audit,
    get_identity_provider,
    get_logger,
    get_notifications,
    get_single_use_token_service,
)
from src.core.container.repositories import (
    get_account_repository,
    get_migration_cohort_repository,
    get_session_repository,
    get_single_use_token_repository,
)
from src.domain.enums import RolloutCohort

if TYPE_CHECKING:
    from src.application.commands.handlers.migration_handlers import (
        AdvanceCohortHandler,
        MigrateAccountsHandler,
        RollbackAccountsHandler,
    )
    from src.application.queries.handlers.migration_query_handlers import (
        GetMigrationProgressHandler,
        ListRecentlyMigratedHandler,
        VerifyAuditChainHandler,
    )
    from src.application.services.migration_orchestrator import (
        MigrationOrchestrator,
    )
    from src.application.services.rollback_service import RollbackService
    from src.infrastructure.persistence.repositories import (
        AccountRepository,
        MigrationCohortRepository,
        SessionRepository,
        SingleUseTokenRepository,
    )


# ============================================================================
# Migration Services (Request-Scoped)
# ============================================================================


async def get_migration_orchestrator(
    account_repo: "AccountRepository" = Depends(get_account_repository),
    session_repo: "SessionRepository" = Depends(get_session_repository),
    cohort_repo: "MigrationCohortRepository" = Depends(
        get_migration_cohort_repository
    ),
    token_repo: "SingleUseTokenRepository" = Depends(
        get_single_use_token_repository
    ),
) -> "MigrationOrchestrator":
    """Get migration orchestrator (request-scoped).

    Cohort targets come from MIGRATION_COHORT_TARGETS, the activation token
    lifetime from ACTIVATION_TOKEN_TTL_HOURS.
    """
    from src.application.services.migration_orchestrator import (
        MigrationOrchestrator,
    )

    return MigrationOrchestrator(
        account_repo=account_repo,
        session_repo=session_repo,
        cohort_repo=cohort_repo,
        token_repo=token_repo,
        token_service=get_single_use_token_service(),
        provider=get_identity_provider(),
        notifications=get_notifications(),
        audit=get_audit(),
        logger=get_logger(),
        cohort_targets={
            RolloutCohort(name): target
            for name, target in settings.cohort_targets.items()
        },
        activation_token_ttl=timedelta(hours=settings.activation_token_ttl_hours),
        default_batch_size=settings.migration_batch_size,
    )


async def get_rollback_service(
    account_repo: "AccountRepository" = Depends(get_account_repository),
    session_repo: "SessionRepository" = Depends(get_session_repository),
) -> "RollbackService":
    """Get rollback service (request-scoped)."""
    from src.application.services.rollback_service import RollbackService

    return RollbackService(
        account_repo=account_repo,
        session_repo=session_repo,
        audit=get_audit(),
        logger=get_logger(),
    )


# ============================================================================
# Migration Handler Factories
# ============================================================================


async def get_migrate_accounts_handler(
    orchestrator: "MigrationOrchestrator" = Depends(get_migration_orchestrator),
) -> "MigrateAccountsHandler":
    """Get MigrateAccounts command handler (request-scoped)."""
    from src.application.commands.handlers.migration_handlers import (
        MigrateAccountsHandler,
    )

    return MigrateAccountsHandler(orchestrator=orchestrator)


async def get_advance_cohort_handler(
    orchestrator: "MigrationOrchestrator" = Depends(get_migration_orchestrator),
) -> "AdvanceCohortHandler":
    """Get AdvanceCohort command handler (request-scoped)."""
    from src.application.commands.handlers.migration_handlers import (
        AdvanceCohortHandler,
    )

    return AdvanceCohortHandler(orchestrator=orchestrator)


async def get_rollback_accounts_handler(
    rollback_service: "RollbackService" = Depends(get_rollback_service),
) -> "RollbackAccountsHandler":
    """Get RollbackAccounts command handler (request-scoped)."""
    from src.application.commands.handlers.migration_handlers import (
        RollbackAccountsHandler,
    )

    return RollbackAccountsHandler(rollback_service=rollback_service)


async def get_list_recently_migrated_handler(
    rollback_service: "RollbackService" = Depends(get_rollback_service),
) -> "ListRecentlyMigratedHandler":
    """Get ListRecentlyMigrated query handler (request-scoped)."""
    from src.application.queries.handlers.migration_query_handlers import (
        ListRecentlyMigratedHandler,
    )

    return ListRecentlyMigratedHandler(rollback_service=rollback_service)


async def get_migration_progress_handler(
    orchestrator: "MigrationOrchestrator" = Depends(get_migration_orchestrator),
) -> "GetMigrationProgressHandler":
    """Get GetMigrationProgress query handler (request-scoped)."""
    from src.application.queries.handlers.migration_query_handlers import (
        GetMigrationProgressHandler,
    )

    return GetMigrationProgressHandler(orchestrator=orchestrator)


def get_verify_audit_chain_handler() -> "VerifyAuditChainHandler":
    """Get VerifyAuditChain query handler.

    Reads the log through the audit adapter's own sessions, so no request
    session is needed.
    """
    from src.application.queries.handlers.migration_query_handlers import (
        VerifyAuditChainHandler,
    )

    return VerifyAuditChainHandler(audit=get_audit(), logger=get_logger())
