"""Migration and audit query handlers.

Handlers:
    - ListRecentlyMigratedHandler: rollback candidates
    - GetMigrationProgressHandler: counts per credential mode and cohorts
    - VerifyAuditChainHandler: full audit chain verification
"""

from src.application.dtos.migration_dtos import (
    MigrationProgress,
    RecentlyMigratedAccount,
)
from src.application.queries.migration_queries import (
    GetMigrationProgress,
    ListRecentlyMigrated,
    VerifyAuditChain,
)
from src.application.services.admin_guard import require_admin
from src.application.services.migration_orchestrator import MigrationOrchestrator
from src.application.services.rollback_service import RollbackService
from src.core.enums import ErrorCode
from src.core.errors import DomainError, IntegrityError
from src.core.result import Failure, Result, Success
from src.domain.entities import ChainVerification
from src.domain.protocols import AuditProtocol, LoggerProtocol


class ListRecentlyMigratedHandler:
    """Handler for ListRecentlyMigrated query."""

    def __init__(self, *, rollback_service: RollbackService) -> None:
        self._rollback_service = rollback_service

    async def handle(
        self, query: ListRecentlyMigrated
    ) -> Result[list[RecentlyMigratedAccount], DomainError]:
        if isinstance(guard := require_admin(query.actor), Failure):
            return guard
        return await self._rollback_service.list_recently_migrated(query.hours_back)


class GetMigrationProgressHandler:
    """Handler for GetMigrationProgress query."""

    def __init__(self, *, orchestrator: MigrationOrchestrator) -> None:
        self._orchestrator = orchestrator

    async def handle(
        self, query: GetMigrationProgress
    ) -> Result[MigrationProgress, DomainError]:
        if isinstance(guard := require_admin(query.actor), Failure):
            return guard
        return Success(value=await self._orchestrator.get_progress())


class VerifyAuditChainHandler:
    """Handler for VerifyAuditChain query.

    A broken chain is reported as IntegrityError and never repaired.
    """

    def __init__(self, *, audit: AuditProtocol, logger: LoggerProtocol) -> None:
        self._audit = audit
        self._logger = logger

    async def handle(
        self, query: VerifyAuditChain
    ) -> Result[ChainVerification, DomainError]:
        """Handle VerifyAuditChain query.

        Returns:
            Success(ChainVerification) for an intact chain.
            Failure(IntegrityError) naming the first broken entry.
            Failure(AuditError) when the log cannot be read.
            Failure(AuthorizationError) for non-admins.
        """
        if isinstance(guard := require_admin(query.actor), Failure):
            return guard

        result = await self._audit.verify()
        if isinstance(result, Failure):
            return result

        verification = result.value
        self._logger.info(
            "audit_chain_verified",
            valid=verification.valid,
            total_entries=verification.total_entries,
            actor_id=query.actor.actor_id,
        )
        if not verification.valid:
            return Failure(
                error=IntegrityError(
                    code=ErrorCode.AUDIT_CHAIN_BROKEN,
                    message=verification.message,
                    broken_at_id=verification.broken_at_id,
                    total_entries=verification.total_entries,
                    details={
                        "broken_at_sequence": str(verification.broken_at_sequence)
                    },
                )
            )
        return Success(value=verification)
