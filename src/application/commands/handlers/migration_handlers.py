"""Migration and rollback command handlers.

Each handler checks the admin role, then delegates to the orchestrator or
the rollback service.

Handlers:
    - MigrateAccountsHandler: import provider users (single, batch, all)
    - AdvanceCohortHandler: move the next batch of a rollout cohort
    - RollbackAccountsHandler: return accounts to provider credentials
"""

from src.application.commands.migration_commands import (
    AdvanceCohort,
    MigrateAccounts,
    RollbackAccounts,
    RollbackMode,
)
from src.application.dtos.migration_dtos import (
    BatchMapResult,
    CohortAdvanceResult,
    RollbackResult,
)
from src.application.services.admin_guard import require_admin
from src.application.services.migration_orchestrator import MigrationOrchestrator
from src.application.services.rollback_service import RollbackService
from src.core.enums import ErrorCode
from src.core.errors import DomainError, ValidationError
from src.core.result import Failure, Result, Success


class MigrateAccountsHandler:
    """Handler for MigrateAccounts command."""

    def __init__(self, *, orchestrator: MigrationOrchestrator) -> None:
        self._orchestrator = orchestrator

    async def handle(
        self, cmd: MigrateAccounts
    ) -> Result[BatchMapResult, DomainError]:
        """Handle MigrateAccounts command.

        Returns:
            Success(BatchMapResult) with per-item errors.
            Failure(AuthorizationError) for non-admins.
            Failure(NotFoundError | UpstreamError | ValidationError) when the
            export cannot start.
        """
        if isinstance(guard := require_admin(cmd.actor), Failure):
            return guard

        return await self._orchestrator.migrate(
            mode=cmd.mode,
            options=cmd.options,
            actor_id=cmd.actor.actor_id,
            provider_user_id=cmd.provider_user_id,
            provider_user_ids=cmd.provider_user_ids,
        )


class AdvanceCohortHandler:
    """Handler for AdvanceCohort command."""

    def __init__(self, *, orchestrator: MigrationOrchestrator) -> None:
        self._orchestrator = orchestrator

    async def handle(
        self, cmd: AdvanceCohort
    ) -> Result[CohortAdvanceResult, DomainError]:
        """Handle AdvanceCohort command.

        Returns:
            Success(CohortAdvanceResult).
            Failure(AuthorizationError) for non-admins.
            Failure(ValidationError) for a non-positive batch size.
            Failure(ConflictError) when the cohort is out of order or done.
        """
        if isinstance(guard := require_admin(cmd.actor), Failure):
            return guard
        if cmd.batch_size is not None and cmd.batch_size <= 0:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.VALIDATION_FAILED,
                    message="batch_size must be positive",
                    field="batch_size",
                )
            )

        return await self._orchestrator.advance_cohort(
            cmd.cohort, actor_id=cmd.actor.actor_id, batch_size=cmd.batch_size
        )


class RollbackAccountsHandler:
    """Handler for RollbackAccounts command."""

    def __init__(self, *, rollback_service: RollbackService) -> None:
        self._rollback_service = rollback_service

    async def handle(
        self, cmd: RollbackAccounts
    ) -> Result[RollbackResult, DomainError]:
        """Handle RollbackAccounts command.

        Returns:
            Success(RollbackResult).
            Failure(AuthorizationError) for non-admins.
            Failure(ValidationError) for missing arguments or a bad window.
            Failure(NotFoundError | ConflictError) in single mode.
        """
        if isinstance(guard := require_admin(cmd.actor), Failure):
            return guard
        if not cmd.reason.strip():
            return Failure(error=_required("reason"))

        match cmd.mode:
            case RollbackMode.SINGLE:
                if cmd.account_id is None:
                    return Failure(error=_required("account_id"))
                single = await self._rollback_service.rollback_one(
                    cmd.account_id, reason=cmd.reason, actor_id=cmd.actor.actor_id
                )
                if isinstance(single, Failure):
                    return single
                return Success(value=RollbackResult(reverted=1))
            case RollbackMode.WINDOW:
                if cmd.start is None or cmd.end is None:
                    return Failure(error=_required("start"))
                return await self._rollback_service.rollback_window(
                    start=cmd.start,
                    end=cmd.end,
                    reason=cmd.reason,
                    actor_id=cmd.actor.actor_id,
                )


def _required(field: str) -> ValidationError:
    return ValidationError(
        code=ErrorCode.VALIDATION_FAILED,
        message=f"{field} is required",
        field=field,
    )
