"""Migration rollback service.

Returns migrated accounts to provider credentials. Rollback is local only:
the identity provider still holds the user, so nothing is sent upstream.

Per account:
1. Revoke every local session (they were issued against local credentials)
2. Switch to PROVIDER mode, which discards the local password hash
3. Clear migrated_at / migrated_by and record the reason in migration_notes
4. Audit MIGRATION_ROLLBACK with the before and after state

Steps 1-3 commit in one transaction: if the account write fails, the
session revocation is rolled back with it, and a concurrent validation
never sees a provider-mode account with a live local session.
"""

from datetime import UTC, datetime, timedelta
from uuid import UUID

from src.application.dtos.migration_dtos import (
    ItemError,
    RecentlyMigratedAccount,
    RollbackResult,
)
from src.core.enums import ErrorCode
from src.core.errors import ConflictError, DomainError, NotFoundError, ValidationError
from src.core.result import Failure, Result, Success
from src.domain.entities import Account
from src.domain.enums import AuditAction
from src.domain.protocols import (
    AccountRepository,
    AuditProtocol,
    LoggerProtocol,
    SessionRepository,
)

ROLLBACK_SESSION_REVOKE_REASON = "migration_rollback"


class RollbackService:
    """Rollback operations. Callers check the admin role."""

    def __init__(
        self,
        *,
        account_repo: AccountRepository,
        session_repo: SessionRepository,
        audit: AuditProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._account_repo = account_repo
        self._session_repo = session_repo
        self._audit = audit
        self._logger = logger

    async def rollback_one(
        self, account_id: UUID, *, reason: str, actor_id: str
    ) -> Result[Account, DomainError]:
        """Roll back one account.

        Returns:
            Success(Account) in PROVIDER mode.
            Failure(NotFoundError) when the account does not exist.
            Failure(ConflictError(ACCOUNT_NOT_MIGRATED)) when it was never
            migrated.
        """
        account = await self._account_repo.find_by_id(account_id)
        if account is None:
            return Failure(
                error=NotFoundError(
                    code=ErrorCode.ACCOUNT_NOT_FOUND,
                    message="Account not found",
                    resource_type="Account",
                    resource_id=str(account_id),
                )
            )
        if not account.was_migrated():
            return Failure(
                error=ConflictError(
                    code=ErrorCode.ACCOUNT_NOT_MIGRATED,
                    message="Account was never migrated",
                    resource_type="Account",
                    conflicting_field="migrated_at",
                )
            )
        await self._roll_back(account, reason=reason, actor_id=actor_id)
        return Success(value=account)

    async def rollback_window(
        self, *, start: datetime, end: datetime, reason: str, actor_id: str
    ) -> Result[RollbackResult, ValidationError]:
        """Roll back every account migrated in [start, end).

        One failing account never stops the rest.

        Returns:
            Success(RollbackResult), or Failure(ValidationError) when the
            window is empty or inverted.
        """
        if start >= end:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.INVALID_TIME_WINDOW,
                    message="Window start must be before its end",
                    field="start",
                )
            )

        result = RollbackResult()
        accounts = await self._account_repo.find_migrated_between(start, end)
        for account in accounts:
            try:
                await self._roll_back(account, reason=reason, actor_id=actor_id)
                result.reverted += 1
            except Exception as e:
                self._logger.error(
                    "migration_rollback_failed", error=e, account_id=str(account.id)
                )
                result.failed += 1
                result.errors.append(
                    ItemError(item_id=str(account.id), message=str(e))
                )

        await self._audit.append(
            actor_id=actor_id,
            action=AuditAction.MIGRATION_ROLLBACK_BATCH,
            resource_type="migration",
            metadata={
                "start": start.isoformat(),
                "end": end.isoformat(),
                "reason": reason,
                "reverted": result.reverted,
                "failed": result.failed,
            },
        )
        return Success(value=result)

    async def list_recently_migrated(
        self, hours_back: int, *, now: datetime | None = None
    ) -> Result[list[RecentlyMigratedAccount], ValidationError]:
        """Accounts migrated within the last hours_back hours, newest first.

        Each row carries hours_since_migration; no cutoff is enforced on
        rolling them back.
        """
        if hours_back <= 0:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.INVALID_TIME_WINDOW,
                    message="hours_back must be positive",
                    field="hours_back",
                )
            )
        moment = now or datetime.now(UTC)
        accounts = await self._account_repo.find_migrated_since(
            moment - timedelta(hours=hours_back)
        )
        return Success(
            value=[
                RecentlyMigratedAccount(
                    account_id=account.id,
                    email=account.email,
                    auth_mode=account.auth_mode.value,
                    migrated_at=account.migrated_at,
                    migrated_by=account.migrated_by,
                    hours_since_migration=int(
                        (moment - account.migrated_at).total_seconds() // 3600
                    ),
                )
                for account in accounts
                if account.migrated_at is not None
            ]
        )

    async def _roll_back(
        self, account: Account, *, reason: str, actor_id: str
    ) -> None:
        previous_state = {
            "auth_mode": account.auth_mode.value,
            "status": account.status.value,
            "migrated_at": (
                account.migrated_at.isoformat() if account.migrated_at else None
            ),
            "migrated_by": account.migrated_by,
        }

        account.roll_back_to_provider(f"Rolled back: {reason}")
        revoked = await self._session_repo.revoke_all_for_account(
            account.id,
            revoked_by=actor_id,
            reason=ROLLBACK_SESSION_REVOKE_REASON,
            commit=False,
        )
        # Commits the revocation too
        await self._account_repo.update(account)

        await self._audit.append(
            actor_id=actor_id,
            action=AuditAction.MIGRATION_ROLLBACK,
            resource_type="account",
            resource_id=str(account.id),
            previous_state=previous_state,
            new_state={
                "auth_mode": account.auth_mode.value,
                "status": account.status.value,
            },
            metadata={"reason": reason, "sessions_revoked": revoked},
        )
        self._logger.info(
            "migration_rolled_back",
            account_id=str(account.id),
            sessions_revoked=revoked,
        )
