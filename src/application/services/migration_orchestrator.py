"""Provider-to-local migration orchestrator.

Imports provider users into the local account store and moves accounts to
local credentials cohort by cohort.

Import:
    export_accounts / export_account read from the identity provider;
    map_account creates or updates one account (idempotent, so an
    interrupted batch can simply be rerun); batch_map tallies outcomes and
    never lets one failure abort the batch.

Gradual rollout:
    Cohorts (pilot, wave1, wave2, final) advance strictly in order. Cohort
    targets are cumulative counts of LOCAL accounts. Each advance call moves
    at most batch_size eligible accounts (most recently active first),
    revokes their sessions and sends an activation link to accounts that
    have no local password yet.

Usage:
    orchestrator = MigrationOrchestrator(...)
    result = await orchestrator.migrate(
        mode=MigrationMode.ALL, options=options, actor_id=str(admin.id)
    )
"""

from collections.abc import Iterable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from uuid_extensions import uuid7

from src.application.commands.migration_commands import MigrationMode
from src.application.dtos.migration_dtos import (
    BatchMapResult,
    CohortAdvanceResult,
    CohortStatus,
    ItemError,
    MapAction,
    MapOutcome,
    MigrationProgress,
)
from src.core.constants import PROVIDER_PAGE_SIZE
from src.core.enums import ErrorCode
from src.core.errors import (
    ConflictError,
    DomainError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from src.core.result import Failure, Result, Success
from src.domain.entities import Account, MigrationCohort, SingleUseToken
from src.domain.enums import (
    AccountRole,
    AccountStatus,
    AuditAction,
    AuthMode,
    RolloutCohort,
    TokenPurpose,
)
from src.domain.protocols import (
    AccountRepository,
    AuditProtocol,
    IdentityProviderProtocol,
    LoggerProtocol,
    MigrationCohortRepository,
    NotificationProtocol,
    SessionRepository,
    SingleUseTokenRepository,
    SingleUseTokenServiceProtocol,
)
from src.domain.value_objects import MigrationOptions, ProviderUser

MIGRATION_SESSION_REVOKE_REASON = "migrated_to_local"

_ROLE_HINTS: dict[str, AccountRole] = {
    "admin": AccountRole.ADMIN,
    "staff": AccountRole.STAFF,
    "inspector": AccountRole.INSPECTOR,
    "company_admin": AccountRole.MEMBER_ADMIN,
}


def derive_role(user: ProviderUser, default_role: AccountRole) -> AccountRole:
    """Role from provider public metadata, falling back to default_role.

    Recognized hints: role = admin | staff | inspector | company_admin,
    and the boolean flags isAdmin / isStaff.
    """
    hint = user.role_hint
    if hint is not None and hint in _ROLE_HINTS:
        return _ROLE_HINTS[hint]
    if user.public_metadata.get("isAdmin") is True:
        return AccountRole.ADMIN
    if user.public_metadata.get("isStaff") is True:
        return AccountRole.STAFF
    return default_role


def provider_snapshot(user: ProviderUser) -> dict[str, Any]:
    """Provider metadata stored on the account (already sanitized)."""
    return {
        "public_metadata": dict(user.public_metadata),
        "email_verified": user.email_verified,
        "provider_created_at": (
            user.created_at.isoformat() if user.created_at else None
        ),
        "last_sign_in_at": (
            user.last_sign_in_at.isoformat() if user.last_sign_in_at else None
        ),
    }


class MigrationOrchestrator:
    """Import and cohort rollout service.

    Every public method assumes the caller already checked the admin role.
    """

    def __init__(
        self,
        *,
        account_repo: AccountRepository,
        session_repo: SessionRepository,
        cohort_repo: MigrationCohortRepository,
        token_repo: SingleUseTokenRepository,
        token_service: SingleUseTokenServiceProtocol,
        provider: IdentityProviderProtocol,
        notifications: NotificationProtocol,
        audit: AuditProtocol,
        logger: LoggerProtocol,
        cohort_targets: Mapping[RolloutCohort, int | None],
        activation_token_ttl: timedelta,
        default_batch_size: int,
        page_size: int = PROVIDER_PAGE_SIZE,
    ) -> None:
        self._account_repo = account_repo
        self._session_repo = session_repo
        self._cohort_repo = cohort_repo
        self._token_repo = token_repo
        self._token_service = token_service
        self._provider = provider
        self._notifications = notifications
        self._audit = audit
        self._logger = logger
        self._cohort_targets = cohort_targets
        self._activation_ttl = activation_token_ttl
        self._default_batch_size = default_batch_size
        self._page_size = page_size

    # =========================================================================
    # Export
    # =========================================================================

    async def export_accounts(self) -> Result[list[ProviderUser], UpstreamError]:
        """Fetch every provider user, page by page.

        Returns:
            Success(list[ProviderUser]) or the first page's Failure.
        """
        users: list[ProviderUser] = []
        offset: int | None = 0
        while offset is not None:
            page_result = await self._provider.list_users(
                limit=self._page_size, offset=offset
            )
            if isinstance(page_result, Failure):
                self._logger.error(
                    "provider_export_failed",
                    offset=offset,
                    error_code=page_result.error.code.value,
                )
                return page_result
            page = page_result.value
            users.extend(page.users)
            offset = page.next_offset

        self._logger.info("provider_export_completed", users=len(users))
        return Success(value=users)

    async def export_account(
        self, provider_user_id: str
    ) -> Result[ProviderUser, DomainError]:
        """Fetch one provider user.

        Returns:
            Success(ProviderUser), Failure(NotFoundError) when the provider
            does not know the id, or Failure(UpstreamError).
        """
        result = await self._provider.get_user(provider_user_id)
        if isinstance(result, Failure):
            return result
        if result.value is None:
            return Failure(
                error=NotFoundError(
                    code=ErrorCode.PROVIDER_USER_NOT_FOUND,
                    message="Provider user not found",
                    resource_type="ProviderUser",
                    resource_id=provider_user_id,
                )
            )
        return Success(value=result.value)

    # =========================================================================
    # Mapping
    # =========================================================================

    async def map_account(
        self, user: ProviderUser, options: MigrationOptions
    ) -> MapOutcome:
        """Create or update the local account for one provider user.

        Existing accounts are matched by provider id first, then by email.
        Running it twice for the same user reports UPDATED the second time.

        Raises:
            Whatever the repository raises on a database failure; batch_map
            records it as a per-item failure.
        """
        if not user.email:
            return MapOutcome(
                action=MapAction.SKIPPED,
                provider_user_id=user.provider_user_id,
                reason="Provider user has no email address",
            )

        existing = await self._account_repo.find_by_provider_user_id(
            user.provider_user_id
        )
        if existing is None:
            existing = await self._account_repo.find_by_email(user.email)

        if existing is not None:
            existing.provider_user_id = user.provider_user_id
            existing.provider_metadata = provider_snapshot(user)
            if user.phone and not existing.phone:
                existing.phone = user.phone
            self._apply_options(existing, options)
            await self._account_repo.update(existing)
            return MapOutcome(
                action=MapAction.UPDATED,
                provider_user_id=user.provider_user_id,
                account_id=existing.id,
            )

        account = Account(
            id=uuid7(),
            email=user.email,
            first_name=user.first_name or "Unknown",
            last_name=user.last_name or "User",
            phone=user.phone,
            role=derive_role(user, options.default_role),
            status=(
                AccountStatus.ACTIVE
                if user.email_verified
                else AccountStatus.PENDING_ACTIVATION
            ),
            auth_mode=AuthMode.PROVIDER,
            provider_user_id=user.provider_user_id,
            provider_metadata=provider_snapshot(user),
        )
        self._apply_options(account, options)
        await self._account_repo.save(account)
        return MapOutcome(
            action=MapAction.CREATED,
            provider_user_id=user.provider_user_id,
            account_id=account.id,
        )

    async def batch_map(
        self, users: Iterable[ProviderUser], options: MigrationOptions
    ) -> BatchMapResult:
        """Map many users; failures are recorded per item."""
        result = BatchMapResult()
        for user in users:
            try:
                result.record(await self.map_account(user, options))
            except Exception as e:
                self._logger.error(
                    "migration_map_failed",
                    error=e,
                    provider_user_id=user.provider_user_id,
                )
                result.record_failure(user.provider_user_id, str(e))
        return result

    async def migrate(
        self,
        *,
        mode: MigrationMode,
        options: MigrationOptions,
        actor_id: str,
        provider_user_id: str | None = None,
        provider_user_ids: Iterable[str] = (),
    ) -> Result[BatchMapResult, DomainError]:
        """Export from the provider and map, then audit a summary.

        Returns:
            Success(BatchMapResult). Failure only when the export itself
            fails (single mode, or the listing in all mode).
        """
        if options.migrated_by is None:
            options = MigrationOptions(
                set_auth_mode=options.set_auth_mode,
                require_password_reset=options.require_password_reset,
                default_role=options.default_role,
                migrated_by=actor_id,
                notes=options.notes,
            )

        match mode:
            case MigrationMode.SINGLE:
                if not provider_user_id:
                    return Failure(error=_missing_ids())
                exported = await self.export_account(provider_user_id)
                if isinstance(exported, Failure):
                    return exported
                result = await self.batch_map([exported.value], options)
            case MigrationMode.BATCH:
                ids = list(provider_user_ids)
                if not ids:
                    return Failure(error=_missing_ids())
                result = await self._migrate_ids(ids, options)
            case MigrationMode.ALL:
                exported_all = await self.export_accounts()
                if isinstance(exported_all, Failure):
                    return exported_all
                result = await self.batch_map(exported_all.value, options)

        await self._audit.append(
            actor_id=actor_id,
            action=AuditAction.MIGRATION_IMPORT,
            resource_type="migration",
            metadata={
                "mode": mode.value,
                "set_auth_mode": (
                    options.set_auth_mode.value if options.set_auth_mode else None
                ),
                "created": result.created,
                "updated": result.updated,
                "skipped": result.skipped,
                "failed": result.failed,
            },
        )
        self._logger.info(
            "migration_import_completed",
            mode=mode.value,
            created=result.created,
            updated=result.updated,
            skipped=result.skipped,
            failed=result.failed,
        )
        return Success(value=result)

    async def _migrate_ids(
        self, ids: list[str], options: MigrationOptions
    ) -> BatchMapResult:
        result = BatchMapResult()
        for provider_user_id in ids:
            exported = await self.export_account(provider_user_id)
            match exported:
                case Failure(error=error):
                    result.record_failure(provider_user_id, error.message)
                case Success(value=user):
                    item = await self.batch_map([user], options)
                    result.created += item.created
                    result.updated += item.updated
                    result.skipped += item.skipped
                    result.failed += item.failed
                    result.errors.extend(item.errors)
        return result

    @staticmethod
    def _apply_options(account: Account, options: MigrationOptions) -> None:
        mode = options.set_auth_mode
        if mode is not None and mode != account.auth_mode:
            if mode.holds_local_password:
                account.mark_migrated(
                    mode=mode, migrated_by=options.migrated_by, notes=options.notes
                )
            else:
                account.apply_auth_mode(mode)
                account.migrated_at = None
                account.migrated_by = None
        elif options.notes is not None:
            account.migration_notes = options.notes
        if options.require_password_reset:
            account.must_change_password = True

    # =========================================================================
    # Gradual rollout
    # =========================================================================

    async def advance_cohort(
        self,
        cohort: RolloutCohort,
        *,
        actor_id: str,
        batch_size: int | None = None,
    ) -> Result[CohortAdvanceResult, ConflictError]:
        """Move the next batch of eligible accounts to LOCAL mode.

        Returns:
            Success(CohortAdvanceResult).
            Failure(ConflictError) when an earlier cohort is incomplete
            (COHORT_OUT_OF_ORDER) or this one is done (COHORT_ALREADY_COMPLETE).
        """
        # Step 1: Ordering
        states = {state.cohort: state for state in await self._cohort_states()}
        for earlier in cohort.predecessors():
            if not states[earlier].is_complete():
                return Failure(
                    error=ConflictError(
                        code=ErrorCode.COHORT_OUT_OF_ORDER,
                        message=f"Cohort {earlier.value} must complete first",
                        resource_type="MigrationCohort",
                        conflicting_field=earlier.value,
                    )
                )
        state = states[cohort]
        if state.is_complete():
            return Failure(
                error=ConflictError(
                    code=ErrorCode.COHORT_ALREADY_COMPLETE,
                    message=f"Cohort {cohort.value} is already complete",
                    resource_type="MigrationCohort",
                    conflicting_field="completed_at",
                )
            )

        # Step 2: How many accounts this call may move
        counts = await self._account_repo.count_by_auth_mode()
        local_before = counts[AuthMode.LOCAL]
        remaining = state.remaining(local_before)
        size = batch_size or self._default_batch_size
        take = size if remaining is None else min(size, remaining)

        # Step 3: Move accounts
        migrated = 0
        tokens_issued = 0
        errors: list[ItemError] = []
        if take > 0:
            candidates = await self._account_repo.find_migration_candidates(take)
            for account in candidates:
                try:
                    tokens_issued += await self._move_to_local(
                        account, cohort=cohort, actor_id=actor_id
                    )
                    migrated += 1
                except Exception as e:
                    self._logger.error(
                        "cohort_account_migration_failed",
                        error=e,
                        account_id=str(account.id),
                        cohort=cohort.value,
                    )
                    errors.append(
                        ItemError(item_id=str(account.id), message=str(e))
                    )

        # Step 4: Completion
        local_after = local_before + migrated
        target_reached = state.target_size is not None and (
            local_after >= state.target_size
        )
        exhausted = not await self._account_repo.find_migration_candidates(1)
        if target_reached or exhausted:
            state.mark_complete(actor_id)
            await self._cohort_repo.upsert(state)

        outcome = CohortAdvanceResult(
            cohort=cohort.value,
            migrated=migrated,
            failed=len(errors),
            activation_tokens_issued=tokens_issued,
            cohort_complete=state.is_complete(),
            local_count=local_after,
            target_size=state.target_size,
            errors=errors,
        )

        # Step 5: Audit summary
        await self._audit.append(
            actor_id=actor_id,
            action=AuditAction.MIGRATION_COHORT_ADVANCED,
            resource_type="migration_cohort",
            resource_id=cohort.value,
            metadata={
                "cohort": cohort.value,
                "migrated": outcome.migrated,
                "failed": outcome.failed,
                "cohort_complete": outcome.cohort_complete,
                "local_count": outcome.local_count,
            },
        )
        self._logger.info(
            "cohort_advanced",
            cohort=cohort.value,
            migrated=outcome.migrated,
            failed=outcome.failed,
            cohort_complete=outcome.cohort_complete,
        )
        return Success(value=outcome)

    async def _move_to_local(
        self, account: Account, *, cohort: RolloutCohort, actor_id: str
    ) -> int:
        """Switch one account to LOCAL. Returns 1 if an activation link was sent."""
        now = datetime.now(UTC)
        previous_mode = account.auth_mode
        needs_activation = account.password_hash is None

        account.mark_migrated(
            mode=AuthMode.LOCAL,
            migrated_by=actor_id,
            notes=f"cohort:{cohort.value}",
            now=now,
        )
        if needs_activation:
            account.must_change_password = True
        await self._account_repo.update(account)
        await self._session_repo.revoke_all_for_account(
            account.id,
            revoked_by=actor_id,
            reason=MIGRATION_SESSION_REVOKE_REASON,
        )

        if needs_activation:
            await self._send_activation(account, now=now)

        await self._audit.append(
            actor_id=actor_id,
            action=AuditAction.MIGRATION_ACCOUNT_TO_LOCAL,
            resource_type="account",
            resource_id=str(account.id),
            previous_state={"auth_mode": previous_mode.value},
            new_state={
                "auth_mode": account.auth_mode.value,
                "status": account.status.value,
            },
            metadata={"cohort": cohort.value, "activation_sent": needs_activation},
        )
        return 1 if needs_activation else 0

    async def _send_activation(self, account: Account, *, now: datetime) -> None:
        await self._token_repo.supersede_unused(
            account.id, TokenPurpose.ACTIVATION, now=now
        )
        raw_token, token_hash = self._token_service.generate()
        await self._token_repo.save(
            SingleUseToken(
                id=uuid7(),
                account_id=account.id,
                purpose=TokenPurpose.ACTIVATION,
                token_hash=token_hash,
                expires_at=now + self._activation_ttl,
                created_at=now,
            )
        )
        await self._notifications.send_activation(
            email=account.email, name=account.full_name, token=raw_token
        )

    # =========================================================================
    # Progress
    # =========================================================================

    async def get_progress(self) -> MigrationProgress:
        """Counts per credential mode, percent complete and cohort status."""
        counts = await self._account_repo.count_by_auth_mode()
        total = sum(counts.values())
        local = counts[AuthMode.LOCAL]
        states = await self._cohort_states(persist=False)
        current = next((s.cohort.value for s in states if not s.is_complete()), None)
        return MigrationProgress(
            total=total,
            provider=counts[AuthMode.PROVIDER],
            local=local,
            migrating=counts[AuthMode.MIGRATING],
            percent_complete=round(local / total * 100, 1) if total else 0.0,
            current_cohort=current,
            cohorts=[
                CohortStatus(
                    cohort=s.cohort.value,
                    target_size=s.target_size,
                    completed_at=s.completed_at,
                    completed_by=s.completed_by,
                )
                for s in states
            ],
        )

    async def _cohort_states(
        self, *, persist: bool = True
    ) -> list[MigrationCohort]:
        """Every cohort in rollout order, creating missing rows lazily."""
        stored = {s.cohort: s for s in await self._cohort_repo.list_all()}
        states: list[MigrationCohort] = []
        for cohort in RolloutCohort.ordered():
            state = stored.get(cohort)
            if state is None:
                state = MigrationCohort(
                    cohort=cohort, target_size=self._cohort_targets.get(cohort)
                )
                if persist:
                    await self._cohort_repo.upsert(state)
            states.append(state)
        return states


def _missing_ids() -> ValidationError:
    return ValidationError(
        code=ErrorCode.VALIDATION_FAILED,
        message="Provider user id(s) required for this migration mode",
        field="provider_user_ids",
    )
