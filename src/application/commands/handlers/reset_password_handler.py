"""Reset password handler (confirm step).

Flow:
1. Check password policy
2. Look up password reset token (unknown / used / expired)
3. Load account
4. Hash password (worker thread)
5. Consume token atomically
6. Set password and clear lockout (commits with the consumed token)
7. Revoke every session of the account
8. Audit PASSWORD_RESET_COMPLETED

No session is issued: the owner logs in again with the new password.
"""

from datetime import UTC, datetime

from src.application.commands.auth_commands import ResetPassword
from src.application.services.token_redemption import (
    check_password_policy,
    find_redeemable_token,
    token_already_used,
)
from src.core.constants import SYSTEM_ACTOR_ID
from src.core.enums import ErrorCode
from src.core.errors import ConflictError, DomainError, NotFoundError
from src.core.result import Failure, Result, Success
from src.domain.enums import AuditAction, TokenPurpose
from src.domain.protocols import (
    AccountRepository,
    AuditProtocol,
    LoggerProtocol,
    PasswordHashingProtocol,
    SessionRepository,
    SingleUseTokenRepository,
    SingleUseTokenServiceProtocol,
)

SESSION_REVOKE_REASON = "password_reset"


class ResetPasswordHandler:
    """Handler for ResetPassword command."""

    def __init__(
        self,
        *,
        account_repo: AccountRepository,
        session_repo: SessionRepository,
        token_repo: SingleUseTokenRepository,
        token_service: SingleUseTokenServiceProtocol,
        password_service: PasswordHashingProtocol,
        audit: AuditProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._account_repo = account_repo
        self._session_repo = session_repo
        self._token_repo = token_repo
        self._token_service = token_service
        self._password_service = password_service
        self._audit = audit
        self._logger = logger

    async def handle(self, cmd: ResetPassword) -> Result[int, DomainError]:
        """Handle ResetPassword command.

        Returns:
            Success(int) with the number of sessions revoked.
            Failure(DomainError) as for activation.
        """
        now = datetime.now(UTC)

        # Step 1: Password policy
        match check_password_policy(cmd.new_password):
            case Failure(error=policy_error):
                return Failure(error=policy_error)

        # Step 2: Token lookup
        token_hash = self._token_service.hash_token(cmd.token)
        match await find_redeemable_token(
            self._token_repo,
            token_hash=token_hash,
            purpose=TokenPurpose.PASSWORD_RESET,
            now=now,
        ):
            case Failure(error=token_error):
                return Failure(error=token_error)
            case Success(value=token):
                pass

        # Step 3: Load account
        account = await self._account_repo.find_by_id(token.account_id)
        if account is None:
            return Failure(
                error=NotFoundError(
                    code=ErrorCode.ACCOUNT_NOT_FOUND,
                    message="Account not found",
                    resource_type="Account",
                    resource_id=str(token.account_id),
                )
            )
        if not account.auth_mode.holds_local_password:
            return Failure(
                error=ConflictError(
                    code=ErrorCode.ACCOUNT_NOT_MIGRATED,
                    message="Account uses provider credentials",
                    resource_type="Account",
                    conflicting_field="auth_mode",
                )
            )

        # Step 4: Hash password
        password_hash = await self._password_service.hash_password(cmd.new_password)

        # Step 5: Consume token
        consumed_by = await self._token_repo.consume(
            token_hash,
            TokenPurpose.PASSWORD_RESET,
            used_ip=cmd.client.ip_address,
            now=now,
        )
        if consumed_by is None:
            return Failure(error=token_already_used())

        # Step 6: Set password, clear lockout
        account.set_password(password_hash, now)
        account.clear_lockout()
        await self._account_repo.update(account)

        # Step 7: Revoke sessions
        revoked = await self._session_repo.revoke_all_for_account(
            account.id, revoked_by=SYSTEM_ACTOR_ID, reason=SESSION_REVOKE_REASON
        )

        # Step 8: Audit
        await self._audit.append(
            actor_id=str(account.id),
            actor_email=account.email,
            action=AuditAction.PASSWORD_RESET_COMPLETED,
            resource_type="account",
            resource_id=str(account.id),
            ip_address=cmd.client.ip_address,
            user_agent=cmd.client.user_agent,
            metadata={"sessions_revoked": revoked},
        )
        self._logger.info(
            "password_reset_completed",
            account_id=str(account.id),
            sessions_revoked=revoked,
        )
        return Success(value=revoked)
