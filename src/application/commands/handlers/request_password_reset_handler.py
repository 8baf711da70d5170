"""Request Password Reset handler.

Flow:
1. Rate limit "{ip}:{email}" on the reset limiter
2. Look up account by email
3. Skip accounts that cannot hold a local password or are not active
4. Supersede older unused reset tokens
5. Generate and store a new token (keyed hash only)
6. Notify the owner with the raw token
7. Audit PASSWORD_RESET_REQUESTED

Security:
- ALWAYS returns Success to prevent account enumeration, including when
  rate limited; the reason is only logged
- Only one reset token per account is redeemable at a time
"""

from datetime import UTC, datetime, timedelta

from uuid_extensions import uuid7

from src.application.commands.auth_commands import RequestPasswordReset
from src.core.result import Failure, Result, Success
from src.domain.entities import SingleUseToken
from src.domain.enums import AccountStatus, AuditAction, RateLimitAction, TokenPurpose
from src.domain.protocols import (
    AccountRepository,
    AuditProtocol,
    LoggerProtocol,
    NotificationProtocol,
    RateLimitProtocol,
    SingleUseTokenRepository,
    SingleUseTokenServiceProtocol,
)
from src.domain.value_objects import normalize_email


class PasswordResetSkipReason:
    """Why no token was issued (logged only, never returned)."""

    RATE_LIMITED = "rate_limited"
    ACCOUNT_NOT_FOUND = "account_not_found"
    ACCOUNT_NOT_ELIGIBLE = "account_not_eligible"


class RequestPasswordResetHandler:
    """Handler for RequestPasswordReset command."""

    def __init__(
        self,
        *,
        account_repo: AccountRepository,
        token_repo: SingleUseTokenRepository,
        token_service: SingleUseTokenServiceProtocol,
        rate_limiter: RateLimitProtocol,
        notifications: NotificationProtocol,
        audit: AuditProtocol,
        logger: LoggerProtocol,
        token_ttl: timedelta,
    ) -> None:
        self._account_repo = account_repo
        self._token_repo = token_repo
        self._token_service = token_service
        self._rate_limiter = rate_limiter
        self._notifications = notifications
        self._audit = audit
        self._logger = logger
        self._token_ttl = token_ttl

    async def handle(self, cmd: RequestPasswordReset) -> Result[None, None]:
        """Handle RequestPasswordReset command.

        Returns:
            Always Success(None).
        """
        email = normalize_email(cmd.email)
        ip_address = cmd.client.ip_address

        # Step 1: Rate limit
        limit_result = await self._rate_limiter.check(
            action=RateLimitAction.PASSWORD_RESET,
            identifier=f"{ip_address or 'unknown'}:{email}",
        )
        if isinstance(limit_result, Failure) or not limit_result.value.allowed:
            self._skip(PasswordResetSkipReason.RATE_LIMITED, email)
            return Success(value=None)

        # Step 2: Look up account
        account = await self._account_repo.find_by_email(email)
        if account is None:
            self._skip(PasswordResetSkipReason.ACCOUNT_NOT_FOUND, email)
            return Success(value=None)

        # Step 3: Eligibility
        if (
            account.status != AccountStatus.ACTIVE
            or not account.auth_mode.holds_local_password
        ):
            self._skip(PasswordResetSkipReason.ACCOUNT_NOT_ELIGIBLE, email)
            return Success(value=None)

        # Step 4: Supersede older tokens
        now = datetime.now(UTC)
        await self._token_repo.supersede_unused(
            account.id, TokenPurpose.PASSWORD_RESET, now=now
        )

        # Step 5: Issue token
        raw_token, token_hash = self._token_service.generate()
        await self._token_repo.save(
            SingleUseToken(
                id=uuid7(),
                account_id=account.id,
                purpose=TokenPurpose.PASSWORD_RESET,
                token_hash=token_hash,
                expires_at=now + self._token_ttl,
                requested_ip=ip_address,
                created_at=now,
            )
        )

        # Step 6: Notify
        await self._notifications.send_password_reset(
            email=account.email, name=account.full_name, token=raw_token
        )

        # Step 7: Audit
        await self._audit.append(
            actor_id=str(account.id),
            actor_email=account.email,
            action=AuditAction.PASSWORD_RESET_REQUESTED,
            resource_type="account",
            resource_id=str(account.id),
            ip_address=ip_address,
            user_agent=cmd.client.user_agent,
            metadata={"expires_at": (now + self._token_ttl).isoformat()},
        )
        return Success(value=None)

    def _skip(self, reason: str, email: str) -> None:
        self._logger.info("password_reset_request_skipped", reason=reason, email=email)
