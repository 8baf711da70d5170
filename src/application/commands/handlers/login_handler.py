"""Login handler.

Verifies credentials against the local credential store, applies the
progressive lockout schedule and issues a session.

Flow:
1. Rate limit "{ip}:{email}" on the login limiter (no account lookup when denied)
2. Find account by normalized email
3. Reject accounts that cannot log in locally (generic response)
4. Reject locked accounts (423 with locked_until)
5. Verify password; on mismatch count the failure and maybe lock
6. On success clear lockout, issue session, audit, start suspicious-login check

Security:
- Unknown accounts and hashless accounts still pay for one bcrypt
  verification against a dummy hash, so response time does not reveal
  whether an email is registered
- Every rejection except lockout and rate limiting returns the same
  INVALID_CREDENTIALS error; the detailed reason only goes to the audit log
- The failed attempt counter is incremented with one UPDATE ... RETURNING so
  concurrent failures each count

Architecture:
- Application layer ONLY imports from domain layer (entities, protocols)
- NO infrastructure imports (adapters are injected via protocols)
"""

from datetime import UTC, datetime
from typing import Any, cast

from uuid_extensions import uuid7

from src.application.commands.auth_commands import Login
from src.application.dtos.auth_dtos import LoginResult
from src.application.services.suspicious_login_monitor import SuspiciousLoginMonitor
from src.core.constants import ANONYMOUS_ACTOR_ID
from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.entities import Account, Session
from src.domain.enums import AccountStatus, AuditAction, AuthMode, RateLimitAction
from src.domain.errors import LoginError
from src.domain.protocols import (
    AccountRepository,
    AuditProtocol,
    LoggerProtocol,
    PasswordHashingProtocol,
    RateLimitProtocol,
    SessionRepository,
    SessionTokenProtocol,
)
from src.domain.value_objects import ClientContext, LockoutPolicy, normalize_email

GENERIC_LOGIN_MESSAGE = "Invalid email or password"


class LoginFailureReason:
    """Detailed login failure reasons (audit metadata only, never returned)."""

    ACCOUNT_NOT_FOUND = "account_not_found"
    NO_PASSWORD_SET = "no_password_set"
    ACCOUNT_INACTIVE = "account_inactive"
    ACCOUNT_PENDING_ACTIVATION = "account_pending_activation"
    AUTH_MODE_NOT_PERMITTED = "auth_mode_not_permitted"
    ACCOUNT_LOCKED = "account_locked"
    INVALID_PASSWORD = "invalid_password"


def permitted_auth_modes(primary_auth_mode: AuthMode) -> frozenset[AuthMode]:
    """Credential modes allowed to log in locally.

    While the provider is primary only pilot accounts (LOCAL) log in here.
    Once local is primary, MIGRATING accounts may log in too.
    """
    if primary_auth_mode == AuthMode.LOCAL:
        return frozenset({AuthMode.LOCAL, AuthMode.MIGRATING})
    return frozenset({AuthMode.LOCAL})


class LoginHandler:
    """Handler for Login command.

    Dependencies are injected by the container; the lockout policy and the
    primary auth mode come from settings.
    """

    def __init__(
        self,
        *,
        account_repo: AccountRepository,
        session_repo: SessionRepository,
        password_service: PasswordHashingProtocol,
        session_tokens: SessionTokenProtocol,
        rate_limiter: RateLimitProtocol,
        audit: AuditProtocol,
        lockout_policy: LockoutPolicy,
        primary_auth_mode: AuthMode,
        logger: LoggerProtocol,
        suspicious_login_monitor: SuspiciousLoginMonitor | None = None,
    ) -> None:
        self._account_repo = account_repo
        self._session_repo = session_repo
        self._password_service = password_service
        self._session_tokens = session_tokens
        self._rate_limiter = rate_limiter
        self._audit = audit
        self._lockout_policy = lockout_policy
        self._permitted_modes = permitted_auth_modes(primary_auth_mode)
        self._logger = logger
        self._monitor = suspicious_login_monitor

    async def handle(self, cmd: Login) -> Result[LoginResult, LoginError]:
        """Handle Login command.

        Args:
            cmd: Login command (email, password, client context).

        Returns:
            Success(LoginResult) with the raw session token.
            Failure(LoginError) with INVALID_CREDENTIALS, ACCOUNT_LOCKED or
                RATE_LIMITED.

        Side Effects:
            - Writes LOGIN_* / ACCOUNT_LOCKED audit entries.
            - Updates failed_login_attempts and locked_until.
            - Creates a Session row on success.
        """
        email = normalize_email(cmd.email)
        client = cmd.client

        # Step 1: Rate limit before touching the account store
        identifier = f"{client.ip_address or 'unknown'}:{email}"
        limit_result = await self._rate_limiter.check(
            action=RateLimitAction.LOGIN, identifier=identifier
        )
        match limit_result:
            case Success(value=decision) if decision.allowed:
                pass
            case Success(value=decision):
                return await self._rate_limited(email, client, decision.retry_after)
            case Failure(error=error):
                # Limiter unavailable: fail closed
                self._logger.warning(
                    "login_rate_limit_unavailable", error_code=error.code.value
                )
                return await self._rate_limited(email, client, None)

        # Step 2: Find account
        account = await self._account_repo.find_by_email(email)
        if account is None:
            await self._password_service.verify_dummy(cmd.password)
            await self._audit_failure(
                email=email,
                client=client,
                reason=LoginFailureReason.ACCOUNT_NOT_FOUND,
            )
            return Failure(error=_invalid_credentials())

        # Step 3: Account must be able to log in locally
        rejection = self._rejection_reason(account)
        if rejection is not None:
            await self._password_service.verify_dummy(cmd.password)
            await self._audit_failure(
                email=email,
                client=client,
                reason=rejection,
                account=account,
            )
            return Failure(error=_invalid_credentials())

        # Step 4: Check lock
        now = datetime.now(UTC)
        if account.is_locked(now):
            await self._audit_failure(
                email=email,
                client=client,
                reason=LoginFailureReason.ACCOUNT_LOCKED,
                account=account,
                extra={"locked_until": account.locked_until},
            )
            return Failure(
                error=LoginError(
                    code=ErrorCode.ACCOUNT_LOCKED,
                    message="Account is temporarily locked",
                    locked_until=account.locked_until,
                )
            )

        # Step 5: Verify password
        # Hashless accounts were rejected in step 3
        verified = await self._password_service.verify_password(
            cmd.password, cast(str, account.password_hash)
        )
        if not verified:
            await self._record_failed_attempt(account, email=email, client=client)
            return Failure(error=_invalid_credentials())

        # Step 6: Success
        return Success(value=await self._open_session(account, client=client))

    def _rejection_reason(self, account: Account) -> str | None:
        if account.status.blocks_login:
            return LoginFailureReason.ACCOUNT_INACTIVE
        if account.status == AccountStatus.PENDING_ACTIVATION:
            return LoginFailureReason.ACCOUNT_PENDING_ACTIVATION
        if account.auth_mode not in self._permitted_modes:
            return LoginFailureReason.AUTH_MODE_NOT_PERMITTED
        if not account.has_local_password():
            return LoginFailureReason.NO_PASSWORD_SET
        return None

    async def _record_failed_attempt(
        self, account: Account, *, email: str, client: ClientContext
    ) -> None:
        now = datetime.now(UTC)
        attempts = await self._account_repo.increment_failed_attempts(account.id)
        locked_until = self._lockout_policy.lock_expiry(
            failed_attempts=attempts, now=now
        )
        if locked_until is not None:
            await self._account_repo.set_locked_until(account.id, locked_until)

        await self._audit_failure(
            email=email,
            client=client,
            reason=LoginFailureReason.INVALID_PASSWORD,
            account=account,
            extra={"attempts": attempts},
        )
        if locked_until is not None:
            self._logger.warning(
                "account_locked",
                account_id=str(account.id),
                attempts=attempts,
                locked_until=locked_until.isoformat(),
            )
            await self._audit.append(
                actor_id=str(account.id),
                actor_email=email,
                action=AuditAction.ACCOUNT_LOCKED,
                resource_type="account",
                resource_id=str(account.id),
                ip_address=client.ip_address,
                user_agent=client.user_agent,
                metadata={
                    "attempts": attempts,
                    "locked_until": locked_until.isoformat(),
                },
            )

    async def _open_session(
        self, account: Account, *, client: ClientContext
    ) -> LoginResult:
        now = datetime.now(UTC)
        session_id = uuid7()
        issued = self._session_tokens.issue(
            account_id=account.id, session_id=session_id, role=account.role
        )
        session = Session(
            id=session_id,
            account_id=account.id,
            token_hash=issued.token_hash,
            expires_at=issued.claims.expires_at,
            user_agent=client.user_agent,
            ip_address=client.ip_address,
            application=client.application,
            created_at=now,
            last_active_at=now,
        )
        await self._session_repo.save(session)

        account.record_successful_login(client.ip_address, now)
        await self._account_repo.update(account)

        await self._audit.append(
            actor_id=str(account.id),
            actor_email=account.email,
            actor_role=account.role.value,
            action=AuditAction.LOGIN_SUCCESS,
            resource_type="session",
            resource_id=str(session_id),
            ip_address=client.ip_address,
            user_agent=client.user_agent,
            metadata={
                "session_id": str(session_id),
                "auth_mode": account.auth_mode.value,
                "application": client.application,
            },
        )
        self._logger.info(
            "login_succeeded",
            account_id=str(account.id),
            session_id=str(session_id),
        )

        if self._monitor is not None and account.auth_mode == AuthMode.LOCAL:
            self._monitor.dispatch(account=account, session=session, client=client)

        return LoginResult(
            account_id=account.id,
            session_id=session_id,
            session_token=issued.token,
            expires_at=issued.claims.expires_at,
            role=account.role,
            must_change_password=account.must_change_password,
        )

    async def _rate_limited(
        self, email: str, client: ClientContext, retry_after: int | None
    ) -> Result[LoginResult, LoginError]:
        await self._audit.append(
            actor_id=ANONYMOUS_ACTOR_ID,
            actor_email=email,
            action=AuditAction.LOGIN_RATE_LIMITED,
            resource_type="account",
            ip_address=client.ip_address,
            user_agent=client.user_agent,
            metadata={"retry_after": retry_after},
        )
        return Failure(
            error=LoginError(
                code=ErrorCode.RATE_LIMITED,
                message="Too many login attempts. Try again later.",
                retry_after=retry_after,
            )
        )

    async def _audit_failure(
        self,
        *,
        email: str,
        client: ClientContext,
        reason: str,
        account: Account | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        metadata: dict[str, Any] = {"reason": reason}
        if extra:
            metadata.update(
                {
                    key: value.isoformat() if isinstance(value, datetime) else value
                    for key, value in extra.items()
                }
            )
        self._logger.info(
            "login_failed",
            reason=reason,
            account_id=str(account.id) if account else None,
        )
        await self._audit.append(
            actor_id=str(account.id) if account else ANONYMOUS_ACTOR_ID,
            actor_email=email,
            action=AuditAction.LOGIN_FAILED,
            resource_type="account",
            resource_id=str(account.id) if account else None,
            ip_address=client.ip_address,
            user_agent=client.user_agent,
            metadata=metadata,
        )


def _invalid_credentials() -> LoginError:
    return LoginError(
        code=ErrorCode.INVALID_CREDENTIALS,
        message=GENERIC_LOGIN_MESSAGE,
    )
