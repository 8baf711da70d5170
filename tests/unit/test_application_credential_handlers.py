"""Unit tests for activation, password reset and session revocation handlers.

Tests cover:
- ActivateAccountHandler: weak password, unknown/used/expired token, provider
  account, lost consume race, success
- RequestPasswordResetHandler: always succeeds, only eligible accounts get a
  token, older tokens superseded
- ResetPasswordHandler: revokes every session, clears lockout
- RevokeSessionHandler: logout audit, idempotent second revoke
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest
from uuid_extensions import uuid7

from src.application.commands.auth_commands import (
    ActivateAccount,
    RequestPasswordReset,
    ResetPassword,
    RevokeSession,
)
from src.application.commands.handlers.activate_account_handler import (
    ActivateAccountHandler,
)
from src.application.commands.handlers.request_password_reset_handler import (
    RequestPasswordResetHandler,
)
from src.application.commands.handlers.reset_password_handler import (
    ResetPasswordHandler,
)
from src.application.commands.handlers.revoke_session_handler import (
    RevokeSessionHandler,
)
from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.entities import Account, SingleUseToken
from src.domain.enums import AccountStatus, AuditAction, AuthMode, TokenPurpose
from src.domain.value_objects import ClientContext, RateLimitResult
from tests.conftest import audited_actions

STRONG_PASSWORD = "N3w!Password"
CLIENT = ClientContext(ip_address="198.51.100.9", user_agent="pytest")


def create_mock_account(**overrides) -> Account:
    defaults = {
        "id": uuid7(),
        "email": "d@x.test",
        "first_name": "Dana",
        "last_name": "Rangi",
        "status": AccountStatus.PENDING_ACTIVATION,
        "auth_mode": AuthMode.LOCAL,
    }
    defaults.update(overrides)
    return Account(**defaults)


def create_mock_token(account: Account, purpose: TokenPurpose, **overrides):
    defaults = {
        "id": uuid7(),
        "account_id": account.id,
        "purpose": purpose,
        "token_hash": "hashed",
        "expires_at": datetime.now(UTC) + timedelta(days=1),
    }
    defaults.update(overrides)
    return SingleUseToken(**defaults)


@pytest.fixture
def account():
    return create_mock_account()


@pytest.fixture
def account_repo(account):
    repo = AsyncMock()
    repo.find_by_id.return_value = account
    repo.find_by_email.return_value = account
    return repo


@pytest.fixture
def token_repo(account):
    repo = AsyncMock()
    repo.find_by_hash.return_value = create_mock_token(
        account, TokenPurpose.ACTIVATION
    )
    repo.consume.return_value = account.id
    return repo


@pytest.fixture
def token_service():
    service = AsyncMock()
    service.hash_token = lambda raw: "hashed"
    service.generate = lambda: ("raw-reset-token", "hashed-reset-token")
    return service


@pytest.fixture
def password_service():
    service = AsyncMock()
    service.hash_password.return_value = "$2b$04$new"
    return service


@pytest.fixture
def activation_handler(
    account_repo, token_repo, token_service, password_service, mock_audit, mock_logger
):
    return ActivateAccountHandler(
        account_repo=account_repo,
        token_repo=token_repo,
        token_service=token_service,
        password_service=password_service,
        audit=mock_audit,
        logger=mock_logger,
    )


@pytest.mark.unit
class TestActivateAccount:
    """Test ActivateAccountHandler."""

    @pytest.mark.asyncio
    async def test_success(
        self, activation_handler, account, account_repo, token_repo, mock_audit
    ):
        # Act
        result = await activation_handler.handle(
            ActivateAccount(token="raw", new_password=STRONG_PASSWORD, client=CLIENT)
        )

        # Assert
        assert isinstance(result, Success)
        assert account.status == AccountStatus.ACTIVE
        assert account.password_hash == "$2b$04$new"
        token_repo.find_by_hash.assert_awaited_once_with(
            "hashed", TokenPurpose.ACTIVATION
        )
        assert token_repo.consume.call_args.kwargs["used_ip"] == "198.51.100.9"
        account_repo.update.assert_awaited_once_with(account)
        assert audited_actions(mock_audit) == [AuditAction.ACCOUNT_ACTIVATED]

    @pytest.mark.asyncio
    async def test_weak_password(self, activation_handler, token_repo):
        result = await activation_handler.handle(
            ActivateAccount(token="raw", new_password="weak")
        )

        assert result.error.code == ErrorCode.PASSWORD_TOO_WEAK
        assert result.error.field == "new_password"
        token_repo.find_by_hash.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_token(self, activation_handler, token_repo):
        token_repo.find_by_hash.return_value = None

        result = await activation_handler.handle(
            ActivateAccount(token="raw", new_password=STRONG_PASSWORD)
        )

        assert result.error.code == ErrorCode.TOKEN_NOT_FOUND

    @pytest.mark.asyncio
    async def test_used_token(self, activation_handler, token_repo, account):
        token_repo.find_by_hash.return_value = create_mock_token(
            account, TokenPurpose.ACTIVATION, used_at=datetime.now(UTC)
        )

        result = await activation_handler.handle(
            ActivateAccount(token="raw", new_password=STRONG_PASSWORD)
        )

        assert result.error.code == ErrorCode.TOKEN_ALREADY_USED

    @pytest.mark.asyncio
    async def test_expired_token(self, activation_handler, token_repo, account):
        token_repo.find_by_hash.return_value = create_mock_token(
            account,
            TokenPurpose.ACTIVATION,
            expires_at=datetime.now(UTC) - timedelta(seconds=1),
        )

        result = await activation_handler.handle(
            ActivateAccount(token="raw", new_password=STRONG_PASSWORD)
        )

        assert result.error.code == ErrorCode.TOKEN_EXPIRED

    @pytest.mark.asyncio
    async def test_provider_account_rejected(
        self, activation_handler, account_repo, password_service
    ):
        account_repo.find_by_id.return_value = create_mock_account(
            auth_mode=AuthMode.PROVIDER
        )

        result = await activation_handler.handle(
            ActivateAccount(token="raw", new_password=STRONG_PASSWORD)
        )

        assert result.error.code == ErrorCode.ACCOUNT_NOT_MIGRATED
        password_service.hash_password.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lost_consume_race(
        self, activation_handler, token_repo, account, account_repo, mock_audit
    ):
        token_repo.consume.return_value = None

        result = await activation_handler.handle(
            ActivateAccount(token="raw", new_password=STRONG_PASSWORD)
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.TOKEN_ALREADY_USED
        assert account.password_hash is None
        account_repo.update.assert_not_awaited()
        mock_audit.append.assert_not_awaited()


@pytest.mark.unit
class TestRequestPasswordReset:
    """Test RequestPasswordResetHandler."""

    def build(self, deps, limiter_allowed: bool = True):
        limiter = AsyncMock()
        limiter.check.return_value = Success(
            value=RateLimitResult(allowed=limiter_allowed, retry_after=60)
        )
        notifications = AsyncMock()
        handler = RequestPasswordResetHandler(
            **deps,
            rate_limiter=limiter,
            notifications=notifications,
            token_ttl=timedelta(hours=1),
        )
        return handler, notifications

    @pytest.fixture
    def deps(self, account_repo, token_repo, token_service, mock_audit, mock_logger):
        return {
            "account_repo": account_repo,
            "token_repo": token_repo,
            "token_service": token_service,
            "audit": mock_audit,
            "logger": mock_logger,
        }

    @pytest.mark.asyncio
    async def test_eligible_account_gets_token(
        self, deps, account_repo, token_repo, mock_audit
    ):
        # Arrange
        account = create_mock_account(
            status=AccountStatus.ACTIVE, password_hash="$2b$04$old"
        )
        account_repo.find_by_email.return_value = account
        handler, notifications = self.build(deps)

        # Act
        result = await handler.handle(
            RequestPasswordReset(email=" D@x.test", client=CLIENT)
        )

        # Assert
        assert result == Success(value=None)
        account_repo.find_by_email.assert_awaited_once_with("d@x.test")
        token_repo.supersede_unused.assert_awaited_once()
        saved = token_repo.save.call_args.args[0]
        assert saved.purpose == TokenPurpose.PASSWORD_RESET
        assert saved.token_hash == "hashed-reset-token"
        assert saved.requested_ip == "198.51.100.9"
        notifications.send_password_reset.assert_awaited_once_with(
            email=account.email, name=account.full_name, token="raw-reset-token"
        )
        assert audited_actions(mock_audit) == [AuditAction.PASSWORD_RESET_REQUESTED]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [
            {"status": AccountStatus.PENDING_ACTIVATION},
            {"status": AccountStatus.SUSPENDED},
            {"status": AccountStatus.ACTIVE, "auth_mode": AuthMode.PROVIDER},
        ],
    )
    async def test_ineligible_account_silently_skipped(
        self, deps, account_repo, token_repo, overrides
    ):
        account_repo.find_by_email.return_value = create_mock_account(**overrides)
        handler, notifications = self.build(deps)

        result = await handler.handle(RequestPasswordReset(email="d@x.test"))

        assert isinstance(result, Success)
        token_repo.save.assert_not_awaited()
        notifications.send_password_reset.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_email_silently_skipped(self, deps, account_repo):
        account_repo.find_by_email.return_value = None
        handler, notifications = self.build(deps)

        result = await handler.handle(RequestPasswordReset(email="ghost@x.test"))

        assert isinstance(result, Success)
        notifications.send_password_reset.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rate_limited_silently_skipped(self, deps, account_repo):
        handler, notifications = self.build(deps, limiter_allowed=False)

        result = await handler.handle(RequestPasswordReset(email="d@x.test"))

        assert isinstance(result, Success)
        account_repo.find_by_email.assert_not_awaited()
        notifications.send_password_reset.assert_not_awaited()


@pytest.mark.unit
class TestResetPassword:
    """Test ResetPasswordHandler."""

    @pytest.mark.asyncio
    async def test_reset_revokes_all_sessions(
        self,
        account_repo,
        token_repo,
        token_service,
        password_service,
        mock_audit,
        mock_logger,
    ):
        # Arrange
        account = create_mock_account(
            status=AccountStatus.ACTIVE,
            password_hash="$2b$04$old",
            failed_login_attempts=7,
            locked_until=datetime.now(UTC) + timedelta(minutes=10),
        )
        account_repo.find_by_id.return_value = account
        token_repo.find_by_hash.return_value = create_mock_token(
            account, TokenPurpose.PASSWORD_RESET
        )
        session_repo = AsyncMock()
        session_repo.revoke_all_for_account.return_value = 3
        handler = ResetPasswordHandler(
            account_repo=account_repo,
            session_repo=session_repo,
            token_repo=token_repo,
            token_service=token_service,
            password_service=password_service,
            audit=mock_audit,
            logger=mock_logger,
        )

        # Act
        result = await handler.handle(
            ResetPassword(token="raw", new_password=STRONG_PASSWORD, client=CLIENT)
        )

        # Assert
        assert result == Success(value=3)
        assert account.password_hash == "$2b$04$new"
        assert account.failed_login_attempts == 0
        assert account.locked_until is None
        session_repo.revoke_all_for_account.assert_awaited_once_with(
            account.id, revoked_by="system", reason="password_reset"
        )
        token_repo.find_by_hash.assert_awaited_once_with(
            "hashed", TokenPurpose.PASSWORD_RESET
        )
        assert audited_actions(mock_audit) == [AuditAction.PASSWORD_RESET_COMPLETED]


@pytest.mark.unit
class TestRevokeSession:
    """Test RevokeSessionHandler."""

    @pytest.mark.asyncio
    async def test_logout_audited(self, mock_audit, mock_logger):
        session_repo = AsyncMock()
        session_repo.revoke.return_value = True
        handler = RevokeSessionHandler(
            session_repo=session_repo, audit=mock_audit, logger=mock_logger
        )
        account_id = uuid7()

        result = await handler.handle(
            RevokeSession(
                session_id=uuid7(), account_id=account_id, revoked_by=str(account_id)
            )
        )

        assert result == Success(value=True)
        assert audited_actions(mock_audit) == [AuditAction.LOGOUT]

    @pytest.mark.asyncio
    async def test_operator_revocation_audited(self, mock_audit, mock_logger):
        session_repo = AsyncMock()
        session_repo.revoke.return_value = True
        handler = RevokeSessionHandler(
            session_repo=session_repo, audit=mock_audit, logger=mock_logger
        )

        await handler.handle(
            RevokeSession(
                session_id=uuid7(),
                account_id=uuid7(),
                revoked_by="system",
                reason="suspicious",
                is_logout=False,
            )
        )

        assert audited_actions(mock_audit) == [AuditAction.SESSION_REVOKED]

    @pytest.mark.asyncio
    async def test_second_revoke_is_noop(self, mock_audit, mock_logger):
        session_repo = AsyncMock()
        session_repo.revoke.return_value = False
        handler = RevokeSessionHandler(
            session_repo=session_repo, audit=mock_audit, logger=mock_logger
        )

        result = await handler.handle(
            RevokeSession(session_id=uuid7(), account_id=uuid7(), revoked_by="x")
        )

        assert result == Success(value=False)
        mock_audit.append.assert_not_awaited()
