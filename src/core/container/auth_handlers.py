"""Authentication handler dependency factories.

Request-scoped handler instances for authentication operations:
- Login and logout
- Session validation
- Account activation
- Password reset (request and confirm)

Repositories injected into one handler share the request's database
session (FastAPI caches get_db_session per request).
"""

from datetime import timedelta
from typing import TYPE_CHECKING

from fastapi import Depends

from src.core.config import settings
from src.core.container.infrastructure import (
    get_audit,
    get_lockout_policy,
    get_logger,
    get_notifications,
    get_password_service,
    get_rate_limiter,
    get_session_token_service,
    get_single_use_token_service,
    get_suspicious_login_monitor,
)
from src.core.container.repositories import (
    get_account_repository,
    get_session_repository,
    get_single_use_token_repository,
)
from src.domain.enums import AuthMode

if TYPE_CHECKING:
    from src.application.commands.handlers.activate_account_handler import (
        ActivateAccountHandler,
    )
    from src.application.commands.handlers.login_handler import LoginHandler
    from src.application.commands.handlers.request_password_reset_handler import (
        RequestPasswordResetHandler,
    )
    from src.application.commands.handlers.reset_password_handler import (
        ResetPasswordHandler,
    )
    from src.application.commands.handlers.revoke_session_handler import (
        RevokeSessionHandler,
    )
    from src.application.queries.handlers.validate_session_handler import (
        ValidateSessionHandler,
    )
    from src.infrastructure.persistence.repositories import (
        AccountRepository,
        SessionRepository,
        SingleUseTokenRepository,
    )


# ============================================================================
# Authentication Handler Factories
# ============================================================================


async def get_login_handler(
    account_repo: "AccountRepository" = Depends(get_account_repository),
    session_repo: "SessionRepository" = Depends(get_session_repository),
) -> "LoginHandler":
    """Get Login command handler (request-scoped).

    Creates new handler instance per request with all required dependencies:
    - AccountRepository, SessionRepository (request-scoped)
    - Password service, session tokens, rate limiter, audit (app-scoped)
    - Lockout policy and primary auth mode (settings)
    - Suspicious login monitor (app-scoped, outlives the request)

    Usage:
        @router.post("/auth/login")
        async def login(handler: LoginHandler = Depends(get_login_handler)):
            result = await handler.handle(command)
    """
    from src.application.commands.handlers.login_handler import LoginHandler

    return LoginHandler(
        account_repo=account_repo,
        session_repo=session_repo,
        password_service=get_password_service(),
        session_tokens=get_session_token_service(),
        rate_limiter=get_rate_limiter(),
        audit=get_audit(),
        lockout_policy=get_lockout_policy(),
        primary_auth_mode=AuthMode(settings.primary_auth_mode),
        logger=get_logger(),
        suspicious_login_monitor=get_suspicious_login_monitor(),
    )


async def get_revoke_session_handler(
    session_repo: "SessionRepository" = Depends(get_session_repository),
) -> "RevokeSessionHandler":
    """Get RevokeSession command handler (request-scoped)."""
    from src.application.commands.handlers.revoke_session_handler import (
        RevokeSessionHandler,
    )

    return RevokeSessionHandler(
        session_repo=session_repo,
        audit=get_audit(),
        logger=get_logger(),
    )


async def get_validate_session_handler(
    session_repo: "SessionRepository" = Depends(get_session_repository),
) -> "ValidateSessionHandler":
    """Get ValidateSession query handler (request-scoped).

    Also backs the authenticated-actor dependency used by admin routes.
    """
    from src.application.queries.handlers.validate_session_handler import (
        ValidateSessionHandler,
    )

    return ValidateSessionHandler(
        session_repo=session_repo,
        session_tokens=get_session_token_service(),
        logger=get_logger(),
        verify_timeout_seconds=settings.session_verify_timeout_seconds,
    )


async def get_activate_account_handler(
    account_repo: "AccountRepository" = Depends(get_account_repository),
    token_repo: "SingleUseTokenRepository" = Depends(
        get_single_use_token_repository
    ),
) -> "ActivateAccountHandler":
    """Get ActivateAccount command handler (request-scoped)."""
    from src.application.commands.handlers.activate_account_handler import (
        ActivateAccountHandler,
    )

    return ActivateAccountHandler(
        account_repo=account_repo,
        token_repo=token_repo,
        token_service=get_single_use_token_service(),
        password_service=get_password_service(),
        audit=get_audit(),
        logger=get_logger(),
    )


async def get_request_password_reset_handler(
    account_repo: "AccountRepository" = Depends(get_account_repository),
    token_repo: "SingleUseTokenRepository" = Depends(
        get_single_use_token_repository
    ),
) -> "RequestPasswordResetHandler":
    """Get RequestPasswordReset command handler (request-scoped).

    Token lifetime comes from PASSWORD_RESET_TOKEN_TTL_MINUTES.
    """
    from src.application.commands.handlers.request_password_reset_handler import (
        RequestPasswordResetHandler,
    )

    return RequestPasswordResetHandler(
        account_repo=account_repo,
        token_repo=token_repo,
        token_service=get_single_use_token_service(),
        rate_limiter=get_rate_limiter(),
        notifications=get_notifications(),
        audit=get_audit(),
        logger=get_logger(),
        token_ttl=timedelta(minutes=settings.password_reset_token_ttl_minutes),
    )


async def get_reset_password_handler(
    account_repo: "AccountRepository" = Depends(get_account_repository),
    session_repo: "SessionRepository" = Depends(get_session_repository),
    token_repo: "SingleUseTokenRepository" = Depends(
        get_single_use_token_repository
    ),
) -> "ResetPasswordHandler":
    """Get ResetPassword command handler (request-scoped)."""
    from src.application.commands.handlers.reset_password_handler import (
        ResetPasswordHandler,
    )

    return ResetPasswordHandler(
        account_repo=account_repo,
        session_repo=session_repo,
        token_repo=token_repo,
        token_service=get_single_use_token_service(),
        password_service=get_password_service(),
        audit=get_audit(),
        logger=get_logger(),
    )
