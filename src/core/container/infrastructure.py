# mypy: disable-error-code="arg-type"
"""Infrastructure dependency factories.

Application-scoped singletons for core infrastructure services:
- Database (PostgreSQL)
- Redis (rate limiter store)
- Rate limiting (sliding window, fails closed)
- Password hashing (bcrypt)
- Session tokens (asymmetric JWT)
- Single-use tokens (activation and reset)
- Audit log (hash chain)
- Identity provider client
- Notifications
- IP geolocation (GeoIP2)
- Suspicious login monitor
- Logging (console)
"""

from datetime import timedelta
from functools import lru_cache
from typing import TYPE_CHECKING, AsyncGenerator
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.infrastructure.persistence.database import Database

if TYPE_CHECKING:
    from redis.asyncio import Redis

    from src.application.services.suspicious_login_monitor import (
        SuspiciousLoginMonitor,
    )
    from src.domain.entities import Session
    from src.domain.protocols import (
        AuditProtocol,
        DeviceFingerprintProtocol,
        IdentityProviderProtocol,
        LocationEnricherProtocol,
        LoggerProtocol,
        NotificationProtocol,
        PasswordHashingProtocol,
        RateLimitProtocol,
        SessionTokenProtocol,
        SingleUseTokenServiceProtocol,
    )
    from src.domain.value_objects import LockoutPolicy


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_database() -> Database:
    """Get database manager singleton (app-scoped).

    Owns the engine and connection pool for the whole application.

    Note:
        This is rarely used directly. Prefer get_db_session() for sessions.
        The audit adapter and the suspicious login monitor use it to open
        sessions that outlive or sit beside the request session.
    """
    return Database(
        database_url=settings.database_url,
        echo=settings.db_echo,
    )


@lru_cache()
def get_redis() -> "Redis":
    """Get Redis client singleton (app-scoped).

    Connection pool is shared across entire application. Timeouts are short:
    the rate limiter treats a slow store as unavailable and fails closed.
    """
    from redis.asyncio import ConnectionPool, Redis

    pool = ConnectionPool.from_url(
        settings.redis_url,
        max_connections=50,
        decode_responses=False,
        socket_connect_timeout=2,
        socket_timeout=2,
        retry_on_timeout=False,
    )
    return Redis(connection_pool=pool)


@lru_cache()
def get_rate_limiter() -> "RateLimitProtocol":
    """Get rate limiter singleton (app-scoped).

    Returns SlidingWindowRateLimiter over Redis sorted sets with one rule per
    RateLimitAction (login, password reset).

    Usage:
        limiter = get_rate_limiter()
        result = await limiter.check(
            action=RateLimitAction.LOGIN, identifier="203.0.113.9:a@b.co"
        )
    """
    from src.infrastructure.rate_limit import (
        RedisStorage,
        SlidingWindowRateLimiter,
        build_rate_limit_rules,
    )

    return SlidingWindowRateLimiter(
        storage=RedisStorage(redis_client=get_redis()),
        rules=build_rate_limit_rules(settings),
        logger=get_logger(),
        timeout_seconds=settings.rate_limit_timeout_seconds,
        unavailable_retry_after=settings.rate_limit_unavailable_retry_after,
    )


# ============================================================================
# Request-Scoped Dependencies (Per-Request)
# ============================================================================


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session (request-scoped).

    Creates new session per request. Repositories commit their own writes;
    the session is rolled back on exception and always closed.

    Yields:
        Database session for request duration.

    Usage:
        @router.post("/auth/login")
        async def login(session: AsyncSession = Depends(get_db_session)):
            ...
    """
    db = get_database()
    async with db.get_session() as session:
        yield session


# ============================================================================
# Audit (Application-Scoped)
# ============================================================================


@lru_cache()
def get_audit() -> "AuditProtocol":
    """Get hash-chained audit adapter singleton (app-scoped).

    Each append opens its own transaction on the shared Database, so audit
    entries persist regardless of the request session's outcome.
    """
    from src.infrastructure.audit import HashChainAuditAdapter

    return HashChainAuditAdapter(database=get_database(), logger=get_logger())


# ============================================================================
# Security Services (Application-Scoped)
# ============================================================================


@lru_cache()
def get_password_service() -> "PasswordHashingProtocol":
    """Get password hashing service singleton (app-scoped).

    Returns BcryptPasswordService with the configured cost factor.
    """
    from src.infrastructure.security import BcryptPasswordService

    return BcryptPasswordService(cost_factor=settings.bcrypt_rounds)


@lru_cache()
def get_session_token_service() -> "SessionTokenProtocol":
    """Get session token service singleton (app-scoped).

    Development and testing generate an ephemeral RSA key pair when no keys
    are configured; sessions then do not survive a restart.

    Raises:
        ValueError: If keys are missing outside development and testing.
    """
    from src.infrastructure.security import (
        JWTSessionTokenService,
        generate_rsa_key_pair,
    )

    private_pem = settings.jwt_private_key
    public_pem = settings.jwt_public_key
    if not private_pem or not public_pem:
        if not (settings.is_development or settings.is_testing or settings.is_ci):
            raise ValueError(
                "JWT_PRIVATE_KEY and JWT_PUBLIC_KEY are required in "
                f"{settings.environment.value}"
            )
        get_logger().warning("session_keys_ephemeral")
        private_pem, public_pem = generate_rsa_key_pair()

    return JWTSessionTokenService(
        private_key_pem=private_pem,
        public_key_pem=public_pem,
        algorithm=settings.jwt_algorithm,
        key_id=settings.jwt_key_id,
        issuer=settings.jwt_issuer,
        audiences=settings.jwt_audiences,
        ttl=timedelta(hours=settings.session_ttl_hours),
    )


@lru_cache()
def get_single_use_token_service() -> "SingleUseTokenServiceProtocol":
    """Get activation/reset token service singleton (app-scoped)."""
    from src.infrastructure.security import SingleUseTokenService

    return SingleUseTokenService(salt=settings.token_hash_salt)


@lru_cache()
def get_lockout_policy() -> "LockoutPolicy":
    """Progressive lockout tiers parsed from LOCKOUT_TIERS."""
    from src.domain.value_objects import LockoutPolicy

    return LockoutPolicy.from_schedule(settings.lockout_schedule)


# ============================================================================
# External Services (Application-Scoped)
# ============================================================================


@lru_cache()
def get_identity_provider() -> "IdentityProviderProtocol":
    """Get identity provider API client singleton (app-scoped)."""
    from src.infrastructure.providers.identity import ProviderAPIClient

    return ProviderAPIClient(
        base_url=settings.provider_api_base_url,
        secret_key=settings.provider_secret_key,
        timeout=settings.provider_timeout_seconds,
    )


@lru_cache()
def get_notifications() -> "NotificationProtocol":
    """Get notification service singleton (app-scoped).

    Notifications are logged; delivery is outside this service.
    """
    from src.infrastructure.email import LoggingNotificationService

    return LoggingNotificationService(
        logger=get_logger(), base_url=settings.app_base_url
    )


@lru_cache()
def get_fingerprinter() -> "DeviceFingerprintProtocol":
    """Get User-Agent device fingerprinter singleton (app-scoped)."""
    from src.infrastructure.enrichers import UserAgentDeviceFingerprinter

    return UserAgentDeviceFingerprinter()


@lru_cache()
def get_location_enricher() -> "LocationEnricherProtocol":
    """Get GeoIP2 location enricher singleton (app-scoped).

    Lookups are disabled while settings.geoip_db_path is None.
    """
    from src.infrastructure.enrichers import GeoIPLocationEnricher

    return GeoIPLocationEnricher(logger=get_logger(), db_path=settings.geoip_db_path)


async def _load_session_history(
    account_id: UUID, exclude_session_id: UUID, limit: int
) -> list["Session"]:
    """Read login history in a session of its own.

    The monitor runs after the request session is closed.
    """
    from src.infrastructure.persistence.repositories import SessionRepository

    async with get_database().get_session() as session:
        return await SessionRepository(session).list_recent_for_account(
            account_id, limit=limit, exclude_session_id=exclude_session_id
        )


@lru_cache()
def get_suspicious_login_monitor() -> "SuspiciousLoginMonitor":
    """Get suspicious login monitor singleton (app-scoped).

    Holds the background checks started after successful logins; the
    application lifespan drains it on shutdown.
    """
    from src.application.services.suspicious_login_monitor import (
        SuspiciousLoginMonitor,
    )
    from src.domain.security import UsualHours

    return SuspiciousLoginMonitor(
        history_loader=_load_session_history,
        audit=get_audit(),
        notifications=get_notifications(),
        fingerprinter=get_fingerprinter(),
        locator=get_location_enricher(),
        usual_hours=UsualHours(
            timezone=settings.suspicious_login_timezone,
            start_hour=settings.suspicious_login_usual_start_hour,
            end_hour=settings.suspicious_login_usual_end_hour,
        ),
        logger=get_logger(),
    )


# ============================================================================
# Logging (Application-Scoped)
# ============================================================================


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    Adapter selection is centralized here (composition root):
    - development: ConsoleAdapter (human-readable)
    - testing/ci/production: ConsoleAdapter (JSON)

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from src.infrastructure.logging import ConsoleAdapter

    return ConsoleAdapter(
        use_json=not settings.is_development,
        level=settings.log_level,
        service=settings.app_name,
    )
