"""System router for non-versioned application endpoints.

Root, health and configuration endpoints outside the versioned API
contract. Health reports database and rate-limit store reachability.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError

from src.core.config import settings
from src.core.container import get_database, get_redis

system_router = APIRouter(tags=["System"])


@system_router.get("/")
async def root() -> dict[str, str]:
    """Root endpoint - basic status check."""
    return {
        "message": settings.app_name,
        "status": "operational",
        "version": settings.app_version,
    }


@system_router.get("/health")
async def health() -> JSONResponse:
    """Health check for monitoring and load balancers.

    Returns:
        200 with component status when every component is reachable,
        503 otherwise.
    """
    database_ok = await get_database().check_connection()
    try:
        redis_ok = bool(await get_redis().ping())
    except RedisError:
        redis_ok = False

    healthy = database_ok and redis_ok
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "degraded",
            "database": "ok" if database_ok else "unavailable",
            "redis": "ok" if redis_ok else "unavailable",
        },
    )


@system_router.get("/config")
async def get_config() -> JSONResponse:
    """Configuration debug endpoint (development only).

    Returns:
        Sanitized configuration, or 403 outside development.
    """
    if not settings.is_development:
        return JSONResponse(
            status_code=403,
            content={"detail": "Config endpoint only available in development"},
        )

    return JSONResponse(
        content={
            "environment": settings.environment.value,
            "debug": settings.debug,
            "api": {
                "name": settings.app_name,
                "version": settings.app_version,
                "base_url": settings.api_base_url,
                "v1_prefix": settings.api_v1_prefix,
            },
            "database": {"url": "<redacted>", "echo": settings.db_echo},
            "redis": {"url": "<redacted>"},
            "auth": {
                "primary_auth_mode": settings.primary_auth_mode,
                "session_ttl_hours": settings.session_ttl_hours,
                "jwt_algorithm": settings.jwt_algorithm,
                "lockout_tiers": settings.lockout_tiers,
            },
            "migration": {
                "batch_size": settings.migration_batch_size,
                "cohort_targets": settings.migration_cohort_targets,
            },
        }
    )
