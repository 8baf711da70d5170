"""
Main FastAPI application entry point.

Wires the trace middleware, RFC 9457 exception handlers, the registry
generated v1 router and the system endpoints. Shutdown drains pending
suspicious-login checks and closes the database engine and Redis pool.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.core.config import settings
from src.core.container import (
    get_database,
    get_logger,
    get_redis,
    get_suspicious_login_monitor,
)
from src.presentation.routers import system_router
from src.presentation.routers.api.middleware.trace_middleware import TraceMiddleware
from src.presentation.routers.api.v1 import v1_router
from src.presentation.routers.api.v1.errors import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager.

    Startup logs the effective auth mode. Shutdown waits for in-flight
    background checks, then releases connections.
    """
    logger = get_logger()
    logger.info(
        "application_started",
        environment=settings.environment.value,
        primary_auth_mode=settings.primary_auth_mode,
    )

    yield

    await get_suspicious_login_monitor().drain()
    await get_database().close()
    await get_redis().aclose()
    logger.info("application_stopped")


app = FastAPI(
    title=settings.app_name,
    description="Identity, session and credential migration control plane",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    debug=settings.debug,
    lifespan=lifespan,
)

# Request correlation
app.add_middleware(TraceMiddleware)

# RFC 9457 error responses
register_exception_handlers(app)

app.include_router(v1_router)
app.include_router(system_router)
