"""Pytest configuration and shared fixtures.

Environment variables are set before anything imports src.core.config, so
the module-level settings object is built for the testing environment:
- in-memory SQLite database (aiosqlite)
- bcrypt at the minimum cost factor
- ephemeral RSA session keys

Fixtures:
    mock_logger: Mock implementing LoggerProtocol
    mock_audit: AsyncMock audit port whose append() succeeds
    rsa_keys: Session signing key pair (generated once per run)
    session_tokens: JWTSessionTokenService over rsa_keys
    database: Fresh in-memory Database with all tables created
    file_database: File-backed Database whose sessions get their own
        connections, for tests that need concurrent transactions
    db_session: Session on the in-memory database
    fake_redis: fakeredis client with Lua scripting
"""

import asyncio
import os

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("TOKEN_HASH_SALT", "test-token-hash-salt")

from datetime import timedelta  # noqa: E402
from unittest.mock import AsyncMock, Mock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fakeredis import FakeAsyncRedis  # noqa: E402
from uuid_extensions import uuid7  # noqa: E402

from src.core.result import Success  # noqa: E402
from src.domain.entities import AuditEvent  # noqa: E402
from src.domain.enums import AuditAction  # noqa: E402
from src.infrastructure.persistence.database import Database  # noqa: E402
from src.infrastructure.security import (  # noqa: E402
    JWTSessionTokenService,
    generate_rsa_key_pair,
)

TEST_ISSUER = "identity-control-plane"
TEST_AUDIENCES = ["portal"]


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line(
        "markers", "integration: Integration tests with SQLite and fakeredis"
    )
    config.addinivalue_line("markers", "api: HTTP tests against the FastAPI app")


def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions."""
    for item in items:
        if asyncio.iscoroutinefunction(getattr(item, "function", None)):
            item.add_marker(pytest.mark.asyncio)


# =============================================================================
# Mocked ports
# =============================================================================


@pytest.fixture
def mock_logger():
    """Logger double (LoggerProtocol is synchronous)."""
    return Mock()


@pytest.fixture
def mock_audit():
    """Audit double that accepts every append."""
    audit = AsyncMock()

    async def append(**kwargs):
        return Success(
            value=AuditEvent(
                id=uuid7(),
                sequence=1,
                actor_id=kwargs["actor_id"],
                action=kwargs["action"],
                resource_type=kwargs["resource_type"],
                resource_id=kwargs.get("resource_id"),
                timestamp=kwargs.get("timestamp") or _now(),
                previous_hash=None,
            )
        )

    audit.append.side_effect = append
    return audit


def audited_actions(audit) -> list[AuditAction]:
    """Actions passed to an audit double, in call order."""
    return [call.kwargs["action"] for call in audit.append.call_args_list]


def _now():
    from datetime import UTC, datetime

    return datetime.now(UTC)


# =============================================================================
# Session tokens
# =============================================================================


@pytest.fixture(scope="session")
def rsa_keys() -> tuple[str, str]:
    """RSA key pair shared by the whole run (key generation is slow)."""
    return generate_rsa_key_pair()


@pytest.fixture
def session_tokens(rsa_keys) -> JWTSessionTokenService:
    private_pem, public_pem = rsa_keys
    return JWTSessionTokenService(
        private_key_pem=private_pem,
        public_key_pem=public_pem,
        algorithm="RS256",
        key_id="test",
        issuer=TEST_ISSUER,
        audiences=TEST_AUDIENCES,
        ttl=timedelta(hours=8),
    )


# =============================================================================
# Database and Redis
# =============================================================================


@pytest_asyncio.fixture
async def database():
    """Fresh in-memory database per test."""
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.create_all()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def file_database(tmp_path):
    """File-backed database; concurrent sessions use separate connections."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'control_plane.db'}")
    await db.create_all()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def db_session(database):
    """Session used by repositories under test."""
    async with database.async_session() as session:
        yield session


@pytest_asyncio.fixture
async def fake_redis():
    """fakeredis client with Lua scripting (fakeredis[lua])."""
    client = FakeAsyncRedis()
    yield client
    await client.flushall()
    await client.aclose()
