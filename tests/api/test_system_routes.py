"""API tests for non-versioned system routes.

Tests cover:
- GET / returns status and version
- GET /health reports database and Redis reachability (200 or 503)
- GET /config is development-only
- X-Trace-Id is echoed on responses
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

from src.core.config import settings
from src.main import app
from src.presentation.routers import system as system_module

client = TestClient(app)


@pytest.fixture
def components(monkeypatch):
    database = AsyncMock()
    database.check_connection.return_value = True
    redis = AsyncMock()
    redis.ping.return_value = True
    monkeypatch.setattr(system_module, "get_database", lambda: database)
    monkeypatch.setattr(system_module, "get_redis", lambda: redis)
    return database, redis


@pytest.mark.api
class TestSystemRoutes:
    def test_root_returns_status_and_version(self):
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == settings.app_name
        assert data["status"] == "operational"
        assert data["version"] == settings.app_version

    def test_health_all_components_up(self, components):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "database": "ok",
            "redis": "ok",
        }

    def test_health_database_down(self, components):
        database, _ = components
        database.check_connection.return_value = False

        response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["database"] == "unavailable"
        assert response.json()["redis"] == "ok"

    def test_health_redis_down(self, components):
        _, redis = components
        redis.ping.side_effect = RedisConnectionError("refused")

        response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "degraded"
        assert response.json()["redis"] == "unavailable"

    def test_config_is_development_only(self):
        response = client.get("/config")

        if settings.is_development:
            assert response.status_code == 200
            assert response.json()["database"]["url"] == "<redacted>"
        else:
            assert response.status_code == 403
            assert (
                response.json()["detail"]
                == "Config endpoint only available in development"
            )

    def test_trace_id_echoed(self):
        response = client.get("/", headers={"X-Trace-Id": "trace-123"})

        assert response.headers["X-Trace-Id"] == "trace-123"

    def test_unknown_path_is_problem_details(self):
        response = client.get("/api/v1/nowhere")

        assert response.status_code == 404
        assert response.json()["status"] == 404
