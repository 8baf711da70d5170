"""API tests for admin migration, rollback and audit endpoints.

Tests cover:
- Admin role required (401 anonymous, 403 non-admin)
- POST /api/v1/admin/migrations: tallies, mode argument validation
- POST /api/v1/admin/migrations/cohorts: advance result, out-of-order 409
- GET /api/v1/admin/migrations/progress
- POST /api/v1/admin/rollbacks: window and single modes
- GET /api/v1/admin/rollbacks/candidates: hours_back bounds
- GET /api/v1/admin/audit/verification: intact 200, broken 409

Architecture:
- Real app with get_current_actor overridden to a fixed actor
- Handlers are AsyncMocks returning Success/Failure
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient
from uuid_extensions import uuid7

from src.application.commands.migration_commands import MigrationMode, RollbackMode
from src.application.dtos.auth_dtos import AuthenticatedActor
from src.application.dtos.migration_dtos import (
    BatchMapResult,
    CohortAdvanceResult,
    CohortStatus,
    ItemError,
    MigrationProgress,
    RecentlyMigratedAccount,
    RollbackResult,
)
from src.core.container import (
    get_advance_cohort_handler,
    get_list_recently_migrated_handler,
    get_migrate_accounts_handler,
    get_migration_progress_handler,
    get_rollback_accounts_handler,
    get_validate_session_handler,
    get_verify_audit_chain_handler,
)
from src.core.enums import ErrorCode
from src.core.errors import ConflictError, IntegrityError
from src.core.result import Failure, Success
from src.domain.entities.audit_event import ChainVerification
from src.domain.enums import AccountRole, RolloutCohort
from src.main import app
from src.presentation.routers.api.middleware.auth_dependencies import (
    get_current_actor,
)

ADMIN = AuthenticatedActor(
    account_id=uuid7(), role=AccountRole.ADMIN.value, session_id=uuid7()
)
MEMBER = AuthenticatedActor(account_id=uuid7(), role=AccountRole.MEMBER.value)


@pytest.fixture
def handlers():
    return {
        get_migrate_accounts_handler: AsyncMock(),
        get_advance_cohort_handler: AsyncMock(),
        get_migration_progress_handler: AsyncMock(),
        get_rollback_accounts_handler: AsyncMock(),
        get_list_recently_migrated_handler: AsyncMock(),
        get_verify_audit_chain_handler: AsyncMock(),
    }


def _provide(handler):
    # A zero-argument provider: a defaulted parameter would be treated by
    # FastAPI as a query parameter and its default deep-copied.
    return lambda: handler


def make_client(handlers, actor: AuthenticatedActor | None) -> TestClient:
    for getter, handler in handlers.items():
        app.dependency_overrides[getter] = _provide(handler)
    if actor is not None:
        app.dependency_overrides[get_current_actor] = lambda: actor
    return TestClient(app)


@pytest.fixture
def admin_client(handlers):
    yield make_client(handlers, ADMIN)
    app.dependency_overrides.clear()


@pytest.fixture
def member_client(handlers):
    yield make_client(handlers, MEMBER)
    app.dependency_overrides.clear()


ADMIN_ROUTES = [
    ("post", "/api/v1/admin/migrations", {"mode": "all"}),
    ("post", "/api/v1/admin/migrations/cohorts", {"cohort": "pilot"}),
    ("get", "/api/v1/admin/migrations/progress", None),
    (
        "post",
        "/api/v1/admin/rollbacks",
        {"mode": "single", "reason": "bad import", "account_id": str(uuid7())},
    ),
    ("get", "/api/v1/admin/rollbacks/candidates", None),
    ("get", "/api/v1/admin/audit/verification", None),
]


@pytest.mark.api
class TestAdminAccess:
    """Every admin route needs an admin session."""

    @pytest.mark.parametrize(("method", "path", "body"), ADMIN_ROUTES)
    def test_non_admin_forbidden(self, member_client, handlers, method, path, body):
        response = member_client.request(method, path, json=body)

        assert response.status_code == 403
        assert response.json()["detail"] == "Administrator role required"
        assert all(not h.handle.called for h in handlers.values())

    @pytest.mark.parametrize(("method", "path", "body"), ADMIN_ROUTES)
    def test_anonymous_unauthorized(self, handlers, method, path, body):
        # Arrange
        validate_handler = AsyncMock()
        client = make_client(handlers, None)
        app.dependency_overrides[get_validate_session_handler] = (
            lambda: validate_handler
        )

        # Act
        try:
            response = client.request(method, path, json=body)
        finally:
            app.dependency_overrides.clear()

        # Assert
        assert response.status_code == 401
        validate_handler.authenticate.assert_not_called()


@pytest.mark.api
class TestMigrations:
    """Migration endpoints."""

    def test_create_migration(self, admin_client, handlers):
        # Arrange
        batch = BatchMapResult(created=3, updated=1, skipped=1)
        batch.record_failure("user_9", "upstream timeout")
        handlers[get_migrate_accounts_handler].handle.return_value = Success(
            value=batch
        )

        # Act
        response = admin_client.post(
            "/api/v1/admin/migrations",
            json={
                "mode": "batch",
                "provider_user_ids": ["user_1", "user_9"],
                "require_password_reset": True,
                "notes": "first import",
            },
        )

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["created"] == 3
        assert data["failed"] == 1
        assert data["total"] == 6
        assert data["errors"] == [
            {"item_id": "user_9", "message": "upstream timeout"}
        ]

        command = handlers[get_migrate_accounts_handler].handle.call_args.args[0]
        assert command.mode == MigrationMode.BATCH
        assert command.provider_user_ids == ["user_1", "user_9"]
        assert command.options.require_password_reset is True
        assert command.options.migrated_by == ADMIN.actor_id
        assert command.actor == ADMIN

    @pytest.mark.parametrize(
        "body",
        [
            {"mode": "single"},
            {"mode": "batch", "provider_user_ids": []},
            {"mode": "everything"},
        ],
    )
    def test_mode_arguments_validated(self, admin_client, handlers, body):
        response = admin_client.post("/api/v1/admin/migrations", json=body)

        assert response.status_code == 422
        handlers[get_migrate_accounts_handler].handle.assert_not_called()

    def test_advance_cohort(self, admin_client, handlers):
        handlers[get_advance_cohort_handler].handle.return_value = Success(
            value=CohortAdvanceResult(
                cohort="pilot",
                migrated=5,
                failed=0,
                activation_tokens_issued=5,
                cohort_complete=True,
                local_count=5,
                target_size=5,
            )
        )

        response = admin_client.post(
            "/api/v1/admin/migrations/cohorts",
            json={"cohort": "pilot", "batch_size": 10},
        )

        assert response.status_code == 200
        assert response.json()["cohort_complete"] is True
        assert response.json()["activation_tokens_issued"] == 5
        command = handlers[get_advance_cohort_handler].handle.call_args.args[0]
        assert command.cohort == RolloutCohort.PILOT
        assert command.batch_size == 10

    def test_advance_cohort_out_of_order(self, admin_client, handlers):
        handlers[get_advance_cohort_handler].handle.return_value = Failure(
            error=ConflictError(
                code=ErrorCode.COHORT_OUT_OF_ORDER,
                message="Cohort pilot must complete first",
                resource_type="MigrationCohort",
                conflicting_field="cohort",
            )
        )

        response = admin_client.post(
            "/api/v1/admin/migrations/cohorts", json={"cohort": "wave1"}
        )

        assert response.status_code == 409
        assert response.json()["code"] == "cohort_out_of_order"

    def test_progress(self, admin_client, handlers):
        completed = datetime(2026, 3, 1, tzinfo=UTC)
        handlers[get_migration_progress_handler].handle.return_value = Success(
            value=MigrationProgress(
                total=200,
                provider=150,
                local=45,
                migrating=5,
                percent_complete=22.5,
                current_cohort="wave1",
                cohorts=[
                    CohortStatus(
                        cohort="pilot",
                        target_size=5,
                        completed_at=completed,
                        completed_by="ops",
                    ),
                    CohortStatus(
                        cohort="wave1",
                        target_size=30,
                        completed_at=None,
                        completed_by=None,
                    ),
                ],
            )
        )

        response = admin_client.get("/api/v1/admin/migrations/progress")

        assert response.status_code == 200
        data = response.json()
        assert data["percent_complete"] == 22.5
        assert data["current_cohort"] == "wave1"
        assert [c["cohort"] for c in data["cohorts"]] == ["pilot", "wave1"]
        assert data["cohorts"][1]["completed_at"] is None


@pytest.mark.api
class TestRollbacks:
    """Rollback endpoints."""

    def test_window_rollback(self, admin_client, handlers):
        # Arrange
        handlers[get_rollback_accounts_handler].handle.return_value = Success(
            value=RollbackResult(
                reverted=2,
                failed=1,
                errors=[ItemError(item_id="acct-3", message="not migrated")],
            )
        )
        start = datetime(2026, 3, 1, 8, tzinfo=UTC)
        end = start + timedelta(hours=2)

        # Act
        response = admin_client.post(
            "/api/v1/admin/rollbacks",
            json={
                "mode": "window",
                "reason": "bad cohort",
                "start": start.isoformat(),
                "end": end.isoformat(),
            },
        )

        # Assert
        assert response.status_code == 200
        assert response.json()["reverted"] == 2
        command = handlers[get_rollback_accounts_handler].handle.call_args.args[0]
        assert command.mode == RollbackMode.WINDOW
        assert command.start == start
        assert command.end == end
        assert command.reason == "bad cohort"

    @pytest.mark.parametrize(
        "body",
        [
            {"mode": "single", "reason": "x"},
            {"mode": "window", "reason": "x", "start": "2026-03-01T00:00:00Z"},
            {"mode": "single", "reason": "", "account_id": str(uuid7())},
        ],
    )
    def test_mode_arguments_validated(self, admin_client, handlers, body):
        response = admin_client.post("/api/v1/admin/rollbacks", json=body)

        assert response.status_code == 422
        handlers[get_rollback_accounts_handler].handle.assert_not_called()

    def test_candidates(self, admin_client, handlers):
        account_id = uuid7()
        handlers[get_list_recently_migrated_handler].handle.return_value = Success(
            value=[
                RecentlyMigratedAccount(
                    account_id=account_id,
                    email="hemi@example.com",
                    auth_mode="local",
                    migrated_at=datetime.now(UTC) - timedelta(hours=3),
                    migrated_by="ops",
                    hours_since_migration=3,
                )
            ]
        )

        response = admin_client.get(
            "/api/v1/admin/rollbacks/candidates", params={"hours_back": 48}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total_count"] == 1
        assert data["candidates"][0]["account_id"] == str(account_id)
        query = handlers[get_list_recently_migrated_handler].handle.call_args.args[0]
        assert query.hours_back == 48

    @pytest.mark.parametrize("hours_back", [0, 721])
    def test_candidates_hours_back_bounds(self, admin_client, hours_back):
        response = admin_client.get(
            "/api/v1/admin/rollbacks/candidates", params={"hours_back": hours_back}
        )

        assert response.status_code == 422


@pytest.mark.api
class TestAuditVerification:
    """GET /api/v1/admin/audit/verification."""

    def test_intact_chain(self, admin_client, handlers):
        handlers[get_verify_audit_chain_handler].handle.return_value = Success(
            value=ChainVerification(
                valid=True, total_entries=42, message="Chain intact"
            )
        )

        response = admin_client.get("/api/v1/admin/audit/verification")

        assert response.status_code == 200
        assert response.json() == {
            "valid": True,
            "total_entries": 42,
            "message": "Chain intact",
        }

    def test_broken_chain(self, admin_client, handlers):
        broken_id = str(uuid7())
        handlers[get_verify_audit_chain_handler].handle.return_value = Failure(
            error=IntegrityError(
                code=ErrorCode.AUDIT_CHAIN_BROKEN,
                message="Audit chain broken at sequence 3",
                broken_at_id=broken_id,
                total_entries=3,
            )
        )

        response = admin_client.get("/api/v1/admin/audit/verification")

        assert response.status_code == 409
        data = response.json()
        assert data["code"] == "audit_chain_broken"
        assert data["broken_at_id"] == broken_id
        assert data["total_entries"] == 3
