"""Integration tests for the SQLAlchemy repositories.

Tests cover:
- AccountRepository: lookups, atomic failed attempt counter, lock writes,
  counts per auth mode, migration candidates and migrated windows
- SessionRepository: revoke once, revoke all, login history, unbounded
  client header columns
- SingleUseTokenRepository: conditional consume, supersede
- MigrationCohortRepository: upsert and rollout ordering

Architecture:
- In-memory SQLite database (aiosqlite), tables created per test
- File-backed SQLite where sessions must run concurrently
- Real repositories, no mocks
"""

import asyncio
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import Text
from sqlalchemy.exc import IntegrityError
from uuid_extensions import uuid7

from src.domain.entities import Account, MigrationCohort, Session, SingleUseToken
from src.domain.enums import AccountStatus, AuthMode, RolloutCohort, TokenPurpose
from src.infrastructure.persistence.models.session import Session as SessionModel
from src.infrastructure.persistence.repositories import (
    AccountRepository,
    MigrationCohortRepository,
    SessionRepository,
    SingleUseTokenRepository,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def create_mock_account(**overrides) -> Account:
    defaults = {
        "id": uuid7(),
        "email": f"{uuid7().hex[-12:]}@example.com",
        "first_name": "Mere",
        "last_name": "Tane",
        "status": AccountStatus.ACTIVE,
    }
    defaults.update(overrides)
    return Account(**defaults)


async def save_account(db_session, **overrides) -> Account:
    account = create_mock_account(**overrides)
    await AccountRepository(db_session).save(account)
    return account


@pytest.mark.integration
class TestAccountRepository:
    """Test AccountRepository."""

    @pytest.mark.asyncio
    async def test_find_by_email_case_insensitive(self, db_session):
        account = await save_account(db_session, email="mere@example.com")

        found = await AccountRepository(db_session).find_by_email(" MERE@Example.com ")

        assert found is not None
        assert found.id == account.id
        assert found.auth_mode == AuthMode.PROVIDER

    @pytest.mark.asyncio
    async def test_find_by_provider_user_id(self, db_session):
        account = await save_account(db_session, provider_user_id="user_2abc")

        found = await AccountRepository(db_session).find_by_provider_user_id(
            "user_2abc"
        )

        assert found.id == account.id
        assert await AccountRepository(db_session).find_by_id(uuid7()) is None

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, db_session):
        await save_account(db_session, email="dup@example.com")

        with pytest.raises(IntegrityError):
            await save_account(db_session, email="dup@example.com")

    @pytest.mark.asyncio
    async def test_update_round_trip(self, db_session):
        # Arrange
        repo = AccountRepository(db_session)
        account = await save_account(db_session, provider_user_id="user_9")
        account.mark_migrated(
            mode=AuthMode.LOCAL, migrated_by="admin-1", notes="pilot", now=NOW
        )

        # Act
        await repo.update(account)
        stored = await repo.find_by_id(account.id)

        # Assert
        assert stored.auth_mode == AuthMode.LOCAL
        assert stored.status == AccountStatus.PENDING_ACTIVATION
        assert stored.migrated_at == NOW
        assert stored.migrated_by == "admin-1"
        assert stored.migration_notes == "pilot"

    @pytest.mark.asyncio
    async def test_increment_failed_attempts(self, db_session):
        repo = AccountRepository(db_session)
        account = await save_account(db_session)

        counts = [await repo.increment_failed_attempts(account.id) for _ in range(3)]

        assert counts == [1, 2, 3]
        assert (await repo.find_by_id(account.id)).failed_login_attempts == 3

    @pytest.mark.asyncio
    async def test_concurrent_increments_each_count(self, file_database):
        # Arrange
        count = 8
        async with file_database.get_session() as session:
            account = await save_account(session)

        async def fail_once() -> int:
            async with file_database.get_session() as session:
                return await AccountRepository(session).increment_failed_attempts(
                    account.id
                )

        # Act
        counts = await asyncio.gather(*(fail_once() for _ in range(count)))

        # Assert
        assert sorted(counts) == list(range(1, count + 1))
        async with file_database.get_session() as session:
            stored = await AccountRepository(session).find_by_id(account.id)
        assert stored.failed_login_attempts == count

    @pytest.mark.asyncio
    async def test_set_locked_until(self, db_session):
        repo = AccountRepository(db_session)
        account = await save_account(db_session)
        until = NOW + timedelta(minutes=5)

        await repo.set_locked_until(account.id, until)
        locked = await repo.find_by_id(account.id)
        await repo.set_locked_until(account.id, None)
        unlocked = await repo.find_by_id(account.id)

        assert locked.locked_until == until
        assert locked.is_locked(NOW) is True
        assert unlocked.locked_until is None

    @pytest.mark.asyncio
    async def test_count_by_auth_mode(self, db_session):
        await save_account(db_session)
        await save_account(db_session)
        await save_account(
            db_session, auth_mode=AuthMode.LOCAL, password_hash="$2b$04$x"
        )

        counts = await AccountRepository(db_session).count_by_auth_mode()

        assert counts == {
            AuthMode.PROVIDER: 2,
            AuthMode.MIGRATING: 0,
            AuthMode.LOCAL: 1,
        }

    @pytest.mark.asyncio
    async def test_migration_candidates(self, db_session):
        # Arrange
        recent = await save_account(
            db_session,
            provider_user_id="user_recent",
            last_login_at=NOW - timedelta(days=1),
        )
        older = await save_account(
            db_session,
            provider_user_id="user_older",
            last_login_at=NOW - timedelta(days=30),
        )
        await save_account(db_session, provider_user_id=None)
        await save_account(
            db_session, provider_user_id="user_gone", status=AccountStatus.DEACTIVATED
        )
        await save_account(
            db_session,
            provider_user_id="user_local",
            auth_mode=AuthMode.LOCAL,
            password_hash="$2b$04$x",
        )

        # Act
        candidates = await AccountRepository(db_session).find_migration_candidates(10)

        # Assert
        assert [a.id for a in candidates] == [recent.id, older.id]

    @pytest.mark.asyncio
    async def test_find_migrated_between_half_open(self, db_session):
        start = NOW - timedelta(hours=2)
        inside = await save_account(db_session, migrated_at=start)
        await save_account(db_session, migrated_at=NOW)
        await save_account(db_session, migrated_at=start - timedelta(seconds=1))

        found = await AccountRepository(db_session).find_migrated_between(start, NOW)

        assert [a.id for a in found] == [inside.id]


@pytest.mark.integration
class TestSessionRepository:
    """Test SessionRepository."""

    @staticmethod
    def create_mock_session(account: Account, **overrides) -> Session:
        defaults = {
            "id": uuid7(),
            "account_id": account.id,
            "token_hash": uuid7().hex,
            "expires_at": NOW + timedelta(hours=8),
            "ip_address": "203.0.113.7",
            "created_at": NOW,
        }
        defaults.update(overrides)
        return Session(**defaults)

    @pytest.mark.asyncio
    async def test_save_and_find(self, db_session):
        account = await save_account(db_session)
        repo = SessionRepository(db_session)
        session = self.create_mock_session(account, token_hash="a" * 64)

        await repo.save(session)
        found = await repo.find_by_id(session.id)

        assert found.token_hash == "a" * 64
        assert found.expires_at == NOW + timedelta(hours=8)
        assert found.is_revoked is False

    @pytest.mark.asyncio
    async def test_long_client_headers_stored_whole(self, db_session):
        # Arrange
        account = await save_account(db_session)
        repo = SessionRepository(db_session)
        user_agent = "Mozilla/5.0 " + "(extension; build) " * 150
        application = "portal-" + "x" * 300
        session = self.create_mock_session(
            account, user_agent=user_agent, application=application
        )

        # Act
        await repo.save(session)
        found = await repo.find_by_id(session.id)

        # Assert
        assert found.user_agent == user_agent
        assert found.application == application
        columns = SessionModel.__table__.c
        assert isinstance(columns.user_agent.type, Text)
        assert isinstance(columns.application.type, Text)

    @pytest.mark.asyncio
    async def test_revoke_only_once(self, db_session):
        account = await save_account(db_session)
        repo = SessionRepository(db_session)
        session = self.create_mock_session(account)
        await repo.save(session)

        first = await repo.revoke(session.id, revoked_by="user", reason="logout")
        second = await repo.revoke(session.id, revoked_by="user", reason="logout")
        stored = await repo.find_by_id(session.id)

        assert (first, second) == (True, False)
        assert stored.is_revoked is True
        assert stored.revoked_reason == "logout"

    @pytest.mark.asyncio
    async def test_revoke_all_for_account(self, db_session):
        # Arrange
        account = await save_account(db_session)
        other = await save_account(db_session)
        repo = SessionRepository(db_session)
        for _ in range(3):
            await repo.save(self.create_mock_session(account))
        await repo.save(self.create_mock_session(other))

        # Act
        revoked = await repo.revoke_all_for_account(
            account.id, revoked_by="system", reason="password_reset"
        )
        again = await repo.revoke_all_for_account(
            account.id, revoked_by="system", reason="password_reset"
        )

        # Assert
        assert revoked == 3
        assert again == 0
        remaining = await repo.list_recent_for_account(other.id, limit=5)
        assert remaining[0].is_revoked is False

    @pytest.mark.asyncio
    async def test_login_history_newest_first(self, db_session):
        account = await save_account(db_session)
        repo = SessionRepository(db_session)
        sessions = [
            self.create_mock_session(account, created_at=NOW - timedelta(days=i))
            for i in range(4)
        ]
        for session in sessions:
            await repo.save(session)

        history = await repo.list_recent_for_account(
            account.id, limit=2, exclude_session_id=sessions[0].id
        )

        assert [s.id for s in history] == [sessions[1].id, sessions[2].id]

    @pytest.mark.asyncio
    async def test_touch_sets_last_active(self, db_session):
        account = await save_account(db_session)
        repo = SessionRepository(db_session)
        session = self.create_mock_session(account)
        await repo.save(session)

        await repo.touch(session.id)

        assert (await repo.find_by_id(session.id)).last_active_at is not None


@pytest.mark.integration
class TestSingleUseTokenRepository:
    """Test SingleUseTokenRepository."""

    @staticmethod
    def create_mock_token(account: Account, **overrides) -> SingleUseToken:
        defaults = {
            "id": uuid7(),
            "account_id": account.id,
            "purpose": TokenPurpose.ACTIVATION,
            "token_hash": uuid7().hex,
            "expires_at": NOW + timedelta(hours=72),
        }
        defaults.update(overrides)
        return SingleUseToken(**defaults)

    @pytest.mark.asyncio
    async def test_consume_once(self, db_session):
        # Arrange
        account = await save_account(db_session)
        repo = SingleUseTokenRepository(db_session)
        token = self.create_mock_token(account)
        await repo.save(token)

        # Act
        first = await repo.consume(
            token.token_hash, TokenPurpose.ACTIVATION, used_ip="203.0.113.7", now=NOW
        )
        second = await repo.consume(
            token.token_hash, TokenPurpose.ACTIVATION, used_ip="203.0.113.7", now=NOW
        )
        await db_session.commit()

        # Assert
        assert first == account.id
        assert second is None
        stored = await repo.find_by_hash(token.token_hash, TokenPurpose.ACTIVATION)
        assert stored.is_used() is True
        assert stored.used_ip == "203.0.113.7"

    @pytest.mark.asyncio
    async def test_consume_rejects_expired_and_wrong_purpose(self, db_session):
        account = await save_account(db_session)
        repo = SingleUseTokenRepository(db_session)
        expired = self.create_mock_token(account, expires_at=NOW - timedelta(seconds=1))
        reset = self.create_mock_token(account, purpose=TokenPurpose.PASSWORD_RESET)
        await repo.save(expired)
        await repo.save(reset)

        assert (
            await repo.consume(
                expired.token_hash, TokenPurpose.ACTIVATION, used_ip=None, now=NOW
            )
            is None
        )
        assert (
            await repo.consume(
                reset.token_hash, TokenPurpose.ACTIVATION, used_ip=None, now=NOW
            )
            is None
        )

    @pytest.mark.asyncio
    async def test_supersede_unused(self, db_session):
        account = await save_account(db_session)
        repo = SingleUseTokenRepository(db_session)
        tokens = [
            self.create_mock_token(account, purpose=TokenPurpose.PASSWORD_RESET)
            for _ in range(2)
        ]
        for token in tokens:
            await repo.save(token)
        await repo.save(self.create_mock_token(account))

        superseded = await repo.supersede_unused(
            account.id, TokenPurpose.PASSWORD_RESET, now=NOW
        )

        assert superseded == 2
        stored = await repo.find_by_hash(
            tokens[0].token_hash, TokenPurpose.PASSWORD_RESET
        )
        assert stored.is_valid(NOW) is False


@pytest.mark.integration
class TestMigrationCohortRepository:
    """Test MigrationCohortRepository."""

    @pytest.mark.asyncio
    async def test_upsert_and_order(self, db_session):
        # Arrange
        repo = MigrationCohortRepository(db_session)
        await repo.upsert(MigrationCohort(cohort=RolloutCohort.WAVE1, target_size=30))
        await repo.upsert(MigrationCohort(cohort=RolloutCohort.PILOT, target_size=5))

        # Act
        pilot = await repo.find(RolloutCohort.PILOT)
        pilot.mark_complete("admin-1")
        await repo.upsert(pilot)
        cohorts = await repo.list_all()

        # Assert
        assert [c.cohort for c in cohorts] == [RolloutCohort.PILOT, RolloutCohort.WAVE1]
        assert cohorts[0].is_complete() is True
        assert cohorts[0].completed_by == "admin-1"
        assert await repo.find(RolloutCohort.FINAL) is None

    @pytest.mark.asyncio
    async def test_unbounded_final_cohort(self, db_session):
        repo = MigrationCohortRepository(db_session)

        await repo.upsert(MigrationCohort(cohort=RolloutCohort.FINAL, target_size=None))

        assert (await repo.find(RolloutCohort.FINAL)).target_size is None
