"""Unit tests for the Account entity.

Tests cover:
- Lock state relative to a reference time
- Credential mode invariant (hash only in LOCAL/MIGRATING)
- Activation through set_password
- Migration provenance and rollback to provider
- Email and Password value objects
"""

from datetime import UTC, datetime, timedelta

import pytest
from uuid_extensions import uuid7

from src.domain.entities import Account
from src.domain.enums import AccountStatus, AuthMode
from src.domain.value_objects import Email, Password, normalize_email

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def create_mock_account(**overrides) -> Account:
    """Create an account with sensible defaults."""
    defaults = {
        "id": uuid7(),
        "email": "a@x.test",
        "first_name": "Aroha",
        "last_name": "Ngata",
    }
    defaults.update(overrides)
    return Account(**defaults)


@pytest.mark.unit
class TestAccountLockState:
    """Test lock checks."""

    def test_never_locked(self):
        assert create_mock_account().is_locked(NOW) is False

    def test_locked_until_future(self):
        account = create_mock_account(locked_until=NOW + timedelta(minutes=5))
        assert account.is_locked(NOW) is True

    def test_lock_expires(self):
        account = create_mock_account(locked_until=NOW + timedelta(minutes=5))
        assert account.is_locked(NOW + timedelta(minutes=5)) is False

    def test_record_successful_login_clears_lockout(self):
        # Arrange
        account = create_mock_account(
            failed_login_attempts=4, locked_until=NOW - timedelta(minutes=1)
        )

        # Act
        account.record_successful_login("203.0.113.5", now=NOW)

        # Assert
        assert account.failed_login_attempts == 0
        assert account.locked_until is None
        assert account.last_login_at == NOW
        assert account.last_login_ip == "203.0.113.5"


@pytest.mark.unit
class TestCredentialMode:
    """Test the password hash invariant across mode changes."""

    def test_provider_account_has_no_local_password(self):
        account = create_mock_account(password_hash="$2b$04$x")
        assert account.has_local_password() is False

    def test_set_password_rejected_in_provider_mode(self):
        account = create_mock_account()
        with pytest.raises(ValueError, match="cannot hold a local password"):
            account.set_password("$2b$04$hash")

    def test_set_password_activates_pending_account(self):
        # Arrange
        account = create_mock_account(
            auth_mode=AuthMode.LOCAL, must_change_password=True
        )

        # Act
        account.set_password("$2b$04$hash", now=NOW)

        # Assert
        assert account.status == AccountStatus.ACTIVE
        assert account.has_local_password() is True
        assert account.password_changed_at == NOW
        assert account.must_change_password is False

    def test_switch_to_provider_discards_hash(self):
        account = create_mock_account(
            auth_mode=AuthMode.LOCAL,
            status=AccountStatus.ACTIVE,
            password_hash="$2b$04$hash",
        )

        account.apply_auth_mode(AuthMode.PROVIDER)

        assert account.password_hash is None
        assert account.status == AccountStatus.ACTIVE

    def test_hashless_switch_to_local_requires_activation(self):
        account = create_mock_account(status=AccountStatus.ACTIVE)

        account.apply_auth_mode(AuthMode.LOCAL)

        assert account.status == AccountStatus.PENDING_ACTIVATION

    def test_suspended_account_keeps_status_on_switch(self):
        account = create_mock_account(status=AccountStatus.SUSPENDED)

        account.apply_auth_mode(AuthMode.MIGRATING)

        assert account.status == AccountStatus.SUSPENDED


@pytest.mark.unit
class TestMigrationProvenance:
    """Test mark_migrated and roll_back_to_provider."""

    def test_mark_migrated_stamps_provenance(self):
        account = create_mock_account(
            provider_user_id="user_1", status=AccountStatus.ACTIVE
        )

        account.mark_migrated(
            mode=AuthMode.LOCAL, migrated_by="system", notes="cohort:pilot", now=NOW
        )

        assert account.auth_mode == AuthMode.LOCAL
        assert account.migrated_at == NOW
        assert account.migrated_by == "system"
        assert account.migration_notes == "cohort:pilot"
        assert account.was_migrated() is True

    def test_mark_migrated_rejects_provider_mode(self):
        with pytest.raises(ValueError):
            create_mock_account().mark_migrated(
                mode=AuthMode.PROVIDER, migrated_by="system"
            )

    def test_was_migrated_requires_provider_link(self):
        account = create_mock_account(migrated_at=NOW, provider_user_id=None)
        assert account.was_migrated() is False

    def test_roll_back_to_provider(self):
        # Arrange
        account = create_mock_account(
            provider_user_id="user_1",
            auth_mode=AuthMode.LOCAL,
            status=AccountStatus.ACTIVE,
            password_hash="$2b$04$hash",
            migrated_at=NOW,
            migrated_by="admin",
            failed_login_attempts=3,
        )

        # Act
        account.roll_back_to_provider("rollback: bad cohort")

        # Assert
        assert account.auth_mode == AuthMode.PROVIDER
        assert account.password_hash is None
        assert account.migrated_at is None
        assert account.migrated_by is None
        assert account.migration_notes == "rollback: bad cohort"
        assert account.failed_login_attempts == 0

    def test_full_name(self):
        assert create_mock_account().full_name == "Aroha Ngata"


@pytest.mark.unit
class TestCredentialValueObjects:
    """Test Email and Password value objects."""

    def test_normalize_email(self):
        assert normalize_email("  A@X.Test ") == "a@x.test"

    def test_email_normalized_and_validated(self):
        assert str(Email(" User@Example.COM ")) == "user@example.com"

    def test_invalid_email_rejected(self):
        with pytest.raises(ValueError, match="Invalid email"):
            Email("not-an-email")

    @pytest.mark.parametrize(
        "candidate,message",
        [
            ("Sh0rt!", "at least 8"),
            ("lowercase1!", "uppercase"),
            ("UPPERCASE1!", "lowercase"),
            ("NoDigits!!", "digit"),
            ("NoSpecial12", "special"),
        ],
    )
    def test_password_policy(self, candidate, message):
        with pytest.raises(ValueError, match=message):
            Password(candidate)

    def test_password_masked(self):
        password = Password("Str0ng!Pass")
        assert str(password) == "*" * 11
        assert "Str0ng" not in repr(password)
