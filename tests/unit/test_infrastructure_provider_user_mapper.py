"""Unit tests for ProviderUserMapper.

Tests cover:
- Full record mapping (email normalized, verification, phone, timestamps)
- private_metadata dropped, secret-looking public metadata redacted
- Records without id or email
- map_users skips unmappable entries
"""

from datetime import UTC, datetime

import pytest

from src.infrastructure.providers.identity.user_mapper import ProviderUserMapper


def create_mock_provider_payload(**overrides) -> dict:
    payload = {
        "id": "user_2abc",
        "email_addresses": [
            {
                "email_address": " Ana@Example.com ",
                "verification": {"status": "verified"},
            }
        ],
        "first_name": "Ana",
        "last_name": "Ngata",
        "phone_numbers": [{"phone_number": "+6421000000"}],
        "public_metadata": {"role": "staff", "api_token": "tok_live_123"},
        "private_metadata": {"ssn": "000-00-0000"},
        "created_at": 1706486400000,
        "last_sign_in_at": 1709164800000,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def mapper():
    return ProviderUserMapper()


@pytest.mark.unit
class TestMapUser:
    """Test map_user()."""

    def test_full_record(self, mapper):
        # Act
        user = mapper.map_user(create_mock_provider_payload())

        # Assert
        assert user.provider_user_id == "user_2abc"
        assert user.email == "ana@example.com"
        assert user.email_verified is True
        assert user.first_name == "Ana"
        assert user.phone == "+6421000000"
        assert user.role_hint == "staff"
        assert user.created_at == datetime(2024, 1, 29, tzinfo=UTC)
        assert user.last_sign_in_at == datetime(2024, 2, 29, tzinfo=UTC)

    def test_metadata_sanitized(self, mapper):
        user = mapper.map_user(create_mock_provider_payload())

        assert user.public_metadata["api_token"] == "[REDACTED]"
        assert "ssn" not in str(user)

    def test_unverified_email(self, mapper):
        user = mapper.map_user(
            create_mock_provider_payload(
                email_addresses=[
                    {
                        "email_address": "a@x.test",
                        "verification": {"status": "unverified"},
                    }
                ]
            )
        )

        assert user.email_verified is False

    def test_no_email(self, mapper):
        user = mapper.map_user(create_mock_provider_payload(email_addresses=[]))

        assert user.email is None
        assert user.email_verified is False

    @pytest.mark.parametrize("value", [None, "", 42])
    def test_missing_id(self, mapper, value):
        assert mapper.map_user(create_mock_provider_payload(id=value)) is None

    def test_bad_timestamps_ignored(self, mapper):
        user = mapper.map_user(
            create_mock_provider_payload(created_at="yesterday", last_sign_in_at=True)
        )

        assert user.created_at is None
        assert user.last_sign_in_at is None


@pytest.mark.unit
class TestMapUsers:
    """Test map_users()."""

    def test_skips_unmappable(self, mapper):
        users = mapper.map_users(
            [
                create_mock_provider_payload(id="user_1"),
                "not-a-dict",
                create_mock_provider_payload(id=None),
                create_mock_provider_payload(id="user_2"),
            ]
        )

        assert [u.provider_user_id for u in users] == ["user_1", "user_2"]
