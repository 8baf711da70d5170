"""Unit tests for Settings.

Tests cover:
- Defaults for login policy, rate limits and cohorts
- Lockout tier and cohort target parsing
- Validation of bcrypt rounds, JWT algorithm and primary auth mode
- PEM unescaping and URL normalization
- Environment detection properties
"""

import pytest
from pydantic import ValidationError

from src.core.config import Settings
from src.core.enums import Environment

REQUIRED = {
    "database_url": "sqlite+aiosqlite:///:memory:",
    "redis_url": "redis://localhost:6379/15",
}


def build_settings(**overrides) -> Settings:
    return Settings(**{**REQUIRED, **overrides})


@pytest.mark.unit
class TestDefaults:
    """Test default values."""

    def test_login_policy_defaults(self):
        settings = build_settings()

        assert settings.lockout_schedule == [(5, 5), (10, 15), (15, 60), (20, None)]
        assert settings.login_rate_limit_max_requests == 5
        assert settings.login_rate_limit_window_seconds == 900
        assert settings.primary_auth_mode == "provider"
        assert settings.session_cookie_name == "cp_session"

    def test_cohort_target_defaults(self):
        assert build_settings().cohort_targets == {
            "pilot": 5,
            "wave1": 30,
            "wave2": 100,
            "final": None,
        }

    def test_audiences_split(self):
        settings = build_settings(jwt_audience="portal, mobile ,")

        assert settings.jwt_audiences == ["portal", "mobile"]


@pytest.mark.unit
class TestValidation:
    """Test field validators."""

    @pytest.mark.parametrize("rounds", [3, 32])
    def test_bcrypt_rounds_out_of_range(self, rounds):
        with pytest.raises(ValidationError, match="bcrypt_rounds"):
            build_settings(bcrypt_rounds=rounds)

    def test_symmetric_jwt_algorithm_rejected(self):
        with pytest.raises(ValidationError, match="jwt_algorithm"):
            build_settings(jwt_algorithm="HS256")

    def test_primary_auth_mode_normalized(self):
        assert build_settings(primary_auth_mode=" LOCAL ").primary_auth_mode == (
            "local"
        )

    def test_unknown_primary_auth_mode(self):
        with pytest.raises(ValidationError):
            build_settings(primary_auth_mode="ldap")

    @pytest.mark.parametrize(
        "tiers",
        ["", "5:5,3:10", "5:0", "five:5", "5:forever"],
    )
    def test_bad_lockout_tiers(self, tiers):
        with pytest.raises(ValidationError):
            build_settings(lockout_tiers=tiers)

    def test_custom_lockout_tiers(self):
        settings = build_settings(lockout_tiers="3:1, 6:INDEFINITE")

        assert settings.lockout_schedule == [(3, 1), (6, None)]

    def test_bad_cohort_targets(self):
        with pytest.raises(ValidationError):
            build_settings(migration_cohort_targets="pilot:few")

    def test_pem_newlines_unescaped(self):
        settings = build_settings(
            jwt_public_key="-----BEGIN-----\\nabc\\n-----END-----"
        )

        assert settings.jwt_public_key == "-----BEGIN-----\nabc\n-----END-----"

    def test_trailing_slash_removed(self):
        settings = build_settings(provider_api_base_url="https://idp.example.com/v1/")

        assert settings.provider_api_base_url == "https://idp.example.com/v1"


@pytest.mark.unit
class TestEnvironment:
    """Test environment detection."""

    @pytest.mark.parametrize(
        "environment,flag",
        [
            (Environment.DEVELOPMENT, "is_development"),
            (Environment.TESTING, "is_testing"),
            (Environment.CI, "is_ci"),
            (Environment.PRODUCTION, "is_production"),
        ],
    )
    def test_flags(self, environment, flag):
        settings = build_settings(environment=environment)

        assert getattr(settings, flag) is True
