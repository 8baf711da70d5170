"""Unit tests for SuspiciousLoginMonitor.

Tests cover:
- New device from history -> SUSPICIOUS_LOGIN_DETECTED audit and alert
- Impossible travel from resolved locations, each address resolved once
- Familiar login -> no audit, no alert
- dispatch() runs in the background; drain() waits for it
- Loader failure is logged and never raised
- Device fingerprinting from User-Agent strings

Architecture:
- Real UserAgentDeviceFingerprinter (user-agents parsing, no I/O)
- History loader, audit, notifications and locator are AsyncMock doubles
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest
from uuid_extensions import uuid7

from src.application.services.suspicious_login_monitor import SuspiciousLoginMonitor
from src.domain.entities import Account, Session
from src.domain.enums import AuditAction, AuthMode, SuspicionReason
from src.domain.protocols import GeoLocation
from src.domain.security.suspicious_login import UsualHours
from src.domain.value_objects import ClientContext
from src.infrastructure.enrichers.device_fingerprinter import (
    UserAgentDeviceFingerprinter,
)
from tests.conftest import audited_actions

CHROME_WINDOWS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
SAFARI_IPHONE = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)
# 13:00 in Auckland
DAYTIME = datetime(2026, 3, 1, 0, 0, tzinfo=UTC)


def create_mock_session(account: Account, **overrides) -> Session:
    defaults = {
        "id": uuid7(),
        "account_id": account.id,
        "token_hash": "h",
        "expires_at": DAYTIME + timedelta(hours=8),
        "ip_address": "203.0.113.10",
        "user_agent": CHROME_WINDOWS,
        "created_at": DAYTIME,
    }
    defaults.update(overrides)
    return Session(**defaults)


@pytest.fixture
def account():
    return Account(
        id=uuid7(),
        email="e@x.test",
        first_name="Eru",
        last_name="Potae",
        auth_mode=AuthMode.LOCAL,
    )


@pytest.fixture
def history_loader():
    return AsyncMock()


@pytest.fixture
def notifications():
    return AsyncMock()


@pytest.fixture
def monitor(history_loader, mock_audit, notifications, mock_logger):
    return SuspiciousLoginMonitor(
        history_loader=history_loader,
        audit=mock_audit,
        notifications=notifications,
        fingerprinter=UserAgentDeviceFingerprinter(),
        usual_hours=UsualHours(),
        logger=mock_logger,
    )


@pytest.mark.unit
class TestSuspiciousLoginCheck:
    """Test check()."""

    @pytest.mark.asyncio
    async def test_new_device_reported(
        self, monitor, account, history_loader, mock_audit, notifications
    ):
        # Arrange
        history_loader.return_value = [create_mock_session(account)]
        session = create_mock_session(account, user_agent=SAFARI_IPHONE)
        client = ClientContext(ip_address="203.0.113.10", user_agent=SAFARI_IPHONE)

        # Act
        assessment = await monitor.check(
            account=account, session=session, client=client
        )

        # Assert
        assert assessment.reasons == (SuspicionReason.NEW_DEVICE,)
        history_loader.assert_awaited_once_with(account.id, session.id, 20)
        assert audited_actions(mock_audit) == [
            AuditAction.SUSPICIOUS_LOGIN_DETECTED
        ]
        assert mock_audit.append.call_args.kwargs["metadata"]["reasons"] == [
            "new_device"
        ]
        alert = notifications.send_suspicious_login_alert.call_args.kwargs
        assert alert["email"] == "e@x.test"
        assert alert["device"].startswith("Mobile Safari")

    @pytest.mark.asyncio
    async def test_familiar_login_quiet(
        self, monitor, account, history_loader, mock_audit, notifications
    ):
        history_loader.return_value = [create_mock_session(account)]
        session = create_mock_session(account, ip_address="203.0.113.99")
        client = ClientContext(ip_address="203.0.113.99", user_agent=CHROME_WINDOWS)

        assessment = await monitor.check(
            account=account, session=session, client=client
        )

        assert assessment.suspicious is False
        mock_audit.append.assert_not_awaited()
        notifications.send_suspicious_login_alert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_loader_failure_swallowed_and_logged(
        self, monitor, account, history_loader, mock_logger
    ):
        history_loader.side_effect = RuntimeError("db gone")

        assessment = await monitor.check(
            account=account,
            session=create_mock_session(account),
            client=ClientContext(),
        )

        assert assessment is None
        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args.args[0] == "suspicious_login_check_failed"

    @pytest.mark.asyncio
    async def test_dispatch_runs_in_background(
        self, monitor, account, history_loader
    ):
        history_loader.return_value = []
        session = create_mock_session(account)

        task = monitor.dispatch(
            account=account,
            session=session,
            client=ClientContext(ip_address="203.0.113.10"),
        )
        await monitor.drain()

        assert task.done()
        assert task.result().suspicious is False
        assert monitor.pending == 0


@pytest.mark.unit
class TestSuspiciousLoginLocation:
    """check() with a location enricher."""

    @pytest.fixture
    def locator(self):
        places = {
            "203.0.113.10": GeoLocation(city="Auckland", country_code="NZ"),
            "198.51.100.20": GeoLocation(city="Sydney", country_code="AU"),
        }
        locator = AsyncMock()
        locator.enrich.side_effect = lambda ip: places.get(ip, GeoLocation())
        return locator

    @pytest.fixture
    def located_monitor(
        self, history_loader, mock_audit, notifications, mock_logger, locator
    ):
        return SuspiciousLoginMonitor(
            history_loader=history_loader,
            audit=mock_audit,
            notifications=notifications,
            fingerprinter=UserAgentDeviceFingerprinter(),
            usual_hours=UsualHours(),
            logger=mock_logger,
            locator=locator,
        )

    @pytest.mark.asyncio
    async def test_impossible_travel_reported(
        self, located_monitor, account, history_loader, mock_audit, notifications
    ):
        # Arrange: two Auckland logins, then Sydney an hour later
        history_loader.return_value = [
            create_mock_session(account, created_at=DAYTIME - timedelta(hours=1)),
            create_mock_session(account, created_at=DAYTIME - timedelta(days=1)),
        ]
        session = create_mock_session(account, ip_address="198.51.100.20")
        client = ClientContext(ip_address="198.51.100.20", user_agent=CHROME_WINDOWS)

        # Act
        assessment = await located_monitor.check(
            account=account, session=session, client=client
        )

        # Assert
        assert assessment.reasons == (
            SuspicionReason.NEW_ORIGIN,
            SuspicionReason.NEW_LOCATION,
            SuspicionReason.IMPOSSIBLE_TRAVEL,
        )
        metadata = mock_audit.append.call_args.kwargs["metadata"]
        assert metadata["location"] == "Sydney, AU"
        assert metadata["reasons"] == [
            "new_origin",
            "new_location",
            "impossible_travel",
        ]
        alert = notifications.send_suspicious_login_alert.call_args.kwargs
        assert alert["location"] == "Sydney, AU"

    @pytest.mark.asyncio
    async def test_each_address_resolved_once(
        self, located_monitor, account, history_loader, locator
    ):
        history_loader.return_value = [
            create_mock_session(account, created_at=DAYTIME - timedelta(hours=h))
            for h in range(1, 4)
        ]
        session = create_mock_session(account)
        client = ClientContext(ip_address="203.0.113.10", user_agent=CHROME_WINDOWS)

        assessment = await located_monitor.check(
            account=account, session=session, client=client
        )

        assert assessment.suspicious is False
        locator.enrich.assert_awaited_once_with("203.0.113.10")


@pytest.mark.unit
class TestDeviceFingerprinter:
    """Test UserAgentDeviceFingerprinter."""

    def test_browser_on_os(self):
        assert UserAgentDeviceFingerprinter().fingerprint(CHROME_WINDOWS) == (
            "Chrome on Windows"
        )

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_agent(self, value):
        assert UserAgentDeviceFingerprinter().fingerprint(value) is None
