"""Suspicious-login detection rules.

Pure function of an account's login history and the new attempt. The caller
supplies observations (already fingerprinted) and acts on the assessment;
nothing here touches storage, the clock or the network.

Signals:
    - NEW_ORIGIN: the attempt's network is absent from history
    - NEW_DEVICE: the attempt's device fingerprint is absent from history
    - NEW_LOCATION: the attempt resolves to a city and country absent from
      history
    - IMPOSSIBLE_TRAVEL: a different country from the previous login less than
      two hours earlier
    - ATYPICAL_HOUR: local hour outside the usual window

An empty history never raises NEW_ORIGIN, NEW_DEVICE or NEW_LOCATION: a first
login has nothing to differ from. NEW_LOCATION also needs at least one
resolved location in history, and logins without a resolved country never
count as travel.
"""

import ipaddress
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from src.domain.enums import SuspicionReason

_IPV4_ORIGIN_PREFIX = 24
_IPV6_ORIGIN_PREFIX = 48
IMPOSSIBLE_TRAVEL_WINDOW = timedelta(hours=2)


@dataclass(frozen=True, slots=True, kw_only=True)
class LoginObservation:
    """One login as seen by the detector.

    Attributes:
        ip_address: Client IP, if known.
        device: Device fingerprint ("Chrome on Windows"), if known.
        occurred_at: Timezone-aware time of the login.
        location: Resolved "City, CC" label, if known.
        country_code: Resolved ISO country code, if known.
    """

    ip_address: str | None
    device: str | None
    occurred_at: datetime
    location: str | None = None
    country_code: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class UsualHours:
    """Local hours considered normal for logins.

    Attributes:
        timezone: IANA timezone name.
        start_hour: First usual hour (inclusive).
        end_hour: End of the usual window (exclusive).
    """

    timezone: str = "Pacific/Auckland"
    start_hour: int = 5
    end_hour: int = 23

    def contains(self, moment: datetime) -> bool:
        hour = moment.astimezone(ZoneInfo(self.timezone)).hour
        return self.start_hour <= hour < self.end_hour


@dataclass(frozen=True, slots=True, kw_only=True)
class LoginAssessment:
    """Detector verdict."""

    reasons: tuple[SuspicionReason, ...] = ()

    @property
    def suspicious(self) -> bool:
        return bool(self.reasons)


def origin_network(ip_address: str | None) -> str | None:
    """Collapse an IP address to its origin network.

    Args:
        ip_address: IPv4 or IPv6 address.

    Returns:
        str | None: Network in CIDR notation, or None for missing or
            unparseable input.
    """
    if not ip_address:
        return None
    try:
        address = ipaddress.ip_address(ip_address)
    except ValueError:
        return None
    prefix = _IPV4_ORIGIN_PREFIX if address.version == 4 else _IPV6_ORIGIN_PREFIX
    return str(ipaddress.ip_network(f"{address}/{prefix}", strict=False))


def assess_login(
    history: Sequence[LoginObservation],
    attempt: LoginObservation,
    usual_hours: UsualHours,
) -> LoginAssessment:
    """Decide whether a successful login deviates from history.

    Args:
        history: Prior logins of the same account (any order).
        attempt: The login being assessed.
        usual_hours: Window of normal local hours.

    Returns:
        LoginAssessment: Reasons found (empty when nothing is unusual).
    """
    reasons: list[SuspicionReason] = []

    if history:
        known_networks = {origin_network(seen.ip_address) for seen in history}
        network = origin_network(attempt.ip_address)
        if network is not None and network not in known_networks:
            reasons.append(SuspicionReason.NEW_ORIGIN)

        known_devices = {seen.device for seen in history if seen.device}
        if attempt.device and attempt.device not in known_devices:
            reasons.append(SuspicionReason.NEW_DEVICE)

        known_locations = {seen.location for seen in history if seen.location}
        if (
            attempt.location
            and known_locations
            and attempt.location not in known_locations
        ):
            reasons.append(SuspicionReason.NEW_LOCATION)

        if _travelled_too_fast(history, attempt):
            reasons.append(SuspicionReason.IMPOSSIBLE_TRAVEL)

    if not usual_hours.contains(attempt.occurred_at):
        reasons.append(SuspicionReason.ATYPICAL_HOUR)

    return LoginAssessment(reasons=tuple(reasons))


def _travelled_too_fast(
    history: Sequence[LoginObservation], attempt: LoginObservation
) -> bool:
    earlier = [seen for seen in history if seen.occurred_at <= attempt.occurred_at]
    if not attempt.country_code or not earlier:
        return False
    previous = max(earlier, key=lambda seen: seen.occurred_at)
    if not previous.country_code or previous.country_code == attempt.country_code:
        return False
    return attempt.occurred_at - previous.occurred_at < IMPOSSIBLE_TRAVEL_WINDOW
