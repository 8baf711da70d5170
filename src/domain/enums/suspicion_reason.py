"""Reasons a successful login is flagged as suspicious."""

from enum import Enum


class SuspicionReason(str, Enum):
    """Signal raised by the suspicious-login detector."""

    NEW_ORIGIN = "new_origin"
    """Client network (IPv4 /24, IPv6 /48) never seen for this account."""

    NEW_DEVICE = "new_device"
    """Browser/OS fingerprint never seen for this account."""

    ATYPICAL_HOUR = "atypical_hour"
    """Login outside the usual hours of the configured timezone."""

    NEW_LOCATION = "new_location"
    """Resolved city and country never seen for this account."""

    IMPOSSIBLE_TRAVEL = "impossible_travel"
    """Different country from the previous login within two hours."""
