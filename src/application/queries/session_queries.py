"""Session queries (CQRS read operations)."""

from dataclasses import dataclass


@dataclass(frozen=True, kw_only=True)
class ValidateSession:
    """Check a session token presented by another service.

    Attributes:
        token: Raw session token (cookie value or bearer token).
    """

    token: str
