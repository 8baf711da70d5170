"""Request origin details captured at login."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class ClientContext:
    """Where a request came from.

    Attributes:
        ip_address: Client IP address (None when unknown).
        user_agent: Raw User-Agent header.
        application: Tag of the calling application (portal, mobile, ...).
    """

    ip_address: str | None = None
    user_agent: str | None = None
    application: str | None = None
