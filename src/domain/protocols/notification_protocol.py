"""Notification protocol (port).

Outbound delivery (email, SMS) is outside this service; the port lets the
application layer hand over the messages it would send.
"""

from typing import Protocol

from src.domain.security import LoginAssessment


class NotificationProtocol(Protocol):
    """Account owner notifications.

    Implementations:
        - LoggingNotificationService: records the message in the log only

    Raw tokens are passed in so the delivery channel can build links; they
    must not be logged.
    """

    async def send_activation(self, *, email: str, name: str, token: str) -> None:
        """Invite the owner to set a local password."""
        ...

    async def send_password_reset(
        self, *, email: str, name: str, token: str
    ) -> None:
        """Send a password reset link."""
        ...

    async def send_suspicious_login_alert(
        self,
        *,
        email: str,
        name: str,
        assessment: LoginAssessment,
        ip_address: str | None,
        device: str | None,
        location: str | None = None,
    ) -> None:
        """Warn the owner about an unusual login."""
        ...
