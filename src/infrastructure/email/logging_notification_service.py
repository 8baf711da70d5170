"""Notification service stub.

Logs the notifications that would be delivered to account owners. Links are
built from Settings.app_base_url; raw tokens are never written to the log,
only the link path they belong to.

Replace with a real delivery adapter (SES, SendGrid...) implementing
NotificationProtocol when outbound email is in scope.
"""

from src.domain.protocols import LoggerProtocol
from src.domain.security import LoginAssessment


class LoggingNotificationService:
    """NotificationProtocol implementation that only logs.

    Attributes:
        _logger: Logger protocol implementation (from container).
        _base_url: Portal base URL used to describe links.
    """

    def __init__(self, *, logger: LoggerProtocol, base_url: str) -> None:
        self._logger = logger
        self._base_url = base_url.rstrip("/")

    async def send_activation(self, *, email: str, name: str, token: str) -> None:
        self._logger.info(
            "notification_activation",
            recipient=email,
            recipient_name=name,
            link=f"{self._base_url}/activate",
        )

    async def send_password_reset(
        self, *, email: str, name: str, token: str
    ) -> None:
        self._logger.info(
            "notification_password_reset",
            recipient=email,
            recipient_name=name,
            link=f"{self._base_url}/reset-password",
        )

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
        self._logger.info(
            "notification_suspicious_login",
            recipient=email,
            recipient_name=name,
            reasons=[reason.value for reason in assessment.reasons],
            ip_address=ip_address,
            device=device,
            location=location,
        )
