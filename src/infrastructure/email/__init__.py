"""Notification service implementations.

- LoggingNotificationService: logs instead of delivering (development/testing)
"""

from src.infrastructure.email.logging_notification_service import (
    LoggingNotificationService,
)

__all__ = ["LoggingNotificationService"]
