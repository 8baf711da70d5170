"""Background suspicious-login monitor.

After a successful local login the monitor compares the new session with the
account's recent sessions and, when the login looks unusual, writes a
SUSPICIOUS_LOGIN_DETECTED audit entry and alerts the owner.

The check runs as a detached asyncio task so it never delays the login
response. Tasks are held in a set until they finish; the event loop only keeps
weak references to tasks. Every failure inside a task is logged and
swallowed: a broken monitor must never affect authentication.

Usage:
    monitor = SuspiciousLoginMonitor(
        history_loader=load_history,
        audit=audit,
        notifications=notifications,
        fingerprinter=fingerprinter,
        locator=locator,
        usual_hours=UsualHours(timezone="Pacific/Auckland"),
        logger=logger,
    )
    monitor.dispatch(account=account, session=session, client=client)
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import TypeAlias
from uuid import UUID

from src.core.result import Failure
from src.domain.entities import Account, Session
from src.domain.enums import AuditAction
from src.domain.protocols import (
    AuditProtocol,
    DeviceFingerprintProtocol,
    GeoLocation,
    LocationEnricherProtocol,
    LoggerProtocol,
    NotificationProtocol,
)
from src.domain.security.suspicious_login import (
    LoginAssessment,
    LoginObservation,
    UsualHours,
    assess_login,
)
from src.domain.value_objects import ClientContext

HISTORY_LIMIT = 20

SessionHistoryLoader: TypeAlias = Callable[[UUID, UUID, int], Awaitable[list[Session]]]
"""(account_id, exclude_session_id, limit) -> recent sessions, newest first.

The loader opens its own database session: the request's session is closed
by the time the task runs.
"""


class SuspiciousLoginMonitor:
    """Dispatches and runs suspicious-login checks."""

    def __init__(
        self,
        *,
        history_loader: SessionHistoryLoader,
        audit: AuditProtocol,
        notifications: NotificationProtocol,
        fingerprinter: DeviceFingerprintProtocol,
        usual_hours: UsualHours,
        logger: LoggerProtocol,
        locator: LocationEnricherProtocol | None = None,
        history_limit: int = HISTORY_LIMIT,
    ) -> None:
        self._history_loader = history_loader
        self._audit = audit
        self._notifications = notifications
        self._fingerprinter = fingerprinter
        self._locator = locator
        self._usual_hours = usual_hours
        self._logger = logger
        self._history_limit = history_limit
        self._tasks: set[asyncio.Task[LoginAssessment | None]] = set()

    @property
    def pending(self) -> int:
        """Checks still running."""
        return len(self._tasks)

    def dispatch(
        self,
        *,
        account: Account,
        session: Session,
        client: ClientContext,
    ) -> asyncio.Task[LoginAssessment | None]:
        """Start a check in the background and return immediately.

        Args:
            account: Account that just logged in.
            session: Session issued by the login.
            client: Request origin of the login.

        Returns:
            The scheduled task (callers normally ignore it).
        """
        task = asyncio.create_task(
            self.check(account=account, session=session, client=client),
            name=f"suspicious-login-{session.id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for every dispatched check (shutdown and tests)."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def check(
        self,
        *,
        account: Account,
        session: Session,
        client: ClientContext,
    ) -> LoginAssessment | None:
        """Assess one login and act on the verdict.

        Returns:
            The assessment, or None when the check itself failed.
        """
        try:
            history = await self._history_loader(
                account.id, session.id, self._history_limit
            )
            locations = await self._locate(
                [client.ip_address, *(previous.ip_address for previous in history)]
            )
            attempt = self._observe(
                client.ip_address,
                client.user_agent,
                session.created_at,
                locations,
            )
            observations = [
                self._observe(
                    previous.ip_address,
                    previous.user_agent,
                    previous.created_at,
                    locations,
                )
                for previous in history
            ]
            assessment = assess_login(observations, attempt, self._usual_hours)
            if assessment.suspicious:
                await self._report(
                    account=account,
                    session=session,
                    client=client,
                    device=attempt.device,
                    location=attempt.location,
                    assessment=assessment,
                )
            return assessment
        except Exception as e:
            self._logger.error(
                "suspicious_login_check_failed",
                error=e,
                account_id=str(account.id),
                session_id=str(session.id),
            )
            return None

    async def _locate(self, addresses: list[str | None]) -> dict[str, GeoLocation]:
        """Resolve each distinct address once; empty without a locator."""
        if self._locator is None:
            return {}
        return {
            address: await self._locator.enrich(address)
            for address in dict.fromkeys(addresses)
            if address
        }

    def _observe(
        self,
        ip_address: str | None,
        user_agent: str | None,
        occurred_at: datetime,
        locations: dict[str, GeoLocation],
    ) -> LoginObservation:
        location = locations.get(ip_address or "", GeoLocation())
        return LoginObservation(
            ip_address=ip_address,
            device=self._fingerprinter.fingerprint(user_agent),
            occurred_at=occurred_at,
            location=location.label,
            country_code=location.country_code,
        )

    async def _report(
        self,
        *,
        account: Account,
        session: Session,
        client: ClientContext,
        device: str | None,
        location: str | None,
        assessment: LoginAssessment,
    ) -> None:
        reasons = [reason.value for reason in assessment.reasons]
        self._logger.warning(
            "suspicious_login_detected",
            account_id=str(account.id),
            session_id=str(session.id),
            reasons=reasons,
        )
        audit_result = await self._audit.append(
            actor_id=str(account.id),
            actor_email=account.email,
            action=AuditAction.SUSPICIOUS_LOGIN_DETECTED,
            resource_type="session",
            resource_id=str(session.id),
            ip_address=client.ip_address,
            user_agent=client.user_agent,
            metadata={"reasons": reasons, "device": device, "location": location},
        )
        if isinstance(audit_result, Failure):
            self._logger.warning(
                "suspicious_login_audit_failed",
                account_id=str(account.id),
                error_code=audit_result.error.code.value,
            )
        await self._notifications.send_suspicious_login_alert(
            email=account.email,
            name=account.full_name,
            assessment=assessment,
            ip_address=client.ip_address,
            device=device,
            location=location,
        )
