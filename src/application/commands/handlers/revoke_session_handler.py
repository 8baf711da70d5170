"""Revoke session handler.

Revocation is idempotent: revoking an unknown or already revoked session
succeeds with revoked=False and writes no audit entry.
"""

from src.application.commands.auth_commands import RevokeSession
from src.core.result import Result, Success
from src.domain.enums import AuditAction
from src.domain.protocols import AuditProtocol, LoggerProtocol, SessionRepository


class RevokeSessionHandler:
    """Handler for RevokeSession command (logout and operator revocation)."""

    def __init__(
        self,
        *,
        session_repo: SessionRepository,
        audit: AuditProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._session_repo = session_repo
        self._audit = audit
        self._logger = logger

    async def handle(self, cmd: RevokeSession) -> Result[bool, None]:
        """Handle RevokeSession command.

        Returns:
            Success(True) if this call revoked the session, Success(False)
            if it was unknown or already revoked.
        """
        revoked = await self._session_repo.revoke(
            cmd.session_id, revoked_by=cmd.revoked_by, reason=cmd.reason
        )
        if not revoked:
            return Success(value=False)

        action = AuditAction.LOGOUT if cmd.is_logout else AuditAction.SESSION_REVOKED
        await self._audit.append(
            actor_id=cmd.revoked_by,
            action=action,
            resource_type="session",
            resource_id=str(cmd.session_id),
            ip_address=cmd.client.ip_address,
            user_agent=cmd.client.user_agent,
            metadata={"account_id": str(cmd.account_id), "reason": cmd.reason},
        )
        self._logger.info(
            "session_revoked",
            session_id=str(cmd.session_id),
            account_id=str(cmd.account_id),
            reason=cmd.reason,
        )
        return Success(value=True)
