"""SessionRepository protocol (port)."""

from typing import Protocol
from uuid import UUID

from src.domain.entities import Session


class SessionRepository(Protocol):
    """Session persistence port.

    Implementations:
        - SessionRepository (SQLAlchemy): src/infrastructure/persistence/repositories/
    """

    async def save(self, session: Session) -> None:
        """Insert a new session."""
        ...

    async def find_by_id(self, session_id: UUID) -> Session | None:
        """Find session by id (revoked and expired sessions included)."""
        ...

    async def touch(self, session_id: UUID) -> None:
        """Record activity on a session (last_active_at = now)."""
        ...

    async def revoke(self, session_id: UUID, *, revoked_by: str, reason: str) -> bool:
        """Revoke one session.

        Returns:
            bool: True if an active session was revoked.
        """
        ...

    async def revoke_all_for_account(
        self,
        account_id: UUID,
        *,
        revoked_by: str,
        reason: str,
        commit: bool = True,
    ) -> int:
        """Revoke every unrevoked session of an account.

        With commit=False the revocation stays in the caller's transaction
        and commits with its next write.

        Returns:
            int: Number of sessions revoked.
        """
        ...

    async def list_recent_for_account(
        self,
        account_id: UUID,
        *,
        limit: int,
        exclude_session_id: UUID | None = None,
    ) -> list[Session]:
        """Most recent sessions of an account, newest first (login history)."""
        ...
