"""SessionRepository - SQLAlchemy implementation of SessionRepository protocol.

Adapter for hexagonal architecture.
Maps between domain Session entities and the sessions table.

Revocation is written as conditional UPDATEs (``revoked_at IS NULL``) so a
session is revoked at most once and concurrent revocations do not overwrite
the first actor and reason.
"""

from datetime import UTC, datetime
from typing import Any, cast
from uuid import UUID

from sqlalchemy import and_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import Session
from src.infrastructure.persistence.models.session import Session as SessionModel


class SessionRepository:
    """SQLAlchemy implementation of SessionRepository protocol.

    This class does NOT inherit from SessionRepository protocol
    (Protocol uses structural typing - duck typing with type safety).

    Attributes:
        session: SQLAlchemy async session for database operations.

    Example:
        >>> async with database.get_session() as db_session:
        ...     repo = SessionRepository(db_session)
        ...     found = await repo.find_by_id(session_id)
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def save(self, session: Session) -> None:
        """Insert a newly issued session.

        Args:
            session: Domain Session entity.
        """
        self.session.add(self._to_model(session))
        await self.session.commit()

    async def find_by_id(self, session_id: UUID) -> Session | None:
        """Find session by ID.

        Args:
            session_id: Session identifier (the sid claim).

        Returns:
            Session if found, None otherwise.
        """
        stmt = (
            select(SessionModel)
            .where(SessionModel.id == session_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        session_model = result.scalar_one_or_none()

        if session_model is None:
            return None

        return self._to_domain(session_model)

    async def touch(self, session_id: UUID) -> None:
        """Set last_active_at to now."""
        stmt = (
            update(SessionModel)
            .where(SessionModel.id == session_id)
            .values(last_active_at=datetime.now(UTC))
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
        await self.session.commit()

    async def revoke(self, session_id: UUID, *, revoked_by: str, reason: str) -> bool:
        """Revoke one session.

        Args:
            session_id: Session to revoke.
            revoked_by: Actor id or "system".
            reason: Why it was revoked.

        Returns:
            bool: True if this call revoked it, False if it was unknown or
                already revoked.
        """
        stmt = (
            update(SessionModel)
            .where(
                and_(
                    SessionModel.id == session_id,
                    SessionModel.revoked_at.is_(None),
                )
            )
            .values(
                revoked_at=datetime.now(UTC),
                revoked_by=revoked_by,
                revoked_reason=reason,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()

        return (cast(Any, result).rowcount or 0) > 0

    async def revoke_all_for_account(
        self,
        account_id: UUID,
        *,
        revoked_by: str,
        reason: str,
        commit: bool = True,
    ) -> int:
        """Revoke every unrevoked session of an account.

        Used on password reset, activation, cohort moves and rollback.

        Args:
            account_id: Owning account.
            revoked_by: Actor id or "system".
            reason: Why the sessions were revoked.
            commit: False leaves the revocation in the current transaction
                so it commits (or rolls back) with the caller's next write.

        Returns:
            int: Number of sessions revoked.
        """
        stmt = (
            update(SessionModel)
            .where(
                and_(
                    SessionModel.account_id == account_id,
                    SessionModel.revoked_at.is_(None),
                )
            )
            .values(
                revoked_at=datetime.now(UTC),
                revoked_by=revoked_by,
                revoked_reason=reason,
            )
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
            if commit:
                await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            raise

        # rowcount exists on CursorResult but mypy doesn't see it
        return cast(Any, result).rowcount or 0

    async def list_recent_for_account(
        self,
        account_id: UUID,
        *,
        limit: int,
        exclude_session_id: UUID | None = None,
    ) -> list[Session]:
        """Most recent sessions of an account, newest first.

        Revoked and expired sessions are included: this is login history.

        Args:
            account_id: Owning account.
            limit: Maximum sessions to return.
            exclude_session_id: Session to leave out (the one just created).

        Returns:
            list[Session]: Sessions ordered by created_at descending.
        """
        stmt = select(SessionModel).where(SessionModel.account_id == account_id)
        if exclude_session_id is not None:
            stmt = stmt.where(SessionModel.id != exclude_session_id)
        stmt = (
            stmt.order_by(SessionModel.created_at.desc())
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    def _to_domain(self, session_model: SessionModel) -> Session:
        """Convert database model to domain entity."""
        return Session(
            id=session_model.id,
            account_id=session_model.account_id,
            token_hash=session_model.token_hash,
            expires_at=session_model.expires_at,
            user_agent=session_model.user_agent,
            ip_address=session_model.ip_address,
            application=session_model.application,
            created_at=session_model.created_at,
            last_active_at=session_model.last_active_at,
            revoked_at=session_model.revoked_at,
            revoked_by=session_model.revoked_by,
            revoked_reason=session_model.revoked_reason,
        )

    def _to_model(self, session: Session) -> SessionModel:
        """Convert domain entity to database model."""
        return SessionModel(
            id=session.id,
            account_id=session.account_id,
            token_hash=session.token_hash,
            expires_at=session.expires_at,
            user_agent=session.user_agent,
            ip_address=session.ip_address,
            application=session.application,
            created_at=session.created_at,
            last_active_at=session.last_active_at,
            revoked_at=session.revoked_at,
            revoked_by=session.revoked_by,
            revoked_reason=session.revoked_reason,
        )
