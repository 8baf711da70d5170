"""SingleUseTokenRepository - SQLAlchemy implementation.

Adapter for hexagonal architecture.
Maps between domain SingleUseToken entities and the single_use_tokens table.

consume() does not commit. The caller commits it together with the account
change the token authorizes (AccountRepository.update commits the shared
session), so a consumed token and its password change land atomically.
"""

from datetime import datetime
from typing import Any, cast
from uuid import UUID

from sqlalchemy import and_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import SingleUseToken
from src.domain.enums import TokenPurpose
from src.infrastructure.persistence.models.single_use_token import (
    SingleUseToken as SingleUseTokenModel,
)

SUPERSEDED_MARKER = "superseded"


class SingleUseTokenRepository:
    """SQLAlchemy implementation of SingleUseTokenRepository protocol.

    This class does NOT inherit from the protocol (structural typing).

    Attributes:
        session: SQLAlchemy async session for database operations.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def save(self, token: SingleUseToken) -> None:
        """Insert a new token.

        Args:
            token: Domain token entity (hash only, never the raw token).
        """
        self.session.add(self._to_model(token))
        await self.session.commit()

    async def find_by_hash(
        self, token_hash: str, purpose: TokenPurpose
    ) -> SingleUseToken | None:
        """Find a token by stored hash and purpose.

        Args:
            token_hash: Keyed hash of the presented token.
            purpose: Expected purpose.

        Returns:
            SingleUseToken if found (used or expired included), None otherwise.
        """
        stmt = (
            select(SingleUseTokenModel)
            .where(
                and_(
                    SingleUseTokenModel.token_hash == token_hash,
                    SingleUseTokenModel.purpose == purpose.value,
                )
            )
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        token_model = result.scalar_one_or_none()

        if token_model is None:
            return None

        return self._to_domain(token_model)

    async def consume(
        self,
        token_hash: str,
        purpose: TokenPurpose,
        *,
        used_ip: str | None,
        now: datetime,
    ) -> UUID | None:
        """Mark a valid token used in one conditional UPDATE.

        Only the first of any number of concurrent callers matches the
        ``used_at IS NULL`` guard. Not committed here.

        Args:
            token_hash: Keyed hash of the presented token.
            purpose: Expected purpose.
            used_ip: Client IP consuming the token.
            now: Reference time for the expiry check.

        Returns:
            UUID | None: Owning account id, or None if the token is unknown,
                used or expired.
        """
        stmt = (
            update(SingleUseTokenModel)
            .where(
                and_(
                    SingleUseTokenModel.token_hash == token_hash,
                    SingleUseTokenModel.purpose == purpose.value,
                    SingleUseTokenModel.used_at.is_(None),
                    SingleUseTokenModel.expires_at > now,
                )
            )
            .values(used_at=now, used_ip=used_ip)
            .returning(SingleUseTokenModel.account_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        account_id = result.scalar_one_or_none()
        await self.session.flush()
        return account_id

    async def supersede_unused(
        self, account_id: UUID, purpose: TokenPurpose, *, now: datetime
    ) -> int:
        """Invalidate every outstanding token of one purpose for an account.

        Args:
            account_id: Owning account.
            purpose: Token purpose to supersede.
            now: Time recorded as used_at.

        Returns:
            int: Number of tokens superseded.
        """
        stmt = (
            update(SingleUseTokenModel)
            .where(
                and_(
                    SingleUseTokenModel.account_id == account_id,
                    SingleUseTokenModel.purpose == purpose.value,
                    SingleUseTokenModel.used_at.is_(None),
                )
            )
            .values(used_at=now, used_ip=SUPERSEDED_MARKER)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()

        return cast(Any, result).rowcount or 0

    def _to_domain(self, token_model: SingleUseTokenModel) -> SingleUseToken:
        return SingleUseToken(
            id=token_model.id,
            account_id=token_model.account_id,
            purpose=TokenPurpose(token_model.purpose),
            token_hash=token_model.token_hash,
            expires_at=token_model.expires_at,
            requested_ip=token_model.requested_ip,
            used_at=token_model.used_at,
            used_ip=token_model.used_ip,
            created_at=token_model.created_at,
        )

    def _to_model(self, token: SingleUseToken) -> SingleUseTokenModel:
        return SingleUseTokenModel(
            id=token.id,
            account_id=token.account_id,
            purpose=token.purpose.value,
            token_hash=token.token_hash,
            expires_at=token.expires_at,
            requested_ip=token.requested_ip,
            used_at=token.used_at,
            used_ip=token.used_ip,
            created_at=token.created_at,
        )
