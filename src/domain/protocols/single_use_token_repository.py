"""SingleUseTokenRepository protocol (port)."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities import SingleUseToken
from src.domain.enums import TokenPurpose


class SingleUseTokenRepository(Protocol):
    """Activation and password reset token persistence port.

    Consumption contract:
        consume() MUST be one conditional statement (used_at IS NULL AND
        expires_at > now) so exactly one concurrent caller wins. It runs in
        the caller's transaction and is committed together with the account
        change it authorizes.
    """

    async def save(self, token: SingleUseToken) -> None:
        """Insert a new token."""
        ...

    async def find_by_hash(
        self, token_hash: str, purpose: TokenPurpose
    ) -> SingleUseToken | None:
        """Find a token by its stored hash (used and expired included)."""
        ...

    async def consume(
        self,
        token_hash: str,
        purpose: TokenPurpose,
        *,
        used_ip: str | None,
        now: datetime,
    ) -> UUID | None:
        """Mark a valid token used.

        Returns:
            UUID | None: Account id when this call consumed the token, None
                when the token is unknown, already used or expired.
        """
        ...

    async def supersede_unused(
        self, account_id: UUID, purpose: TokenPurpose, *, now: datetime
    ) -> int:
        """Mark every unused token of that purpose as used ("superseded").

        Returns:
            int: Number of tokens superseded.
        """
        ...
