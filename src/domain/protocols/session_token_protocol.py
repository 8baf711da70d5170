"""Session token protocol (port).

Issues and decodes signed session tokens. Durable session state lives in the
SessionRepository; this port only covers the cryptographic half.
"""

from typing import Protocol
from uuid import UUID

from src.core.result import Result
from src.domain.enums import AccountRole
from src.domain.errors import SessionError
from src.domain.value_objects import IssuedSessionToken, SessionClaims


class SessionTokenProtocol(Protocol):
    """Signed session token interface.

    Implementations:
        - JWTSessionTokenService: PyJWT with an asymmetric key pair
    """

    def issue(
        self, *, account_id: UUID, session_id: UUID, role: AccountRole
    ) -> IssuedSessionToken:
        """Sign a new token.

        Returns:
            IssuedSessionToken: Raw token, its SHA-256 hex and decoded claims.
        """
        ...

    def decode(self, token: str) -> Result[SessionClaims, SessionError]:
        """Check signature, expiry, issuer, audience and required claims.

        Returns:
            Result[SessionClaims, SessionError]: Failure with TOKEN_EXPIRED
                or TOKEN_INVALID.
        """
        ...

    def hash_token(self, token: str) -> str:
        """SHA-256 hex digest stored alongside the session."""
        ...
