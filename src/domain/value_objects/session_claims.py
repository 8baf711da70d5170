"""Session token claims."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True, kw_only=True)
class SessionClaims:
    """Claims carried by a signed session token.

    Attributes:
        account_id: Subject (sub claim).
        session_id: Durable session record (sid claim).
        role: Account role at issue time.
        issued_at: iat claim.
        expires_at: exp claim.
        token_id: Random jti claim.
    """

    account_id: UUID
    session_id: UUID
    role: str
    issued_at: datetime
    expires_at: datetime
    token_id: str


@dataclass(frozen=True, slots=True, kw_only=True)
class IssuedSessionToken:
    """Freshly signed session token.

    Attributes:
        token: Raw compact JWT (only ever handed to the client).
        token_hash: SHA-256 hex of the token (stored on the session).
        claims: Claims encoded into the token.
    """

    token: str
    token_hash: str
    claims: SessionClaims
