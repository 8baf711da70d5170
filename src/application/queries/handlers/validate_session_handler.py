"""Validate session handler.

Flow:
1. Decode the token (signature, exp, iss, aud, required claims)
2. Load the durable session under a short timeout
3. Check existence, revocation, expiry and token hash
4. Record activity

Consumers that only need a yes/no use handle(); the admin surface uses
authenticate() to get the typed SessionError.
"""

import asyncio
import hmac
from dataclasses import dataclass
from datetime import UTC, datetime

from src.application.dtos.auth_dtos import SessionValidation
from src.application.queries.session_queries import ValidateSession
from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.entities import Session
from src.domain.errors import SessionError
from src.domain.protocols import LoggerProtocol, SessionRepository, SessionTokenProtocol
from src.domain.value_objects import SessionClaims


@dataclass(frozen=True, kw_only=True)
class VerifiedSession:
    """Claims plus the durable session they point at."""

    claims: SessionClaims
    session: Session


class ValidateSessionHandler:
    """Handler for ValidateSession query."""

    def __init__(
        self,
        *,
        session_repo: SessionRepository,
        session_tokens: SessionTokenProtocol,
        logger: LoggerProtocol,
        verify_timeout_seconds: float,
    ) -> None:
        self._session_repo = session_repo
        self._session_tokens = session_tokens
        self._logger = logger
        self._verify_timeout = verify_timeout_seconds

    async def handle(self, query: ValidateSession) -> Result[SessionValidation, None]:
        """Handle ValidateSession query.

        Returns:
            Always Success: SessionValidation(valid=True, ...) or
            SessionValidation(valid=False, reason=...).
        """
        match await self.authenticate(query.token):
            case Success(value=verified):
                return Success(
                    value=SessionValidation(
                        valid=True,
                        account_id=verified.claims.account_id,
                        session_id=verified.claims.session_id,
                        expires_at=verified.session.expires_at,
                        role=verified.claims.role,
                    )
                )
            case Failure(error=error):
                return Success(
                    value=SessionValidation(valid=False, reason=error.reason)
                )

    async def authenticate(self, token: str) -> Result[VerifiedSession, SessionError]:
        """Verify a token against its durable session.

        Returns:
            Success(VerifiedSession) or Failure(SessionError) with TOKEN_INVALID,
            TOKEN_EXPIRED, SESSION_NOT_FOUND, SESSION_REVOKED, SESSION_EXPIRED
            or SESSION_VERIFY_TIMEOUT.
        """
        # Step 1: Decode
        decoded = self._session_tokens.decode(token)
        if isinstance(decoded, Failure):
            return decoded
        claims = decoded.value

        # Step 2-4: Durable lookup
        try:
            async with asyncio.timeout(self._verify_timeout):
                session = await self._session_repo.find_by_id(claims.session_id)
                if session is None:
                    return Failure(
                        error=SessionError(
                            code=ErrorCode.SESSION_NOT_FOUND,
                            message="Session not found",
                        )
                    )
                error = self._check(session, claims, token)
                if error is not None:
                    return Failure(error=error)
                await self._session_repo.touch(session.id)
        except TimeoutError:
            self._logger.warning(
                "session_verify_timeout", session_id=str(claims.session_id)
            )
            return Failure(
                error=SessionError(
                    code=ErrorCode.SESSION_VERIFY_TIMEOUT,
                    message="Session could not be verified in time",
                )
            )

        return Success(value=VerifiedSession(claims=claims, session=session))

    def _check(
        self, session: Session, claims: SessionClaims, token: str
    ) -> SessionError | None:
        if session.is_revoked:
            return SessionError(
                code=ErrorCode.SESSION_REVOKED, message="Session has been revoked"
            )
        if session.is_expired(datetime.now(UTC)):
            return SessionError(
                code=ErrorCode.SESSION_EXPIRED, message="Session has expired"
            )
        token_hash = self._session_tokens.hash_token(token)
        if session.account_id != claims.account_id or not hmac.compare_digest(
            session.token_hash, token_hash
        ):
            return SessionError(
                code=ErrorCode.TOKEN_INVALID, message="Session token is invalid"
            )
        return None
