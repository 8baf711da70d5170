"""Signed session token service (adapter).

Implements SessionTokenProtocol with PyJWT and an asymmetric key pair loaded
through ``cryptography``. Only the holder of the private key can mint
tokens; any service with the public key can check them.

Claims:
    sub: account id
    sid: durable session id
    role: account role at issue time
    iss, aud: issuer and audience list
    iat, exp: issue and expiry (seconds)
    jti: random token id

Header:
    kid: key identifier, so keys can be rotated
"""

import hashlib
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.enums import AccountRole
from src.domain.errors import SessionError
from src.domain.value_objects import IssuedSessionToken, SessionClaims

REQUIRED_CLAIMS = ["sub", "sid", "role", "iss", "aud", "iat", "exp", "jti"]


class JWTSessionTokenService:
    """Session token issue and decode.

    Usage:
        from src.core.container import get_session_token_service

        tokens = get_session_token_service()
        issued = tokens.issue(account_id=account.id, session_id=session_id,
                              role=account.role)
        result = tokens.decode(issued.token)
    """

    def __init__(
        self,
        *,
        private_key_pem: str,
        public_key_pem: str,
        algorithm: str,
        key_id: str,
        issuer: str,
        audiences: list[str],
        ttl: timedelta,
    ) -> None:
        """Initialize the service.

        Args:
            private_key_pem: PEM private key used to sign.
            public_key_pem: PEM public key used to verify.
            algorithm: Asymmetric JWS algorithm (RS256, ES256, EdDSA...).
            key_id: kid header value.
            issuer: iss claim.
            audiences: aud claim values (at least one).
            ttl: Token lifetime.

        Raises:
            ValueError: If a key cannot be parsed or no audience is given.
        """
        if not audiences:
            msg = "At least one JWT audience is required"
            raise ValueError(msg)

        self._private_key = serialization.load_pem_private_key(
            private_key_pem.encode("utf-8"), password=None
        )
        self._public_key = serialization.load_pem_public_key(
            public_key_pem.encode("utf-8")
        )
        self._algorithm = algorithm
        self._key_id = key_id
        self._issuer = issuer
        self._audiences = audiences
        self._ttl = ttl

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(
        self, *, account_id: UUID, session_id: UUID, role: AccountRole
    ) -> IssuedSessionToken:
        """Sign a new session token.

        Returns:
            IssuedSessionToken: Raw token, its SHA-256 hex and the claims.
        """
        now = datetime.now(UTC).replace(microsecond=0)
        expires_at = now + self._ttl
        token_id = uuid4().hex

        payload = {
            "sub": str(account_id),
            "sid": str(session_id),
            "role": role.value,
            "iss": self._issuer,
            "aud": self._audiences,
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
            "jti": token_id,
        }
        token: str = jwt.encode(
            payload,
            self._private_key,  # type: ignore[arg-type]
            algorithm=self._algorithm,
            headers={"kid": self._key_id},
        )
        return IssuedSessionToken(
            token=token,
            token_hash=self.hash_token(token),
            claims=SessionClaims(
                account_id=account_id,
                session_id=session_id,
                role=role.value,
                issued_at=now,
                expires_at=expires_at,
                token_id=token_id,
            ),
        )

    def decode(self, token: str) -> Result[SessionClaims, SessionError]:
        """Verify signature, expiry, issuer, audience and required claims.

        Returns:
            Result[SessionClaims, SessionError]: TOKEN_EXPIRED for an expired
                token, TOKEN_INVALID for anything else wrong.
        """
        try:
            header = jwt.get_unverified_header(token)
            if header.get("kid") != self._key_id:
                return Failure(error=_invalid("Unknown signing key"))

            payload = jwt.decode(
                token,
                self._public_key,  # type: ignore[arg-type]
                algorithms=[self._algorithm],
                audience=self._audiences,
                issuer=self._issuer,
                options={"require": REQUIRED_CLAIMS},
            )
            claims = SessionClaims(
                account_id=UUID(str(payload["sub"])),
                session_id=UUID(str(payload["sid"])),
                role=str(payload["role"]),
                issued_at=datetime.fromtimestamp(int(payload["iat"]), UTC),
                expires_at=datetime.fromtimestamp(int(payload["exp"]), UTC),
                token_id=str(payload["jti"]),
            )
        except ExpiredSignatureError:
            return Failure(
                error=SessionError(
                    code=ErrorCode.TOKEN_EXPIRED,
                    message="Session token has expired",
                )
            )
        except (InvalidTokenError, ValueError, TypeError):
            return Failure(error=_invalid("Session token is invalid"))

        return Success(value=claims)

    def hash_token(self, token: str) -> str:
        """SHA-256 hex digest of the raw token."""
        return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _invalid(message: str) -> SessionError:
    return SessionError(code=ErrorCode.TOKEN_INVALID, message=message)


def generate_rsa_key_pair() -> tuple[str, str]:
    """Create a throwaway RSA key pair for development and tests.

    Returns:
        tuple[str, str]: (private PEM, public PEM).
    """
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")
    public_pem = (
        private_key.public_key()
        .public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode("utf-8")
    )
    return private_pem, public_pem
