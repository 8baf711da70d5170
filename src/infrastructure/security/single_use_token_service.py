"""Single-use token service (activation and password reset).

Token Strategy:
    - 32 random bytes, hex encoded (64 characters)
    - Stored as HMAC-SHA256 keyed with a server-side salt, so a leaked
      table cannot be used to activate or reset accounts
    - Lifetime and one-time use are enforced by the repository
"""

import hashlib
import hmac
import secrets

from src.core.constants import TOKEN_BYTES


class SingleUseTokenService:
    """Generates single-use tokens and their storage hashes.

    Usage:
        service = SingleUseTokenService(salt=settings.token_hash_salt)
        raw_token, token_hash = service.generate()
    """

    def __init__(self, *, salt: str) -> None:
        if not salt:
            msg = "Token hash salt must not be empty"
            raise ValueError(msg)
        self._key = salt.encode("utf-8")

    def generate(self) -> tuple[str, str]:
        """Create a token.

        Returns:
            tuple[str, str]: (64-character hex token, keyed hash).
        """
        token = secrets.token_hex(TOKEN_BYTES)
        return token, self.hash_token(token)

    def hash_token(self, token: str) -> str:
        """Keyed SHA-256 of a presented token (hex)."""
        return hmac.new(
            self._key, token.strip().encode("utf-8"), hashlib.sha256
        ).hexdigest()
