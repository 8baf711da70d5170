"""Session validation error."""

from dataclasses import dataclass

from src.core.errors import AuthenticationError


@dataclass(frozen=True, slots=True, kw_only=True)
class SessionError(AuthenticationError):
    """Session token rejected.

    Attributes:
        code: TOKEN_INVALID, TOKEN_EXPIRED, SESSION_NOT_FOUND,
            SESSION_REVOKED, SESSION_EXPIRED or SESSION_VERIFY_TIMEOUT.
        message: Client-safe message.
    """

    @property
    def reason(self) -> str:
        """Short reason string reported by validate_session."""
        return self.code.value
