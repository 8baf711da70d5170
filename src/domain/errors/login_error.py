"""Login failure error.

Carries the extra data the HTTP layer needs for 423 and 429 responses. The
message is deliberately generic for invalid credentials: the detailed reason
only goes to the audit log.
"""

from dataclasses import dataclass
from datetime import datetime

from src.core.errors import AuthenticationError


@dataclass(frozen=True, slots=True, kw_only=True)
class LoginError(AuthenticationError):
    """Login rejected.

    Attributes:
        code: INVALID_CREDENTIALS, ACCOUNT_LOCKED or RATE_LIMITED.
        message: Client-safe message.
        retry_after: Seconds until another attempt is allowed (RATE_LIMITED).
        locked_until: Lock expiry (ACCOUNT_LOCKED).
    """

    retry_after: int | None = None
    locked_until: datetime | None = None
