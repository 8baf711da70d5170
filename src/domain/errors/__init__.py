"""Domain errors package.

Usage:
    from src.domain.errors import AuditError, LoginError, SessionError
"""

from src.domain.errors.audit_error import AuditError
from src.domain.errors.login_error import LoginError
from src.domain.errors.rate_limit_error import RateLimitError
from src.domain.errors.session_error import SessionError

__all__ = [
    "AuditError",
    "LoginError",
    "RateLimitError",
    "SessionError",
]
