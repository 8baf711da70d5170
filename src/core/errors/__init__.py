"""Core errors package.

Usage:
    from src.core.errors import DomainError, ValidationError, NotFoundError
"""

from src.core.errors.common_errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    IntegrityError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from src.core.errors.domain_error import DomainError

__all__ = [
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "AuthenticationError",
    "AuthorizationError",
    "UpstreamError",
    "IntegrityError",
]
