"""Core shared kernel.

Foundations used across every architectural layer:
- Result types for railway-oriented programming
- Error taxonomy returned inside Failure values
- Configuration and dependency container

The core module has NO dependencies on other application layers
(the container wires them together lazily).
"""

from src.core.enums import ErrorCode
from src.core.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    IntegrityError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from src.core.result import Failure, Result, Success

__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "DomainError",
    "ErrorCode",
    "Failure",
    "IntegrityError",
    "NotFoundError",
    "Result",
    "Success",
    "UpstreamError",
    "ValidationError",
]
