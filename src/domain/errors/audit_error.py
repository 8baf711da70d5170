"""Audit trail error types.

Returned when appending to or reading the hash-chained audit log fails.
Callers log these; an audit failure never fails the operation being audited.

Usage:
    from src.domain.errors import AuditError
    from src.core.enums import ErrorCode
    from src.core.result import Failure

    return Failure(AuditError(
        code=ErrorCode.AUDIT_RECORD_FAILED,
        message="Failed to append audit entry: database connection lost",
    ))
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class AuditError(DomainError):
    """Audit system failure.

    Attributes:
        code: AUDIT_RECORD_FAILED or AUDIT_QUERY_FAILED.
        message: Human-readable message.
        details: Additional context.
    """

    pass
