"""Machine-readable error codes.

Codes follow the ENTITY_ACTION_REASON naming convention and travel inside
DomainError instances returned through Result types.

Categories:
- Validation (INVALID_*, PASSWORD_*)
- Resources (*_NOT_FOUND)
- Conflicts (*_ALREADY_*, ACCOUNT_NOT_MIGRATED)
- Authentication (INVALID_CREDENTIALS, ACCOUNT_LOCKED, TOKEN_*, SESSION_*)
- Authorization (PERMISSION_DENIED)
- Infrastructure (AUDIT_*, RATE_LIMIT_*, UPSTREAM_*)
"""

from enum import Enum


class ErrorCode(Enum):
    """Error codes shared by every layer."""

    # Validation errors
    INVALID_EMAIL = "invalid_email"
    INVALID_PASSWORD = "invalid_password"
    PASSWORD_TOO_WEAK = "password_too_weak"
    INVALID_TIME_WINDOW = "invalid_time_window"
    VALIDATION_FAILED = "validation_failed"

    # Resource errors
    ACCOUNT_NOT_FOUND = "account_not_found"
    TOKEN_NOT_FOUND = "token_not_found"
    PROVIDER_USER_NOT_FOUND = "provider_user_not_found"

    # Conflict errors
    TOKEN_ALREADY_USED = "token_already_used"
    ACCOUNT_NOT_MIGRATED = "account_not_migrated"
    ACCOUNT_ALREADY_ACTIVE = "account_already_active"
    COHORT_ALREADY_COMPLETE = "cohort_already_complete"
    COHORT_OUT_OF_ORDER = "cohort_out_of_order"

    # Authentication errors
    INVALID_CREDENTIALS = "invalid_credentials"
    ACCOUNT_LOCKED = "account_locked"
    RATE_LIMITED = "rate_limited"
    TOKEN_INVALID = "token_invalid"
    TOKEN_EXPIRED = "token_expired"
    SESSION_NOT_FOUND = "session_not_found"
    SESSION_REVOKED = "session_revoked"
    SESSION_EXPIRED = "session_expired"
    SESSION_VERIFY_TIMEOUT = "session_verify_timeout"

    # Authorization errors
    PERMISSION_DENIED = "permission_denied"

    # Audit trail errors
    AUDIT_RECORD_FAILED = "audit_record_failed"
    AUDIT_QUERY_FAILED = "audit_query_failed"
    AUDIT_CHAIN_BROKEN = "audit_chain_broken"

    # Rate limit errors
    RATE_LIMIT_CHECK_FAILED = "rate_limit_check_failed"
    RATE_LIMIT_RESET_FAILED = "rate_limit_reset_failed"

    # Upstream identity provider errors
    UPSTREAM_AUTHENTICATION_FAILED = "upstream_authentication_failed"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    UPSTREAM_RATE_LIMITED = "upstream_rate_limited"
    UPSTREAM_INVALID_RESPONSE = "upstream_invalid_response"

    # Persistence errors
    DATABASE_ERROR = "database_error"
