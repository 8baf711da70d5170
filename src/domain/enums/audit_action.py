"""Audit action types.

Closed enumeration of every security-relevant action written to the
hash-chained audit log. The action value is part of the chain hash input, so
renaming a value invalidates verification of historic entries: add new
members, never rename existing ones.

Categories:
    - Authentication: LOGIN_*, LOGOUT, ACCOUNT_LOCKED, SUSPICIOUS_LOGIN_DETECTED
    - Sessions: SESSION_REVOKED
    - Credentials: ACCOUNT_ACTIVATED, PASSWORD_RESET_*
    - Migration: MIGRATION_*

Usage:
    from src.domain.enums import AuditAction

    await audit.append(
        action=AuditAction.LOGIN_FAILED,
        actor_id=str(account.id),
        resource_type="account",
        resource_id=str(account.id),
        metadata={"reason": "invalid_password", "attempts": 3},
    )
"""

from enum import Enum


class AuditAction(str, Enum):
    """Auditable actions.

    String Enum:
        Inherits from str for serialization and database storage.
        Values are upper snake case, matching the historic log format.
    """

    # =========================================================================
    # Authentication
    # =========================================================================

    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    """Credentials accepted and a session issued.

    Metadata should include:
        - session_id: Issued session id
        - auth_mode: Credential mode of the account
    """

    LOGIN_FAILED = "LOGIN_FAILED"
    """Login rejected.

    Metadata should include:
        - reason: account_not_found, no_password_set, account_inactive,
          account_pending_activation, auth_mode_not_permitted,
          account_locked or invalid_password
        - attempts: Failed attempt count (wrong password only)
    """

    LOGIN_RATE_LIMITED = "LOGIN_RATE_LIMITED"
    """Login refused by the rate limiter before any account lookup."""

    ACCOUNT_LOCKED = "ACCOUNT_LOCKED"
    """A failed attempt crossed a lockout tier.

    Metadata should include:
        - attempts: Failed attempt count
        - locked_until: ISO timestamp of the lock expiry
    """

    LOGOUT = "LOGOUT"
    """Session owner ended their own session."""

    SUSPICIOUS_LOGIN_DETECTED = "SUSPICIOUS_LOGIN_DETECTED"
    """Successful login that did not match the account's history.

    Metadata should include:
        - reasons: new_origin, new_device and/or atypical_hour
    """

    # =========================================================================
    # Sessions
    # =========================================================================

    SESSION_REVOKED = "SESSION_REVOKED"
    """Session revoked by an operator or a security flow."""

    # =========================================================================
    # Credentials
    # =========================================================================

    ACCOUNT_ACTIVATED = "ACCOUNT_ACTIVATED"
    """Owner consumed an activation token and set a local password."""

    PASSWORD_RESET_REQUESTED = "PASSWORD_RESET_REQUESTED"
    """Reset token issued for an eligible account."""

    PASSWORD_RESET_COMPLETED = "PASSWORD_RESET_COMPLETED"
    """Reset token consumed and the password replaced."""

    # =========================================================================
    # Migration
    # =========================================================================

    MIGRATION_IMPORT = "MIGRATION_IMPORT"
    """Summary of a provider import run (single, batch or all)."""

    MIGRATION_ACCOUNT_TO_LOCAL = "MIGRATION_ACCOUNT_TO_LOCAL"
    """Account switched to local credentials as part of a cohort."""

    MIGRATION_COHORT_ADVANCED = "MIGRATION_COHORT_ADVANCED"
    """Summary of a cohort advance call.

    Metadata should include:
        - cohort, migrated, failed, cohort_complete
    """

    MIGRATION_ROLLBACK = "MIGRATION_ROLLBACK"
    """Account returned to provider credentials."""

    MIGRATION_ROLLBACK_BATCH = "MIGRATION_ROLLBACK_BATCH"
    """Summary of a rollback over a migration time window."""
