"""Account roles.

Roles are coarse labels carried into the session token. The control plane
itself only distinguishes ADMIN (allowed to run migrations, rollbacks and
audit verification) from everyone else.

Usage:
    from src.domain.enums import AccountRole

    if account.role == AccountRole.ADMIN:
        ...
"""

from enum import Enum


class AccountRole(str, Enum):
    """Role assigned to an account."""

    ADMIN = "admin"
    """Operator with access to migration, rollback and audit verification."""

    STAFF = "staff"
    INSPECTOR = "inspector"
    MEMBER_ADMIN = "member_admin"
    """Administrator of a member organisation (``company_admin`` upstream)."""

    MEMBER = "member"
    """Default role for imported accounts without a role hint."""

    EXTERNAL_INSPECTOR = "external_inspector"

    @classmethod
    def values(cls) -> list[str]:
        """Get all role values as strings.

        Returns:
            list[str]: Every role value.
        """
        return [role.value for role in cls]

    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Check if a string is a valid role.

        Args:
            value: String to check.

        Returns:
            bool: True if value is a valid role.
        """
        return value in cls.values()
