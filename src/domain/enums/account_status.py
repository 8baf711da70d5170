"""Account lifecycle status."""

from enum import Enum


class AccountStatus(str, Enum):
    """Lifecycle status of an account.

    Transitions:
        PENDING_ACTIVATION -> ACTIVE (owner sets a password)
        ACTIVE -> SUSPENDED | DEACTIVATED (administrative)
        SUSPENDED -> ACTIVE
    """

    PENDING_ACTIVATION = "pending_activation"
    """Account exists but has no usable local password yet."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    DEACTIVATED = "deactivated"
    """Terminal for login purposes; the row is kept for audit history."""

    @property
    def blocks_login(self) -> bool:
        """True for statuses that can never authenticate."""
        return self in (AccountStatus.SUSPENDED, AccountStatus.DEACTIVATED)
