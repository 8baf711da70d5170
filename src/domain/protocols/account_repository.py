"""AccountRepository protocol (port).

Defines the persistence contract for accounts. Implementations live in the
infrastructure layer; handlers depend on this protocol only.
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities import Account
from src.domain.enums import AuthMode


class AccountRepository(Protocol):
    """Account persistence port.

    Implementations:
        - AccountRepository (SQLAlchemy): src/infrastructure/persistence/repositories/

    Concurrency:
        increment_failed_attempts() MUST be a single atomic statement so
        concurrent wrong-password attempts each count exactly once.
    """

    async def find_by_id(self, account_id: UUID) -> Account | None:
        """Find account by id."""
        ...

    async def find_by_email(self, email: str) -> Account | None:
        """Find account by normalized email (case-insensitive)."""
        ...

    async def find_by_provider_user_id(self, provider_user_id: str) -> Account | None:
        """Find account linked to an upstream identity."""
        ...

    async def save(self, account: Account) -> None:
        """Insert a new account.

        Raises:
            IntegrityError: If email or provider_user_id already exist.
        """
        ...

    async def update(self, account: Account) -> None:
        """Persist all mutable fields of an existing account.

        Raises:
            NoResultFound: If the account does not exist.
        """
        ...

    async def increment_failed_attempts(self, account_id: UUID) -> int:
        """Atomically add one failed attempt.

        Returns:
            int: The new failed_login_attempts value.
        """
        ...

    async def set_locked_until(
        self, account_id: UUID, locked_until: datetime | None
    ) -> None:
        """Write the lock expiry without touching other columns."""
        ...

    async def count_by_auth_mode(self) -> dict[AuthMode, int]:
        """Count accounts per credential mode (every mode present as a key)."""
        ...

    async def find_migration_candidates(self, limit: int) -> list[Account]:
        """Accounts eligible for the next cohort.

        Eligible: auth_mode is not LOCAL, provider_user_id is set, status is
        not DEACTIVATED. Ordered by last_login_at descending (never-seen
        accounts last), then created_at.
        """
        ...

    async def find_migrated_between(
        self, start: datetime, end: datetime
    ) -> list[Account]:
        """Accounts whose migrated_at lies in [start, end)."""
        ...

    async def find_migrated_since(self, since: datetime) -> list[Account]:
        """Accounts migrated at or after since, newest first."""
        ...
