"""AccountRepository - SQLAlchemy implementation of AccountRepository protocol.

Adapter for hexagonal architecture.
Maps between domain Account entities and the AccountModel table.
"""

from datetime import datetime
from typing import Any, cast
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import Account
from src.domain.enums import AccountRole, AccountStatus, AuthMode
from src.infrastructure.persistence.models.account import Account as AccountModel


class AccountRepository:
    """SQLAlchemy implementation of AccountRepository protocol.

    This class does NOT inherit from the protocol (structural typing).

    Attributes:
        session: SQLAlchemy async session for database operations.

    Example:
        >>> async with database.get_session() as session:
        ...     repo = AccountRepository(session)
        ...     account = await repo.find_by_email("a@x.test")
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def find_by_id(self, account_id: UUID) -> Account | None:
        """Find account by ID.

        Args:
            account_id: Account identifier.

        Returns:
            Domain Account entity if found, None otherwise.
        """
        stmt = (
            select(AccountModel)
            .where(AccountModel.id == account_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        account_model = result.scalar_one_or_none()

        if account_model is None:
            return None

        return self._to_domain(account_model)

    async def find_by_email(self, email: str) -> Account | None:
        """Find account by email address (case-insensitive exact match).

        Args:
            email: Email address.

        Returns:
            Domain Account entity if found, None otherwise.
        """
        stmt = select(AccountModel).where(
            func.lower(AccountModel.email) == email.strip().lower()
        ).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        account_model = result.scalar_one_or_none()

        if account_model is None:
            return None

        return self._to_domain(account_model)

    async def find_by_provider_user_id(self, provider_user_id: str) -> Account | None:
        """Find account linked to an upstream identity.

        Args:
            provider_user_id: Identifier at the identity provider.

        Returns:
            Domain Account entity if found, None otherwise.
        """
        stmt = select(AccountModel).where(
            AccountModel.provider_user_id == provider_user_id
        ).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        account_model = result.scalar_one_or_none()

        if account_model is None:
            return None

        return self._to_domain(account_model)

    async def save(self, account: Account) -> None:
        """Create new account in database.

        Args:
            account: Domain Account entity to persist.

        Raises:
            IntegrityError: If email or provider_user_id already exists.
        """
        account_model = self._to_model(account)
        self.session.add(account_model)
        await self._commit()

    async def update(self, account: Account) -> None:
        """Update existing account in database.

        Commits the session, so anything flushed earlier on the same session
        (e.g. a consumed single-use token) commits with it. On failure the
        session is rolled back, discarding that earlier work too.

        Args:
            account: Domain Account entity with updated fields.

        Raises:
            NoResultFound: If account doesn't exist.
        """
        stmt = select(AccountModel).where(AccountModel.id == account.id)
        try:
            result = await self.session.execute(stmt)
            account_model = result.scalar_one()
        except SQLAlchemyError:
            await self.session.rollback()
            raise

        account_model.email = account.email
        account_model.first_name = account.first_name
        account_model.last_name = account.last_name
        account_model.phone = account.phone
        account_model.role = account.role.value
        account_model.status = account.status.value
        account_model.auth_mode = account.auth_mode.value
        account_model.password_hash = account.password_hash
        account_model.failed_login_attempts = account.failed_login_attempts
        account_model.locked_until = account.locked_until
        account_model.must_change_password = account.must_change_password
        account_model.password_changed_at = account.password_changed_at
        account_model.last_login_at = account.last_login_at
        account_model.last_login_ip = account.last_login_ip
        account_model.provider_user_id = account.provider_user_id
        account_model.provider_metadata = account.provider_metadata
        account_model.migrated_at = account.migrated_at
        account_model.migrated_by = account.migrated_by
        account_model.migration_notes = account.migration_notes

        await self._commit()

    async def increment_failed_attempts(self, account_id: UUID) -> int:
        """Atomically add one failed login attempt.

        Single UPDATE ... RETURNING, so concurrent failures each count once.

        Args:
            account_id: Account identifier.

        Returns:
            int: New failed_login_attempts value.
        """
        stmt = (
            update(AccountModel)
            .where(AccountModel.id == account_id)
            .values(failed_login_attempts=AccountModel.failed_login_attempts + 1)
            .returning(AccountModel.failed_login_attempts)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        attempts = result.scalar_one()
        await self.session.commit()
        return int(attempts)

    async def set_locked_until(
        self, account_id: UUID, locked_until: datetime | None
    ) -> None:
        """Write the lock expiry without touching other columns.

        Args:
            account_id: Account identifier.
            locked_until: New lock expiry, or None to unlock.
        """
        stmt = (
            update(AccountModel)
            .where(AccountModel.id == account_id)
            .values(locked_until=locked_until)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
        await self.session.commit()

    async def count_by_auth_mode(self) -> dict[AuthMode, int]:
        """Count accounts per credential mode.

        Returns:
            dict[AuthMode, int]: Count for every mode (zero when absent).
        """
        stmt = select(AccountModel.auth_mode, func.count()).group_by(
            AccountModel.auth_mode
        )
        result = await self.session.execute(stmt)
        counts = {mode: 0 for mode in AuthMode}
        for mode_value, count in result.all():
            counts[AuthMode(mode_value)] = int(count)
        return counts

    async def find_migration_candidates(self, limit: int) -> list[Account]:
        """Accounts eligible for the next cohort, most recently active first.

        Args:
            limit: Maximum accounts to return.

        Returns:
            list[Account]: Eligible accounts.
        """
        stmt = (
            select(AccountModel)
            .where(
                AccountModel.auth_mode != AuthMode.LOCAL.value,
                AccountModel.provider_user_id.is_not(None),
                AccountModel.status != AccountStatus.DEACTIVATED.value,
            )
            .order_by(
                AccountModel.last_login_at.desc().nulls_last(),
                AccountModel.created_at.asc(),
            )
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def find_migrated_between(
        self, start: datetime, end: datetime
    ) -> list[Account]:
        """Accounts whose migrated_at lies in [start, end).

        Args:
            start: Inclusive lower bound.
            end: Exclusive upper bound.

        Returns:
            list[Account]: Accounts ordered by migrated_at.
        """
        stmt = (
            select(AccountModel)
            .where(
                AccountModel.migrated_at.is_not(None),
                AccountModel.migrated_at >= start,
                AccountModel.migrated_at < end,
            )
            .order_by(AccountModel.migrated_at.asc())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def find_migrated_since(self, since: datetime) -> list[Account]:
        """Accounts migrated at or after a point in time, newest first.

        Args:
            since: Inclusive lower bound.

        Returns:
            list[Account]: Accounts ordered by migrated_at descending.
        """
        stmt = (
            select(AccountModel)
            .where(AccountModel.migrated_at >= since)
            .order_by(AccountModel.migrated_at.desc())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def _commit(self) -> None:
        """Commit, rolling back first if the commit fails.

        Leaves the session usable for the next item of a batch import.
        """
        try:
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            raise

    def _to_domain(self, account_model: AccountModel) -> Account:
        """Convert database model to domain entity.

        Args:
            account_model: SQLAlchemy AccountModel instance.

        Returns:
            Domain Account entity.
        """
        return Account(
            id=account_model.id,
            email=account_model.email,
            first_name=account_model.first_name,
            last_name=account_model.last_name,
            phone=account_model.phone,
            role=AccountRole(account_model.role),
            status=AccountStatus(account_model.status),
            auth_mode=AuthMode(account_model.auth_mode),
            password_hash=account_model.password_hash,
            failed_login_attempts=account_model.failed_login_attempts,
            locked_until=account_model.locked_until,
            must_change_password=account_model.must_change_password,
            password_changed_at=account_model.password_changed_at,
            last_login_at=account_model.last_login_at,
            last_login_ip=account_model.last_login_ip,
            provider_user_id=account_model.provider_user_id,
            provider_metadata=cast(
                dict[str, Any] | None, account_model.provider_metadata
            ),
            migrated_at=account_model.migrated_at,
            migrated_by=account_model.migrated_by,
            migration_notes=account_model.migration_notes,
            created_at=account_model.created_at,
            updated_at=account_model.updated_at,
        )

    def _to_model(self, account: Account) -> AccountModel:
        """Convert domain entity to database model.

        Args:
            account: Domain Account entity.

        Returns:
            SQLAlchemy AccountModel instance.
        """
        return AccountModel(
            id=account.id,
            email=account.email,
            first_name=account.first_name,
            last_name=account.last_name,
            phone=account.phone,
            role=account.role.value,
            status=account.status.value,
            auth_mode=account.auth_mode.value,
            password_hash=account.password_hash,
            failed_login_attempts=account.failed_login_attempts,
            locked_until=account.locked_until,
            must_change_password=account.must_change_password,
            password_changed_at=account.password_changed_at,
            last_login_at=account.last_login_at,
            last_login_ip=account.last_login_ip,
            provider_user_id=account.provider_user_id,
            provider_metadata=account.provider_metadata,
            migrated_at=account.migrated_at,
            migrated_by=account.migrated_by,
            migration_notes=account.migration_notes,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )
