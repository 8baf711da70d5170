"""Repository dependency factories.

Request-scoped repository instances for domain entity persistence.
Each request gets fresh repository instances with shared session.
"""

from typing import TYPE_CHECKING

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.container.infrastructure import get_db_session

if TYPE_CHECKING:
    from src.infrastructure.persistence.repositories import (
        AccountRepository,
        MigrationCohortRepository,
        SessionRepository,
        SingleUseTokenRepository,
    )


# ============================================================================
# Repository Factories (Request-Scoped)
# ============================================================================


async def get_account_repository(
    session: AsyncSession = Depends(get_db_session),
) -> "AccountRepository":
    """Get account repository (request-scoped).

    Args:
        session: Database session for request duration.
            Injected via Depends(get_db_session).

    Returns:
        AccountRepository instance.

    Usage:
        @router.get("/admin/accounts/{account_id}")
        async def get_account(
            account_repo: AccountRepository = Depends(get_account_repository)
        ):
            account = await account_repo.find_by_id(account_id)
    """
    from src.infrastructure.persistence.repositories import AccountRepository

    return AccountRepository(session=session)


async def get_session_repository(
    session: AsyncSession = Depends(get_db_session),
) -> "SessionRepository":
    """Get session repository (request-scoped)."""
    from src.infrastructure.persistence.repositories import SessionRepository

    return SessionRepository(session=session)


async def get_single_use_token_repository(
    session: AsyncSession = Depends(get_db_session),
) -> "SingleUseTokenRepository":
    """Get activation/reset token repository (request-scoped)."""
    from src.infrastructure.persistence.repositories import (
        SingleUseTokenRepository,
    )

    return SingleUseTokenRepository(session=session)


async def get_migration_cohort_repository(
    session: AsyncSession = Depends(get_db_session),
) -> "MigrationCohortRepository":
    """Get rollout cohort repository (request-scoped)."""
    from src.infrastructure.persistence.repositories import (
        MigrationCohortRepository,
    )

    return MigrationCohortRepository(session=session)
