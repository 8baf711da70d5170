"""Identity provider protocol (port).

Read-only view of the managed identity provider the accounts are migrating
away from. Used by the migration orchestrator to export users.
"""

from typing import Protocol

from src.core.errors import UpstreamError
from src.core.result import Result
from src.domain.value_objects import ProviderUser, ProviderUserPage


class IdentityProviderProtocol(Protocol):
    """Upstream user directory.

    Implementations:
        - ProviderAPIClient: httpx client for the provider's backend API

    Error Handling:
        Transport failures and unexpected statuses come back as
        Failure(UpstreamError); nothing is raised.
    """

    async def list_users(
        self, *, limit: int, offset: int
    ) -> Result[ProviderUserPage, UpstreamError]:
        """Fetch one page of users.

        Args:
            limit: Page size.
            offset: Number of users to skip.

        Returns:
            Result[ProviderUserPage, UpstreamError]: Sanitized users plus the
                provider's total_count and the next offset (None on the last
                page).
        """
        ...

    async def get_user(
        self, provider_user_id: str
    ) -> Result[ProviderUser | None, UpstreamError]:
        """Fetch a single user.

        Returns:
            Result[ProviderUser | None, UpstreamError]: Success(None) when the
                provider answers 404.
        """
        ...
