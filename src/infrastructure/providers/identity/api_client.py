"""Identity provider backend API client.

Implements IdentityProviderProtocol over the provider's REST API using a
secret key (Bearer auth).

Endpoints:
    GET /users?limit=&offset=  -> {"data": [...], "total_count": N}
                                  (a bare list is accepted too)
    GET /users/{id}            -> user object, 404 when unknown
"""

from typing import Any

import httpx

from src.core.constants import BEARER_PREFIX, PROVIDER_NAME
from src.core.enums import ErrorCode
from src.core.errors import UpstreamError
from src.core.result import Failure, Result, Success
from src.domain.value_objects import ProviderUser, ProviderUserPage
from src.infrastructure.providers.base_api_client import BaseProviderAPIClient
from src.infrastructure.providers.identity.user_mapper import ProviderUserMapper


class ProviderAPIClient(BaseProviderAPIClient):
    """User directory client for the identity provider.

    Example:
        >>> client = ProviderAPIClient(
        ...     base_url="https://api.identity-provider.example/v1",
        ...     secret_key="sk_live_...",
        ... )
        >>> result = await client.list_users(limit=100, offset=0)
    """

    def __init__(
        self,
        *,
        base_url: str,
        secret_key: str | None,
        timeout: float = 30.0,
        mapper: ProviderUserMapper | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            base_url=base_url,
            provider_name=PROVIDER_NAME,
            timeout=timeout,
            transport=transport,
        )
        self._secret_key = secret_key
        self._mapper = mapper or ProviderUserMapper()

    async def list_users(
        self, *, limit: int, offset: int
    ) -> Result[ProviderUserPage, UpstreamError]:
        """Fetch one page of users.

        Returns:
            Result[ProviderUserPage, UpstreamError]: next_offset is None once
                offset + page size reaches total_count or the page is empty.
                Bare-list responses carry no total, so paging continues
                while pages come back full.
        """
        if (missing := self._missing_key()) is not None:
            return missing

        result = await self._get_json(
            path="/users",
            headers=self._headers(),
            params={"limit": limit, "offset": offset, "order_by": "created_at"},
            operation="list_users",
        )
        if isinstance(result, Failure):
            return result

        records, total_count = _unwrap_page(result.value)
        if records is None:
            return Failure(
                error=self._upstream_error(
                    ErrorCode.UPSTREAM_INVALID_RESPONSE,
                    "Unexpected user list format from identity provider",
                    is_transient=False,
                )
            )

        users = self._mapper.map_users(records)
        next_offset = offset + len(records)
        if total_count is None:
            # Bare list: no total, so a full page means more may follow.
            total = next_offset
            has_more = bool(records) and len(records) >= limit
        else:
            total = total_count
            has_more = bool(records) and next_offset < total
        return Success(
            value=ProviderUserPage(
                users=users,
                total_count=total,
                next_offset=next_offset if has_more else None,
            )
        )

    async def get_user(
        self, provider_user_id: str
    ) -> Result[ProviderUser | None, UpstreamError]:
        """Fetch a single user; Success(None) when the provider answers 404."""
        if (missing := self._missing_key()) is not None:
            return missing

        result = await self._get_json_or_none(
            path=f"/users/{provider_user_id}",
            headers=self._headers(),
            operation="get_user",
        )
        match result:
            case Failure():
                return result
            case Success(value=None):
                return Success(value=None)
            case Success(value=payload) if isinstance(payload, dict):
                return Success(value=self._mapper.map_user(payload))
            case Success():
                return Failure(
                    error=self._upstream_error(
                        ErrorCode.UPSTREAM_INVALID_RESPONSE,
                        "Expected a user object from identity provider",
                        is_transient=False,
                    )
                )

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"{BEARER_PREFIX}{self._secret_key}",
            "Accept": "application/json",
        }

    def _missing_key(self) -> Failure[UpstreamError] | None:
        if self._secret_key:
            return None
        return Failure(
            error=self._upstream_error(
                ErrorCode.UPSTREAM_AUTHENTICATION_FAILED,
                "Identity provider secret key is not configured",
                is_transient=False,
            )
        )


def _unwrap_page(payload: Any) -> tuple[list[Any] | None, int | None]:
    if isinstance(payload, list):
        return payload, None
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        total = payload.get("total_count")
        return payload["data"], total if isinstance(total, int) else None
    return None, None
