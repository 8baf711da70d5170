"""Base API client for upstream HTTP communication.

Handles what every upstream client needs:
- HTTP request execution with timeout/connection error handling
- Response status code interpretation
- JSON parsing with error handling
- Structured logging with provider context

Subclasses build their authentication headers and call the helpers.

Architecture:
    - Infrastructure layer (adapter for external APIs)
    - Uses httpx for async HTTP
    - Returns Result types (no exceptions for upstream failures)

Status Handling:
    200       -> parsed JSON
    401/403   -> UpstreamError(UPSTREAM_AUTHENTICATION_FAILED, not transient)
    404       -> Success(None) from the *_or_none helpers
    429       -> UpstreamError(UPSTREAM_RATE_LIMITED, retry_after)
    5xx       -> UpstreamError(UPSTREAM_UNAVAILABLE, transient)
    timeout   -> UpstreamError(UPSTREAM_UNAVAILABLE, transient)
    other     -> UpstreamError(UPSTREAM_INVALID_RESPONSE)
"""

from typing import Any

import httpx
import structlog

from src.core.constants import RESPONSE_BODY_MAX_LENGTH
from src.core.enums import ErrorCode
from src.core.errors import UpstreamError
from src.core.result import Failure, Result, Success


class BaseProviderAPIClient:
    """Base class for upstream API clients with shared HTTP handling.

    Attributes:
        _base_url: API base URL (without trailing slash).
        _provider_name: Provider identifier for logging and error messages.
        _timeout: HTTP request timeout in seconds.
        _logger: Structured logger with provider context.
    """

    def __init__(
        self,
        *,
        base_url: str,
        provider_name: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize base API client.

        Args:
            base_url: API base URL.
            provider_name: Provider identifier (used in logs and errors).
            timeout: HTTP request timeout in seconds.
            transport: Optional httpx transport (tests, proxies).
        """
        self._base_url = base_url.rstrip("/")
        self._provider_name = provider_name
        self._timeout = timeout
        self._transport = transport
        self._logger = structlog.get_logger(f"{provider_name}_api")

    async def _execute_request(
        self,
        *,
        method: str,
        path: str,
        headers: dict[str, str],
        params: dict[str, str | int] | None = None,
        operation: str,
    ) -> Result[httpx.Response, UpstreamError]:
        """Execute an HTTP request, converting transport failures.

        Returns:
            Success(httpx.Response): Raw HTTP response (any status).
            Failure(UpstreamError): On timeout or connection error.
        """
        url = f"{self._base_url}{path}"

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=headers,
                    params=params,
                )
            return Success(value=response)

        except httpx.TimeoutException as e:
            self._logger.warning(
                f"{self._provider_name}_api_timeout",
                operation=operation,
                error=str(e),
            )
            return Failure(
                error=self._upstream_error(
                    ErrorCode.UPSTREAM_UNAVAILABLE,
                    "Identity provider request timed out",
                )
            )

        except httpx.RequestError as e:
            self._logger.warning(
                f"{self._provider_name}_api_connection_error",
                operation=operation,
                error=str(e),
            )
            return Failure(
                error=self._upstream_error(
                    ErrorCode.UPSTREAM_UNAVAILABLE,
                    "Failed to connect to identity provider",
                )
            )

    def _check_error_response(
        self,
        response: httpx.Response,
        operation: str,
    ) -> Failure[UpstreamError] | None:
        """Map a non-200 response to an UpstreamError.

        Returns:
            Failure(UpstreamError) if error detected, None if response is OK.
        """
        status = response.status_code

        if status == 200:
            return None

        if status == 429:
            retry_seconds = _parse_retry_after(response.headers.get("Retry-After"))
            self._logger.warning(
                f"{self._provider_name}_api_rate_limited",
                operation=operation,
                retry_after=retry_seconds,
            )
            return Failure(
                error=self._upstream_error(
                    ErrorCode.UPSTREAM_RATE_LIMITED,
                    "Identity provider rate limit exceeded",
                    retry_after=retry_seconds,
                )
            )

        if status in (401, 403):
            self._logger.warning(
                f"{self._provider_name}_api_auth_failed",
                operation=operation,
                status_code=status,
            )
            return Failure(
                error=self._upstream_error(
                    ErrorCode.UPSTREAM_AUTHENTICATION_FAILED,
                    "Identity provider rejected the API credentials",
                    is_transient=False,
                )
            )

        if status >= 500:
            self._logger.warning(
                f"{self._provider_name}_api_server_error",
                operation=operation,
                status_code=status,
            )
            return Failure(
                error=self._upstream_error(
                    ErrorCode.UPSTREAM_UNAVAILABLE,
                    f"Identity provider server error: {status}",
                )
            )

        self._logger.warning(
            f"{self._provider_name}_api_unexpected_status",
            operation=operation,
            status_code=status,
            response_body=response.text[:RESPONSE_BODY_MAX_LENGTH],
        )
        return Failure(
            error=self._upstream_error(
                ErrorCode.UPSTREAM_INVALID_RESPONSE,
                f"Unexpected response from identity provider: {status}",
                is_transient=False,
            )
        )

    def _parse_json(
        self,
        response: httpx.Response,
        operation: str,
    ) -> Result[Any, UpstreamError]:
        """Parse a 200 response body as JSON."""
        error_result = self._check_error_response(response, operation)
        if error_result is not None:
            return error_result

        try:
            data = response.json()
        except ValueError as e:
            self._logger.error(
                f"{self._provider_name}_api_invalid_json",
                operation=operation,
                error=str(e),
            )
            return Failure(
                error=self._upstream_error(
                    ErrorCode.UPSTREAM_INVALID_RESPONSE,
                    "Invalid JSON response from identity provider",
                    is_transient=False,
                )
            )

        self._logger.debug(f"{self._provider_name}_api_succeeded", operation=operation)
        return Success(value=data)

    async def _get_json(
        self,
        *,
        path: str,
        headers: dict[str, str],
        params: dict[str, str | int] | None = None,
        operation: str,
    ) -> Result[Any, UpstreamError]:
        """GET and parse JSON."""
        result = await self._execute_request(
            method="GET", path=path, headers=headers, params=params, operation=operation
        )
        match result:
            case Failure():
                return result
            case Success(value=response):
                return self._parse_json(response, operation)

    async def _get_json_or_none(
        self,
        *,
        path: str,
        headers: dict[str, str],
        operation: str,
    ) -> Result[Any | None, UpstreamError]:
        """GET and parse JSON, treating 404 as Success(None)."""
        result = await self._execute_request(
            method="GET", path=path, headers=headers, operation=operation
        )
        match result:
            case Failure():
                return result
            case Success(value=response) if response.status_code == 404:
                self._logger.info(
                    f"{self._provider_name}_api_not_found", operation=operation
                )
                return Success(value=None)
            case Success(value=response):
                return self._parse_json(response, operation)

    def _upstream_error(
        self,
        code: ErrorCode,
        message: str,
        *,
        is_transient: bool = True,
        retry_after: int | None = None,
    ) -> UpstreamError:
        return UpstreamError(
            code=code,
            message=message,
            provider_name=self._provider_name,
            is_transient=is_transient,
            retry_after=retry_after,
        )


def _parse_retry_after(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return max(int(value), 0)
    except ValueError:
        return None
