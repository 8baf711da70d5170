"""Error response builder for RFC 9457 Problem Details.

Converts domain errors returned by handlers into RFC 9457 JSON responses.

Status mapping (by error type, most specific first):
    LoginError RATE_LIMITED   -> 429 (Retry-After header)
    LoginError ACCOUNT_LOCKED -> 423 (locked_until member)
    AuthenticationError       -> 401
    ValidationError           -> 400
    AuthorizationError        -> 403
    NotFoundError             -> 404
    ConflictError             -> 409
    IntegrityError            -> 409 (broken_at_id, total_entries members)
    UpstreamError             -> 502
    anything else             -> 500

Exports:
    ErrorResponseBuilder: Utility class for building RFC 9457 responses
"""

from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse

from src.core.config import settings
from src.core.enums import ErrorCode
from src.core.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    IntegrityError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from src.domain.errors import LoginError
from src.presentation.routers.api.middleware.trace_middleware import get_trace_id
from src.presentation.routers.api.v1.errors.problem_details import (
    ErrorDetail,
    ProblemDetails,
)

_TITLES: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "Validation Failed",
    status.HTTP_401_UNAUTHORIZED: "Authentication Failed",
    status.HTTP_403_FORBIDDEN: "Access Denied",
    status.HTTP_404_NOT_FOUND: "Resource Not Found",
    status.HTTP_409_CONFLICT: "Resource Conflict",
    status.HTTP_423_LOCKED: "Account Locked",
    status.HTTP_429_TOO_MANY_REQUESTS: "Too Many Requests",
    status.HTTP_502_BAD_GATEWAY: "Upstream Provider Error",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "Internal Server Error",
}


class ErrorResponseBuilder:
    """Build RFC 9457 Problem Details error responses.

    Example:
        >>> match result:
        ...     case Failure(error=error):
        ...         return ErrorResponseBuilder.from_domain_error(error, request)
    """

    @staticmethod
    def from_domain_error(
        error: DomainError,
        request: Request,
        trace_id: str | None = None,
    ) -> JSONResponse:
        """Convert a DomainError to an RFC 9457 JSON response.

        Args:
            error: Error returned inside Failure.
            request: FastAPI Request object (for instance URL).
            trace_id: Request trace ID; defaults to the current one.

        Returns:
            JSONResponse with ProblemDetails content.
        """
        status_code = ErrorResponseBuilder.status_for(error)
        extensions, headers = ErrorResponseBuilder._extensions(error)

        problem = ProblemDetails(
            type=f"{settings.api_base_url}/errors/{error.code.value}",
            title=_TITLES.get(status_code, "Error"),
            status=status_code,
            detail=error.message,
            instance=str(request.url.path),
            code=error.code.value,
            trace_id=trace_id or get_trace_id(),
            **extensions,
        )
        if isinstance(error, ValidationError) and error.field:
            problem.errors = [
                ErrorDetail(
                    field=error.field,
                    code=error.code.value,
                    message=error.message,
                )
            ]

        return JSONResponse(
            status_code=status_code,
            content=problem.model_dump(mode="json", exclude_none=True),
            headers=headers or None,
        )

    @staticmethod
    def status_for(error: DomainError) -> int:
        """Map a domain error to its HTTP status code."""
        if isinstance(error, LoginError):
            if error.code == ErrorCode.RATE_LIMITED:
                return status.HTTP_429_TOO_MANY_REQUESTS
            if error.code == ErrorCode.ACCOUNT_LOCKED:
                return status.HTTP_423_LOCKED
        match error:
            case AuthenticationError():
                return status.HTTP_401_UNAUTHORIZED
            case ValidationError():
                return status.HTTP_400_BAD_REQUEST
            case AuthorizationError():
                return status.HTTP_403_FORBIDDEN
            case NotFoundError():
                return status.HTTP_404_NOT_FOUND
            case ConflictError() | IntegrityError():
                return status.HTTP_409_CONFLICT
            case UpstreamError():
                return status.HTTP_502_BAD_GATEWAY
            case _:
                return status.HTTP_500_INTERNAL_SERVER_ERROR

    @staticmethod
    def _extensions(error: DomainError) -> tuple[dict[str, Any], dict[str, str]]:
        extensions: dict[str, Any] = {}
        headers: dict[str, str] = {}
        match error:
            case LoginError(retry_after=retry_after, locked_until=locked_until):
                if retry_after is not None:
                    extensions["retry_after"] = retry_after
                    headers["Retry-After"] = str(retry_after)
                if locked_until is not None:
                    extensions["locked_until"] = locked_until.isoformat()
            case IntegrityError(broken_at_id=broken_at_id, total_entries=total):
                extensions["broken_at_id"] = broken_at_id
                extensions["total_entries"] = total
            case UpstreamError(retry_after=retry_after) if retry_after is not None:
                extensions["retry_after"] = retry_after
        if ErrorResponseBuilder.status_for(error) == status.HTTP_401_UNAUTHORIZED:
            headers["WWW-Authenticate"] = "Bearer"
        return extensions, headers
