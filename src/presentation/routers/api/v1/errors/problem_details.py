"""RFC 9457 Problem Details for HTTP APIs.

RFC 9457: https://www.rfc-editor.org/rfc/rfc9457

Exports:
    ErrorDetail: Individual field-specific error
    ProblemDetails: RFC 9457 compliant error response schema
"""

from pydantic import BaseModel, ConfigDict, Field


class ErrorDetail(BaseModel):
    """Individual field-specific error.

    Attributes:
        field: Name of the field with error
        code: Machine-readable error code
        message: Human-readable error message
    """

    field: str = Field(..., description="Field name")
    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")


class ProblemDetails(BaseModel):
    """RFC 9457 Problem Details for HTTP APIs.

    Extension members (retry_after, locked_until, broken_at_id, ...) are
    allowed and serialized next to the standard members.

    Examples:
        >>> problem = ProblemDetails(
        ...     type="http://localhost:8000/errors/account_locked",
        ...     title="Account Locked",
        ...     status=423,
        ...     detail="Account is temporarily locked",
        ...     instance="/api/v1/sessions",
        ...     code="account_locked",
        ...     locked_until="2026-01-01T10:15:00+00:00",
        ... )
    """

    model_config = ConfigDict(extra="allow")

    type: str = Field(
        ...,
        description="URI reference identifying the problem type",
        examples=["http://localhost:8000/errors/invalid_credentials"],
    )
    title: str = Field(
        ...,
        description="Short, human-readable summary",
        examples=["Authentication Failed"],
    )
    status: int = Field(
        ...,
        description="HTTP status code",
        examples=[401],
    )
    detail: str = Field(
        ...,
        description="Human-readable explanation",
        examples=["Invalid email or password"],
    )
    instance: str = Field(
        ...,
        description="URI reference identifying this occurrence",
        examples=["/api/v1/sessions"],
    )
    code: str | None = Field(
        None,
        description="Machine-readable error code",
        examples=["invalid_credentials"],
    )
    errors: list[ErrorDetail] | None = Field(
        None,
        description="List of field-specific errors",
    )
    trace_id: str | None = Field(
        None,
        description="Request trace ID for debugging",
    )
