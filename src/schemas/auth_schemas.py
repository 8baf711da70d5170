"""Authentication request/response schemas.

Pydantic models for API request validation and response serialization.
Kept separate from domain entities - these are HTTP-layer concerns.

RESTful Endpoints (resource-based):
    POST   /api/v1/sessions                    - Create session (login)
    POST   /api/v1/sessions/validate           - Validate a session token
    DELETE /api/v1/sessions/current            - Delete session (logout)
    POST   /api/v1/activations                 - Activate account
    POST   /api/v1/password-resets             - Request reset email
    POST   /api/v1/password-resets/confirm     - Set new password
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from src.application.dtos.auth_dtos import LoginResult, SessionValidation


# =============================================================================
# Login
# =============================================================================


class SessionCreateRequest(BaseModel):
    """Request schema for session creation (login).

    POST /api/v1/sessions
    Returns: 201 Created (token delivered in the session cookie)
    """

    email: EmailStr = Field(
        ...,
        description="Account email address",
        examples=["user@example.com"],
    )
    password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="Account password",
        examples=["SecurePass123!"],
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "user@example.com",
                "password": "SecurePass123!",
            }
        }
    )


class SessionCreateResponse(BaseModel):
    """Response schema for session creation (201 Created).

    The signed token itself is only sent in the HttpOnly cookie.
    """

    account_id: UUID = Field(..., description="Authenticated account")
    session_id: UUID = Field(..., description="Created session")
    expires_at: datetime = Field(..., description="Session expiry (UTC)")
    role: str = Field(..., description="Account role")
    must_change_password: bool = Field(
        default=False, description="Client should force a password change"
    )

    @classmethod
    def from_result(cls, result: LoginResult) -> "SessionCreateResponse":
        return cls(
            account_id=result.account_id,
            session_id=result.session_id,
            expires_at=result.expires_at,
            role=result.role.value,
            must_change_password=result.must_change_password,
        )


# =============================================================================
# Session validation
# =============================================================================


class SessionValidateRequest(BaseModel):
    """Request schema for session validation.

    POST /api/v1/sessions/validate
    Returns: 200 OK (valid or not)
    """

    token: str = Field(..., min_length=1, description="Signed session token")


class SessionValidateResponse(BaseModel):
    """Response schema for session validation."""

    valid: bool = Field(..., description="Token and session are usable")
    account_id: UUID | None = Field(None, description="Session owner")
    session_id: UUID | None = Field(None, description="Session id")
    expires_at: datetime | None = Field(None, description="Session expiry")
    role: str | None = Field(None, description="Role claim")
    reason: str | None = Field(None, description="Rejection reason code")

    @classmethod
    def from_validation(
        cls, validation: SessionValidation
    ) -> "SessionValidateResponse":
        return cls(
            valid=validation.valid,
            account_id=validation.account_id,
            session_id=validation.session_id,
            expires_at=validation.expires_at,
            role=validation.role,
            reason=validation.reason,
        )


# =============================================================================
# Activation
# =============================================================================


class ActivationCreateRequest(BaseModel):
    """Request schema for account activation.

    POST /api/v1/activations
    Returns: 201 Created
    """

    token: str = Field(..., min_length=1, description="Activation token")
    new_password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="Password (at least 8 chars with a letter and a digit)",
    )


class ActivationCreateResponse(BaseModel):
    """Response schema for account activation (201 Created)."""

    message: str = Field(
        default="Account activated. You can now sign in.",
        description="Success message",
    )


# =============================================================================
# Password reset
# =============================================================================


class PasswordResetCreateRequest(BaseModel):
    """Request schema for a password reset email.

    POST /api/v1/password-resets
    Returns: 202 Accepted (always, to prevent email enumeration)
    """

    email: EmailStr = Field(..., description="Account email address")


class PasswordResetCreateResponse(BaseModel):
    """Response schema for a password reset request (202 Accepted)."""

    message: str = Field(
        default="If an account exists for this email, a reset link has been sent.",
        description="Generic message (same for known and unknown emails)",
    )


class PasswordResetConfirmRequest(BaseModel):
    """Request schema for setting a new password.

    POST /api/v1/password-resets/confirm
    Returns: 200 OK
    """

    token: str = Field(..., min_length=1, description="Password reset token")
    new_password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="Password (at least 8 chars with a letter and a digit)",
    )


class PasswordResetConfirmResponse(BaseModel):
    """Response schema for a completed password reset."""

    sessions_revoked: int = Field(..., description="Sessions ended by the reset")
    message: str = Field(
        default="Password updated. Please sign in again.",
        description="Success message",
    )
