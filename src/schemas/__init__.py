"""Request/response schemas for API endpoints.

All Pydantic models for HTTP request validation and response serialization.
Schemas are kept separate from domain entities (HTTP-layer concerns only).

Usage:
    from src.schemas import SessionCreateRequest, MigrationProgressResponse
"""

from src.schemas.auth_schemas import (
    # Activation
    ActivationCreateRequest,
    ActivationCreateResponse,
    # Password reset
    PasswordResetConfirmRequest,
    PasswordResetConfirmResponse,
    PasswordResetCreateRequest,
    PasswordResetCreateResponse,
    # Session (login/validate)
    SessionCreateRequest,
    SessionCreateResponse,
    SessionValidateRequest,
    SessionValidateResponse,
)
from src.schemas.migration_schemas import (
    # Audit
    AuditVerificationResponse,
    # Cohorts
    CohortAdvanceRequest,
    CohortAdvanceResponse,
    CohortStatusResponse,
    ItemErrorResponse,
    # Import
    MigrationCreateRequest,
    MigrationCreateResponse,
    MigrationProgressResponse,
    # Rollback
    RollbackCandidateListResponse,
    RollbackCandidateResponse,
    RollbackCreateRequest,
    RollbackCreateResponse,
)

__all__ = [
    "ActivationCreateRequest",
    "ActivationCreateResponse",
    "AuditVerificationResponse",
    "CohortAdvanceRequest",
    "CohortAdvanceResponse",
    "CohortStatusResponse",
    "ItemErrorResponse",
    "MigrationCreateRequest",
    "MigrationCreateResponse",
    "MigrationProgressResponse",
    "PasswordResetConfirmRequest",
    "PasswordResetConfirmResponse",
    "PasswordResetCreateRequest",
    "PasswordResetCreateResponse",
    "RollbackCandidateListResponse",
    "RollbackCandidateResponse",
    "RollbackCreateRequest",
    "RollbackCreateResponse",
    "SessionCreateRequest",
    "SessionCreateResponse",
    "SessionValidateRequest",
    "SessionValidateResponse",
]
