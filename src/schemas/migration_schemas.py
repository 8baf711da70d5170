"""Migration, rollback and audit request/response schemas.

Admin-only endpoints:
    POST /api/v1/admin/migrations                - Import provider users
    POST /api/v1/admin/migrations/cohorts        - Advance a rollout cohort
    GET  /api/v1/admin/migrations/progress       - Migration progress
    POST /api/v1/admin/rollbacks                 - Roll accounts back
    GET  /api/v1/admin/rollbacks/candidates      - Recently migrated accounts
    GET  /api/v1/admin/audit/verification        - Verify the audit chain

Response models read application DTOs directly (from_attributes=True).
"""

from datetime import datetime
from typing import Self
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.application.commands.migration_commands import MigrationMode, RollbackMode
from src.domain.enums import AccountRole, AuthMode, RolloutCohort


class ItemErrorResponse(BaseModel):
    """One failed item of a batch operation."""

    model_config = ConfigDict(from_attributes=True)

    item_id: str = Field(..., description="Provider user id or account id")
    message: str = Field(..., description="What went wrong")


# =============================================================================
# Import
# =============================================================================


class MigrationCreateRequest(BaseModel):
    """Request schema for importing provider users.

    POST /api/v1/admin/migrations
    Returns: 200 OK with per-item tallies
    """

    mode: MigrationMode = Field(..., description="single, batch or all")
    provider_user_id: str | None = Field(
        None, description="User to import (single mode)"
    )
    provider_user_ids: list[str] = Field(
        default_factory=list, description="Users to import (batch mode)"
    )
    set_auth_mode: AuthMode | None = Field(
        None, description="Credential mode written onto imported accounts"
    )
    require_password_reset: bool = Field(
        False, description="Force a password change on next login"
    )
    default_role: AccountRole = Field(
        AccountRole.MEMBER, description="Role when the provider has no hint"
    )
    notes: str | None = Field(None, max_length=1000, description="Provenance note")

    @model_validator(mode="after")
    def check_mode_arguments(self) -> Self:
        if self.mode == MigrationMode.SINGLE and not self.provider_user_id:
            raise ValueError("provider_user_id is required in single mode")
        if self.mode == MigrationMode.BATCH and not self.provider_user_ids:
            raise ValueError("provider_user_ids is required in batch mode")
        return self


class MigrationCreateResponse(BaseModel):
    """Tallies of an import run."""

    model_config = ConfigDict(from_attributes=True)

    created: int
    updated: int
    skipped: int
    failed: int
    total: int
    errors: list[ItemErrorResponse] = Field(default_factory=list)


# =============================================================================
# Cohorts
# =============================================================================


class CohortAdvanceRequest(BaseModel):
    """Request schema for advancing a cohort.

    POST /api/v1/admin/migrations/cohorts
    """

    cohort: RolloutCohort = Field(..., description="pilot, wave1, wave2 or final")
    batch_size: int | None = Field(
        None, ge=1, le=1000, description="Accounts moved by this call"
    )


class CohortAdvanceResponse(BaseModel):
    """Outcome of one cohort advance call."""

    model_config = ConfigDict(from_attributes=True)

    cohort: str
    migrated: int
    failed: int
    activation_tokens_issued: int
    cohort_complete: bool
    local_count: int
    target_size: int | None
    errors: list[ItemErrorResponse] = Field(default_factory=list)


class CohortStatusResponse(BaseModel):
    """State of one cohort."""

    model_config = ConfigDict(from_attributes=True)

    cohort: str
    target_size: int | None
    completed_at: datetime | None
    completed_by: str | None


class MigrationProgressResponse(BaseModel):
    """Counts per credential mode plus cohort status."""

    model_config = ConfigDict(from_attributes=True)

    total: int
    provider: int
    local: int
    migrating: int
    percent_complete: float
    current_cohort: str | None
    cohorts: list[CohortStatusResponse]


# =============================================================================
# Rollback
# =============================================================================


class RollbackCreateRequest(BaseModel):
    """Request schema for rolling accounts back to provider credentials.

    POST /api/v1/admin/rollbacks
    """

    mode: RollbackMode = Field(..., description="single or window")
    reason: str = Field(
        ..., min_length=1, max_length=500, description="Why, recorded in audit"
    )
    account_id: UUID | None = Field(None, description="Account (single mode)")
    start: datetime | None = Field(None, description="Window start (inclusive)")
    end: datetime | None = Field(None, description="Window end (exclusive)")

    @model_validator(mode="after")
    def check_mode_arguments(self) -> Self:
        if self.mode == RollbackMode.SINGLE and self.account_id is None:
            raise ValueError("account_id is required in single mode")
        if self.mode == RollbackMode.WINDOW and (
            self.start is None or self.end is None
        ):
            raise ValueError("start and end are required in window mode")
        return self


class RollbackCreateResponse(BaseModel):
    """Tally of a rollback run."""

    model_config = ConfigDict(from_attributes=True)

    reverted: int
    failed: int
    errors: list[ItemErrorResponse] = Field(default_factory=list)


class RollbackCandidateResponse(BaseModel):
    """Recently migrated account."""

    model_config = ConfigDict(from_attributes=True)

    account_id: UUID
    email: str
    auth_mode: str
    migrated_at: datetime
    migrated_by: str | None
    hours_since_migration: int


class RollbackCandidateListResponse(BaseModel):
    """Rollback candidates, newest migration first."""

    candidates: list[RollbackCandidateResponse]
    total_count: int


# =============================================================================
# Audit
# =============================================================================


class AuditVerificationResponse(BaseModel):
    """Result of an intact audit chain walk (broken chains return 409)."""

    model_config = ConfigDict(from_attributes=True)

    valid: bool
    total_entries: int
    message: str = ""
