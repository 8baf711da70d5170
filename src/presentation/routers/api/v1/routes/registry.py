"""API Route Registry.

Single source of truth for every v1 endpoint. Routes are generated from
these entries at startup by register_routes_from_registry().
"""

from src.presentation.routers.api.v1.activations import create_activation
from src.presentation.routers.api.v1.admin import (
    advance_cohort,
    create_migration,
    create_rollback,
    get_audit_verification,
    get_progress,
    list_candidates,
)
from src.presentation.routers.api.v1.password_resets import (
    confirm_password_reset,
    create_password_reset,
)
from src.presentation.routers.api.v1.routes.metadata import (
    AuthLevel,
    AuthPolicy,
    ErrorSpec,
    HTTPMethod,
    RouteMetadata,
)
from src.presentation.routers.api.v1.sessions import (
    create_session,
    delete_current_session,
    validate_session,
)
from src.schemas.auth_schemas import (
    ActivationCreateResponse,
    PasswordResetConfirmResponse,
    PasswordResetCreateResponse,
    SessionCreateResponse,
    SessionValidateResponse,
)
from src.schemas.migration_schemas import (
    AuditVerificationResponse,
    CohortAdvanceResponse,
    MigrationCreateResponse,
    MigrationProgressResponse,
    RollbackCandidateListResponse,
    RollbackCreateResponse,
)

_ADMIN = AuthPolicy(level=AuthLevel.ADMIN)
_ADMIN_ERRORS = [
    ErrorSpec(status=401, description="Not authenticated"),
    ErrorSpec(status=403, description="Administrator role required"),
]

_TOKEN_ERRORS = [
    ErrorSpec(status=400, description="Password does not meet the policy"),
    ErrorSpec(status=401, description="Token expired"),
    ErrorSpec(status=404, description="Token not found"),
    ErrorSpec(status=409, description="Token already used"),
]

ROUTE_REGISTRY: list[RouteMetadata] = [
    # =========================================================================
    # Sessions
    # =========================================================================
    RouteMetadata(
        method=HTTPMethod.POST,
        path="/sessions",
        handler=create_session,
        resource="sessions",
        tags=["Sessions"],
        summary="Create session",
        description="Authenticate with email and password. "
        "The session token is returned in an HttpOnly cookie.",
        operation_id="create_session",
        response_model=SessionCreateResponse,
        status_code=201,
        errors=[
            ErrorSpec(status=401, description="Invalid credentials"),
            ErrorSpec(status=423, description="Account temporarily locked"),
            ErrorSpec(status=429, description="Too many login attempts"),
        ],
        auth_policy=AuthPolicy(
            level=AuthLevel.PUBLIC, rationale="Login creates the credential"
        ),
    ),
    RouteMetadata(
        method=HTTPMethod.POST,
        path="/sessions/validate",
        handler=validate_session,
        resource="sessions",
        tags=["Sessions"],
        summary="Validate session token",
        description="Check a session token on behalf of another service.",
        operation_id="validate_session",
        response_model=SessionValidateResponse,
        status_code=200,
        auth_policy=AuthPolicy(
            level=AuthLevel.PUBLIC, rationale="The body token is the credential"
        ),
    ),
    RouteMetadata(
        method=HTTPMethod.DELETE,
        path="/sessions/current",
        handler=delete_current_session,
        resource="sessions",
        tags=["Sessions"],
        summary="Delete current session",
        description="Revoke the caller's session and clear the cookie.",
        operation_id="delete_current_session",
        status_code=204,
        errors=[ErrorSpec(status=401, description="Not authenticated")],
        auth_policy=AuthPolicy(level=AuthLevel.AUTHENTICATED),
    ),
    # =========================================================================
    # Activations and password resets
    # =========================================================================
    RouteMetadata(
        method=HTTPMethod.POST,
        path="/activations",
        handler=create_activation,
        resource="activations",
        tags=["Activations"],
        summary="Activate account",
        description="Set the first local password with an activation token.",
        operation_id="create_activation",
        response_model=ActivationCreateResponse,
        status_code=201,
        errors=_TOKEN_ERRORS,
        auth_policy=AuthPolicy(
            level=AuthLevel.PUBLIC, rationale="The token is the credential"
        ),
    ),
    RouteMetadata(
        method=HTTPMethod.POST,
        path="/password-resets",
        handler=create_password_reset,
        resource="password_resets",
        tags=["Password Resets"],
        summary="Request password reset",
        description="Send a reset link if the account exists. "
        "Always returns 202.",
        operation_id="create_password_reset",
        response_model=PasswordResetCreateResponse,
        status_code=202,
        auth_policy=AuthPolicy(
            level=AuthLevel.PUBLIC, rationale="Caller has lost the password"
        ),
    ),
    RouteMetadata(
        method=HTTPMethod.POST,
        path="/password-resets/confirm",
        handler=confirm_password_reset,
        resource="password_resets",
        tags=["Password Resets"],
        summary="Confirm password reset",
        description="Set a new password and revoke every session.",
        operation_id="confirm_password_reset",
        response_model=PasswordResetConfirmResponse,
        status_code=200,
        errors=_TOKEN_ERRORS,
        auth_policy=AuthPolicy(
            level=AuthLevel.PUBLIC, rationale="The token is the credential"
        ),
    ),
    # =========================================================================
    # Admin: migrations
    # =========================================================================
    RouteMetadata(
        method=HTTPMethod.POST,
        path="/admin/migrations",
        handler=create_migration,
        resource="admin_migrations",
        tags=["Admin Migrations"],
        summary="Import provider users",
        description="Map one, several or all identity provider users "
        "onto local accounts.",
        operation_id="create_migration",
        response_model=MigrationCreateResponse,
        status_code=200,
        errors=[
            *_ADMIN_ERRORS,
            ErrorSpec(status=404, description="Provider user not found"),
            ErrorSpec(status=502, description="Identity provider unavailable"),
        ],
        auth_policy=_ADMIN,
    ),
    RouteMetadata(
        method=HTTPMethod.POST,
        path="/admin/migrations/cohorts",
        handler=advance_cohort,
        resource="admin_migrations",
        tags=["Admin Migrations"],
        summary="Advance cohort",
        description="Move the next batch of a rollout cohort to local "
        "credentials and send activation links.",
        operation_id="advance_cohort",
        response_model=CohortAdvanceResponse,
        status_code=200,
        errors=[
            *_ADMIN_ERRORS,
            ErrorSpec(status=409, description="Previous cohort not complete"),
        ],
        auth_policy=_ADMIN,
    ),
    RouteMetadata(
        method=HTTPMethod.GET,
        path="/admin/migrations/progress",
        handler=get_progress,
        resource="admin_migrations",
        tags=["Admin Migrations"],
        summary="Get migration progress",
        operation_id="get_migration_progress",
        response_model=MigrationProgressResponse,
        status_code=200,
        errors=_ADMIN_ERRORS,
        auth_policy=_ADMIN,
    ),
    # =========================================================================
    # Admin: rollbacks
    # =========================================================================
    RouteMetadata(
        method=HTTPMethod.POST,
        path="/admin/rollbacks",
        handler=create_rollback,
        resource="admin_rollbacks",
        tags=["Admin Rollbacks"],
        summary="Roll accounts back",
        description="Return one account or every account migrated in a "
        "window to provider credentials.",
        operation_id="create_rollback",
        response_model=RollbackCreateResponse,
        status_code=200,
        errors=[
            *_ADMIN_ERRORS,
            ErrorSpec(status=404, description="Account not found"),
        ],
        auth_policy=_ADMIN,
    ),
    RouteMetadata(
        method=HTTPMethod.GET,
        path="/admin/rollbacks/candidates",
        handler=list_candidates,
        resource="admin_rollbacks",
        tags=["Admin Rollbacks"],
        summary="List rollback candidates",
        operation_id="list_rollback_candidates",
        response_model=RollbackCandidateListResponse,
        status_code=200,
        errors=_ADMIN_ERRORS,
        auth_policy=_ADMIN,
    ),
    # =========================================================================
    # Admin: audit
    # =========================================================================
    RouteMetadata(
        method=HTTPMethod.GET,
        path="/admin/audit/verification",
        handler=get_audit_verification,
        resource="admin_audit",
        tags=["Admin Audit"],
        summary="Verify audit chain",
        description="Walk the hash chain and report the first broken entry.",
        operation_id="verify_audit_chain",
        response_model=AuditVerificationResponse,
        status_code=200,
        errors=[
            *_ADMIN_ERRORS,
            ErrorSpec(status=409, description="Audit chain broken"),
        ],
        auth_policy=_ADMIN,
    ),
]
