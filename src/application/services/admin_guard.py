"""Admin role verification.

Centralizes the role check shared by migration, rollback and audit handlers,
so each handler starts with the same guard instead of repeating it.

Usage:
    match require_admin(cmd.actor):
        case Failure(error=error):
            return Failure(error=error)
"""

from src.application.dtos.auth_dtos import AuthenticatedActor
from src.core.enums import ErrorCode
from src.core.errors import AuthorizationError
from src.core.result import Failure, Result, Success
from src.domain.enums import AccountRole


def require_admin(
    actor: AuthenticatedActor,
) -> Result[AuthenticatedActor, AuthorizationError]:
    """Verify the actor holds the admin role.

    Args:
        actor: Caller resolved from the session token.

    Returns:
        Success(actor) for admins.
        Failure(AuthorizationError) for everyone else.
    """
    if actor.is_admin:
        return Success(value=actor)
    return Failure(
        error=AuthorizationError(
            code=ErrorCode.PERMISSION_DENIED,
            message="Administrator role required",
            required_permission=AccountRole.ADMIN.value,
        )
    )
