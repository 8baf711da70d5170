"""Single-use token redemption.

Shared by activation and password reset. Looking a token up and consuming it
are separate steps: the lookup explains WHY a token is unusable (unknown,
used, expired), the conditional consume makes the redemption atomic. A token
that passes the lookup but loses the consume race reports TOKEN_ALREADY_USED.
"""

from datetime import datetime

from src.core.enums import ErrorCode
from src.core.errors import (
    AuthenticationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from src.core.result import Failure, Result, Success
from src.domain.entities import SingleUseToken
from src.domain.enums import TokenPurpose
from src.domain.protocols import SingleUseTokenRepository
from src.domain.value_objects import Password


def check_password_policy(raw: str) -> Result[Password, ValidationError]:
    """Apply the password complexity rules to a chosen password."""
    try:
        return Success(value=Password(raw))
    except ValueError as e:
        return Failure(
            error=ValidationError(
                code=ErrorCode.PASSWORD_TOO_WEAK,
                message=str(e),
                field="new_password",
            )
        )


async def find_redeemable_token(
    token_repo: SingleUseTokenRepository,
    *,
    token_hash: str,
    purpose: TokenPurpose,
    now: datetime,
) -> Result[SingleUseToken, DomainError]:
    """Look up a token and explain why it cannot be redeemed.

    Returns:
        Success(SingleUseToken) when unused and unexpired.
        Failure(NotFoundError) for unknown tokens.
        Failure(ConflictError) for used or superseded tokens.
        Failure(AuthenticationError) for expired tokens.
    """
    token = await token_repo.find_by_hash(token_hash, purpose)
    if token is None:
        return Failure(
            error=NotFoundError(
                code=ErrorCode.TOKEN_NOT_FOUND,
                message="Token not found",
                resource_type="Token",
                resource_id=purpose.value,
            )
        )
    if token.is_used():
        return Failure(error=token_already_used())
    if token.is_expired(now):
        return Failure(
            error=AuthenticationError(
                code=ErrorCode.TOKEN_EXPIRED,
                message="Token has expired",
            )
        )
    return Success(value=token)


def token_already_used() -> ConflictError:
    return ConflictError(
        code=ErrorCode.TOKEN_ALREADY_USED,
        message="Token has already been used",
        resource_type="Token",
        conflicting_field="used_at",
    )
