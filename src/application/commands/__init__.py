"""Commands (CQRS write operations)."""

from src.application.commands.auth_commands import (
    ActivateAccount,
    Login,
    RequestPasswordReset,
    ResetPassword,
    RevokeSession,
)
from src.application.commands.migration_commands import (
    AdvanceCohort,
    MigrateAccounts,
    MigrationMode,
    RollbackAccounts,
    RollbackMode,
)

__all__ = [
    "ActivateAccount",
    "AdvanceCohort",
    "Login",
    "MigrateAccounts",
    "MigrationMode",
    "RequestPasswordReset",
    "ResetPassword",
    "RevokeSession",
    "RollbackAccounts",
    "RollbackMode",
]
