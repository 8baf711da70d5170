"""Repository implementations (adapters for hexagonal architecture).

This package contains concrete implementations of repository protocols
defined in the domain layer.
"""

from src.infrastructure.persistence.repositories.account_repository import (
    AccountRepository,
)
from src.infrastructure.persistence.repositories.migration_cohort_repository import (
    MigrationCohortRepository,
)
from src.infrastructure.persistence.repositories.session_repository import (
    SessionRepository,
)
from src.infrastructure.persistence.repositories.single_use_token_repository import (
    SingleUseTokenRepository,
)

__all__ = [
    "AccountRepository",
    "MigrationCohortRepository",
    "SessionRepository",
    "SingleUseTokenRepository",
]
