"""Database models for the persistence layer.

SQLAlchemy models that map to database tables. Infrastructure concern only:
the domain layer never imports these.

Models Organization:
    - account.py: Accounts, lockout state and migration provenance
    - session.py: Durable session records
    - single_use_token.py: Activation and password reset tokens
    - audit_event.py: Hash-chained audit log (append-only)
    - migration_cohort.py: Rollout cohort progress

Note:
    Domain entities live in src/domain/entities/ and are mapped to these
    models by the repositories.
"""

from src.infrastructure.persistence.models.account import Account
from src.infrastructure.persistence.models.audit_event import AuditEvent
from src.infrastructure.persistence.models.migration_cohort import MigrationCohort
from src.infrastructure.persistence.models.session import Session
from src.infrastructure.persistence.models.single_use_token import SingleUseToken

__all__ = [
    "Account",
    "AuditEvent",
    "MigrationCohort",
    "Session",
    "SingleUseToken",
]
