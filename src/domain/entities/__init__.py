"""Domain entities.

Entities have identity and carry the business rules of the control plane.
"""

from src.domain.entities.account import Account
from src.domain.entities.audit_event import (
    AuditEvent,
    ChainVerification,
    ChainVerifier,
    canonical_json,
    format_timestamp,
    redact_secrets,
    verify_chain,
)
from src.domain.entities.migration_cohort import MigrationCohort
from src.domain.entities.session import Session
from src.domain.entities.single_use_token import SingleUseToken

__all__ = [
    "Account",
    "AuditEvent",
    "ChainVerification",
    "ChainVerifier",
    "MigrationCohort",
    "Session",
    "SingleUseToken",
    "canonical_json",
    "format_timestamp",
    "redact_secrets",
    "verify_chain",
]
