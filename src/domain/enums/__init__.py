"""Domain enums.

Available Enums:
    - AccountRole: Role carried into the session token
    - AccountStatus: Account lifecycle status
    - AuditAction: Closed set of audited actions
    - AuthMode: Credential mode tag (provider, local, migrating)
    - RateLimitAction: Independent rate limit keyspaces
    - RolloutCohort: Gradual rollout stages
    - SuspicionReason: Suspicious-login signals
    - TokenPurpose: What a single-use token authorizes
"""

from src.domain.enums.account_role import AccountRole
from src.domain.enums.account_status import AccountStatus
from src.domain.enums.audit_action import AuditAction
from src.domain.enums.auth_mode import AuthMode
from src.domain.enums.rate_limit_action import RateLimitAction
from src.domain.enums.rollout_cohort import RolloutCohort
from src.domain.enums.suspicion_reason import SuspicionReason
from src.domain.enums.token_purpose import TokenPurpose

__all__ = [
    "AccountRole",
    "AccountStatus",
    "AuditAction",
    "AuthMode",
    "RateLimitAction",
    "RolloutCohort",
    "SuspicionReason",
    "TokenPurpose",
]
