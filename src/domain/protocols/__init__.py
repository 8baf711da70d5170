"""Domain protocols (ports) package.

This package contains protocol definitions that the domain layer needs.
Infrastructure adapters implement these protocols without inheritance.

IMPORTANT: Re-exports are ONLY for protocols defined in this package.

Usage:
    # Service protocols
    from src.domain.protocols import AuditProtocol, PasswordHashingProtocol

    # Repository protocols
    from src.domain.protocols import AccountRepository, SessionRepository
"""

# Service protocols
from src.domain.protocols.audit_protocol import AuditProtocol
from src.domain.protocols.device_fingerprint_protocol import (
    DeviceFingerprintProtocol,
)
from src.domain.protocols.identity_provider_protocol import IdentityProviderProtocol
from src.domain.protocols.location_enricher_protocol import (
    GeoLocation,
    LocationEnricherProtocol,
)
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.notification_protocol import NotificationProtocol
from src.domain.protocols.password_hashing_protocol import PasswordHashingProtocol
from src.domain.protocols.rate_limit_protocol import RateLimitProtocol
from src.domain.protocols.session_token_protocol import SessionTokenProtocol
from src.domain.protocols.single_use_token_service_protocol import (
    SingleUseTokenServiceProtocol,
)

# Repository protocols
from src.domain.protocols.account_repository import AccountRepository
from src.domain.protocols.migration_cohort_repository import (
    MigrationCohortRepository,
)
from src.domain.protocols.session_repository import SessionRepository
from src.domain.protocols.single_use_token_repository import (
    SingleUseTokenRepository,
)

__all__ = [
    # Service protocols
    "AuditProtocol",
    "DeviceFingerprintProtocol",
    "IdentityProviderProtocol",
    "LocationEnricherProtocol",
    "LoggerProtocol",
    "NotificationProtocol",
    "PasswordHashingProtocol",
    "RateLimitProtocol",
    "SessionTokenProtocol",
    "SingleUseTokenServiceProtocol",
    "GeoLocation",
    # Repository protocols
    "AccountRepository",
    "MigrationCohortRepository",
    "SessionRepository",
    "SingleUseTokenRepository",
]
