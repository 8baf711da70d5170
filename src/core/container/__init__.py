"""Container module - Centralized dependency injection.

This module re-exports all factory functions from submodules:

    from src.core.container import get_audit, get_login_handler, ...

The container is organized into modules by concern:
- infrastructure: Core services (db, redis, rate limiting, security, logging)
- repositories: Repository factories
- auth_handlers: Authentication handler factories
- migration_handlers: Migration and rollback handler factories
"""

# Infrastructure services
from src.core.container.infrastructure import (
    get_audit,
    get_database,
    get_db_session,
    get_fingerprinter,
    get_location_enricher,
    get_identity_provider,
    get_lockout_policy,
    get_logger,
    get_notifications,
    get_password_service,
    get_rate_limiter,
    get_redis,
    get_session_token_service,
    get_single_use_token_service,
    get_suspicious_login_monitor,
)

# Repositories
from src.core.container.repositories import (
    get_account_repository,
    get_migration_cohort_repository,
    get_session_repository,
    get_single_use_token_repository,
)

# Auth handlers
from src.core.container.auth_handlers import (
    get_activate_account_handler,
    get_login_handler,
    get_request_password_reset_handler,
    get_reset_password_handler,
    get_revoke_session_handler,
    get_validate_session_handler,
)

# Migration handlers
from src.core.container.migration_handlers import (
    get_advance_cohort_handler,
    get_list_recently_migrated_handler,
    get_migrate_accounts_handler,
    get_migration_orchestrator,
    get_migration_progress_handler,
    get_rollback_accounts_handler,
    get_rollback_service,
    get_verify_audit_chain_handler,
)

__all__ = [
    # Infrastructure
    "get_audit",
    "get_database",
    "get_db_session",
    "get_fingerprinter",
    "get_location_enricher",
    "get_identity_provider",
    "get_lockout_policy",
    "get_logger",
    "get_notifications",
    "get_password_service",
    "get_rate_limiter",
    "get_redis",
    "get_session_token_service",
    "get_single_use_token_service",
    "get_suspicious_login_monitor",
    # Repositories
    "get_account_repository",
    "get_migration_cohort_repository",
    "get_session_repository",
    "get_single_use_token_repository",
    # Auth handlers
    "get_activate_account_handler",
    "get_login_handler",
    "get_request_password_reset_handler",
    "get_reset_password_handler",
    "get_revoke_session_handler",
    "get_validate_session_handler",
    # Migration handlers
    "get_advance_cohort_handler",
    "get_list_recently_migrated_handler",
    "get_migrate_accounts_handler",
    "get_migration_orchestrator",
    "get_migration_progress_handler",
    "get_rollback_accounts_handler",
    "get_rollback_service",
    "get_verify_audit_chain_handler",
]
