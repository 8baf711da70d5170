"""Account domain entity.

Pure business logic, no framework dependencies.

Credential Mode:
    Every account carries an AuthMode tag. The local password hash exists
    only for LOCAL and MIGRATING accounts that have finished activation.
    The mutators below are the only way the tag or the hash change, so the
    invariant holds after every call.

Lockout:
    failed_login_attempts and locked_until are written by the repository's
    atomic increment during login; the entity only reads them and clears them.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from src.domain.enums import AccountRole, AccountStatus, AuthMode


@dataclass(slots=True, kw_only=True)
class Account:
    """Account with credential and lockout business rules.

    Business Rules:
        - password_hash is set iff auth_mode is LOCAL or MIGRATING and the
          status is not PENDING_ACTIVATION
        - Moving to PROVIDER mode discards the local hash
        - Moving a hashless account to LOCAL or MIGRATING puts it into
          PENDING_ACTIVATION until the owner sets a password
        - Accounts are never deleted; DEACTIVATED is terminal for login

    Attributes:
        id: Unique account identifier (UUIDv7).
        email: Normalized email (unique).
        first_name: Given name.
        last_name: Family name.
        role: Role carried into session tokens.
        status: Lifecycle status.
        auth_mode: Credential mode tag.
        password_hash: Bcrypt hash, or None.
        phone: Optional phone number.

        Lockout:
            failed_login_attempts: Consecutive failed logins.
            locked_until: Lock expiry (None if never locked).

        Credential Lifecycle:
            must_change_password: Force a password change after login.
            password_changed_at: When the local password was last set.
            last_login_at: Last successful login.
            last_login_ip: IP of the last successful login.

        Migration Provenance:
            provider_user_id: Upstream identifier (unique).
            provider_metadata: Sanitized upstream metadata snapshot.
            migrated_at: When the account left PROVIDER mode.
            migrated_by: Who moved it.
            migration_notes: Free-form notes (cohort, rollback reason).
    """

    id: UUID
    email: str
    first_name: str
    last_name: str
    role: AccountRole = AccountRole.MEMBER
    status: AccountStatus = AccountStatus.PENDING_ACTIVATION
    auth_mode: AuthMode = AuthMode.PROVIDER
    password_hash: str | None = None
    phone: str | None = None

    failed_login_attempts: int = 0
    locked_until: datetime | None = None

    must_change_password: bool = False
    password_changed_at: datetime | None = None
    last_login_at: datetime | None = None
    last_login_ip: str | None = None

    provider_user_id: str | None = None
    provider_metadata: dict[str, Any] | None = None
    migrated_at: datetime | None = None
    migrated_by: str | None = None
    migration_notes: str | None = None

    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def full_name(self) -> str:
        """Display name."""
        return f"{self.first_name} {self.last_name}".strip()

    def is_locked(self, now: datetime | None = None) -> bool:
        """Check whether the account is currently locked.

        Args:
            now: Reference time (defaults to current UTC time).

        Returns:
            bool: True while locked_until lies in the future.
        """
        if self.locked_until is None:
            return False
        return (now or datetime.now(UTC)) < self.locked_until

    def has_local_password(self) -> bool:
        """True when a local hash exists and the mode honours it."""
        return self.password_hash is not None and self.auth_mode.holds_local_password

    def apply_auth_mode(self, mode: AuthMode) -> None:
        """Switch credential mode, keeping the password invariant.

        Side Effects:
            - PROVIDER: clears password_hash; a PENDING_ACTIVATION account
              stays pending (activation is a local concept)
            - LOCAL/MIGRATING without a hash: status becomes
              PENDING_ACTIVATION unless the account is suspended or deactivated

        Args:
            mode: Target credential mode.
        """
        self.auth_mode = mode
        self.updated_at = datetime.now(UTC)
        if not mode.holds_local_password:
            self.password_hash = None
            return
        if self.password_hash is None and not self.status.blocks_login:
            self.status = AccountStatus.PENDING_ACTIVATION

    def set_password(self, password_hash: str, now: datetime | None = None) -> None:
        """Install a new local password hash.

        Completes activation for PENDING_ACTIVATION accounts.

        Args:
            password_hash: Bcrypt hash of the new password.
            now: Reference time.

        Raises:
            ValueError: If the account's mode cannot hold a local password.
        """
        if not self.auth_mode.holds_local_password:
            raise ValueError(
                f"Account in {self.auth_mode.value} mode cannot hold a local password"
            )
        moment = now or datetime.now(UTC)
        self.password_hash = password_hash
        self.password_changed_at = moment
        self.must_change_password = False
        if self.status == AccountStatus.PENDING_ACTIVATION:
            self.status = AccountStatus.ACTIVE
        self.updated_at = moment

    def clear_lockout(self) -> None:
        """Reset the failed attempt counter and any lock."""
        self.failed_login_attempts = 0
        self.locked_until = None

    def record_successful_login(
        self, ip_address: str | None, now: datetime | None = None
    ) -> None:
        """Apply the effects of a successful login.

        Side Effects:
            - Clears lockout state
            - Records last_login_at and last_login_ip
        """
        moment = now or datetime.now(UTC)
        self.clear_lockout()
        self.last_login_at = moment
        self.last_login_ip = ip_address
        self.updated_at = moment

    def mark_migrated(
        self,
        *,
        mode: AuthMode,
        migrated_by: str | None,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> None:
        """Move the account off the provider and stamp provenance.

        Args:
            mode: LOCAL or MIGRATING.
            migrated_by: Actor recorded for the move.
            notes: Provenance note (cohort name, import run).
            now: Reference time.

        Raises:
            ValueError: If mode is PROVIDER.
        """
        if not mode.holds_local_password:
            raise ValueError("mark_migrated requires a local credential mode")
        self.apply_auth_mode(mode)
        self.migrated_at = now or datetime.now(UTC)
        self.migrated_by = migrated_by
        if notes is not None:
            self.migration_notes = notes

    def was_migrated(self) -> bool:
        """True when the account has migration provenance to roll back."""
        return self.migrated_at is not None and self.provider_user_id is not None

    def roll_back_to_provider(self, note: str, now: datetime | None = None) -> None:
        """Return the account to provider credentials.

        Side Effects:
            - auth_mode becomes PROVIDER (local hash discarded)
            - migrated_at and migrated_by are cleared
            - migration_notes records the rollback note
            - lockout state is cleared
        """
        self.apply_auth_mode(AuthMode.PROVIDER)
        self.migrated_at = None
        self.migrated_by = None
        self.migration_notes = note
        self.clear_lockout()
        self.updated_at = now or datetime.now(UTC)
