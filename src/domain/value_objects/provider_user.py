"""Identity provider records and migration options.

Provider users are read-only snapshots fetched from the external identity
provider. They are already sanitized by the infrastructure mapper: private
metadata never reaches the domain, and secret-looking public metadata values
are redacted.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from src.domain.enums.account_role import AccountRole
from src.domain.enums.auth_mode import AuthMode


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderUser:
    """Account snapshot exported from the identity provider.

    Attributes:
        provider_user_id: Identifier assigned by the provider.
        email: Primary email, normalized (None when the provider has none).
        email_verified: Whether the provider verified the primary email.
        first_name: Given name, if known.
        last_name: Family name, if known.
        phone: Primary phone number, if known.
        public_metadata: Sanitized public metadata (role hints live here).
        created_at: When the provider created the user.
        last_sign_in_at: Last provider sign-in, used to order cohorts.
    """

    provider_user_id: str
    email: str | None
    email_verified: bool = False
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    public_metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    last_sign_in_at: datetime | None = None

    @property
    def role_hint(self) -> str | None:
        """Role named in public metadata, if any."""
        role = self.public_metadata.get("role")
        return role if isinstance(role, str) else None


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderUserPage:
    """One page of a provider export.

    Attributes:
        users: Users on this page.
        total_count: Total users the provider reports.
        next_offset: Offset of the next page, or None when exhausted.
    """

    users: list[ProviderUser]
    total_count: int
    next_offset: int | None


@dataclass(frozen=True, slots=True, kw_only=True)
class MigrationOptions:
    """How provider users are mapped onto local accounts.

    Attributes:
        set_auth_mode: Credential mode written onto the account. None keeps
            the existing mode (PROVIDER for new accounts).
        require_password_reset: Sets must_change_password on the account.
        default_role: Role used when the provider carries no role hint.
        migrated_by: Actor recorded as the migration's author.
        notes: Free-form provenance note.
    """

    set_auth_mode: AuthMode | None = None
    require_password_reset: bool = False
    default_role: AccountRole = AccountRole.MEMBER
    migrated_by: str | None = None
    notes: str | None = None
