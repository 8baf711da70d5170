"""Credential mode of an account.

Every account is tagged with the back-end that owns its credentials. Login,
session issuance and suspicious-login monitoring read this tag instead of
branching the whole flow per back-end.

Modes:
    PROVIDER: External identity provider verifies credentials; no local hash.
    LOCAL: Self-hosted credential store verifies credentials.
    MIGRATING: Moved to local, still linked upstream for rollback.
"""

from enum import Enum


class AuthMode(str, Enum):
    """Credential mode tag on an account."""

    PROVIDER = "provider"
    LOCAL = "local"
    MIGRATING = "migrating"

    @property
    def holds_local_password(self) -> bool:
        """True when the mode keeps a local password hash."""
        return self in (AuthMode.LOCAL, AuthMode.MIGRATING)
