"""Centralized constants for internal implementation details.

These are fixed implementation details, NOT environment-specific
configuration. Environment-specific settings live in `src/core/config.py`.

Categories:
- Token lengths: sizes for single-use tokens and request ids
- Audit chain: sentinels baked into the hash input
- Provider API: page size and timeouts
- Redaction: markers used when scrubbing metadata
"""

# =============================================================================
# Token Lengths
# =============================================================================

TOKEN_BYTES: int = 32
"""Number of random bytes in a single-use token (32 bytes = 256 bits)."""

TOKEN_HEX_LENGTH: int = 64
"""Length of a hex-encoded single-use token (TOKEN_BYTES * 2)."""


# =============================================================================
# Audit Chain
# =============================================================================

AUDIT_GENESIS_SENTINEL: str = "genesis"
"""Stand-in for previous_hash when hashing the first chain entry."""

SYSTEM_ACTOR_ID: str = "system"
"""Actor recorded for events without a human actor."""

ANONYMOUS_ACTOR_ID: str = "anonymous"
"""Actor recorded for login attempts that match no account."""

AUDIT_APPEND_MAX_ATTEMPTS: int = 3
"""Retries when a concurrent writer claims the same chain sequence."""


# =============================================================================
# Provider API
# =============================================================================

PROVIDER_PAGE_SIZE: int = 100
"""Users fetched per page when exporting from the identity provider."""

PROVIDER_NAME: str = "identity_provider"
"""Name attached to upstream errors and logs."""

BEARER_PREFIX: str = "Bearer "
"""HTTP Authorization header prefix for Bearer tokens."""

RESPONSE_BODY_MAX_LENGTH: int = 500
"""Maximum length for response body in error messages (truncation limit)."""


# =============================================================================
# Redaction
# =============================================================================

REDACTED_VALUE: str = "[REDACTED]"
"""Replacement for values whose key looks secret."""

SENSITIVE_KEY_FRAGMENTS: tuple[str, ...] = (
    "password",
    "token",
    "secret",
    "authorization",
    "api_key",
    "apikey",
    "credential",
)
"""Lowercase key fragments that mark a metadata value as secret."""
