"""Audit event entity and hash chain rules.

Pure business logic, no framework dependencies.

Every audit entry commits to its predecessor: its hash covers its own fields
plus the previous entry's hash. Altering, deleting or reordering any stored
entry breaks verification from that entry onward.

Hash Input (pipe-joined, in this order):
    event_id | actor_id | action | resource_type | resource_id or "" |
    timestamp (ISO-8601 UTC, milliseconds, "Z") | previous_hash or "genesis" |
    canonical JSON of previous_state | canonical JSON of new_state |
    canonical JSON of metadata

Canonical JSON sorts keys, uses compact separators and writes ``null`` for
absent payloads. Payloads are normalized through the same serializer before
they are stored so a stored row re-serializes to identical text.
"""

import hashlib
import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from src.core.constants import (
    AUDIT_GENESIS_SENTINEL,
    REDACTED_VALUE,
    SENSITIVE_KEY_FRAGMENTS,
)
from src.domain.enums import AuditAction


def canonical_json(value: Any) -> str:
    """Serialize a payload deterministically.

    Args:
        value: JSON-compatible payload or None.

    Returns:
        str: Compact JSON with sorted keys ("null" for None).
    """
    return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)


def normalize_payload(value: Any) -> Any:
    """Round-trip a payload through canonical JSON.

    UUIDs, datetimes and enums become strings, exactly as hashing sees them.
    """
    if value is None:
        return None
    return json.loads(canonical_json(value))


def _is_sensitive_key(key: object) -> bool:
    lowered = str(key).lower()
    return any(fragment in lowered for fragment in SENSITIVE_KEY_FRAGMENTS)


def redact_secrets(value: Any) -> Any:
    """Replace values stored under secret-looking keys, recursively."""
    if isinstance(value, dict):
        return {
            key: REDACTED_VALUE if _is_sensitive_key(key) else redact_secrets(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [redact_secrets(item) for item in value]
    return value


def truncate_to_millis(moment: datetime) -> datetime:
    """Drop sub-millisecond precision and normalize to UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    moment = moment.astimezone(UTC)
    return moment.replace(microsecond=(moment.microsecond // 1000) * 1000)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a trailing Z."""
    moment = truncate_to_millis(moment)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


@dataclass(slots=True, kw_only=True)
class AuditEvent:
    """Append-only audit log entry.

    Business Rules:
        - Entries are never updated or deleted
        - previous_hash is None only for the first entry (sequence 1)
        - hash equals compute_hash() for an untampered entry

    Attributes:
        id: Random event identifier (part of the hash input).
        sequence: Position in the chain, starting at 1.
        actor_id: Acting account id, or "system".
        action: What happened (raw string when a stored value is not a
            known action).
        resource_type: Kind of resource affected.
        resource_id: Affected resource, if any.
        timestamp: When it happened (UTC, millisecond precision).
        previous_hash: Hash of the preceding entry, None for the first.
        hash: SHA-256 hex of this entry's hash input.
        actor_email: Actor's email (not hashed).
        actor_role: Actor's role (not hashed).
        ip_address: Client IP (not hashed).
        user_agent: Client User-Agent (not hashed).
        previous_state: State before the change.
        new_state: State after the change.
        metadata: Action-specific context.
    """

    id: UUID
    sequence: int
    actor_id: str
    action: AuditAction | str
    resource_type: str
    resource_id: str | None
    timestamp: datetime
    previous_hash: str | None
    hash: str = ""
    actor_email: str | None = None
    actor_role: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    previous_state: dict[str, Any] | None = None
    new_state: dict[str, Any] | None = None
    metadata: dict[str, Any] | None = field(default=None)

    def hash_input(self) -> str:
        """Pipe-joined string the hash is computed over."""
        action = (
            self.action.value
            if isinstance(self.action, AuditAction)
            else str(self.action)
        )
        return "|".join(
            [
                str(self.id),
                self.actor_id,
                action,
                self.resource_type,
                self.resource_id or "",
                format_timestamp(self.timestamp),
                self.previous_hash or AUDIT_GENESIS_SENTINEL,
                canonical_json(self.previous_state),
                canonical_json(self.new_state),
                canonical_json(self.metadata),
            ]
        )

    def compute_hash(self) -> str:
        """SHA-256 hex digest of hash_input()."""
        return hashlib.sha256(self.hash_input().encode("utf-8")).hexdigest()

    def seal(self) -> None:
        """Normalize payloads and timestamp, then set hash."""
        self.timestamp = truncate_to_millis(self.timestamp)
        self.previous_state = normalize_payload(self.previous_state)
        self.new_state = normalize_payload(self.new_state)
        self.metadata = normalize_payload(self.metadata)
        self.hash = self.compute_hash()


@dataclass(frozen=True, slots=True, kw_only=True)
class ChainVerification:
    """Outcome of walking the audit chain.

    Attributes:
        valid: True when every entry links and hashes correctly.
        total_entries: Entries examined (all entries when valid).
        broken_at_id: Event id of the first failing entry.
        broken_at_sequence: Sequence of the first failing entry.
        message: Human-readable summary.
    """

    valid: bool
    total_entries: int
    broken_at_id: str | None = None
    broken_at_sequence: int | None = None
    message: str = ""


class ChainVerifier:
    """Incremental chain checker.

    Feed entries in sequence order; verification stops at the first broken
    entry. Works on streamed pages so the whole log never has to be in memory.

    Example:
        >>> verifier = ChainVerifier()
        >>> for page in pages:
        ...     if not verifier.feed_all(page):
        ...         break
        >>> verifier.result()
    """

    def __init__(self) -> None:
        self._previous_hash: str | None = None
        self._count = 0
        self._failure: ChainVerification | None = None

    @property
    def broken(self) -> bool:
        return self._failure is not None

    def feed(self, event: AuditEvent) -> bool:
        """Check one entry.

        Returns:
            bool: False once the chain is broken.
        """
        if self._failure is not None:
            return False
        self._count += 1
        if event.previous_hash != self._previous_hash:
            self._failure = self._broken(
                event, "previous_hash does not match the preceding entry"
            )
            return False
        if event.compute_hash() != event.hash:
            self._failure = self._broken(
                event, "stored hash does not match entry contents"
            )
            return False
        self._previous_hash = event.hash
        return True

    def feed_all(self, events: Iterable[AuditEvent]) -> bool:
        for event in events:
            if not self.feed(event):
                return False
        return True

    def result(self) -> ChainVerification:
        if self._failure is not None:
            return self._failure
        return ChainVerification(
            valid=True,
            total_entries=self._count,
            message=f"Audit chain intact ({self._count} entries)",
        )

    def _broken(self, event: AuditEvent, reason: str) -> ChainVerification:
        return ChainVerification(
            valid=False,
            total_entries=self._count,
            broken_at_id=str(event.id),
            broken_at_sequence=event.sequence,
            message=f"Chain broken at entry {event.sequence}: {reason}",
        )


def verify_chain(events: Iterable[AuditEvent]) -> ChainVerification:
    """Verify an ordered run of entries starting at the first entry."""
    verifier = ChainVerifier()
    verifier.feed_all(events)
    return verifier.result()
