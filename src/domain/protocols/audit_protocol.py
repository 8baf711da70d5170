"""Audit trail protocol (port) for the hash-chained audit log.

Following hexagonal architecture:
- Domain defines the PORT (this protocol)
- Infrastructure provides ADAPTERS (HashChainAuditAdapter)
- Application layer uses the protocol (doesn't know about specific adapters)

Usage:
    from src.domain.protocols import AuditProtocol
    from src.domain.enums import AuditAction

    result = await audit.append(
        actor_id=str(account.id),
        action=AuditAction.LOGIN_SUCCESS,
        resource_type="session",
        resource_id=str(session_id),
        ip_address=client.ip_address,
        metadata={"application": client.application},
    )
"""

from typing import Any, Protocol

from src.core.result import Result
from src.domain.entities import AuditEvent, ChainVerification
from src.domain.enums import AuditAction
from src.domain.errors import AuditError


class AuditProtocol(Protocol):
    """Protocol for the append-only, hash-chained audit log.

    Implementations:
        - HashChainAuditAdapter: SQLAlchemy (PostgreSQL advisory lock,
          UNIQUE sequence column)

    Error Handling:
        All methods return Result types (Success or Failure).
        NEVER raise exceptions - wrap in Failure(AuditError(...)) instead.
        Callers log a failed append and carry on with the audited operation.
    """

    async def append(
        self,
        *,
        actor_id: str,
        action: AuditAction,
        resource_type: str,
        resource_id: str | None = None,
        actor_email: str | None = None,
        actor_role: str | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
        previous_state: dict[str, Any] | None = None,
        new_state: dict[str, Any] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Result[AuditEvent, AuditError]:
        """Append one entry linked to the current chain head.

        Metadata is redacted before it is hashed and stored.

        Args:
            actor_id: Acting account id, or "system".
            action: What happened.
            resource_type: Kind of resource affected.
            resource_id: Affected resource, if any.
            actor_email: Actor's email.
            actor_role: Actor's role.
            ip_address: Client IP.
            user_agent: Client User-Agent.
            previous_state: State before the change.
            new_state: State after the change.
            metadata: Action-specific context.

        Returns:
            Result[AuditEvent, AuditError]:
                - Success(AuditEvent) with sequence and hash assigned
                - Failure(AuditError) if the entry could not be written
        """
        ...

    async def verify(self) -> Result[ChainVerification, AuditError]:
        """Walk the whole chain in sequence order.

        Returns:
            Result[ChainVerification, AuditError]:
                - Success(ChainVerification) whether or not the chain is intact
                - Failure(AuditError) if the log could not be read
        """
        ...
