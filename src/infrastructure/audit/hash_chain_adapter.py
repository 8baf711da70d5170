"""Hash-chained implementation of AuditProtocol.

Every entry stores the hash of its predecessor and a hash over its own
content, so tampering with any stored row is detectable by verify().

Serialization:
    Each append runs in its own short transaction (Database.transaction),
    independent of the request's session:
    - In process: an asyncio.Lock admits one appender at a time
    - PostgreSQL: pg_advisory_xact_lock serializes appenders, released at
      commit
    - Every database: UNIQUE(sequence) rejects a racing writer that read the
      same chain head; the loser retries from a fresh read

Error Handling:
    append() never raises. Database, driver and serialization failures are
    logged and returned as Failure(AuditError); the audited operation
    carries on.

Usage:
    adapter = HashChainAuditAdapter(database=database, logger=logger)
    result = await adapter.append(
        actor_id="system",
        action=AuditAction.MIGRATION_IMPORT,
        resource_type="migration",
        metadata={"created": 12},
    )
"""

import asyncio
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError as SQLIntegrityError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.constants import AUDIT_APPEND_MAX_ATTEMPTS
from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.entities import (
    AuditEvent,
    ChainVerification,
    ChainVerifier,
    redact_secrets,
)
from src.domain.enums import AuditAction
from src.domain.errors import AuditError
from src.domain.protocols import LoggerProtocol
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.models.audit_event import (
    AuditEvent as AuditEventModel,
)

# Arbitrary application-wide key for pg_advisory_xact_lock.
AUDIT_CHAIN_LOCK_KEY = 0x5A17_C4A1
VERIFY_PAGE_SIZE = 500


class HashChainAuditAdapter:
    """Append-only audit log with a SHA-256 hash chain.

    Attributes:
        database: Database used to open one transaction per append.
        logger: Structured logger.
    """

    def __init__(
        self,
        *,
        database: Database,
        logger: LoggerProtocol,
        max_attempts: int = AUDIT_APPEND_MAX_ATTEMPTS,
    ) -> None:
        self.database = database
        self.logger = logger
        self.max_attempts = max_attempts
        self._append_lock = asyncio.Lock()

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
        """Append one entry at the head of the chain.

        Returns:
            Result[AuditEvent, AuditError]: The sealed entry, or the failure.
        """
        last_error: Exception | None = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                event = AuditEvent(
                    id=uuid4(),
                    sequence=0,
                    actor_id=actor_id,
                    action=action,
                    resource_type=resource_type,
                    resource_id=resource_id,
                    timestamp=datetime.now(UTC),
                    previous_hash=None,
                    actor_email=actor_email,
                    actor_role=actor_role,
                    ip_address=ip_address,
                    user_agent=user_agent,
                    previous_state=redact_secrets(previous_state),
                    new_state=redact_secrets(new_state),
                    metadata=redact_secrets(metadata),
                )
                async with (
                    self._append_lock,
                    self.database.transaction() as session,
                ):
                    await self._lock_chain(session)
                    head = await self._chain_head(session)
                    if head is not None:
                        event.sequence = head.sequence + 1
                        event.previous_hash = head.hash
                    else:
                        event.sequence = 1
                    event.seal()
                    session.add(self._to_model(event))
                return Success(value=event)
            except SQLIntegrityError as e:
                # Another writer claimed this sequence number
                last_error = e
                self.logger.warning(
                    "audit_append_conflict",
                    action=action.value,
                    attempt=attempt,
                )
            except SQLAlchemyError as e:
                last_error = e
                break
            except Exception as e:
                # Driver connect errors or an unserializable payload
                last_error = e
                break

        self.logger.error(
            "audit_append_failed",
            error=last_error,
            action=action.value,
            resource_type=resource_type,
            resource_id=resource_id,
        )
        return Failure(
            error=AuditError(
                code=ErrorCode.AUDIT_RECORD_FAILED,
                message="Failed to append audit entry",
                details={
                    "action": action.value,
                    "resource_type": resource_type,
                    "error_type": type(last_error).__name__,
                },
            )
        )

    async def verify(self) -> Result[ChainVerification, AuditError]:
        """Stream the chain in sequence order through a ChainVerifier.

        Returns:
            Result[ChainVerification, AuditError]: The verification outcome,
                or Failure if the log could not be read.
        """
        verifier = ChainVerifier()
        last_sequence = 0
        try:
            async with self.database.get_session() as session:
                while not verifier.broken:
                    stmt = (
                        select(AuditEventModel)
                        .where(AuditEventModel.sequence > last_sequence)
                        .order_by(AuditEventModel.sequence.asc())
                        .limit(VERIFY_PAGE_SIZE)
                    )
                    result = await session.execute(stmt)
                    page = [self._to_domain(row) for row in result.scalars().all()]
                    if not page:
                        break
                    verifier.feed_all(page)
                    last_sequence = page[-1].sequence
        except SQLAlchemyError as e:
            self.logger.error("audit_verify_failed", error=e)
            return Failure(
                error=AuditError(
                    code=ErrorCode.AUDIT_QUERY_FAILED,
                    message="Failed to read audit log",
                    details={"error_type": type(e).__name__},
                )
            )

        verification = verifier.result()
        if not verification.valid:
            self.logger.critical(
                "audit_chain_broken",
                broken_at_id=verification.broken_at_id,
                broken_at_sequence=verification.broken_at_sequence,
            )
        return Success(value=verification)

    async def _lock_chain(self, session: AsyncSession) -> None:
        if self.database.is_postgresql:
            await session.execute(
                text("SELECT pg_advisory_xact_lock(:key)"),
                {"key": AUDIT_CHAIN_LOCK_KEY},
            )

    async def _chain_head(self, session: AsyncSession) -> AuditEventModel | None:
        stmt = (
            select(AuditEventModel)
            .order_by(AuditEventModel.sequence.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    def _to_model(self, event: AuditEvent) -> AuditEventModel:
        action = (
            event.action.value
            if isinstance(event.action, AuditAction)
            else str(event.action)
        )
        return AuditEventModel(
            id=event.id,
            sequence=event.sequence,
            actor_id=event.actor_id,
            actor_email=event.actor_email,
            actor_role=event.actor_role,
            ip_address=event.ip_address,
            user_agent=event.user_agent,
            action=action,
            resource_type=event.resource_type,
            resource_id=event.resource_id,
            previous_state=event.previous_state,
            new_state=event.new_state,
            event_metadata=event.metadata,
            timestamp=event.timestamp,
            hash=event.hash,
            previous_hash=event.previous_hash,
        )

    def _to_domain(self, model: AuditEventModel) -> AuditEvent:
        try:
            action: AuditAction | str = AuditAction(model.action)
        except ValueError:
            action = model.action
        return AuditEvent(
            id=model.id,
            sequence=model.sequence,
            actor_id=model.actor_id,
            action=action,
            resource_type=model.resource_type,
            resource_id=model.resource_id,
            timestamp=model.timestamp,
            previous_hash=model.previous_hash,
            hash=model.hash,
            actor_email=model.actor_email,
            actor_role=model.actor_role,
            ip_address=model.ip_address,
            user_agent=model.user_agent,
            previous_state=model.previous_state,
            new_state=model.new_state,
            metadata=model.event_metadata,
        )
