"""LoggerProtocol definition for structured logging.

Backend-agnostic contract for structured logs: a fixed message plus
key-value context. Implementations render the context (JSON or console) and
may add timestamp and level.

Security:
    - NEVER log passwords, raw session tokens or single-use tokens
    - Log account ids rather than emails where an id is available

Usage:
    from src.core.container import get_logger

    logger = get_logger()
    logger.info("login_succeeded", account_id=str(account.id))

    scoped = logger.bind(handler="advance_cohort", cohort="pilot")
    scoped.warning("cohort_target_unreachable", remaining=3)
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters.

    Levels follow the usual hierarchy: debug for diagnostics, info for normal
    events, warning for degraded paths (limiter unavailable, audit retry),
    error for failed operations, critical for integrity failures such as a
    broken audit chain.
    """

    def debug(self, message: str, /, **context: Any) -> None: ...

    def info(self, message: str, /, **context: Any) -> None: ...

    def warning(self, message: str, /, **context: Any) -> None: ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error, optionally with the exception that caused it.

        Args:
            message: Event name (avoid f-strings; use context).
            error: Exception whose type and message are added to the entry.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a failure that needs immediate human attention."""
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return a new logger that adds context to every entry.

        The original logger is left unchanged.
        """
        ...

    def with_context(self, **context: Any) -> LoggerProtocol:
        """Alias for bind()."""
        ...
