"""Sliding window adapter implementing RateLimitProtocol.

Architecture:
    Domain Protocol <- SlidingWindowRateLimiter -> RedisStorage -> Redis

Fail-Closed Design:
    Every check runs under asyncio.timeout. A timeout, a Redis error or a
    missing rule denies the request with a fixed retry_after and logs a
    warning. Credential endpoints must never be left unthrottled because the
    limiter store is down.

Usage:
    from src.core.container import get_rate_limiter

    result = await get_rate_limiter().check(
        action=RateLimitAction.LOGIN,
        identifier="203.0.113.7:user@example.com",
    )
"""

from __future__ import annotations

import asyncio
from time import perf_counter
from typing import TYPE_CHECKING

from src.core.result import Failure, Result, Success
from src.domain.enums import RateLimitAction
from src.domain.errors import RateLimitError
from src.domain.value_objects import RateLimitResult, RateLimitRule

if TYPE_CHECKING:
    from src.domain.protocols import LoggerProtocol
    from src.infrastructure.rate_limit.redis_storage import RedisStorage


class SlidingWindowRateLimiter:
    """Sliding window log rate limiter.

    Args:
        storage: RedisStorage running the atomic Lua script.
        rules: Rule per action.
        logger: Structured logger.
        timeout_seconds: Upper bound on one check.
        unavailable_retry_after: retry_after reported when failing closed.
    """

    def __init__(
        self,
        *,
        storage: RedisStorage,
        rules: dict[RateLimitAction, RateLimitRule],
        logger: LoggerProtocol,
        timeout_seconds: float,
        unavailable_retry_after: int,
    ) -> None:
        self._storage = storage
        self._rules = rules
        self._logger = logger
        self._timeout_seconds = timeout_seconds
        self._unavailable_retry_after = unavailable_retry_after

    async def check(
        self,
        *,
        action: RateLimitAction,
        identifier: str,
    ) -> Result[RateLimitResult, RateLimitError]:
        """Record one attempt if the window has room.

        Returns:
            Result[RateLimitResult, RateLimitError]: Always Success; denials
                (including fail-closed ones) carry allowed=False.
        """
        rule = self._rules.get(action)
        if rule is None:
            self._logger.warning(
                "rate_limit_rule_missing", action=action.value, identifier=identifier
            )
            return Success(value=self._unavailable(limit=0))
        if not rule.enabled:
            return Success(
                value=RateLimitResult(
                    allowed=True,
                    remaining=rule.max_requests,
                    limit=rule.max_requests,
                )
            )

        start_time = perf_counter()
        key = self._build_key(action, identifier)
        try:
            async with asyncio.timeout(self._timeout_seconds):
                result = await self._storage.check_and_record(key=key, rule=rule)
        except TimeoutError:
            self._logger.warning(
                "rate_limit_timeout",
                action=action.value,
                timeout_seconds=self._timeout_seconds,
            )
            return Success(value=self._unavailable(limit=rule.max_requests))

        match result:
            case Failure(error=error):
                self._logger.warning(
                    "rate_limit_unavailable",
                    action=action.value,
                    error_code=error.code.value,
                    error_message=error.message,
                )
                return Success(value=self._unavailable(limit=rule.max_requests))
            case Success(value=decision):
                elapsed_ms = (perf_counter() - start_time) * 1000
                if decision.allowed:
                    self._logger.debug(
                        "rate_limit_allowed",
                        action=action.value,
                        remaining=decision.remaining,
                        execution_time_ms=round(elapsed_ms, 2),
                    )
                else:
                    self._logger.info(
                        "rate_limit_denied",
                        action=action.value,
                        retry_after=decision.retry_after,
                        execution_time_ms=round(elapsed_ms, 2),
                    )
                return Success(value=decision)

    async def reset(
        self,
        *,
        action: RateLimitAction,
        identifier: str,
    ) -> Result[None, RateLimitError]:
        """Clear one identifier's window (admin unlock, tests)."""
        result = await self._storage.reset(key=self._build_key(action, identifier))
        if isinstance(result, Failure):
            self._logger.error(
                "rate_limit_reset_failed",
                action=action.value,
                error_message=result.error.message,
            )
        return result

    @staticmethod
    def _build_key(action: RateLimitAction, identifier: str) -> str:
        return f"{action.value}:{identifier.strip().lower()}"

    def _unavailable(self, *, limit: int) -> RateLimitResult:
        return RateLimitResult(
            allowed=False,
            retry_after=self._unavailable_retry_after,
            remaining=0,
            limit=limit,
            reset_seconds=self._unavailable_retry_after,
        )
