"""Redis-backed storage for sliding window rate limiting.

Runs the sliding window Lua script (EVALSHA) so that pruning, counting and
recording a request happen atomically inside Redis. Key shaping and the
fail-closed policy live in the higher-level adapter.

Note:
    This is a storage component used by SlidingWindowRateLimiter. It is not
    exposed directly to the application layer.
"""

from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from time import time
from typing import Any
from uuid import uuid4

from redis.exceptions import NoScriptError, RedisError

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.errors import RateLimitError
from src.domain.value_objects import RateLimitResult, RateLimitRule


@dataclass(slots=True)
class _LuaRefs:
    """Holds loaded Lua script SHA references."""

    sliding_window_sha: str | None = None


class RedisStorage:
    """Redis storage for rate limiting with an atomic Lua script.

    The script is loaded once and executed via EVALSHA. If Redis loses its
    script cache (restart, SCRIPT FLUSH) the script is reloaded once.

    Args:
        redis_client: An async Redis client (redis.asyncio.Redis compatible).
    """

    def __init__(self, *, redis_client: Any) -> None:
        self.redis = redis_client
        self._lua = _LuaRefs()
        self._script_lock = asyncio.Lock()

    async def check_and_record(
        self,
        *,
        key: str,
        rule: RateLimitRule,
        now_ms: int | None = None,
    ) -> Result[RateLimitResult, RateLimitError]:
        """Atomically prune, count and (if allowed) record one request.

        Args:
            key: Full sorted set key (action prefix plus identifier).
            rule: Rule providing the window and limit.
            now_ms: Override current time in milliseconds (tests).

        Returns:
            Result[RateLimitResult, RateLimitError]: Failure on any Redis
                error; the caller decides how to degrade.
        """
        now = now_ms if now_ms is not None else int(time() * 1000)
        args = (now, rule.window_ms, rule.max_requests, f"{now}-{uuid4().hex}")
        try:
            try:
                resp = await self._evalsha(key, args)
            except NoScriptError:
                self._lua.sliding_window_sha = None
                resp = await self._evalsha(key, args)
        except RedisError as exc:
            return Failure(
                error=RateLimitError(
                    code=ErrorCode.RATE_LIMIT_CHECK_FAILED,
                    message=f"Rate limit check failed: {type(exc).__name__}",
                    details={"key": key},
                )
            )

        allowed = bool(int(resp[0]))
        retry_after = math.ceil(int(resp[2]) / 1000)
        return Success(
            value=RateLimitResult(
                allowed=allowed,
                retry_after=max(retry_after, 1) if not allowed else 0,
                remaining=int(resp[1]),
                limit=rule.max_requests,
                reset_seconds=math.ceil(int(resp[3]) / 1000),
            )
        )

    async def reset(self, *, key: str) -> Result[None, RateLimitError]:
        """Delete the window for one key.

        Unlike checks, reset reports real errors to callers.
        """
        try:
            await self.redis.delete(key)
            return Success(value=None)
        except RedisError as exc:
            return Failure(
                error=RateLimitError(
                    code=ErrorCode.RATE_LIMIT_RESET_FAILED,
                    message=f"Failed to reset rate limit for '{key}': {exc}",
                    details={"key": key},
                )
            )

    async def _evalsha(self, key: str, args: tuple[Any, ...]) -> list[Any]:
        sha = await self._ensure_sliding_window_script()
        resp: list[Any] = await self.redis.evalsha(sha, 1, key, *args)
        return resp

    async def _ensure_sliding_window_script(self) -> str:
        """Load the sliding window script into Redis and cache the SHA."""
        if self._lua.sliding_window_sha:
            return self._lua.sliding_window_sha
        async with self._script_lock:
            if self._lua.sliding_window_sha:
                return self._lua.sliding_window_sha
            script = await _read_lua_script("lua_scripts/sliding_window.lua")
            sha: str = await self.redis.script_load(script)
            self._lua.sliding_window_sha = sha
            return sha


def _read_lua_script_sync(path: Path) -> str:
    """Synchronous helper to read Lua script (called via run_in_executor)."""
    return path.read_text(encoding="utf-8")


async def _read_lua_script(rel_path: str) -> str:
    """Read Lua script file relative to this module.

    Uses run_in_executor to avoid blocking the event loop on file IO.
    """
    full_path = Path(__file__).parent / rel_path
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(_read_lua_script_sync, full_path))
