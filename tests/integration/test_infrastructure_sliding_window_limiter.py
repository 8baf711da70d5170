"""Integration tests for the sliding window rate limiter.

Tests cover:
- 5 logins per 15 minutes per identifier, 6th denied with retry_after > 0
- Window slides: old attempts stop counting
- Identifiers are isolated and normalized
- Fail closed on missing rule, timeout and Redis errors
- Disabled rules always allow
- reset() clears one identifier

Architecture:
- Real Lua script executed by fakeredis (fakeredis[lua])
- Clock controlled through RedisStorage.check_and_record(now_ms=...)
"""

import asyncio
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.enums import RateLimitAction
from src.domain.value_objects import RateLimitRule
from src.infrastructure.rate_limit import RedisStorage, SlidingWindowRateLimiter

LOGIN_RULE = RateLimitRule(
    action=RateLimitAction.LOGIN, max_requests=5, window_seconds=900
)
IDENTIFIER = "203.0.113.7:a@x.test"


@pytest.fixture
def storage(fake_redis):
    return RedisStorage(redis_client=fake_redis)


@pytest.fixture
def limiter(storage, mock_logger):
    return SlidingWindowRateLimiter(
        storage=storage,
        rules={RateLimitAction.LOGIN: LOGIN_RULE},
        logger=mock_logger,
        timeout_seconds=1.0,
        unavailable_retry_after=30,
    )


@pytest.mark.integration
class TestSlidingWindowLimit:
    """Five per window, then denial."""

    @pytest.mark.asyncio
    async def test_sixth_attempt_denied(self, limiter):
        # Act
        results = [
            await limiter.check(action=RateLimitAction.LOGIN, identifier=IDENTIFIER)
            for _ in range(6)
        ]

        # Assert
        decisions = [r.value for r in results]
        assert [d.allowed for d in decisions] == [True] * 5 + [False]
        assert [d.remaining for d in decisions[:5]] == [4, 3, 2, 1, 0]
        assert decisions[5].retry_after > 0
        assert decisions[5].retry_after <= 900
        assert decisions[5].limit == 5

    @pytest.mark.asyncio
    async def test_denied_attempts_not_recorded(self, storage, fake_redis):
        key = "auth:login:" + IDENTIFIER
        for i in range(8):
            await storage.check_and_record(key=key, rule=LOGIN_RULE, now_ms=1000 + i)

        assert await fake_redis.zcard(key) == 5

    @pytest.mark.asyncio
    async def test_window_slides(self, storage):
        # Arrange
        key = "auth:login:" + IDENTIFIER
        start = 1_700_000_000_000
        for i in range(5):
            await storage.check_and_record(
                key=key, rule=LOGIN_RULE, now_ms=start + i * 60_000
            )

        # Act
        blocked = await storage.check_and_record(
            key=key, rule=LOGIN_RULE, now_ms=start + 10 * 60_000
        )
        after_first_expires = await storage.check_and_record(
            key=key, rule=LOGIN_RULE, now_ms=start + 900_000 + 1
        )

        # Assert
        assert blocked.value.allowed is False
        assert blocked.value.retry_after == 300
        assert after_first_expires.value.allowed is True

    @pytest.mark.asyncio
    async def test_identifiers_isolated(self, limiter):
        for _ in range(5):
            await limiter.check(action=RateLimitAction.LOGIN, identifier=IDENTIFIER)

        other = await limiter.check(
            action=RateLimitAction.LOGIN, identifier="203.0.113.8:a@x.test"
        )

        assert other.value.allowed is True

    @pytest.mark.asyncio
    async def test_identifier_normalized(self, limiter):
        for _ in range(5):
            await limiter.check(action=RateLimitAction.LOGIN, identifier=IDENTIFIER)

        result = await limiter.check(
            action=RateLimitAction.LOGIN, identifier=" 203.0.113.7:A@X.TEST "
        )

        assert result.value.allowed is False


@pytest.mark.integration
class TestFailClosed:
    """Limiter outages deny instead of allowing."""

    @pytest.mark.asyncio
    async def test_missing_rule(self, limiter, mock_logger):
        result = await limiter.check(
            action=RateLimitAction.PASSWORD_RESET, identifier=IDENTIFIER
        )

        assert isinstance(result, Success)
        assert result.value.allowed is False
        assert result.value.retry_after == 30
        assert mock_logger.warning.call_args.args[0] == "rate_limit_rule_missing"

    @pytest.mark.asyncio
    async def test_redis_error(self, mock_logger):
        # Arrange
        client = AsyncMock()
        client.script_load.side_effect = RedisConnectionError("refused")
        limiter = SlidingWindowRateLimiter(
            storage=RedisStorage(redis_client=client),
            rules={RateLimitAction.LOGIN: LOGIN_RULE},
            logger=mock_logger,
            timeout_seconds=1.0,
            unavailable_retry_after=30,
        )

        # Act
        result = await limiter.check(
            action=RateLimitAction.LOGIN, identifier=IDENTIFIER
        )

        # Assert
        assert result.value.allowed is False
        assert result.value.retry_after == 30
        kwargs = mock_logger.warning.call_args.kwargs
        assert kwargs["error_code"] == ErrorCode.RATE_LIMIT_CHECK_FAILED.value

    @pytest.mark.asyncio
    async def test_timeout(self, mock_logger):
        async def slow_check(**kwargs):
            await asyncio.sleep(1)

        storage = AsyncMock()
        storage.check_and_record.side_effect = slow_check
        limiter = SlidingWindowRateLimiter(
            storage=storage,
            rules={RateLimitAction.LOGIN: LOGIN_RULE},
            logger=mock_logger,
            timeout_seconds=0.01,
            unavailable_retry_after=30,
        )

        result = await limiter.check(
            action=RateLimitAction.LOGIN, identifier=IDENTIFIER
        )

        assert result.value.allowed is False
        assert mock_logger.warning.call_args.args[0] == "rate_limit_timeout"

    @pytest.mark.asyncio
    async def test_disabled_rule_allows(self, storage, mock_logger):
        rule = RateLimitRule(
            action=RateLimitAction.LOGIN,
            max_requests=1,
            window_seconds=60,
            enabled=False,
        )
        limiter = SlidingWindowRateLimiter(
            storage=storage,
            rules={RateLimitAction.LOGIN: rule},
            logger=mock_logger,
            timeout_seconds=1.0,
            unavailable_retry_after=30,
        )

        for _ in range(3):
            result = await limiter.check(
                action=RateLimitAction.LOGIN, identifier=IDENTIFIER
            )
            assert result.value.allowed is True


@pytest.mark.integration
class TestReset:
    """Test reset()."""

    @pytest.mark.asyncio
    async def test_reset_clears_window(self, limiter):
        for _ in range(5):
            await limiter.check(action=RateLimitAction.LOGIN, identifier=IDENTIFIER)

        reset = await limiter.reset(
            action=RateLimitAction.LOGIN, identifier=IDENTIFIER
        )
        after = await limiter.check(
            action=RateLimitAction.LOGIN, identifier=IDENTIFIER
        )

        assert isinstance(reset, Success)
        assert after.value.allowed is True

    @pytest.mark.asyncio
    async def test_reset_failure_reported(self, mock_logger):
        client = AsyncMock()
        client.delete.side_effect = RedisConnectionError("refused")
        limiter = SlidingWindowRateLimiter(
            storage=RedisStorage(redis_client=client),
            rules={RateLimitAction.LOGIN: LOGIN_RULE},
            logger=mock_logger,
            timeout_seconds=1.0,
            unavailable_retry_after=30,
        )

        result = await limiter.reset(
            action=RateLimitAction.LOGIN, identifier=IDENTIFIER
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.RATE_LIMIT_RESET_FAILED
        mock_logger.error.assert_called_once()
