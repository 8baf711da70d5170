"""Progressive lockout policy.

Immutable schedule mapping consecutive failed login attempts to lock
durations. Each failure whose new count reaches a tier threshold locks the
account for that tier's duration, measured from the failure. The highest
matching tier wins. The last tier is usually indefinite and needs an
administrator unlock.

Usage:
    policy = LockoutPolicy.from_schedule([(5, 5), (10, 15), (15, 60), (20, None)])
    locked_until = policy.lock_expiry(failed_attempts=5, now=now)
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

INDEFINITE_LOCK_UNTIL = datetime(9999, 12, 31, tzinfo=UTC)
"""locked_until stored for indefinite locks."""


@dataclass(frozen=True, slots=True, kw_only=True)
class LockoutTier:
    """One step of the lockout schedule.

    Attributes:
        threshold: Consecutive failures at which this tier applies.
        duration: Lock length, or None for an indefinite lock.
    """

    threshold: int
    duration: timedelta | None

    def __post_init__(self) -> None:
        if self.threshold <= 0:
            raise ValueError(f"threshold must be positive, got {self.threshold}")
        if self.duration is not None and self.duration <= timedelta(0):
            raise ValueError("duration must be positive or None")


@dataclass(frozen=True, slots=True, kw_only=True)
class LockoutPolicy:
    """Ordered lockout tiers (value object).

    Attributes:
        tiers: Tiers sorted by strictly increasing threshold.

    Raises:
        ValueError: If no tiers are given or thresholds are not increasing.
    """

    tiers: tuple[LockoutTier, ...]

    def __post_init__(self) -> None:
        if not self.tiers:
            raise ValueError("LockoutPolicy requires at least one tier")
        thresholds = [tier.threshold for tier in self.tiers]
        if thresholds != sorted(set(thresholds)):
            raise ValueError("Lockout thresholds must be strictly increasing")

    @classmethod
    def from_schedule(
        cls, schedule: Iterable[tuple[int, int | None]]
    ) -> "LockoutPolicy":
        """Build a policy from (threshold, minutes) pairs.

        Args:
            schedule: Pairs as produced by Settings.lockout_schedule. None
                minutes means indefinite.

        Returns:
            LockoutPolicy: Policy with one tier per pair.
        """
        return cls(
            tiers=tuple(
                LockoutTier(
                    threshold=threshold,
                    duration=None if minutes is None else timedelta(minutes=minutes),
                )
                for threshold, minutes in schedule
            )
        )

    @property
    def first_threshold(self) -> int:
        """Failures needed before any lock applies."""
        return self.tiers[0].threshold

    def tier_for(self, failed_attempts: int) -> LockoutTier | None:
        """Highest tier whose threshold the count has reached.

        Args:
            failed_attempts: Consecutive failures including the current one.

        Returns:
            LockoutTier | None: Matching tier, or None below the first threshold.
        """
        matched: LockoutTier | None = None
        for tier in self.tiers:
            if failed_attempts >= tier.threshold:
                matched = tier
        return matched

    def lock_expiry(self, *, failed_attempts: int, now: datetime) -> datetime | None:
        """Compute locked_until after a failure.

        Args:
            failed_attempts: Consecutive failures including the current one.
            now: Time of the failure.

        Returns:
            datetime | None: Lock expiry, INDEFINITE_LOCK_UNTIL for the
                indefinite tier, or None when no tier applies.
        """
        tier = self.tier_for(failed_attempts)
        if tier is None:
            return None
        if tier.duration is None:
            return INDEFINITE_LOCK_UNTIL
        return now + tier.duration
