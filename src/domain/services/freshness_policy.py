"""Freshness policy for cached university results."""

from collections.abc import Callable
from datetime import datetime, timedelta

from src.domain.entities.university import UniversityResult
from src.shared.exceptions import ConfigurationError
from src.shared.utils.timezone import ensure_utc, now_utc


class FreshnessPolicy:
    """Decides whether a cached result is still usable.

    Expiry is fixed when a batch is written (``write_time + ttl``) and is
    never extended by reads. A record is fresh strictly before its
    ``expires_at``; at the exact instant it becomes stale.
    """

    def __init__(
        self,
        ttl: timedelta,
        clock: Callable[[], datetime] = now_utc,
    ):
        """Initialize the policy.

        Args:
            ttl: Time-to-live applied to every written batch
            clock: Source of the current time, injectable for tests

        Raises:
            ConfigurationError: If ttl is zero or negative
        """
        if ttl <= timedelta(0):
            raise ConfigurationError(f"Cache TTL must be positive, got {ttl}")
        self.ttl = ttl
        self._clock = clock

    @classmethod
    def from_hours(
        cls, hours: int, clock: Callable[[], datetime] = now_utc
    ) -> "FreshnessPolicy":
        """Build a policy from the CACHE_TTL_HOURS setting."""
        if hours <= 0:
            raise ConfigurationError(f"CACHE_TTL_HOURS must be positive, got {hours}")
        return cls(timedelta(hours=hours), clock=clock)

    def now(self) -> datetime:
        return ensure_utc(self._clock())

    def expires_at(self, write_time: datetime) -> datetime:
        """Expiry for a batch written at ``write_time``."""
        return ensure_utc(write_time) + self.ttl

    def is_fresh(self, record: UniversityResult, now: datetime) -> bool:
        """Check ``now < record.expires_at``.

        A record without an expiry was never written through the cache and
        is treated as stale.
        """
        if record.expires_at is None:
            return False
        return ensure_utc(now) < ensure_utc(record.expires_at)
