"""Database-backed result cache for university searches.

The cache sits in front of the search provider. Reads and writes never
raise: a failed read is a miss, and a failed write is reported through
``CacheWriteResult`` so the caller can log it.
"""

from dataclasses import dataclass, field
from datetime import datetime

import structlog

from src.application.ports.result_store_port import ResultStorePort
from src.domain.entities.university import UniversityResult
from src.domain.services.freshness_policy import FreshnessPolicy
from src.domain.value_objects.query_key import QueryKey
from src.infrastructure.monitoring import (
    track_cache_hit,
    track_cache_miss,
    track_cache_read_error,
    track_cache_write,
    track_expired_cleared,
)
from src.shared.exceptions import CacheError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CacheReadResult:
    """Outcome of a cache lookup."""

    results: list[UniversityResult] = field(default_factory=list)
    hit: bool = False

    @classmethod
    def miss(cls) -> "CacheReadResult":
        return cls(results=[], hit=False)


@dataclass(frozen=True)
class CacheWriteResult:
    """Outcome of a cache write: either the number of rows written or the error."""

    records_written: int = 0
    error: CacheError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, records_written: int) -> "CacheWriteResult":
        return cls(records_written=records_written)

    @classmethod
    def failure(cls, error: CacheError) -> "CacheWriteResult":
        return cls(error=error)


class ResultCache:
    """Cache gateway over the result store.

    Hit/miss is decided per query: if no record for a key is fresh, the
    whole key is a miss, even though expiry is stored per record.
    """

    def __init__(self, store: ResultStorePort, policy: FreshnessPolicy):
        """Initialize the cache.

        Args:
            store: Persistent result store
            policy: Freshness policy computing and checking expiry
        """
        self._store = store
        self._policy = policy

    async def read(self, key: QueryKey) -> CacheReadResult:
        """Return fresh cached results for a key, or a miss.

        Args:
            key: Normalized query key

        Returns:
            CacheReadResult with results ordered by ranking when hit is True
        """
        try:
            entry = await self._store.find_entry(key.normalized)
        except Exception as e:
            track_cache_read_error()
            track_cache_miss()
            logger.error(
                "cache_read_failed",
                degree=key.display,
                error=str(e),
                error_type=type(e).__name__,
            )
            return CacheReadResult.miss()

        if entry is None:
            track_cache_miss()
            logger.info("cache_miss", degree=key.display, reason="no_entry")
            return CacheReadResult.miss()

        now = self._policy.now()
        fresh = [r for r in entry.results if self._policy.is_fresh(r, now)]

        if not fresh:
            track_cache_miss()
            logger.info(
                "cache_miss",
                degree=key.display,
                reason="expired",
                stale_records=len(entry.results),
            )
            return CacheReadResult.miss()

        # Stable sort keeps the store's insertion order for equal rankings
        fresh.sort(key=lambda r: r.ranking)
        track_cache_hit()
        logger.info("cache_hit", degree=key.display, records=len(fresh))
        return CacheReadResult(results=fresh, hit=True)

    async def write(
        self, key: QueryKey, results: list[UniversityResult]
    ) -> CacheWriteResult:
        """Replace the cached results for a key.

        Every record in the batch shares one ``expires_at = now + ttl``.

        Args:
            key: Normalized query key
            results: Freshly fetched results

        Returns:
            CacheWriteResult; never raises
        """
        now = self._policy.now()
        expires_at = self._policy.expires_at(now)

        try:
            await self._store.replace_results(
                degree=key.display,
                normalized_key=key.normalized,
                results=results,
                expires_at=expires_at,
                cached_at=now,
            )
        except Exception as e:
            track_cache_write(succeeded=False)
            error = CacheError(operation="write", reason=str(e))
            logger.error(
                "cache_write_failed",
                degree=key.display,
                error=str(e),
                error_type=type(e).__name__,
            )
            return CacheWriteResult.failure(error)

        track_cache_write(succeeded=True)
        logger.info(
            "cache_write_completed",
            degree=key.display,
            records=len(results),
            expires_at=expires_at.isoformat(),
        )
        return CacheWriteResult.success(len(results))

    async def sweep(self, now: datetime | None = None) -> int:
        """Physically delete expired results.

        Args:
            now: Reference time, defaults to the policy clock

        Returns:
            Number of deleted results, 0 if the sweep failed
        """
        reference = now or self._policy.now()
        try:
            count = await self._store.delete_expired(reference)
        except Exception as e:
            logger.error("cache_sweep_failed", error=str(e))
            return 0

        track_expired_cleared(count)
        logger.info("expired_results_cleared", count=count)
        return count

    async def statistics(self) -> dict[str, int]:
        """Return stored query, result and live result counts."""
        return await self._store.get_statistics(self._policy.now())
