"""Clear expired results use case.

Reads already ignore expired rows; this only reclaims space.
"""

import asyncio

import structlog

from src.infrastructure.caching import ResultCache

logger = structlog.get_logger(__name__)


class ClearExpiredResultsUseCase:
    """Deletes expired cached results, once or on an interval."""

    def __init__(self, cache: ResultCache):
        self._cache = cache

    async def execute(self) -> int:
        """Run one sweep.

        Returns:
            Number of deleted results
        """
        return await self._cache.sweep()

    async def run_periodically(self, interval_seconds: float) -> None:
        """Sweep forever, sleeping ``interval_seconds`` between runs.

        Meant to run as a background task; stops when cancelled.
        """
        logger.info("expired_sweep_scheduled", interval_seconds=interval_seconds)
        while True:
            await asyncio.sleep(interval_seconds)
            await self.execute()
