"""Search universities use case.

This module implements the cache-first degree search: serve fresh cached
results when present, otherwise fetch from the search provider and write
the new batch back to the cache.
"""

import asyncio
from dataclasses import dataclass, field

import structlog

from src.application.ports.search_provider_port import SearchProviderPort
from src.domain.entities.university import UniversityResult
from src.domain.value_objects import DegreeQuery, QueryKey
from src.infrastructure.caching import ResultCache
from src.shared.exceptions import FetchError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SearchOutcome:
    """Result of a degree search."""

    degree: str
    results: list[UniversityResult] = field(default_factory=list)
    cached: bool = False


class SearchUniversitiesUseCase:
    """Use case for searching universities by degree.

    This use case coordinates the search process by:
    1. Validating the degree before any I/O
    2. Returning fresh cached results on a hit
    3. Fetching from the provider on a miss, then writing back best-effort

    Concurrent misses for the same key each call the provider unless
    ``single_flight`` is enabled, in which case they share one fetch.
    """

    def __init__(
        self,
        cache: ResultCache,
        provider: SearchProviderPort,
        single_flight: bool = False,
    ):
        """Initialize the use case with required dependencies.

        Args:
            cache: Cache gateway over the result store
            provider: External search provider
            single_flight: Collapse concurrent fetches for the same key
        """
        self._cache = cache
        self._provider = provider
        self._single_flight = single_flight
        self._in_flight: dict[str, asyncio.Task[list[UniversityResult]]] = {}

    async def execute(self, raw_degree: str) -> SearchOutcome:
        """Execute the degree search.

        Args:
            raw_degree: Degree as submitted by the user

        Returns:
            SearchOutcome with ranked results and whether they came from cache

        Raises:
            QueryValidationError: If the degree fails validation
            FetchError: If the provider fails on a cache miss
        """
        query = DegreeQuery.parse(raw_degree)
        key = query.key

        logger.info("degree_search_started", degree=key.display)

        cached = await self._cache.read(key)
        if cached.hit:
            return SearchOutcome(degree=key.display, results=cached.results, cached=True)

        if self._single_flight:
            results = await self._fetch_shared(key)
        else:
            results = await self._fetch_and_store(key)

        return SearchOutcome(degree=key.display, results=results, cached=False)

    async def _fetch_shared(self, key: QueryKey) -> list[UniversityResult]:
        """Join an in-flight fetch for this key, or start one."""
        task = self._in_flight.get(key.normalized)
        if task is None:
            task = asyncio.ensure_future(self._fetch_and_store(key))
            self._in_flight[key.normalized] = task
            task.add_done_callback(
                lambda t: self._release_in_flight(key.normalized, t)
            )
        else:
            logger.info("joined_in_flight_fetch", degree=key.display)

        # Shield so one caller going away does not cancel the shared fetch
        return await asyncio.shield(task)

    def _release_in_flight(
        self, normalized_key: str, task: asyncio.Task[list[UniversityResult]]
    ) -> None:
        # Waiters may all be cancelled; mark the outcome as retrieved
        if not task.cancelled():
            task.exception()
        self._in_flight.pop(normalized_key, None)

    async def _fetch_and_store(self, key: QueryKey) -> list[UniversityResult]:
        logger.info(
            "provider_fetch_started", degree=key.display, provider=self._provider.name
        )

        try:
            results = await self._provider.search(key.display)
        except FetchError:
            raise
        except Exception as e:
            raise FetchError(provider=self._provider.name, reason=str(e)) from e

        write = await self._cache.write(key, results)
        if not write.ok:
            # Only costs a redundant fetch next time
            logger.warning(
                "cache_write_failed",
                degree=key.display,
                error=write.error.message if write.error else None,
            )

        return results
