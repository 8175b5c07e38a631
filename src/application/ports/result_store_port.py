"""Port interface for the cached result store.

This module defines the abstract interface for persisting and retrieving
cached university results, following the hexagonal architecture pattern.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from src.domain.entities.university import SearchQueryEntry, UniversityResult


class ResultStorePort(ABC):
    """Abstract interface for result cache persistence.

    The store owns all entries and results. Callers get detached copies;
    every call is its own round trip.
    """

    @abstractmethod
    async def find_entry(self, normalized_key: str) -> SearchQueryEntry | None:
        """Find the entry for a normalized key, with all of its results.

        Results include expired rows that have not been swept yet; callers
        apply the freshness policy. They are ordered by ranking ascending,
        then by their position in the written batch.

        Args:
            normalized_key: Trimmed, lower-cased degree

        Returns:
            SearchQueryEntry if found, None otherwise
        """
        pass

    @abstractmethod
    async def replace_results(
        self,
        degree: str,
        normalized_key: str,
        results: list[UniversityResult],
        expires_at: datetime,
        cached_at: datetime,
    ) -> SearchQueryEntry:
        """Atomically replace every result owned by a key.

        Finds or creates the entry (an existing entry keeps its stored
        casing and only has ``updated_at`` touched), deletes its prior
        results and inserts the new batch, all in one transaction.

        Args:
            degree: Degree as submitted, used only when creating the entry
            normalized_key: Trimmed, lower-cased degree
            results: New batch, in provider order
            expires_at: Expiry applied to every record in the batch
            cached_at: Write timestamp applied to every record

        Returns:
            The entry with its newly written results
        """
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Delete every result with ``expires_at < now``.

        Args:
            now: Reference time

        Returns:
            Number of deleted results
        """
        pass

    @abstractmethod
    async def get_statistics(self, now: datetime) -> dict[str, Any]:
        """Get store statistics.

        Returns:
            Dictionary containing:
            - total_queries: Number of cached degree entries
            - total_results: Number of stored result rows
            - live_results: Rows not yet expired at ``now``
        """
        pass
