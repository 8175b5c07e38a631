"""Test doubles and sample data for university search tests.

Provides an in-memory result store, a scripted search provider and a
controllable clock so cache behavior can be tested without a database or
network access.
"""

import asyncio
import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

from src.application.ports import ResultStorePort, SearchProviderPort
from src.domain.entities.university import SearchQueryEntry, UniversityResult
from src.shared.exceptions import FetchError

BASE_TIME = datetime(2025, 1, 15, 12, 0, 0, tzinfo=UTC)


def make_university(ranking: int = 1, **overrides: Any) -> UniversityResult:
    """Build a valid UniversityResult, overriding any field."""
    data: dict[str, Any] = {
        "university_name": f"Test University {ranking}",
        "country": "USA",
        "ranking": ranking,
        "psw_duration": "3 years (STEM OPT extension)",
        "psw_details": "OPT 12 months + 24 months STEM extension",
        "industry_match": "Tech hub",
        "major_employers": ["Google", "Microsoft"],
        "health_insurance": "$3,000 per year",
        "visa_fees": "$510",
        "proof_of_funds": "$60,000",
        "accreditation_bodies": ["ABET"],
    }
    data.update(overrides)
    return UniversityResult(**data)


class MutableClock:
    """Clock whose current time only moves when told to."""

    def __init__(self, start: datetime = BASE_TIME):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current = self.current + timedelta(**kwargs)


class InMemoryResultStore(ResultStorePort):
    """Dict-backed result store with the same replace semantics."""

    def __init__(self):
        self.entries: dict[str, SearchQueryEntry] = {}
        self.replace_calls = 0
        self.find_calls = 0
        self.fail_reads = False
        self.fail_writes = False

    async def find_entry(self, normalized_key: str) -> SearchQueryEntry | None:
        self.find_calls += 1
        if self.fail_reads:
            raise ConnectionError("store unavailable")
        entry = self.entries.get(normalized_key)
        if entry is None:
            return None
        # Stable sort keeps batch order for equal rankings
        ordered = sorted(entry.results, key=lambda r: r.ranking)
        return entry.model_copy(update={"results": ordered})

    async def replace_results(
        self,
        degree: str,
        normalized_key: str,
        results: list[UniversityResult],
        expires_at: datetime,
        cached_at: datetime,
    ) -> SearchQueryEntry:
        self.replace_calls += 1
        if self.fail_writes:
            raise ConnectionError("store unavailable")

        existing = self.entries.get(normalized_key)
        stored = [
            r.model_copy(
                update={
                    "id": str(uuid.uuid4()),
                    "expires_at": expires_at,
                    "cached_at": cached_at,
                }
            )
            for r in results
        ]
        entry = SearchQueryEntry(
            query_id=existing.query_id if existing else uuid.uuid4(),
            degree=existing.degree if existing else degree,
            degree_normalized=normalized_key,
            created_at=existing.created_at if existing else cached_at,
            updated_at=cached_at,
            results=stored,
        )
        self.entries[normalized_key] = entry
        return entry

    async def delete_expired(self, now: datetime) -> int:
        deleted = 0
        for key, entry in list(self.entries.items()):
            live = [r for r in entry.results if not r.expires_at < now]
            deleted += len(entry.results) - len(live)
            self.entries[key] = entry.model_copy(update={"results": live})
        return deleted

    async def get_statistics(self, now: datetime) -> dict[str, Any]:
        results = [r for e in self.entries.values() for r in e.results]
        return {
            "total_queries": len(self.entries),
            "total_results": len(results),
            "live_results": sum(1 for r in results if r.expires_at > now),
        }


class ScriptedSearchProvider(SearchProviderPort):
    """Provider returning a fixed batch and counting calls."""

    def __init__(
        self,
        results: list[UniversityResult] | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ):
        self.results = results if results is not None else [
            make_university(ranking=i) for i in (1, 2, 3)
        ]
        self.error = error
        self.delay = delay
        self.calls: list[str] = []
        self.closed = False

    @property
    def name(self) -> str:
        return "scripted"

    async def search(self, degree: str) -> list[UniversityResult]:
        self.calls.append(degree)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.results)

    async def close(self) -> None:
        self.closed = True


def failing_provider(reason: str = "upstream timeout") -> ScriptedSearchProvider:
    return ScriptedSearchProvider(error=FetchError(provider="scripted", reason=reason))
