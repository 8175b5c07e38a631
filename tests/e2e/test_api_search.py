"""
End-to-end tests for the degree search flow.

Drives the API through a full cache lifecycle: first request misses and
fetches, a repeat within the TTL is served from the cache, and a request
after the TTL fetches again.
"""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from src.application.use_cases import SearchUniversitiesUseCase
from src.domain.services import FreshnessPolicy
from src.infrastructure.caching import ResultCache
from src.infrastructure.search import UniversityResponseParser
from src.interfaces.api.dependencies import (
    get_result_cache,
    get_search_rate_limiter,
    get_search_universities_use_case,
)
from src.interfaces.api.main import app
from src.interfaces.api.rate_limit import ClientRateLimiter
from tests.fixtures import (
    BASE_TIME,
    InMemoryResultStore,
    MutableClock,
    ScriptedSearchProvider,
)


@pytest.fixture
def clock() -> MutableClock:
    return MutableClock()


@pytest.fixture
def provider() -> ScriptedSearchProvider:
    catalog = UniversityResponseParser(clock=lambda: BASE_TIME).parse("", "any")
    return ScriptedSearchProvider(results=catalog)


@pytest.fixture
def test_client(clock, provider):
    """Create a test client over an in-memory store and a controllable clock."""
    cache = ResultCache(
        InMemoryResultStore(), FreshnessPolicy(timedelta(hours=24), clock=clock)
    )
    use_case = SearchUniversitiesUseCase(cache, provider)
    limiter = ClientRateLimiter(max_requests=100, window_seconds=60)

    app.dependency_overrides[get_result_cache] = lambda: cache
    app.dependency_overrides[get_search_universities_use_case] = lambda: use_case
    app.dependency_overrides[get_search_rate_limiter] = lambda: limiter

    yield TestClient(app)

    app.dependency_overrides.clear()


class TestSearchLifecycle:
    """Miss, hit, expiry."""

    def test_computer_science_scenario(self, test_client, clock, provider):
        first = test_client.post("/api/search", json={"degree": "Computer Science"})

        assert first.status_code == 200
        first_data = first.json()["data"]
        assert first_data["cached"] is False
        assert [r["ranking"] for r in first_data["results"]] == [1, 2, 3]
        assert len(provider.calls) == 1

        clock.advance(hours=1)
        second = test_client.post("/api/search", json={"degree": "Computer Science"})

        second_data = second.json()["data"]
        assert second_data["cached"] is True
        assert [r["universityName"] for r in second_data["results"]] == [
            r["universityName"] for r in first_data["results"]
        ]
        assert len(provider.calls) == 1

        clock.advance(hours=23)
        third = test_client.post("/api/search", json={"degree": "Computer Science"})

        assert third.json()["data"]["cached"] is False
        assert len(provider.calls) == 2

    def test_case_variants_share_the_cache(self, test_client, provider):
        test_client.post("/api/search", json={"degree": "MBA"})
        response = test_client.post("/api/search", json={"degree": "  mba "})

        assert response.json()["data"]["cached"] is True
        assert response.json()["data"]["degree"] == "mba"
        assert len(provider.calls) == 1

    def test_validation_failure_leaves_cache_untouched(self, test_client, provider):
        response = test_client.post("/api/search", json={"degree": "a"})

        assert response.status_code == 400
        assert provider.calls == []
