"""Unit tests for SearchUniversitiesUseCase."""

import asyncio
import gc
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from src.application.use_cases import SearchUniversitiesUseCase
from src.domain.services import FreshnessPolicy
from src.infrastructure.caching import CacheReadResult, CacheWriteResult, ResultCache
from src.shared.exceptions import CacheError, FetchError, QueryValidationError
from tests.fixtures import (
    InMemoryResultStore,
    MutableClock,
    ScriptedSearchProvider,
    failing_provider,
    make_university,
)


@pytest.fixture
def clock() -> MutableClock:
    return MutableClock()


@pytest.fixture
def store() -> InMemoryResultStore:
    return InMemoryResultStore()


@pytest.fixture
def cache(store, clock) -> ResultCache:
    return ResultCache(store, FreshnessPolicy(timedelta(hours=24), clock=clock))


@pytest.fixture
def provider() -> ScriptedSearchProvider:
    return ScriptedSearchProvider()


@pytest.fixture
def use_case(cache, provider) -> SearchUniversitiesUseCase:
    return SearchUniversitiesUseCase(cache=cache, provider=provider)


class TestSearchUniversitiesUseCase:
    """Cache-first search flow."""

    @pytest.mark.asyncio
    async def test_miss_fetches_and_caches(self, use_case, provider, store):
        outcome = await use_case.execute("Computer Science")

        assert outcome.cached is False
        assert outcome.degree == "Computer Science"
        assert [r.ranking for r in outcome.results] == [1, 2, 3]
        assert provider.calls == ["Computer Science"]
        assert len(store.entries["computer science"].results) == 3

    @pytest.mark.asyncio
    async def test_second_call_is_served_from_cache(self, use_case, provider):
        await use_case.execute("Computer Science")
        outcome = await use_case.execute("computer science")

        assert outcome.cached is True
        assert len(outcome.results) == 3
        assert len(provider.calls) == 1

    @pytest.mark.asyncio
    async def test_expired_cache_fetches_again(self, use_case, provider, clock):
        await use_case.execute("MBA")
        clock.advance(hours=24)

        outcome = await use_case.execute("MBA")

        assert outcome.cached is False
        assert len(provider.calls) == 2

    @pytest.mark.asyncio
    async def test_invalid_degree_does_no_io(self, store, provider, use_case):
        with pytest.raises(QueryValidationError) as exc_info:
            await use_case.execute("a")

        assert exc_info.value.constraint == "min_length"
        assert store.find_calls == 0
        assert store.replace_calls == 0
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_provider_failure_propagates(self, cache, store):
        use_case = SearchUniversitiesUseCase(cache=cache, provider=failing_provider())

        with pytest.raises(FetchError) as exc_info:
            await use_case.execute("Computer Science")

        assert exc_info.value.reason == "upstream timeout"
        assert store.replace_calls == 0

    @pytest.mark.asyncio
    async def test_unexpected_provider_error_becomes_fetch_error(self, cache):
        provider = ScriptedSearchProvider(error=RuntimeError("socket closed"))
        use_case = SearchUniversitiesUseCase(cache=cache, provider=provider)

        with pytest.raises(FetchError) as exc_info:
            await use_case.execute("Computer Science")

        assert exc_info.value.provider == "scripted"
        assert "socket closed" in exc_info.value.reason

    @pytest.mark.asyncio
    async def test_cache_write_failure_still_returns_results(
        self, use_case, store, provider
    ):
        store.fail_writes = True

        outcome = await use_case.execute("Computer Science")

        assert outcome.cached is False
        assert len(outcome.results) == 3

        # Nothing was cached, so the provider is asked again
        await use_case.execute("Computer Science")
        assert len(provider.calls) == 2

    @pytest.mark.asyncio
    async def test_cache_read_failure_falls_back_to_provider(
        self, use_case, store, provider
    ):
        store.fail_reads = True

        outcome = await use_case.execute("Computer Science")

        assert outcome.cached is False
        assert provider.calls == ["Computer Science"]

    @pytest.mark.asyncio
    async def test_with_mocked_cache(self):
        cache = AsyncMock(spec=ResultCache)
        cache.read.return_value = CacheReadResult.miss()
        cache.write.return_value = CacheWriteResult.failure(
            CacheError(operation="write", reason="disk full")
        )
        provider = ScriptedSearchProvider(results=[make_university(ranking=1)])
        use_case = SearchUniversitiesUseCase(cache=cache, provider=provider)

        outcome = await use_case.execute("  Data Science ")

        assert outcome.degree == "Data Science"
        written_key, written_results = cache.write.await_args.args
        assert written_key.normalized == "data science"
        assert len(written_results) == 1


class TestConcurrentSearches:
    """Behavior of simultaneous misses for the same degree."""

    @pytest.mark.asyncio
    async def test_concurrent_misses_each_fetch_by_default(self, cache):
        provider = ScriptedSearchProvider(delay=0.01)
        use_case = SearchUniversitiesUseCase(cache=cache, provider=provider)

        outcomes = await asyncio.gather(
            use_case.execute("MBA"), use_case.execute("mba")
        )

        assert len(provider.calls) == 2
        assert all(not o.cached for o in outcomes)

    @pytest.mark.asyncio
    async def test_single_flight_shares_one_fetch(self, cache, store):
        provider = ScriptedSearchProvider(delay=0.01)
        use_case = SearchUniversitiesUseCase(
            cache=cache, provider=provider, single_flight=True
        )

        outcomes = await asyncio.gather(
            use_case.execute("MBA"), use_case.execute("mba"), use_case.execute("MBA ")
        )

        assert len(provider.calls) == 1
        assert store.replace_calls == 1
        assert all(len(o.results) == 3 for o in outcomes)

    @pytest.mark.asyncio
    async def test_single_flight_failure_reaches_every_waiter(self, cache):
        provider = ScriptedSearchProvider(
            delay=0.01, error=FetchError(provider="scripted", reason="down")
        )
        use_case = SearchUniversitiesUseCase(
            cache=cache, provider=provider, single_flight=True
        )

        outcomes = await asyncio.gather(
            use_case.execute("MBA"), use_case.execute("MBA"), return_exceptions=True
        )

        assert all(isinstance(o, FetchError) for o in outcomes)
        assert len(provider.calls) == 1

    @pytest.mark.asyncio
    async def test_single_flight_releases_key_after_completion(self, cache, clock):
        provider = ScriptedSearchProvider()
        use_case = SearchUniversitiesUseCase(
            cache=cache, provider=provider, single_flight=True
        )

        await use_case.execute("MBA")
        clock.advance(hours=25)
        await use_case.execute("MBA")

        assert len(provider.calls) == 2

    @pytest.mark.asyncio
    async def test_single_flight_failure_after_all_waiters_cancelled(self, cache):
        loop = asyncio.get_running_loop()
        reported: list[dict] = []
        previous_handler = loop.get_exception_handler()
        loop.set_exception_handler(lambda _loop, context: reported.append(context))

        provider = ScriptedSearchProvider(
            delay=0.05, error=FetchError(provider="scripted", reason="down")
        )
        use_case = SearchUniversitiesUseCase(
            cache=cache, provider=provider, single_flight=True
        )
        try:
            waiter = asyncio.create_task(use_case.execute("MBA"))
            await asyncio.sleep(0.01)
            waiter.cancel()
            with pytest.raises(asyncio.CancelledError):
                await waiter

            # Let the shared fetch fail with nobody waiting on it
            await asyncio.sleep(0.1)
            gc.collect()
        finally:
            loop.set_exception_handler(previous_handler)

        assert provider.calls == ["MBA"]
        assert reported == []
        assert use_case._in_flight == {}
