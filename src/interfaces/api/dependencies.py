"""Dependency injection for FastAPI application.

This module provides dependency functions that can be injected
into FastAPI route handlers.
"""

import structlog
from fastapi import Depends, Request

from src.application.ports import SearchProviderPort
from src.application.use_cases import (
    ClearExpiredResultsUseCase,
    SearchUniversitiesUseCase,
)
from src.domain.services import FreshnessPolicy
from src.infrastructure.caching import ResultCache
from src.infrastructure.persistence.postgres import (
    DatabaseConnection,
    PostgresResultStore,
)
from src.infrastructure.search import TavilyConfig, TavilySearchAdapter
from src.interfaces.api.rate_limit import ClientRateLimiter
from src.shared.config import get_settings
from src.shared.exceptions import RateLimitExceededError

logger = structlog.get_logger(__name__)

# Global instances (initialized once)
_db_connection: DatabaseConnection | None = None
_result_cache: ResultCache | None = None
_search_provider: SearchProviderPort | None = None
_search_use_case: SearchUniversitiesUseCase | None = None
_search_rate_limiter: ClientRateLimiter | None = None
_general_rate_limiter: ClientRateLimiter | None = None


async def get_db_connection() -> DatabaseConnection:
    """Get the database connection.

    Only builds the engine; the first query opens a connection.
    """
    global _db_connection

    if _db_connection is None:
        connection = DatabaseConnection(echo=get_settings().debug_mode)
        await connection.initialize()
        _db_connection = connection
    return _db_connection


async def get_result_cache(
    connection: DatabaseConnection = Depends(get_db_connection),  # noqa: B008
) -> ResultCache:
    """Get the cache gateway over the result store."""
    global _result_cache

    if _result_cache is None:
        settings = get_settings()
        _result_cache = ResultCache(
            store=PostgresResultStore(connection.session_factory),
            policy=FreshnessPolicy.from_hours(settings.cache.cache_ttl_hours),
        )
        logger.info(
            "result_cache_initialized", ttl_hours=settings.cache.cache_ttl_hours
        )
    return _result_cache


def get_search_provider() -> SearchProviderPort:
    """Get the search provider singleton."""
    global _search_provider

    if _search_provider is None:
        config = TavilyConfig.from_settings(get_settings().search_provider)
        _search_provider = TavilySearchAdapter(config)
    return _search_provider


async def get_search_universities_use_case(
    cache: ResultCache = Depends(get_result_cache),  # noqa: B008
    provider: SearchProviderPort = Depends(get_search_provider),  # noqa: B008
) -> SearchUniversitiesUseCase:
    """Get the search universities use case.

    The use case is shared so single-flight can see every in-flight fetch.
    """
    global _search_use_case

    if _search_use_case is None:
        _search_use_case = SearchUniversitiesUseCase(
            cache=cache,
            provider=provider,
            single_flight=get_settings().cache.cache_single_flight,
        )
    return _search_use_case


async def get_clear_expired_results_use_case(
    cache: ResultCache = Depends(get_result_cache),  # noqa: B008
) -> ClearExpiredResultsUseCase:
    return ClearExpiredResultsUseCase(cache)


def get_search_rate_limiter() -> ClientRateLimiter:
    global _search_rate_limiter

    if _search_rate_limiter is None:
        api = get_settings().api
        _search_rate_limiter = ClientRateLimiter(
            max_requests=api.search_rate_limit_requests,
            window_seconds=api.search_rate_limit_window_minutes * 60,
            enabled=api.rate_limit_enabled,
        )
    return _search_rate_limiter


def get_general_rate_limiter() -> ClientRateLimiter:
    global _general_rate_limiter

    if _general_rate_limiter is None:
        api = get_settings().api
        _general_rate_limiter = ClientRateLimiter(
            max_requests=api.general_rate_limit_requests,
            window_seconds=api.general_rate_limit_window_minutes * 60,
            enabled=api.rate_limit_enabled,
        )
    return _general_rate_limiter


def _client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def enforce_search_rate_limit(
    request: Request,
    limiter: ClientRateLimiter = Depends(get_search_rate_limiter),  # noqa: B008
) -> None:
    """Reject the request when the client exhausted its search budget.

    Raises:
        RateLimitExceededError: With the seconds until the next allowed call
    """
    retry_after = await limiter.try_acquire(_client_key(request))
    if retry_after:
        raise RateLimitExceededError(
            message="Too many search requests. Please try again later.",
            retry_after_seconds=retry_after,
        )


async def enforce_general_rate_limit(
    request: Request,
    limiter: ClientRateLimiter = Depends(get_general_rate_limiter),  # noqa: B008
) -> None:
    retry_after = await limiter.try_acquire(_client_key(request))
    if retry_after:
        raise RateLimitExceededError(
            message="Too many requests. Please slow down.",
            retry_after_seconds=retry_after,
        )


async def shutdown_dependencies():
    """Cleanup function to close connections on shutdown."""
    global \
        _db_connection, \
        _result_cache, \
        _search_provider, \
        _search_use_case, \
        _search_rate_limiter, \
        _general_rate_limiter

    if _search_provider:
        await _search_provider.close()
        _search_provider = None
        logger.info("search_provider_closed")

    if _db_connection:
        await _db_connection.close()
        _db_connection = None

    _result_cache = None
    _search_use_case = None
    _search_rate_limiter = None
    _general_rate_limiter = None
