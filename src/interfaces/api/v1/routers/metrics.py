"""Metrics API endpoint for monitoring and observability.

This module exposes cache and provider counters together with the
current contents of the result store.
"""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from src.infrastructure.caching import ResultCache
from src.infrastructure.monitoring import get_metrics
from src.interfaces.api.dependencies import (
    enforce_general_rate_limit,
    get_result_cache,
)

router = APIRouter()


class CacheMetricsResponse(BaseModel):
    """Response model for the cache metrics endpoint."""

    cache: dict[str, Any] = Field(..., description="Cache hit and write counters")
    provider: dict[str, Any] = Field(..., description="Search provider counters")
    store: dict[str, int] = Field(
        ..., description="Stored queries, results and still-fresh results"
    )
    uptime_seconds: float = Field(..., description="Service uptime in seconds")


@router.get(
    "/cache",
    response_model=CacheMetricsResponse,
    summary="Get cache metrics",
    description="Retrieve cache effectiveness counters and result store size",
    dependencies=[Depends(enforce_general_rate_limit)],
)
async def get_cache_metrics(
    cache: ResultCache = Depends(get_result_cache),  # noqa: B008
) -> CacheMetricsResponse:
    """Get current cache metrics.

    Returns:
        CacheMetricsResponse with counters and store statistics
    """
    metrics_dict = get_metrics().to_dict()
    store_stats = await cache.statistics()

    return CacheMetricsResponse(
        cache=metrics_dict["cache"],
        provider=metrics_dict["provider"],
        store=store_stats,
        uptime_seconds=metrics_dict["uptime_seconds"],
    )
