"""Performance logging and monitoring for UniScout.

This module tracks cache effectiveness and search provider latency for the
metrics endpoint.
"""

import time
from contextlib import asynccontextmanager
from typing import Any

import structlog

from src.shared.utils.timezone import now_utc

logger = structlog.get_logger(__name__)

# Keep only the most recent measurements to bound memory
_MAX_SAMPLES = 1000
# Provider calls slower than this are logged as warnings
_SLOW_FETCH_MS = 10_000


def _percentile(samples: list[float], fraction: float) -> float | None:
    if not samples:
        return None
    sorted_samples = sorted(samples)
    index = int(len(sorted_samples) * fraction)
    return sorted_samples[min(index, len(sorted_samples) - 1)]


class PerformanceMetrics:
    """Container for performance metrics data."""

    def __init__(self):
        """Initialize metrics storage."""
        self.cache_hits = 0
        self.cache_misses = 0
        self.cache_read_errors = 0
        self.cache_write_errors = 0
        self.cache_writes = 0

        self.fetch_times: list[float] = []
        self.total_fetches = 0
        self.failed_fetches = 0

        self.expired_results_cleared = 0
        self._start_time = time.time()

    def add_cache_hit(self):
        """Increment cache hit counter."""
        self.cache_hits += 1

    def add_cache_miss(self):
        """Increment cache miss counter."""
        self.cache_misses += 1

    def add_cache_read_error(self):
        self.cache_read_errors += 1

    def add_cache_write(self, succeeded: bool):
        if succeeded:
            self.cache_writes += 1
        else:
            self.cache_write_errors += 1

    def add_fetch_time(self, duration_ms: float):
        """Add a provider fetch execution time."""
        self.fetch_times.append(duration_ms)
        self.total_fetches += 1
        if len(self.fetch_times) > _MAX_SAMPLES:
            self.fetch_times = self.fetch_times[-_MAX_SAMPLES:]

    def add_failed_fetch(self):
        self.total_fetches += 1
        self.failed_fetches += 1

    def add_expired_cleared(self, count: int):
        self.expired_results_cleared += count

    def get_cache_hit_rate(self) -> float:
        """Calculate cache hit rate as percentage."""
        total_cache_ops = self.cache_hits + self.cache_misses
        if total_cache_ops == 0:
            return 0.0
        return (self.cache_hits / total_cache_ops) * 100

    def get_fetch_p95_latency(self) -> float | None:
        """Calculate P95 provider fetch latency in milliseconds."""
        return _percentile(self.fetch_times, 0.95)

    def get_average_fetch_latency(self) -> float | None:
        if not self.fetch_times:
            return None
        return sum(self.fetch_times) / len(self.fetch_times)

    def get_uptime_seconds(self) -> float:
        """Get uptime in seconds."""
        return time.time() - self._start_time

    def to_dict(self) -> dict[str, Any]:
        """Convert metrics to dictionary format."""
        return {
            "cache": {
                "hits": self.cache_hits,
                "misses": self.cache_misses,
                "hit_rate": self.get_cache_hit_rate(),
                "read_errors": self.cache_read_errors,
                "writes": self.cache_writes,
                "write_errors": self.cache_write_errors,
                "expired_results_cleared": self.expired_results_cleared,
            },
            "provider": {
                "total_fetches": self.total_fetches,
                "failed_fetches": self.failed_fetches,
                "average_latency_ms": self.get_average_fetch_latency(),
                "p95_latency_ms": self.get_fetch_p95_latency(),
            },
            "uptime_seconds": self.get_uptime_seconds(),
            "timestamp": now_utc().isoformat(),
        }


# Global metrics instance
_metrics = PerformanceMetrics()


def get_metrics() -> PerformanceMetrics:
    """Get the global metrics instance."""
    return _metrics


def reset_metrics() -> PerformanceMetrics:
    """Replace the global metrics instance with a fresh one."""
    global _metrics
    _metrics = PerformanceMetrics()
    return _metrics


# Cache tracking utilities
def track_cache_hit():
    """Record a cache hit."""
    _metrics.add_cache_hit()


def track_cache_miss():
    """Record a cache miss."""
    _metrics.add_cache_miss()


def track_cache_read_error():
    _metrics.add_cache_read_error()


def track_cache_write(succeeded: bool):
    _metrics.add_cache_write(succeeded)


def track_expired_cleared(count: int):
    _metrics.add_expired_cleared(count)


@asynccontextmanager
async def track_fetch_performance(provider: str, degree: str):
    """Context manager for tracking search provider latency.

    Args:
        provider: Provider name
        degree: Degree being searched

    Yields:
        None
    """
    start_time = time.perf_counter()

    try:
        yield
    except Exception as e:
        _metrics.add_failed_fetch()
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.error(
            "provider_fetch_failed",
            provider=provider,
            degree=degree,
            duration_ms=round(duration_ms, 2),
            error=str(e),
        )
        raise

    duration_ms = (time.perf_counter() - start_time) * 1000
    _metrics.add_fetch_time(duration_ms)
    logger.info(
        "provider_fetch_completed",
        provider=provider,
        degree=degree,
        duration_ms=round(duration_ms, 2),
    )
    if duration_ms > _SLOW_FETCH_MS:
        logger.warning(
            "slow_provider_fetch",
            provider=provider,
            degree=degree,
            duration_ms=round(duration_ms, 2),
        )
