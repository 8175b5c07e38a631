"""Monitoring and observability infrastructure for UniScout."""

from .performance_logger import (
    PerformanceMetrics,
    get_metrics,
    reset_metrics,
    track_cache_hit,
    track_cache_miss,
    track_cache_read_error,
    track_cache_write,
    track_expired_cleared,
    track_fetch_performance,
)
from .telemetry import get_tracer, setup_telemetry, shutdown_telemetry, trace_span

__all__ = [
    # Telemetry
    "setup_telemetry",
    "shutdown_telemetry",
    "get_tracer",
    "trace_span",
    # Performance
    "PerformanceMetrics",
    "get_metrics",
    "reset_metrics",
    "track_cache_hit",
    "track_cache_miss",
    "track_cache_read_error",
    "track_cache_write",
    "track_expired_cleared",
    "track_fetch_performance",
]
