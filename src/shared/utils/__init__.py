"""Shared utility modules."""

from .logger import configure_logging
from .timezone import UTC_TZ, ensure_utc, now_utc

__all__ = [
    "configure_logging",
    "UTC_TZ",
    "ensure_utc",
    "now_utc",
]
