"""Timezone utilities for UniScout.

Cache timestamps are always stored and compared in UTC.
"""

from datetime import UTC, datetime

UTC_TZ = UTC


def now_utc() -> datetime:
    """Get current datetime in UTC timezone.

    Returns:
        Current datetime with UTC timezone.
    """
    return datetime.now(UTC_TZ)


def ensure_utc(dt: datetime) -> datetime:
    """Return an aware UTC datetime.

    SQLite drops tzinfo on round trip, so naive values read back from the
    store are assumed to already be UTC.

    Args:
        dt: Datetime object (timezone-aware or naive).

    Returns:
        Datetime in UTC timezone.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC_TZ)
    return dt.astimezone(UTC_TZ)
