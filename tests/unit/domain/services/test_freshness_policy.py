"""Unit tests for FreshnessPolicy."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from src.domain.services import FreshnessPolicy
from src.shared.exceptions import ConfigurationError
from tests.fixtures import BASE_TIME, MutableClock, make_university


@pytest.fixture
def policy() -> FreshnessPolicy:
    return FreshnessPolicy(timedelta(hours=24), clock=MutableClock())


class TestFreshnessPolicy:
    """Expiry computation and the freshness boundary."""

    def test_expires_at_is_write_time_plus_ttl(self, policy):
        assert policy.expires_at(BASE_TIME) == BASE_TIME + timedelta(hours=24)

    def test_naive_write_time_is_treated_as_utc(self, policy):
        naive = BASE_TIME.replace(tzinfo=None)
        assert policy.expires_at(naive) == BASE_TIME + timedelta(hours=24)

    def test_fresh_just_before_expiry(self, policy):
        record = make_university(expires_at=policy.expires_at(BASE_TIME))
        now = BASE_TIME + timedelta(hours=23, minutes=59)
        assert policy.is_fresh(record, now) is True

    def test_stale_at_exact_expiry(self, policy):
        record = make_university(expires_at=policy.expires_at(BASE_TIME))
        assert policy.is_fresh(record, BASE_TIME + timedelta(hours=24)) is False

    def test_stale_after_expiry(self, policy):
        record = make_university(expires_at=policy.expires_at(BASE_TIME))
        now = BASE_TIME + timedelta(hours=24, seconds=1)
        assert policy.is_fresh(record, now) is False

    def test_record_without_expiry_is_stale(self, policy):
        assert policy.is_fresh(make_university(), BASE_TIME) is False

    def test_now_uses_injected_clock(self):
        clock = MutableClock()
        policy = FreshnessPolicy(timedelta(hours=1), clock=clock)
        clock.advance(minutes=5)
        assert policy.now() == BASE_TIME + timedelta(minutes=5)

    def test_now_converts_other_timezones_to_utc(self):
        eastern = timezone(timedelta(hours=-5))
        local = datetime(2025, 1, 15, 7, 0, tzinfo=eastern)
        policy = FreshnessPolicy(timedelta(hours=1), clock=lambda: local)
        assert policy.now() == datetime(2025, 1, 15, 12, 0, tzinfo=UTC)

    @pytest.mark.parametrize("ttl", [timedelta(0), timedelta(hours=-1)])
    def test_non_positive_ttl_is_rejected(self, ttl):
        with pytest.raises(ConfigurationError):
            FreshnessPolicy(ttl)

    @pytest.mark.parametrize("hours", [0, -24])
    def test_from_hours_rejects_non_positive(self, hours):
        with pytest.raises(ConfigurationError):
            FreshnessPolicy.from_hours(hours)

    def test_from_hours(self):
        assert FreshnessPolicy.from_hours(24).ttl == timedelta(hours=24)
