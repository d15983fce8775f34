"""
Tests for datetime utilities and the check-in calendar day.
"""
from datetime import date, datetime, timezone

import pytest

from checkin.core.datetime_utils import ensure_timezone_aware, local_today


class TestLocalToday:
    """The calendar day follows the configured zone, not UTC."""

    def test_late_evening_in_sao_paulo_is_still_that_day(self):
        # 23:30 in Sao Paulo (UTC-3) is 02:30 the next day in UTC
        now = datetime(2026, 3, 11, 2, 30, tzinfo=timezone.utc)

        assert local_today("America/Sao_Paulo", now) == date(2026, 3, 10)

    def test_same_instant_in_utc(self):
        now = datetime(2026, 3, 11, 2, 30, tzinfo=timezone.utc)

        assert local_today("UTC", now) == date(2026, 3, 11)

    def test_naive_reference_is_treated_as_utc(self):
        assert local_today("America/Sao_Paulo", datetime(2026, 3, 11, 2, 30)) == date(
            2026, 3, 10
        )


class TestEnsureTimezoneAware:
    def test_naive_becomes_utc(self):
        assert ensure_timezone_aware(datetime(2026, 1, 1)).tzinfo == timezone.utc

    def test_none_is_rejected(self):
        with pytest.raises(ValueError):
            ensure_timezone_aware(None)
