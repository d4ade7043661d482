"""
Tests for the aggregation engine.

Every figure must be derivable from sum_day alone, and day boundaries
follow the device calendar, never UTC.
"""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from ecusson.ledger import (
    daily_series,
    day_of_year,
    local_day,
    sum_day,
    sum_trailing,
    sum_year_to_date,
    summarize,
)
from ecusson.models.ledger import LedgerSnapshot


PARIS = ZoneInfo("Europe/Paris")
REFERENCE = date(2024, 3, 10)


@pytest.fixture
def snapshot():
    return LedgerSnapshot(
        totals={
            date(2023, 12, 31): 100,
            date(2024, 1, 1): 5,
            date(2024, 2, 11): 50,
            date(2024, 2, 12): 7,
            date(2024, 3, 9): 3,
            date(2024, 3, 10): 4,
            date(2024, 3, 11): 1000,
        }
    )


class TestLocalDay:
    """Tests for calendar day resolution."""

    def test_date_is_returned_as_is(self):
        """Test that plain dates are not shifted."""
        assert local_day(REFERENCE, PARIS) == REFERENCE

    def test_naive_datetime_is_local_wall_clock(self):
        """Test that naive datetimes keep their wall-clock day."""
        assert local_day(datetime(2024, 3, 10, 23, 59), PARIS) == REFERENCE

    def test_aware_datetime_uses_device_calendar(self):
        """Test that 00:30 local time lands on the local day, not the UTC one."""
        instant = datetime(2024, 3, 10, 23, 30, tzinfo=timezone.utc)
        assert local_day(instant, PARIS) == date(2024, 3, 11)
        assert local_day(instant, timezone.utc) == date(2024, 3, 10)

    def test_day_of_year(self):
        """Test day-of-year ordinals, leap year included."""
        assert day_of_year(date(2024, 1, 1)) == 1
        assert day_of_year(REFERENCE) == 70
        assert day_of_year(date(2024, 12, 31)) == 366


class TestSums:
    """Tests for sum_day, sum_trailing and sum_year_to_date."""

    def test_sum_day_absent_is_zero(self, snapshot):
        """Test that an absent day sums to zero."""
        assert sum_day(snapshot, date(2024, 3, 8)) == 0
        assert sum_day(LedgerSnapshot.empty(), REFERENCE) == 0

    def test_sum_day_present(self, snapshot):
        """Test a recorded day."""
        assert sum_day(snapshot, REFERENCE) == 4

    def test_trailing_window_is_closed(self, snapshot):
        """Test that the 28-day window spans Feb 12 to Mar 10 inclusive."""
        assert sum_trailing(snapshot, REFERENCE, 28) == 7 + 3 + 4

    def test_trailing_one_day_equals_sum_day(self, snapshot):
        """Test that a one-day window is the reference day."""
        assert sum_trailing(snapshot, REFERENCE, 1) == sum_day(snapshot, REFERENCE)

    def test_trailing_equals_sum_of_days(self, snapshot):
        """Test sum_trailing against the per-day definition."""
        for n in (1, 2, 7, 28, 29, 70, 71, 400):
            expected = sum(
                sum_day(snapshot, REFERENCE - timedelta(days=k)) for k in range(n)
            )
            assert sum_trailing(snapshot, REFERENCE, n) == expected

    def test_trailing_non_positive_window_is_zero(self, snapshot):
        """Test that an empty window sums to zero."""
        assert sum_trailing(snapshot, REFERENCE, 0) == 0
        assert sum_trailing(snapshot, REFERENCE, -5) == 0

    def test_trailing_huge_window_does_not_overflow(self, snapshot):
        """Test that a window reaching before year 1 is clamped."""
        assert sum_trailing(snapshot, REFERENCE, 10**7) == 100 + 5 + 50 + 7 + 3 + 4

    def test_year_to_date(self, snapshot):
        """Test that year-to-date starts on January 1 of the reference year."""
        assert sum_year_to_date(snapshot, REFERENCE) == 5 + 50 + 7 + 3 + 4

    def test_year_to_date_equals_trailing_day_of_year(self, snapshot):
        """Test the year-to-date identity for several reference days."""
        for reference in (date(2024, 1, 1), date(2024, 2, 12), REFERENCE, date(2024, 12, 31)):
            assert sum_year_to_date(snapshot, reference) == sum_trailing(
                snapshot, reference, day_of_year(reference)
            )

    def test_year_to_date_on_january_first(self, snapshot):
        """Test that January 1 only counts itself."""
        assert sum_year_to_date(snapshot, date(2024, 1, 1)) == 5

    def test_negative_totals_are_kept(self):
        """Test that net-negative days reduce the sums."""
        snapshot = LedgerSnapshot(totals={REFERENCE: -2, date(2024, 3, 9): 5})
        assert sum_trailing(snapshot, REFERENCE, 2) == 3


class TestCrossMidnight:
    """Tests for reference instants near local midnight."""

    def test_sums_follow_local_day(self, snapshot):
        """Test that 23:30 UTC on Mar 10 is already Mar 11 in Paris."""
        instant = datetime(2024, 3, 10, 23, 30, tzinfo=timezone.utc)
        assert sum_day(snapshot, instant, PARIS) == 1000
        assert sum_trailing(snapshot, instant, 1, PARIS) == 1000
        assert sum_day(snapshot, instant, timezone.utc) == 4

    def test_summarize_uses_local_day(self, snapshot):
        """Test the summary of an instant just after local midnight."""
        instant = datetime(2024, 3, 11, 0, 30, tzinfo=PARIS)
        summary = summarize(snapshot, instant, tz=PARIS)
        assert summary.day == date(2024, 3, 11)
        assert summary.today == 1000


class TestSummarize:
    """Tests for summarize and daily_series."""

    def test_summary_figures(self, snapshot):
        """Test the three figures of the reference day."""
        summary = summarize(snapshot, REFERENCE)
        assert summary.day == REFERENCE
        assert summary.today == 4
        assert summary.trailing == 14
        assert summary.trailing_days == 28
        assert summary.year_to_date == 69

    def test_summary_custom_window(self, snapshot):
        """Test a seven-day window."""
        summary = summarize(snapshot, REFERENCE, trailing_days=7)
        assert summary.trailing == 7
        assert summary.trailing_days == 7

    def test_daily_series_is_zero_filled(self, snapshot):
        """Test that missing days appear with zero."""
        series = daily_series(snapshot, date(2024, 3, 8), REFERENCE)
        assert series == [
            (date(2024, 3, 8), 0),
            (date(2024, 3, 9), 3),
            (date(2024, 3, 10), 4),
        ]

    def test_daily_series_empty_range(self, snapshot):
        """Test that an inverted range yields nothing."""
        assert daily_series(snapshot, REFERENCE, date(2024, 3, 1)) == []

    def test_daily_series_sums_to_trailing(self, snapshot):
        """Test that the series over a window adds up to the trailing sum."""
        series = daily_series(snapshot, REFERENCE - timedelta(days=27), REFERENCE)
        assert len(series) == 28
        assert sum(amount for _, amount in series) == sum_trailing(snapshot, REFERENCE, 28)
