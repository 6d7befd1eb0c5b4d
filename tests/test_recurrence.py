"""Tests for recurring date projection."""

import pytest
from datetime import date

from fintrack.domain.entities import RecurringInterval
from fintrack.domain.recurrence import next_occurrence, project_next_recurring_date


class TestNextOccurrence:
    """Tests for next_occurrence."""

    @pytest.mark.parametrize(
        "interval,expected",
        [
            (RecurringInterval.DAILY, date(2024, 1, 16)),
            (RecurringInterval.WEEKLY, date(2024, 1, 22)),
            (RecurringInterval.MONTHLY, date(2024, 2, 15)),
            (RecurringInterval.YEARLY, date(2025, 1, 15)),
        ],
    )
    def test_single_step(self, interval, expected):
        assert next_occurrence(date(2024, 1, 15), interval) == expected

    def test_daily_applied_twice(self):
        start = date(2024, 12, 31)
        assert next_occurrence(next_occurrence(start, "DAILY"), "DAILY") == date(2025, 1, 2)

    def test_weekly_applied_twice(self):
        start = date(2024, 2, 20)
        twice = next_occurrence(next_occurrence(start, RecurringInterval.WEEKLY), RecurringInterval.WEEKLY)
        assert (twice - start).days == 14

    def test_yearly_applied_twice(self):
        start = date(2023, 6, 1)
        twice = next_occurrence(next_occurrence(start, RecurringInterval.YEARLY), RecurringInterval.YEARLY)
        assert twice == date(2025, 6, 1)

    def test_monthly_clamps_to_end_of_month(self):
        """Jan 31 has no Feb counterpart, so the last day of February is used."""
        assert next_occurrence(date(2024, 1, 31), RecurringInterval.MONTHLY) == date(2024, 2, 29)
        assert next_occurrence(date(2023, 1, 31), RecurringInterval.MONTHLY) == date(2023, 2, 28)

    def test_yearly_from_leap_day(self):
        assert next_occurrence(date(2024, 2, 29), RecurringInterval.YEARLY) == date(2025, 2, 28)

    @pytest.mark.parametrize("interval", ["HOURLY", "", None])
    def test_unknown_interval_returns_start(self, interval):
        assert next_occurrence(date(2024, 1, 15), interval) == date(2024, 1, 15)


class TestProjectNextRecurringDate:
    """Tests for project_next_recurring_date."""

    def test_recurring_with_interval(self):
        assert project_next_recurring_date(date(2024, 1, 15), True, RecurringInterval.MONTHLY) == date(2024, 2, 15)

    def test_not_recurring(self):
        assert project_next_recurring_date(date(2024, 1, 15), False, RecurringInterval.MONTHLY) is None

    def test_recurring_without_interval(self):
        assert project_next_recurring_date(date(2024, 1, 15), True, None) is None
