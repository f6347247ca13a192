"""
Tests for the 30/360 calendar service
"""

import pytest
from datetime import datetime, timezone

from credit_engine.calendar_service import Calendar, SECONDS_IN_A_DAY
from credit_engine.errors import StartDateLaterThanEndDate
from credit_engine.models import PayPeriodDuration


def ts(year, month, day, hour=0):
    return int(datetime(year, month, day, hour, tzinfo=timezone.utc).timestamp())


@pytest.fixture
def calendar():
    return Calendar()


class TestDaysDiff:
    """Test 30/360 day counts"""

    def test_same_timestamp(self, calendar):
        assert calendar.get_days_diff(ts(2023, 3, 15), ts(2023, 3, 15)) == 0

    def test_within_month(self, calendar):
        assert calendar.get_days_diff(ts(2023, 1, 1), ts(2023, 1, 3)) == 2

    def test_thirty_first_counts_as_thirtieth(self, calendar):
        assert calendar.get_days_diff(ts(2023, 1, 31), ts(2023, 2, 28)) == 28
        assert calendar.get_days_diff(ts(2023, 1, 30), ts(2023, 1, 31)) == 0

    def test_across_months(self, calendar):
        assert calendar.get_days_diff(ts(2023, 1, 1), ts(2023, 3, 1)) == 60
        assert calendar.get_days_diff(ts(2023, 1, 15), ts(2023, 3, 28)) == 73

    def test_across_years(self, calendar):
        assert calendar.get_days_diff(ts(2023, 1, 1), ts(2024, 3, 14)) == 433

    def test_time_of_day_ignored(self, calendar):
        assert calendar.get_days_diff(ts(2023, 3, 1, 23), ts(2023, 3, 2, 1)) == 1

    def test_reversed_range_raises(self, calendar):
        with pytest.raises(StartDateLaterThanEndDate) as exc_info:
            calendar.get_days_diff(ts(2023, 3, 2), ts(2023, 3, 1))

        assert exc_info.value.start_date == ts(2023, 3, 2)
        assert exc_info.value.end_date == ts(2023, 3, 1)


class TestPeriodBoundaries:
    """Test period start computations"""

    def test_next_period_monthly(self, calendar):
        result = calendar.get_start_date_of_next_period(PayPeriodDuration.MONTHLY, ts(2023, 2, 15))
        assert result == ts(2023, 3, 1)

    def test_next_period_on_boundary(self, calendar):
        result = calendar.get_start_date_of_next_period(PayPeriodDuration.MONTHLY, ts(2023, 3, 1))
        assert result == ts(2023, 4, 1)

    def test_next_period_year_end(self, calendar):
        result = calendar.get_start_date_of_next_period(PayPeriodDuration.MONTHLY, ts(2023, 12, 10))
        assert result == ts(2024, 1, 1)

    def test_next_period_quarterly(self, calendar):
        result = calendar.get_start_date_of_next_period(PayPeriodDuration.QUARTERLY, ts(2023, 2, 15))
        assert result == ts(2023, 4, 1)

    def test_next_period_semi_annually(self, calendar):
        assert calendar.get_start_date_of_next_period(
            PayPeriodDuration.SEMI_ANNUALLY, ts(2023, 2, 15)
        ) == ts(2023, 7, 1)
        assert calendar.get_start_date_of_next_period(
            PayPeriodDuration.SEMI_ANNUALLY, ts(2023, 8, 15)
        ) == ts(2024, 1, 1)

    def test_start_of_period(self, calendar):
        assert calendar.get_start_date_of_period(
            PayPeriodDuration.MONTHLY, ts(2023, 5, 20, 12)
        ) == ts(2023, 5, 1)
        assert calendar.get_start_date_of_period(
            PayPeriodDuration.QUARTERLY, ts(2023, 5, 20)
        ) == ts(2023, 4, 1)
        assert calendar.get_start_date_of_period(
            PayPeriodDuration.SEMI_ANNUALLY, ts(2023, 12, 31)
        ) == ts(2023, 7, 1)

    def test_total_days_in_full_period(self, calendar):
        assert calendar.get_total_days_in_full_period(PayPeriodDuration.MONTHLY) == 30
        assert calendar.get_total_days_in_full_period(PayPeriodDuration.QUARTERLY) == 90
        assert calendar.get_total_days_in_full_period(PayPeriodDuration.SEMI_ANNUALLY) == 180

    def test_days_remaining_in_period(self, calendar):
        assert calendar.get_days_remaining_in_period(
            PayPeriodDuration.MONTHLY, ts(2023, 3, 15)
        ) == 16


class TestPeriodsPassed:
    """Test period counting"""

    def test_same_period(self, calendar):
        assert calendar.get_num_periods_passed(
            PayPeriodDuration.MONTHLY, ts(2023, 2, 1), ts(2023, 2, 28)
        ) == 0

    def test_boundary_counts(self, calendar):
        assert calendar.get_num_periods_passed(
            PayPeriodDuration.MONTHLY, ts(2023, 2, 15), ts(2023, 3, 1)
        ) == 1

    def test_multiple_periods(self, calendar):
        assert calendar.get_num_periods_passed(
            PayPeriodDuration.MONTHLY, ts(2023, 2, 1), ts(2023, 5, 1)
        ) == 3
        assert calendar.get_num_periods_passed(
            PayPeriodDuration.MONTHLY, ts(2023, 2, 15), ts(2023, 4, 14)
        ) == 2

    def test_quarterly(self, calendar):
        assert calendar.get_num_periods_passed(
            PayPeriodDuration.QUARTERLY, ts(2023, 2, 1), ts(2023, 3, 31)
        ) == 0
        assert calendar.get_num_periods_passed(
            PayPeriodDuration.QUARTERLY, ts(2023, 2, 1), ts(2023, 4, 1)
        ) == 1

    def test_many_years(self, calendar):
        assert calendar.get_num_periods_passed(
            PayPeriodDuration.MONTHLY, ts(2023, 2, 1), ts(2043, 2, 1)
        ) == 240

    def test_reversed_range_raises(self, calendar):
        with pytest.raises(StartDateLaterThanEndDate):
            calendar.get_num_periods_passed(
                PayPeriodDuration.MONTHLY, ts(2023, 5, 1), ts(2023, 2, 1)
            )


class TestDayBoundaries:

    def test_start_of_day(self, calendar):
        assert calendar.get_start_of_day(ts(2023, 3, 1, 15)) == ts(2023, 3, 1)

    def test_start_of_next_day(self, calendar):
        assert calendar.get_start_of_next_day(ts(2023, 3, 1, 15)) == ts(2023, 3, 2)
        assert calendar.get_start_of_next_day(ts(2023, 3, 1)) == ts(2023, 3, 1) + SECONDS_IN_A_DAY
