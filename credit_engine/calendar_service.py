"""
Calendar Service Module

30/360 day-count calendar over UTC Unix timestamps. Periods are aligned to
calendar months: monthly periods start on the 1st of every month, quarterly
periods in January, April, July and October, and semi-annual periods in
January and July. Every computation is closed-form, so the cost of a query
never depends on how far apart the two dates are.
"""

from datetime import datetime, timezone

from .errors import StartDateLaterThanEndDate
from .models import PayPeriodDuration


SECONDS_IN_A_DAY = 24 * 60 * 60
DAYS_IN_A_MONTH = 30
DAYS_IN_A_YEAR = 360


def _to_datetime(timestamp: int) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def _to_timestamp(value: datetime) -> int:
    return int(value.timestamp())


def _month_index(value: datetime) -> int:
    """Months elapsed since year 0, used for period arithmetic"""
    return value.year * 12 + value.month - 1


def _month_start(month_index: int) -> datetime:
    year, month = divmod(month_index, 12)
    return datetime(year, month + 1, 1, tzinfo=timezone.utc)


class Calendar:
    """
    Day-count and period-boundary service consumed by the due engine.

    Stateless; a single instance can be shared by every caller.
    """

    def get_days_diff(self, start_date: int, end_date: int) -> int:
        """
        Number of 30/360 days between two timestamps

        The 31st of a month counts as the 30th, and time of day is ignored.

        Args:
            start_date: Start timestamp
            end_date: End timestamp, not earlier than start_date

        Returns:
            Day count

        Raises:
            StartDateLaterThanEndDate: If start_date > end_date
        """
        if start_date > end_date:
            raise StartDateLaterThanEndDate(start_date, end_date)

        start = _to_datetime(start_date)
        end = _to_datetime(end_date)
        start_day = min(start.day, DAYS_IN_A_MONTH)
        end_day = min(end.day, DAYS_IN_A_MONTH)

        return (
            (end.year - start.year) * DAYS_IN_A_YEAR
            + (end.month - start.month) * DAYS_IN_A_MONTH
            + end_day - start_day
        )

    def get_total_days_in_full_period(self, period_duration: PayPeriodDuration) -> int:
        """Days in one full period: 30, 90 or 180"""
        return period_duration.months * DAYS_IN_A_MONTH

    def get_start_date_of_period(self, period_duration: PayPeriodDuration, timestamp: int) -> int:
        """Start of the period containing the timestamp"""
        index = _month_index(_to_datetime(timestamp))
        index -= index % period_duration.months
        return _to_timestamp(_month_start(index))

    def get_start_date_of_next_period(self, period_duration: PayPeriodDuration, timestamp: int) -> int:
        """Start of the period immediately after the one containing the timestamp"""
        index = _month_index(_to_datetime(timestamp))
        index = index - index % period_duration.months + period_duration.months
        return _to_timestamp(_month_start(index))

    def get_num_periods_passed(
        self,
        period_duration: PayPeriodDuration,
        start_date: int,
        end_date: int
    ) -> int:
        """
        Number of period boundaries crossed going from start_date to end_date

        Two dates inside the same period give 0; an end date sitting exactly on
        the next boundary counts that boundary.

        Raises:
            StartDateLaterThanEndDate: If start_date > end_date
        """
        if start_date > end_date:
            raise StartDateLaterThanEndDate(start_date, end_date)

        months = period_duration.months
        start_index = _month_index(_to_datetime(start_date)) // months
        end_index = _month_index(_to_datetime(end_date)) // months
        return end_index - start_index

    def get_days_remaining_in_period(self, period_duration: PayPeriodDuration, timestamp: int) -> int:
        """Days from the timestamp to the start of the next period"""
        return self.get_days_diff(
            timestamp, self.get_start_date_of_next_period(period_duration, timestamp)
        )

    def get_start_of_day(self, timestamp: int) -> int:
        """Midnight UTC of the timestamp's day"""
        return timestamp - timestamp % SECONDS_IN_A_DAY

    def get_start_of_next_day(self, timestamp: int) -> int:
        """Midnight UTC of the day after the timestamp"""
        return self.get_start_of_day(timestamp) + SECONDS_IN_A_DAY
