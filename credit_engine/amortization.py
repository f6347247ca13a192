"""
Principal Amortization Module

Splits unbilled principal into the part that fell due in periods already
past, the part due with the bill being opened, and the part that stays
unbilled. Amortization is linear in 30/360 days at the pool's minimum
principal rate per period.
"""

from typing import Tuple

from .calendar_service import Calendar
from .logging_config import get_logger, log_action
from .models import PayPeriodDuration
from .pool_config import HUNDRED_PERCENT_IN_BPS


logger = get_logger("credit_engine.amortization")


def split_billing_days(
    calendar: Calendar,
    period_duration: PayPeriodDuration,
    reference_timestamp: int,
    old_due_date: int,
    new_due_date: int
) -> Tuple[int, int]:
    """
    Day counts of the past-due span and of the bill being opened

    The bill being opened always covers the period ending at new_due_date.
    For a credit that never had a bill (old_due_date == 0) both spans start at
    reference_timestamp, which is the draw time or the designated start date.

    Returns:
        Tuple of (days_past_due, days_next_due)
    """
    current_period_start = calendar.get_start_date_of_period(period_duration, new_due_date)

    if old_due_date == 0:
        past_start = reference_timestamp
        next_start = max(reference_timestamp, current_period_start)
    else:
        past_start = old_due_date
        next_start = current_period_start

    days_past = 0
    if past_start < current_period_start:
        days_past = calendar.get_days_diff(past_start, current_period_start)
    days_next = calendar.get_days_diff(next_start, new_due_date)

    return days_past, days_next


def calc_principal_due(
    calendar: Calendar,
    unbilled_principal: int,
    reference_timestamp: int,
    old_due_date: int,
    new_due_date: int,
    period_duration: PayPeriodDuration,
    principal_rate_bps: int
) -> Tuple[int, int, int]:
    """
    Amortize unbilled principal over the elapsed span

    Args:
        calendar: Day-count service
        unbilled_principal: Principal not yet rolled into any bill
        reference_timestamp: Start of the first bill when old_due_date is 0
        old_due_date: Due date of the last bill, 0 if none was ever opened
        new_due_date: Due date of the bill being opened
        period_duration: Billing cycle length
        principal_rate_bps: Share of unbilled principal due per full period

    Returns:
        Tuple of (new_unbilled_principal, principal_past_due, principal_next_due)
    """
    if principal_rate_bps == 0 or unbilled_principal == 0:
        return unbilled_principal, 0, 0

    days_past, days_next = split_billing_days(
        calendar, period_duration, reference_timestamp, old_due_date, new_due_date
    )
    denominator = HUNDRED_PERCENT_IN_BPS * calendar.get_total_days_in_full_period(period_duration)

    amortized = unbilled_principal * principal_rate_bps * (days_past + days_next) // denominator
    if amortized > unbilled_principal:
        log_action(
            logger, "warning", "Amortized principal capped at unbilled principal",
            action="calc_principal_due",
            extra={
                "unbilled_principal": unbilled_principal,
                "amortized": amortized,
                "principal_rate_bps": principal_rate_bps,
                "days_elapsed": days_past + days_next
            }
        )
        amortized = unbilled_principal

    principal_past_due = min(
        amortized, unbilled_principal * principal_rate_bps * days_past // denominator
    )
    principal_next_due = amortized - principal_past_due

    return unbilled_principal - amortized, principal_past_due, principal_next_due
