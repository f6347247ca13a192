"""
Late Fee Module

Incremental late fee accrual. Each call charges only for the days between the
previous checkpoint and the new one, so refreshing twice at the same time
never charges twice.
"""

from typing import Tuple

from .calendar_service import Calendar, DAYS_IN_A_YEAR
from .models import CreditConfig, CreditRecord, DueDetail
from .pool_config import FeeStructure, HUNDRED_PERCENT_IN_BPS


def calc_late_fee(
    calendar: Calendar,
    fees: FeeStructure,
    config: CreditConfig,
    record: CreditRecord,
    due_detail: DueDetail,
    now: int
) -> Tuple[int, int]:
    """
    Accrue the late fee up to the start of the day after `now`

    The fee is charged on the past-due yield and principal, plus the current
    bill when its due date has already passed.

    Args:
        calendar: Day-count service
        fees: Current pool fee structure
        config: Credit configuration
        record: Credit record before the refresh
        due_detail: Due detail before the refresh
        now: Refresh timestamp

    Returns:
        Tuple of (new_late_fee_updated_date, new_late_fee)
    """
    checkpoint = calendar.get_start_of_next_day(now)

    basis = due_detail.yield_past_due + due_detail.principal_past_due
    bill_overdue = record.next_due_date != 0 and now > record.next_due_date
    if bill_overdue:
        basis += record.next_due

    anchor = due_detail.late_fee_updated_date
    if anchor == 0:
        if bill_overdue:
            # Late since the missed bill fell due.
            anchor = record.next_due_date
        else:
            anchor = calendar.get_start_date_of_period(config.period_duration, now)

    if anchor >= checkpoint or basis == 0 or fees.late_fee_bps == 0:
        return max(anchor, checkpoint), due_detail.late_fee

    days = calendar.get_days_diff(anchor, checkpoint)
    increment = basis * fees.late_fee_bps * days // (HUNDRED_PERCENT_IN_BPS * DAYS_IN_A_YEAR)
    return checkpoint, due_detail.late_fee + increment
