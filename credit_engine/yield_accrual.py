"""
Yield Accrual Module

Yield owed over a span of 30/360 days, on both the outstanding principal and
the committed amount of the credit.
"""

from typing import Tuple

from .calendar_service import DAYS_IN_A_YEAR
from .models import CreditConfig
from .pool_config import HUNDRED_PERCENT_IN_BPS


def calc_yield_due(config: CreditConfig, principal: int, days: int) -> Tuple[int, int]:
    """
    Compute yield for a span of days

    The committed amount acts as a floor: callers charge the larger of the two
    results, and keep both for reporting.

    Args:
        config: Credit configuration supplying the rate and committed amount
        principal: Outstanding principal
        days: Number of 30/360 days in the span

    Returns:
        Tuple of (accrued_yield, committed_yield)
    """
    denominator = HUNDRED_PERCENT_IN_BPS * DAYS_IN_A_YEAR
    accrued = principal * config.yield_in_bps * days // denominator
    committed = config.committed_amount * config.yield_in_bps * days // denominator
    return accrued, committed
