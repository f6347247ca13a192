"""
Front Loading Fee Module

Upfront platform fee charged on every draw, and the split of a draw between
the borrower and the platform.
"""

from typing import Tuple

from .errors import BorrowAmountLessThanPlatformFees
from .pool_config import FrontLoadingFeesStructure, HUNDRED_PERCENT_IN_BPS


def calc_front_loading_fee(fees: FrontLoadingFeesStructure, amount: int) -> int:
    """
    Compute the front loading fee for a draw

    Args:
        fees: Current front loading fee structure
        amount: Draw amount

    Returns:
        Flat fee plus the proportional fee, rounded down
    """
    fee = fees.front_loading_fee_flat
    if fees.front_loading_fee_bps > 0:
        fee += amount * fees.front_loading_fee_bps // HUNDRED_PERCENT_IN_BPS
    return fee


def dist_borrowing_amount(fees: FrontLoadingFeesStructure, borrow_amount: int) -> Tuple[int, int]:
    """
    Split a draw into the amount sent to the borrower and the platform fee

    Args:
        fees: Current front loading fee structure
        borrow_amount: Amount the borrower asked for

    Returns:
        Tuple of (amount_to_borrower, platform_fee)

    Raises:
        BorrowAmountLessThanPlatformFees: If the fee exceeds the draw
    """
    platform_fee = calc_front_loading_fee(fees, borrow_amount)
    if borrow_amount < platform_fee:
        raise BorrowAmountLessThanPlatformFees(borrow_amount, platform_fee)
    return borrow_amount - platform_fee, platform_fee
