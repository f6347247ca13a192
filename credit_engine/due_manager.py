"""
Credit Due Manager Module

Bill refresh engine for credit lines. Given a credit's configuration, its last
billing record, the due-detail bookkeeping and the current time, it derives
the next billing record and due detail, however many periods were missed in
between. All methods are pure with respect to persistent state: callers own
persistence of the returned records.
"""

from dataclasses import replace
from typing import Optional, Tuple

from .amortization import calc_principal_due, split_billing_days
from .calendar_service import Calendar, SECONDS_IN_A_DAY
from .fees import calc_front_loading_fee, dist_borrowing_amount
from .late_fee import calc_late_fee
from .logging_config import get_logger, log_action
from .models import CreditConfig, CreditRecord, CreditState, DueDetail, get_principal
from .pool_config import PoolConfig
from .yield_accrual import calc_yield_due


class CreditDueManager:
    """
    Computes bills, past-due amounts and late fees for credit lines.

    The transition from one (CreditRecord, DueDetail) pair to the next is
    evaluated in this order:

    1. Deleted or defaulted credits are never recomputed.
    2. Approved credits wait for their designated start date.
    3. Within the current billing cycle only the late fee of an already late
       credit moves.
    4. A credit in good standing is left alone during the late payment grace
       period.
    5. Otherwise a new bill is opened for the period containing `now`, rolling
       the old bill and every fully elapsed period into past due.
    """

    def __init__(self, pool_config: PoolConfig, calendar: Optional[Calendar] = None):
        self.pool_config = pool_config
        self.calendar = calendar or Calendar()
        self.logger = get_logger("credit_engine.due_manager")

    def calc_front_loading_fee(self, amount: int) -> int:
        """Front loading fee for a draw of the given amount"""
        return calc_front_loading_fee(self.pool_config.get_front_loading_fees(), amount)

    def dist_borrowing_amount(self, borrow_amount: int) -> Tuple[int, int]:
        """
        Split a draw between the borrower and the platform

        Returns:
            Tuple of (amount_to_borrower, platform_fee)

        Raises:
            BorrowAmountLessThanPlatformFees: If the fee exceeds the draw
        """
        return dist_borrowing_amount(self.pool_config.get_front_loading_fees(), borrow_amount)

    def get_next_bill_refresh_date(self, record: CreditRecord) -> int:
        """
        Timestamp after which the bill has to be refreshed

        A credit in good standing with an unpaid bill only turns late once the
        late payment grace period is over.
        """
        if record.state == CreditState.GOOD_STANDING and record.next_due > 0:
            grace_days = self.pool_config.get_pool_settings().late_payment_grace_period_in_days
            return record.next_due_date + grace_days * SECONDS_IN_A_DAY
        return record.next_due_date

    def get_payoff_amount(self, record: CreditRecord) -> int:
        """Amount needed to close the credit, without refreshing late fees"""
        return record.unbilled_principal + record.next_due + record.total_past_due

    def get_due_info(
        self,
        record: CreditRecord,
        config: CreditConfig,
        due_detail: DueDetail,
        now: int
    ) -> Tuple[CreditRecord, DueDetail]:
        """
        Derive the billing state of a credit as of `now`

        Args:
            record: Last known credit record
            config: Credit configuration
            due_detail: Due detail matching the record
            now: Refresh timestamp; must not precede the last refresh

        Returns:
            Tuple of (new_record, new_due_detail); the inputs are returned
            as-is when nothing changes
        """
        if record.state.is_absorbing:
            return record, due_detail

        if record.state == CreditState.APPROVED and now < record.next_due_date:
            return record, due_detail

        first_bill = record.next_due_date == 0 or record.state == CreditState.APPROVED
        if not first_bill:
            if now <= record.next_due_date:
                if record.missed_periods == 0:
                    return record, due_detail
                return self._refresh_late_fee(record, config, due_detail, now)

            if now <= self.get_next_bill_refresh_date(record):
                return record, due_detail

        return self._open_bill(record, config, due_detail, now, first_bill)

    def _refresh_late_fee(
        self,
        record: CreditRecord,
        config: CreditConfig,
        due_detail: DueDetail,
        now: int
    ) -> Tuple[CreditRecord, DueDetail]:
        fees = self.pool_config.get_fee_structure()
        late_fee_updated_date, late_fee = calc_late_fee(
            self.calendar, fees, config, record, due_detail, now
        )
        new_record = replace(
            record, total_past_due=record.total_past_due + late_fee - due_detail.late_fee
        )
        new_due_detail = replace(
            due_detail, late_fee_updated_date=late_fee_updated_date, late_fee=late_fee
        )

        self.logger.debug(
            "Late fee refreshed: %s -> %s", due_detail.late_fee, late_fee
        )
        return new_record, new_due_detail

    def _open_bill(
        self,
        record: CreditRecord,
        config: CreditConfig,
        due_detail: DueDetail,
        now: int,
        first_bill: bool
    ) -> Tuple[CreditRecord, DueDetail]:
        period_duration = config.period_duration
        fees = self.pool_config.get_fee_structure()
        new_due_date = self.calendar.get_start_date_of_next_period(period_duration, now)

        if first_bill:
            # Starts at the draw, or at the designated start date if one was set.
            bill_start = record.next_due_date or now
            old_due_date = 0
        else:
            bill_start = record.next_due_date
            old_due_date = record.next_due_date

        # Periods elapsed since the last bill, counting the one being opened.
        periods_passed = self.calendar.get_num_periods_passed(period_duration, bill_start, now) + 1

        # Yield
        principal = get_principal(record, due_detail)
        days_past, days_next = split_billing_days(
            self.calendar, period_duration, bill_start, old_due_date, new_due_date
        )
        yield_past_due = 0
        if days_past > 0:
            yield_past_due = max(calc_yield_due(config, principal, days_past))
        accrued, committed = calc_yield_due(config, principal, days_next)
        yield_next_due = max(accrued, committed)

        # Principal
        unbilled_principal, principal_past_due, principal_next_due = calc_principal_due(
            self.calendar,
            record.unbilled_principal,
            bill_start,
            old_due_date,
            new_due_date,
            period_duration,
            fees.min_principal_rate_in_bps,
        )
        if periods_passed == record.remaining_periods:
            # Final bill of the term.
            principal_next_due += unbilled_principal
            unbilled_principal = 0
        elif periods_passed > record.remaining_periods:
            # Maturity passed before the current period.
            principal_past_due += principal_next_due + unbilled_principal
            principal_next_due = 0
            unbilled_principal = 0
        remaining_periods = max(record.remaining_periods - periods_passed, 0)

        # Past due and state
        new_yield_past_due = due_detail.yield_past_due + yield_past_due
        new_principal_past_due = due_detail.principal_past_due + principal_past_due
        if not first_bill:
            new_yield_past_due += record.yield_due
            new_principal_past_due += record.principal_due

        late_fee_updated_date = due_detail.late_fee_updated_date
        late_fee = due_detail.late_fee
        missed_periods = record.missed_periods
        owed_at_due_date = not first_bill and (record.next_due > 0 or record.total_past_due > 0)

        if owed_at_due_date:
            late_fee_updated_date, late_fee = calc_late_fee(
                self.calendar, fees, config, record, due_detail, now
            )
            missed_periods += periods_passed
        elif yield_past_due + principal_past_due > 0:
            # Nothing was owed at the old due date, but the periods in between
            # were never billed and are already past due.
            late_fee_updated_date = self.calendar.get_start_of_next_day(now)
            missed_periods += periods_passed - 1

        state = CreditState.DELAYED if missed_periods > 0 else CreditState.GOOD_STANDING

        new_record = CreditRecord(
            unbilled_principal=unbilled_principal,
            next_due_date=new_due_date,
            next_due=yield_next_due + principal_next_due,
            yield_due=yield_next_due,
            total_past_due=late_fee + new_yield_past_due + new_principal_past_due,
            missed_periods=missed_periods,
            remaining_periods=remaining_periods,
            state=state,
        )
        new_due_detail = DueDetail(
            late_fee_updated_date=late_fee_updated_date,
            late_fee=late_fee,
            yield_past_due=new_yield_past_due,
            principal_past_due=new_principal_past_due,
            committed=committed,
            accrued=accrued,
            paid=0,
        )

        log_action(
            self.logger, "info", "Bill opened",
            action="get_due_info",
            extra={
                "first_bill": first_bill,
                "periods_passed": periods_passed,
                "next_due_date": new_due_date,
                "next_due": new_record.next_due,
                "total_past_due": new_record.total_past_due,
                "missed_periods": missed_periods,
                "remaining_periods": remaining_periods,
                "state": state.value
            }
        )

        return new_record, new_due_detail
