"""
Credit Models Module

Immutable billing state of a credit line: its configuration, the current
billing record and the due-detail bookkeeping that supports it. All amounts
are integers in the smallest unit of account and all rates are basis points.
NEVER uses float.
"""

from dataclasses import dataclass, asdict, fields
from typing import Any, Dict
from enum import Enum


class CreditState(Enum):
    """Credit lifecycle states"""
    DELETED = "deleted"              # Credit closed and removed
    DEFAULTED = "defaulted"          # Credit written into default
    APPROVED = "approved"            # Approved, no bill opened yet
    GOOD_STANDING = "good_standing"  # Bills paid on time
    DELAYED = "delayed"              # One or more periods missed

    @property
    def is_absorbing(self) -> bool:
        """No further due recomputation happens once reached"""
        return self in (CreditState.DELETED, CreditState.DEFAULTED)


class PayPeriodDuration(Enum):
    """Billing cycle length, valued in calendar months"""
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUALLY = "semi_annually"

    @property
    def months(self) -> int:
        """Number of calendar months in one period"""
        return {
            PayPeriodDuration.MONTHLY: 1,
            PayPeriodDuration.QUARTERLY: 3,
            PayPeriodDuration.SEMI_ANNUALLY: 6,
        }[self]


def _require_non_negative_ints(record: Any) -> None:
    """Validate that every int field of a record is a non-negative int"""
    for f in fields(record):
        value = getattr(record, f.name)
        if f.type in ("int", int):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{f.name} must be an integer, got {value!r}")
            if value < 0:
                raise ValueError(f"{f.name} must be non-negative, got {value}")


@dataclass(frozen=True)
class CreditConfig:
    """Credit terms, fixed once the credit is approved"""
    credit_limit: int
    committed_amount: int               # Floor principal used for yield
    period_duration: PayPeriodDuration
    num_of_periods: int                 # Contract term in periods
    yield_in_bps: int
    advance_rate_in_bps: int = 10000
    revolving: bool = False
    receivable_auto_approval: bool = False

    def __post_init__(self):
        if isinstance(self.period_duration, str):
            object.__setattr__(self, 'period_duration', PayPeriodDuration(self.period_duration))
        _require_non_negative_ints(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage"""
        result = asdict(self)
        result['period_duration'] = self.period_duration.value
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CreditConfig':
        """Create instance from dictionary"""
        return cls(**data)


@dataclass(frozen=True)
class CreditRecord:
    """Billing state of one credit line"""
    unbilled_principal: int = 0  # Principal not yet rolled into a bill
    next_due_date: int = 0       # Upcoming bill boundary, 0 if no bill opened
    next_due: int = 0            # Yield + principal due at next_due_date
    yield_due: int = 0           # Yield portion of next_due
    total_past_due: int = 0      # Overdue yield + principal + late fees
    missed_periods: int = 0
    remaining_periods: int = 0
    state: CreditState = CreditState.APPROVED

    def __post_init__(self):
        if isinstance(self.state, str):
            object.__setattr__(self, 'state', CreditState(self.state))
        _require_non_negative_ints(self)
        if self.yield_due > self.next_due:
            raise ValueError("yield_due cannot exceed next_due")

    @property
    def principal_due(self) -> int:
        """Principal portion of next_due"""
        return self.next_due - self.yield_due

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage"""
        result = asdict(self)
        result['state'] = self.state.value
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CreditRecord':
        """Create instance from dictionary"""
        return cls(**data)


@dataclass(frozen=True)
class DueDetail:
    """Fine-grained breakdown supporting a CreditRecord"""
    late_fee_updated_date: int = 0  # Late fee accrual checkpoint
    late_fee: int = 0
    yield_past_due: int = 0
    principal_past_due: int = 0
    committed: int = 0  # Committed yield of the current bill
    accrued: int = 0    # Rate-accrued yield of the current bill
    paid: int = 0       # Paid against the current bill

    def __post_init__(self):
        _require_non_negative_ints(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DueDetail':
        """Create instance from dictionary"""
        return cls(**data)


def get_principal(record: CreditRecord, due_detail: DueDetail) -> int:
    """Total outstanding principal: unbilled, billed and past due"""
    return record.unbilled_principal + record.principal_due + due_detail.principal_past_due
