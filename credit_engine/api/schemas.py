"""
Pydantic schemas for API requests and responses

Amounts travel as JSON integers in the smallest unit of account.
"""

from typing import Optional
from pydantic import BaseModel, Field

from ..models import CreditConfig, CreditRecord, DueDetail, PayPeriodDuration, CreditState


class CreditConfigModel(BaseModel):
    credit_limit: int = Field(..., ge=0)
    committed_amount: int = Field(0, ge=0)
    period_duration: PayPeriodDuration = PayPeriodDuration.MONTHLY
    num_of_periods: int = Field(..., ge=0)
    yield_in_bps: int = Field(..., ge=0)
    advance_rate_in_bps: int = Field(10000, ge=0)
    revolving: bool = False
    receivable_auto_approval: bool = False

    def to_config(self) -> CreditConfig:
        return CreditConfig(**self.model_dump())

    @classmethod
    def from_config(cls, config: CreditConfig) -> 'CreditConfigModel':
        return cls(**config.to_dict())


class CreditRecordModel(BaseModel):
    unbilled_principal: int = Field(0, ge=0)
    next_due_date: int = Field(0, ge=0)
    next_due: int = Field(0, ge=0)
    yield_due: int = Field(0, ge=0)
    total_past_due: int = Field(0, ge=0)
    missed_periods: int = Field(0, ge=0)
    remaining_periods: int = Field(0, ge=0)
    state: CreditState = CreditState.APPROVED

    def to_record(self) -> CreditRecord:
        return CreditRecord(**self.model_dump())

    @classmethod
    def from_record(cls, record: CreditRecord) -> 'CreditRecordModel':
        return cls(**record.to_dict())


class DueDetailModel(BaseModel):
    late_fee_updated_date: int = Field(0, ge=0)
    late_fee: int = Field(0, ge=0)
    yield_past_due: int = Field(0, ge=0)
    principal_past_due: int = Field(0, ge=0)
    committed: int = Field(0, ge=0)
    accrued: int = Field(0, ge=0)
    paid: int = Field(0, ge=0)

    def to_due_detail(self) -> DueDetail:
        return DueDetail(**self.model_dump())

    @classmethod
    def from_due_detail(cls, due_detail: DueDetail) -> 'DueDetailModel':
        return cls(**due_detail.to_dict())


# Stateless due calculation schemas
class AmountRequest(BaseModel):
    amount: int = Field(..., ge=0, description="Draw amount")


class RecordRequest(BaseModel):
    record: CreditRecordModel


class RefreshRequest(BaseModel):
    record: CreditRecordModel
    config: CreditConfigModel
    due_detail: DueDetailModel = Field(default_factory=DueDetailModel)
    now: int = Field(..., ge=0, description="Refresh timestamp (UTC seconds)")


class DueInfoResponse(BaseModel):
    record: CreditRecordModel
    due_detail: DueDetailModel


# Credit book schemas
class RegisterCreditRequest(BaseModel):
    credit_id: str = Field(..., min_length=1)
    config: CreditConfigModel
    record: Optional[CreditRecordModel] = None
    due_detail: Optional[DueDetailModel] = None


class CreditRefreshRequest(BaseModel):
    now: int = Field(..., ge=0, description="Refresh timestamp (UTC seconds)")


class CreditResponse(BaseModel):
    credit_id: str
    config: CreditConfigModel
    record: CreditRecordModel
    due_detail: DueDetailModel
    last_refreshed_at: int
