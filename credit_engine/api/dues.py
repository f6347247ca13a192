"""
Stateless due calculation endpoints
"""

from fastapi import APIRouter, HTTPException, Depends

from ..errors import BorrowAmountLessThanPlatformFees
from .system import EngineSystem, get_engine_system
from .schemas import (
    AmountRequest, RecordRequest, RefreshRequest, DueInfoResponse,
    CreditRecordModel, DueDetailModel
)


router = APIRouter()


@router.post("/front-loading-fee")
async def calc_front_loading_fee(
    request: AmountRequest,
    system: EngineSystem = Depends(get_engine_system)
):
    """Front loading fee charged on a draw"""
    return {
        "amount": request.amount,
        "front_loading_fee": system.due_manager.calc_front_loading_fee(request.amount)
    }


@router.post("/distribution")
async def dist_borrowing_amount(
    request: AmountRequest,
    system: EngineSystem = Depends(get_engine_system)
):
    """Split a draw between the borrower and the platform"""
    try:
        amount_to_borrower, platform_fees = system.due_manager.dist_borrowing_amount(
            request.amount
        )
    except BorrowAmountLessThanPlatformFees as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "amount_to_borrower": amount_to_borrower,
        "platform_fees": platform_fees
    }


@router.post("/next-refresh-date")
async def get_next_bill_refresh_date(
    request: RecordRequest,
    system: EngineSystem = Depends(get_engine_system)
):
    """Timestamp after which the bill must be refreshed"""
    try:
        record = request.record.to_record()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"next_bill_refresh_date": system.due_manager.get_next_bill_refresh_date(record)}


@router.post("/refresh", response_model=DueInfoResponse)
async def get_due_info(
    request: RefreshRequest,
    system: EngineSystem = Depends(get_engine_system)
):
    """Compute the billing state as of `now` without persisting it"""
    try:
        record, due_detail = system.due_manager.get_due_info(
            request.record.to_record(),
            request.config.to_config(),
            request.due_detail.to_due_detail(),
            request.now
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return DueInfoResponse(
        record=CreditRecordModel.from_record(record),
        due_detail=DueDetailModel.from_due_detail(due_detail)
    )


@router.post("/payoff")
async def get_payoff_amount(
    request: RecordRequest,
    system: EngineSystem = Depends(get_engine_system)
):
    """Amount needed to close the credit"""
    try:
        record = request.record.to_record()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"payoff_amount": system.due_manager.get_payoff_amount(record)}
