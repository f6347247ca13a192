"""
Credit book endpoints
"""

from fastapi import APIRouter, HTTPException, Depends

from ..credit_book import CreditEntry
from ..errors import CreditAlreadyExists, CreditNotFound, OutOfOrderRefresh
from .system import EngineSystem, get_engine_system
from .schemas import (
    RegisterCreditRequest, CreditRefreshRequest, CreditResponse, DueInfoResponse,
    CreditConfigModel, CreditRecordModel, DueDetailModel
)


router = APIRouter()


def _credit_response(entry: CreditEntry) -> CreditResponse:
    return CreditResponse(
        credit_id=entry.credit_id,
        config=CreditConfigModel.from_config(entry.config),
        record=CreditRecordModel.from_record(entry.record),
        due_detail=DueDetailModel.from_due_detail(entry.due_detail),
        last_refreshed_at=entry.last_refreshed_at
    )


@router.post("", response_model=CreditResponse, status_code=201)
async def register_credit(
    request: RegisterCreditRequest,
    system: EngineSystem = Depends(get_engine_system)
):
    """Register a credit with its initial billing state"""
    try:
        entry = system.credit_book.register_credit(
            credit_id=request.credit_id,
            config=request.config.to_config(),
            record=request.record.to_record() if request.record else None,
            due_detail=request.due_detail.to_due_detail() if request.due_detail else None
        )
    except CreditAlreadyExists as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _credit_response(entry)


@router.get("/{credit_id}", response_model=CreditResponse)
async def get_credit(
    credit_id: str,
    system: EngineSystem = Depends(get_engine_system)
):
    """Get a stored credit"""
    try:
        entry = system.credit_book.get_credit(credit_id)
    except CreditNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    return _credit_response(entry)


@router.post("/{credit_id}/refresh", response_model=DueInfoResponse)
async def refresh_credit(
    credit_id: str,
    request: CreditRefreshRequest,
    system: EngineSystem = Depends(get_engine_system)
):
    """Refresh a stored credit's bill as of `now`"""
    try:
        record, due_detail = system.credit_book.refresh_credit(credit_id, request.now)
    except CreditNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except OutOfOrderRefresh as e:
        raise HTTPException(status_code=409, detail=str(e))

    return DueInfoResponse(
        record=CreditRecordModel.from_record(record),
        due_detail=DueDetailModel.from_due_detail(due_detail)
    )


@router.get("/{credit_id}/payoff")
async def get_payoff_amount(
    credit_id: str,
    system: EngineSystem = Depends(get_engine_system)
):
    """Payoff amount of a stored credit as of its last refresh"""
    try:
        payoff_amount = system.credit_book.get_payoff_amount(credit_id)
    except CreditNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {"credit_id": credit_id, "payoff_amount": payoff_amount}
