"""GET /v1/collection - Circle-wide collection summary"""

from datetime import datetime
from fastapi import APIRouter, Depends

from circle_ledger.api.v1.schemas import CollectionResponse
from circle_ledger.api.dependencies import Caller, get_caller, get_clock, get_ledger_service
from circle_ledger.services.ledger import LedgerService

router = APIRouter()


@router.get("/collection", response_model=CollectionResponse)
def get_collection(
    _: Caller = Depends(get_caller),
    now: datetime = Depends(get_clock),
    service: LedgerService = Depends(get_ledger_service),
):
    """
    Dues collected, interest paid and balance after expenses.

    Returns:
        Totals across all members plus the number of collection periods so far
    """
    summary = service.get_collection_summary(now)
    return CollectionResponse(
        current_period=summary.current_period,
        current_period_collection=float(summary.current_period_collection),
        total_collection=float(summary.total_collection),
        paid_interest=float(summary.paid_interest),
        total_expense=float(summary.total_expense),
        total_balance=float(summary.total_balance),
        total_months_of_collection=summary.total_months_of_collection,
    )
