"""Dues endpoints - current period and marking payments"""

from datetime import datetime
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from circle_ledger.api.v1.schemas import CurrentPeriodResponse, PaymentMarkRequest, PaymentMarkResponse
from circle_ledger.api.dependencies import Caller, get_caller, get_clock, get_ledger_service, get_request_id, require_admin
from circle_ledger.domain.exceptions import DomainException
from circle_ledger.domain.periods import range_label
from circle_ledger.infrastructure.database.session import get_db
from circle_ledger.infrastructure.observability.logging import log_ledger_event
from circle_ledger.infrastructure.observability.metrics import record_payment_marked
from circle_ledger.services.ledger import LedgerService

router = APIRouter()


@router.get("/payments/current-period", response_model=CurrentPeriodResponse)
def get_current_period(
    _: Caller = Depends(get_caller),
    now: datetime = Depends(get_clock),
    service: LedgerService = Depends(get_ledger_service),
):
    """Billing period containing now (15th to 15th)"""
    period = service.current_period(now)
    return CurrentPeriodResponse(period=period.range_label, label=period.label)


@router.post("/payments/mark", response_model=PaymentMarkResponse)
def mark_payment(
    body: PaymentMarkRequest,
    request: Request,
    _: Caller = Depends(require_admin),
    now: datetime = Depends(get_clock),
    db: Session = Depends(get_db),
    service: LedgerService = Depends(get_ledger_service),
):
    """
    Mark a member's dues paid or unpaid.

    The period may be given in any accepted form; it is stored as YYYY-MM.
    Marking the same period twice updates the one record.
    """
    try:
        payment = service.mark_payment(body.member_id, body.period, body.paid, now)
        db.commit()
    except DomainException:
        db.rollback()
        raise

    record_payment_marked(payment.paid)
    log_ledger_event(
        "Payment marked",
        request_id=get_request_id(request),
        step="payment_marked",
        member_id=body.member_id,
        period=payment.period,
        paid=payment.paid,
    )
    return PaymentMarkResponse(
        member_id=body.member_id,
        paid=payment.paid,
        payment_period=range_label(payment.period),
        period_stored=payment.period,
        paid_date=payment.paid_date,
    )
