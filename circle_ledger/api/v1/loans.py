"""Loan endpoints - grant, settle interest, repay principal, view"""

from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from circle_ledger.api.v1.schemas import (
    InterestPaymentResponse,
    InterestPaymentSchema,
    LoanActionRequest,
    LoanCreateRequest,
    LoanResponse,
    LoansResponse,
)
from circle_ledger.api.dependencies import Caller, get_caller, get_clock, get_ledger_service, get_request_id, require_admin
from circle_ledger.domain.exceptions import DomainException
from circle_ledger.domain.loans import summarize_loan
from circle_ledger.domain.models import InterestPayment, LoanSummary
from circle_ledger.infrastructure.database.session import get_db
from circle_ledger.infrastructure.observability.logging import log_ledger_event
from circle_ledger.infrastructure.observability.metrics import (
    loan_closed_counter,
    record_interest_payment,
    record_loan_granted,
)
from circle_ledger.services.ledger import LedgerService

router = APIRouter()


def _interest_schema(payment: InterestPayment) -> InterestPaymentSchema:
    return InterestPaymentSchema(
        amount=float(payment.amount),
        paid_date=payment.paid_date,
        period_start=payment.period_start,
        period_end=payment.period_end,
    )


def to_loan_response(summary: LoanSummary) -> LoanResponse:
    loan = summary.loan
    return LoanResponse(
        loan_id=loan.id,
        principal=float(loan.principal),
        monthly_rate=float(loan.monthly_rate),
        taken_date=loan.taken_date,
        state=summary.state.value,
        principal_paid=loan.principal_paid,
        principal_paid_date=loan.principal_paid_date,
        closed=loan.closed,
        closed_date=loan.closed_date,
        interest_payments=[_interest_schema(p) for p in loan.interest_payments],
        current_interest_due=float(summary.current_interest_due),
        total_amount_owed=float(summary.total_amount_owed),
        total_interest_paid=float(summary.total_interest_paid),
        outstanding_since=summary.outstanding_since,
        days_accrued=summary.days_accrued,
    )


@router.post("/loans", response_model=LoanResponse)
def grant_loan(
    body: LoanCreateRequest,
    request: Request,
    _: Caller = Depends(require_admin),
    now: datetime = Depends(get_clock),
    db: Session = Depends(get_db),
    service: LedgerService = Depends(get_ledger_service),
):
    """Grant a loan at the configured monthly rate, accruing from now"""
    try:
        loan = service.grant_loan(body.member_id, body.principal, now)
        db.commit()
    except DomainException:
        db.rollback()
        raise

    record_loan_granted(loan.principal)
    log_ledger_event(
        "Loan granted",
        request_id=get_request_id(request),
        step="loan_granted",
        member_id=body.member_id,
        loan_id=loan.id,
        amount=loan.principal,
    )
    return to_loan_response(summarize_loan(loan, now))


@router.get("/loans", response_model=LoansResponse)
def get_loans(
    member_id: Optional[str] = Query(None, description="Member to inspect (admins only)"),
    caller: Caller = Depends(get_caller),
    now: datetime = Depends(get_clock),
    service: LedgerService = Depends(get_ledger_service),
):
    """
    Loans with interest due and amount owed as of now.

    Admins may inspect any member; everyone else sees their own loans.
    """
    target = member_id if caller.is_admin and member_id else caller.member_id
    summaries = service.get_loans(target, now)
    return LoansResponse(member_id=target, loans=[to_loan_response(s) for s in summaries])


@router.post("/loans/{loan_id}/interest", response_model=InterestPaymentResponse)
def pay_loan_interest(
    loan_id: str,
    body: LoanActionRequest,
    request: Request,
    _: Caller = Depends(require_admin),
    now: datetime = Depends(get_clock),
    db: Session = Depends(get_db),
    service: LedgerService = Depends(get_ledger_service),
):
    """Settle interest accrued since the last settlement"""
    try:
        loan = service.pay_loan_interest(body.member_id, loan_id, now)
        db.commit()
    except DomainException:
        db.rollback()
        raise

    payment = loan.interest_payments[-1]
    closed = loan.closed
    record_interest_payment(payment.amount, closed)
    log_ledger_event(
        "Interest paid",
        request_id=get_request_id(request),
        step="interest_paid",
        member_id=body.member_id,
        loan_id=loan_id,
        amount=payment.amount,
        loan_closed=closed,
    )
    return InterestPaymentResponse(loan_id=loan_id, payment=_interest_schema(payment), loan_closed=closed)


@router.post("/loans/{loan_id}/principal", response_model=LoanResponse)
def mark_loan_principal_paid(
    loan_id: str,
    body: LoanActionRequest,
    request: Request,
    _: Caller = Depends(require_admin),
    now: datetime = Depends(get_clock),
    db: Session = Depends(get_db),
    service: LedgerService = Depends(get_ledger_service),
):
    """Record principal repayment; rejected while interest is outstanding"""
    try:
        loan = service.mark_loan_principal_paid(body.member_id, loan_id, now)
        db.commit()
    except DomainException:
        db.rollback()
        raise

    if loan.closed:
        loan_closed_counter.inc()
    log_ledger_event(
        "Principal paid",
        request_id=get_request_id(request),
        step="principal_paid",
        member_id=body.member_id,
        loan_id=loan_id,
        amount=loan.principal,
        loan_closed=loan.closed,
    )
    return to_loan_response(summarize_loan(loan, now))
