"""
Loan lifecycle: Active -> PrincipalPaid -> Closed

Every transition is one-way. Interest is settled in consecutive intervals;
each InterestPayment starts where the previous one ended (or at the loan's
taken_date) and ends at the instant it was recorded.
"""

from datetime import datetime
from decimal import Decimal
from typing import List
from circle_ledger.domain.exceptions import (
    AlreadyClosedError,
    AlreadyPaidError,
    NoInterestDueError,
    NotFoundError,
    UnpaidInterestError,
    ValidationError,
)
from circle_ledger.domain.interest import ZERO, days_elapsed, interest_due
from circle_ledger.domain.models import InterestPayment, Loan, LoanState, LoanSummary
from circle_ledger.utils.money import Number, round_money, to_decimal


def grant_loan(principal: Number, monthly_rate: Number, now: datetime) -> Loan:
    """Create an Active loan taken at now with no interest history"""
    principal = to_decimal(principal)
    monthly_rate = to_decimal(monthly_rate)

    if principal <= 0:
        raise ValidationError(f"Loan principal must be positive, got {principal}")
    if monthly_rate < 0:
        raise ValidationError(f"Monthly rate cannot be negative, got {monthly_rate}")

    return Loan(principal=round_money(principal), monthly_rate=monthly_rate, taken_date=now)


def find_loan(loans: List[Loan], loan_id: str) -> Loan:
    for loan in loans:
        if loan.id == loan_id:
            return loan
    raise NotFoundError(f"Loan {loan_id} not found")


def outstanding_since(loan: Loan) -> datetime:
    """Start of the interval not yet covered by an interest payment"""
    if loan.interest_payments:
        return loan.interest_payments[-1].period_end
    return loan.taken_date


def loan_state(loan: Loan) -> LoanState:
    if loan.closed:
        return LoanState.CLOSED
    if loan.principal_paid:
        return LoanState.PRINCIPAL_PAID
    return LoanState.ACTIVE


def current_interest_due(loan: Loan, now: datetime) -> Decimal:
    """Interest accrued since the last settlement; always 0 once closed"""
    if loan.closed:
        return ZERO
    return interest_due(loan.principal, loan.monthly_rate, outstanding_since(loan), now)


def total_interest_paid(loan: Loan) -> Decimal:
    return round_money(sum((p.amount for p in loan.interest_payments), ZERO))


def total_amount_owed(loan: Loan, now: datetime) -> Decimal:
    """Principal plus unpaid interest; 0 once the principal is repaid"""
    if loan.principal_paid:
        return ZERO
    return round_money(loan.principal + current_interest_due(loan, now))


def _close(loan: Loan, now: datetime) -> None:
    loan.closed = True
    loan.closed_date = now


def pay_interest(loan: Loan, now: datetime) -> InterestPayment:
    """
    Settle interest accrued from the outstanding start through now.

    Closes the loan when the principal was already repaid.

    Raises:
        AlreadyClosedError: loan is closed
        NoInterestDueError: no interest-bearing day has elapsed since the last settlement
    """
    if loan.closed:
        raise AlreadyClosedError(f"Loan {loan.id} is already closed")

    start = outstanding_since(loan)
    if days_elapsed(start, now) <= 0:
        raise NoInterestDueError(f"No interest has accrued on loan {loan.id} since {start.isoformat()}")

    payment = InterestPayment(
        amount=interest_due(loan.principal, loan.monthly_rate, start, now),
        paid_date=now,
        period_start=start,
        period_end=now,
    )
    loan.interest_payments.append(payment)

    if loan.principal_paid:
        _close(loan, now)

    return payment


def mark_principal_paid(loan: Loan, now: datetime) -> Loan:
    """
    Record repayment of the principal.

    The loan closes immediately when interest is already settled through now;
    otherwise it waits in PrincipalPaid for a final interest payment.

    Raises:
        AlreadyPaidError: principal already repaid
        UnpaidInterestError: interest has accrued since the last settlement (loan untouched)
    """
    if loan.principal_paid:
        raise AlreadyPaidError(f"Principal of loan {loan.id} is already paid")

    due = current_interest_due(loan, now)
    if due > 0:
        raise UnpaidInterestError(due)

    loan.principal_paid = True
    loan.principal_paid_date = now

    if outstanding_since(loan) >= now:
        _close(loan, now)

    return loan


def summarize_loan(loan: Loan, now: datetime) -> LoanSummary:
    """Annotate a loan with its figures as of now"""
    since = outstanding_since(loan)
    return LoanSummary(
        loan=loan,
        state=loan_state(loan),
        current_interest_due=current_interest_due(loan, now),
        total_amount_owed=total_amount_owed(loan, now),
        total_interest_paid=total_interest_paid(loan),
        outstanding_since=since,
        days_accrued=0 if loan.closed else days_elapsed(since, now),
    )
