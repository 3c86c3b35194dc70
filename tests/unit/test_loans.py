"""Unit tests for the loan lifecycle state machine"""

import copy
import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from circle_ledger.domain.exceptions import (
    AlreadyClosedError,
    AlreadyPaidError,
    BusinessRuleError,
    NoInterestDueError,
    NotFoundError,
    UnpaidInterestError,
    ValidationError,
)
from circle_ledger.domain.loans import (
    current_interest_due,
    find_loan,
    grant_loan,
    loan_state,
    mark_principal_paid,
    outstanding_since,
    pay_interest,
    summarize_loan,
    total_amount_owed,
    total_interest_paid,
)
from circle_ledger.domain.models import LoanState

JAN_1 = datetime(2025, 1, 1, tzinfo=timezone.utc)
JAN_31 = datetime(2025, 1, 31, tzinfo=timezone.utc)


@pytest.fixture
def loan():
    return grant_loan(10000, 5, JAN_1)


def test_grant_loan_starts_active(loan):
    assert loan.principal == Decimal("10000.00")
    assert loan.monthly_rate == Decimal("5")
    assert loan.taken_date == JAN_1
    assert loan.interest_payments == []
    assert loan_state(loan) == LoanState.ACTIVE
    assert loan.id


@pytest.mark.parametrize("principal", [0, -1, Decimal("-0.01")])
def test_grant_loan_rejects_non_positive_principal(principal):
    with pytest.raises(ValidationError):
        grant_loan(principal, 5, JAN_1)


def test_grant_loan_rejects_negative_rate():
    with pytest.raises(ValidationError):
        grant_loan(1000, -1, JAN_1)


def test_pay_interest_then_principal_closes_loan(loan):
    """Jan 1 -> Jan 31 is 29 interest days: 10000 * 5/3000 * 29 = 483.33"""
    payment = pay_interest(loan, JAN_31)

    assert payment.amount == Decimal("483.33")
    assert payment.period_start == JAN_1
    assert payment.period_end == JAN_31
    assert payment.paid_date == JAN_31
    assert loan_state(loan) == LoanState.ACTIVE

    mark_principal_paid(loan, JAN_31)

    assert loan.principal_paid is True
    assert loan.principal_paid_date == JAN_31
    assert loan.closed is True
    assert loan.closed_date == JAN_31
    assert loan_state(loan) == LoanState.CLOSED


def test_consecutive_interest_payments_partition_time(loan):
    """Each payment starts exactly where the previous one ended"""
    first = pay_interest(loan, JAN_31)
    second = pay_interest(loan, JAN_31 + timedelta(days=10))
    third = pay_interest(loan, JAN_31 + timedelta(days=40))

    assert second.period_start == first.period_end
    assert third.period_start == second.period_end
    assert second.amount == Decimal("150.00")  # 9 interest days
    assert third.amount == Decimal("483.33")  # 29 interest days
    assert total_interest_paid(loan) == Decimal("1116.66")


def test_pay_interest_twice_at_same_instant_fails(loan):
    pay_interest(loan, JAN_31)
    with pytest.raises(NoInterestDueError):
        pay_interest(loan, JAN_31)
    assert len(loan.interest_payments) == 1


def test_pay_interest_within_grace_day_fails(loan):
    with pytest.raises(NoInterestDueError):
        pay_interest(loan, JAN_1 + timedelta(hours=20))
    assert loan.interest_payments == []


def test_pay_interest_on_closed_loan_fails(loan):
    pay_interest(loan, JAN_31)
    mark_principal_paid(loan, JAN_31)
    with pytest.raises(AlreadyClosedError):
        pay_interest(loan, JAN_31 + timedelta(days=30))


def test_mark_principal_paid_with_outstanding_interest_fails(loan):
    """Loan state is left exactly as it was"""
    pay_interest(loan, JAN_31)
    before = copy.deepcopy(loan)

    with pytest.raises(UnpaidInterestError) as exc_info:
        mark_principal_paid(loan, JAN_31 + timedelta(days=5))

    assert exc_info.value.interest_due == Decimal("66.67")  # 4 interest days
    assert exc_info.value.reason == "unpaid_interest"
    assert loan == before


def test_mark_principal_paid_twice_fails(loan):
    pay_interest(loan, JAN_31)
    mark_principal_paid(loan, JAN_31)
    with pytest.raises(AlreadyPaidError):
        mark_principal_paid(loan, JAN_31)


def test_principal_paid_within_grace_waits_for_final_interest(loan):
    """
    Half a day after settling interest nothing is due, so the principal may be
    repaid, but interest is not settled through now: the loan stays open until
    a final interest payment closes it.
    """
    pay_interest(loan, JAN_31)
    mark_principal_paid(loan, JAN_31 + timedelta(hours=12))

    assert loan_state(loan) == LoanState.PRINCIPAL_PAID
    assert total_amount_owed(loan, JAN_31 + timedelta(days=5)) == Decimal("0.00")

    final = pay_interest(loan, JAN_31 + timedelta(days=3))

    assert final.amount == Decimal("33.33")  # 2 interest days
    assert loan_state(loan) == LoanState.CLOSED
    assert loan.closed_date == JAN_31 + timedelta(days=3)


def test_interest_due_after_principal_matches_final_charge(loan):
    pay_interest(loan, JAN_31)
    mark_principal_paid(loan, JAN_31 + timedelta(hours=12))
    later = JAN_31 + timedelta(days=3)

    reported = current_interest_due(loan, later)

    assert reported == pay_interest(loan, later).amount


def test_principal_paid_at_grant_instant_closes_immediately(loan):
    mark_principal_paid(loan, JAN_1)
    assert loan_state(loan) == LoanState.CLOSED
    assert loan.interest_payments == []


def test_current_interest_due_and_amount_owed(loan):
    assert current_interest_due(loan, JAN_31) == Decimal("483.33")
    assert total_amount_owed(loan, JAN_31) == Decimal("10483.33")

    pay_interest(loan, JAN_31)

    assert current_interest_due(loan, JAN_31) == Decimal("0.00")
    assert total_amount_owed(loan, JAN_31) == Decimal("10000.00")
    assert outstanding_since(loan) == JAN_31


def test_closed_loan_has_no_interest_due(loan):
    pay_interest(loan, JAN_31)
    mark_principal_paid(loan, JAN_31)
    later = JAN_31 + timedelta(days=90)
    assert current_interest_due(loan, later) == Decimal("0.00")
    assert total_amount_owed(loan, later) == Decimal("0.00")


def test_summarize_loan(loan):
    summary = summarize_loan(loan, JAN_31)
    assert summary.state == LoanState.ACTIVE
    assert summary.current_interest_due == Decimal("483.33")
    assert summary.total_amount_owed == Decimal("10483.33")
    assert summary.total_interest_paid == Decimal("0.00")
    assert summary.outstanding_since == JAN_1
    assert summary.days_accrued == 29


def test_find_loan(loan):
    other = grant_loan(500, 5, JAN_1)
    assert find_loan([other, loan], loan.id) is loan
    with pytest.raises(NotFoundError):
        find_loan([other], loan.id)


def test_business_rule_errors_carry_reason_codes():
    assert issubclass(NoInterestDueError, BusinessRuleError)
    assert AlreadyPaidError.reason == "already_paid"
    assert AlreadyClosedError.reason == "already_closed"
    assert NoInterestDueError.reason == "no_interest_due"
