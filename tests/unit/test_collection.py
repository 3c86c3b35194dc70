"""Unit tests for the collection summary"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from circle_ledger.domain.collection import summarize_collection
from circle_ledger.domain.loans import grant_loan, pay_interest
from circle_ledger.domain.models import Expense, Member
from circle_ledger.domain.payments import get_or_create_payment, mark_paid

NOW = datetime(2025, 9, 20, 12, 0, tzinfo=timezone.utc)  # period 2025-09


def _member(name: str, amount: str) -> Member:
    return Member(name=name, number="98000", address="", monthly_amount=Decimal(amount))


def _circle():
    """Three members on the current period; two have paid"""
    asha, bikash, chandra = _member("Asha", "1000"), _member("Bikash", "1500"), _member("Chandra", "2000")
    mark_paid(asha, "2025-09", True, NOW)
    mark_paid(bikash, "2025-09", True, NOW)
    get_or_create_payment(chandra, "2025-09")
    return [asha, bikash, chandra]


def test_current_period_collection_counts_paid_members():
    summary = summarize_collection(_circle(), [], NOW, "2025-08")

    assert summary.current_period == "2025-09"
    assert summary.current_period_collection == Decimal("2500.00")
    assert summary.total_collection == Decimal("2500.00")


def test_total_collection_includes_earlier_periods():
    members = _circle()
    mark_paid(members[2], "2025-08", True, NOW - timedelta(days=30))

    summary = summarize_collection(members, [], NOW, "2025-08")

    assert summary.current_period_collection == Decimal("2500.00")
    assert summary.total_collection == Decimal("4500.00")


def test_interest_expenses_and_balance():
    members = _circle()
    loan = grant_loan(10000, 5, datetime(2025, 8, 1, tzinfo=timezone.utc))
    members[0].loans.append(loan)
    pay_interest(loan, datetime(2025, 8, 31, tzinfo=timezone.utc))  # 483.33

    expenses = [
        Expense(amount=Decimal("200.00"), created_by=members[0].id, date=NOW),
        Expense(amount=Decimal("83.33"), created_by=members[0].id, date=NOW),
    ]

    summary = summarize_collection(members, expenses, NOW, "2025-08")

    assert summary.paid_interest == Decimal("483.33")
    assert summary.total_expense == Decimal("283.33")
    assert summary.total_balance == Decimal("2700.00")


def test_opening_balances_and_months_of_collection():
    summary = summarize_collection(
        _circle(),
        [],
        NOW,
        "2025-08",
        opening_collection=Decimal("203650"),
        opening_interest=Decimal("100348"),
    )

    assert summary.total_collection == Decimal("206150.00")
    assert summary.paid_interest == Decimal("100348.00")
    assert summary.total_balance == Decimal("306498.00")
    assert summary.total_months_of_collection == 2


def test_empty_circle():
    summary = summarize_collection([], [], NOW, "2025-08")
    assert summary.current_period_collection == Decimal("0.00")
    assert summary.total_balance == Decimal("0.00")


def test_months_of_collection_follow_the_calendar_month():
    """Before the 15th the billing period lags, but the month count does not"""
    summary = summarize_collection([], [], datetime(2025, 8, 10, tzinfo=timezone.utc), "2025-08")

    assert summary.current_period == "2025-07"
    assert summary.total_months_of_collection == 1
