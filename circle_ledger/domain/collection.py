"""Collection summary across all circle members"""

from datetime import datetime
from decimal import Decimal
from typing import List
from circle_ledger.domain.interest import ZERO
from circle_ledger.domain.loans import total_interest_paid
from circle_ledger.domain.models import CollectionSummary, Expense, Member
from circle_ledger.domain.payments import is_period_paid
from circle_ledger.domain.periods import Period, months_between, parse_period, period_for
from circle_ledger.utils.date_utils import calendar_date
from circle_ledger.utils.money import round_money


def summarize_collection(
    members: List[Member],
    expenses: List[Expense],
    now: datetime,
    collection_start_period: str,
    opening_collection: Decimal = ZERO,
    opening_interest: Decimal = ZERO,
) -> CollectionSummary:
    """
    Aggregate dues, interest and expenses.

    - current_period_collection: monthly_amount of every member paid for the current period
    - total_collection: monthly_amount for every paid period on record, plus opening balance
    - paid_interest: every settled interest payment, plus opening balance
    - total_balance: total_collection + paid_interest - total_expense
    - total_months_of_collection: start month through the current calendar month
    """
    current = period_for(now)
    today = calendar_date(now)
    months = months_between(parse_period(collection_start_period), Period(today.year, today.month))

    current_period_collection = sum(
        (m.monthly_amount for m in members if is_period_paid(m, current.label)),
        ZERO,
    )

    # Paid and dated, matching how dues were historically counted
    dues_on_record = sum(
        (m.monthly_amount for m in members for p in m.payments if p.paid and p.paid_date is not None),
        ZERO,
    )

    interest_on_record = sum(
        (total_interest_paid(loan) for m in members for loan in m.loans),
        ZERO,
    )

    total_expense = sum((e.amount for e in expenses), ZERO)

    total_collection = round_money(dues_on_record + opening_collection)
    paid_interest = round_money(interest_on_record + opening_interest)

    return CollectionSummary(
        current_period=current.label,
        current_period_collection=round_money(current_period_collection),
        total_collection=total_collection,
        paid_interest=paid_interest,
        total_expense=round_money(total_expense),
        total_balance=round_money(total_collection + paid_interest - total_expense),
        total_months_of_collection=months,
    )
