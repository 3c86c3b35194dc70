"""
Ledger service - orchestration consumed by the HTTP layer.

Every operation is one load -> in-memory mutation -> save round trip against
the stores. Domain rules raise before anything is saved, so a rejected
operation never persists partial state.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Protocol
from circle_ledger.config import settings
from circle_ledger.domain import loans as lifecycle
from circle_ledger.domain import payments as ledger
from circle_ledger.domain.collection import summarize_collection
from circle_ledger.domain.exceptions import ValidationError
from circle_ledger.domain.models import (
    ROLE_MEMBER,
    CollectionSummary,
    Expense,
    Loan,
    LoanSummary,
    Member,
    Payment,
)
from circle_ledger.domain.periods import Period, period_for, period_label
from circle_ledger.utils.money import Number, round_money, to_decimal


class MemberStore(Protocol):
    def load_member(self, member_id: str) -> Member: ...

    def save_member(self, member: Member) -> None: ...

    def list_members(self, role: Optional[str] = None) -> List[Member]: ...


class ExpenseStore(Protocol):
    def list_expenses(self, created_by: Optional[str] = None) -> List[Expense]: ...

    def save_expense(self, expense: Expense) -> None: ...


class LedgerService:
    """Member dues, loans and collection totals"""

    def __init__(self, members: MemberStore, expenses: ExpenseStore):
        self.members = members
        self.expenses = expenses

    # Members

    def enroll_member(
        self,
        name: str,
        number: str,
        address: str,
        monthly_amount: Number,
        now: datetime,
    ) -> Member:
        """Create a member with an unpaid record for the current period"""
        monthly_amount = to_decimal(monthly_amount)
        if monthly_amount < 0:
            raise ValidationError(f"Monthly amount cannot be negative, got {monthly_amount}")

        member = Member(
            name=name,
            number=number,
            address=address,
            monthly_amount=round_money(monthly_amount),
            role=ROLE_MEMBER,
        )
        ledger.current_period_payment(member, now)
        self.members.save_member(member)
        return member

    def get_member(self, member_id: str) -> Member:
        return self.members.load_member(member_id)

    def list_members(self) -> List[Member]:
        return self.members.list_members(role=ROLE_MEMBER)

    # Dues

    def current_period(self, now: datetime) -> Period:
        return period_for(now)

    def mark_payment(
        self,
        member_id: str,
        period_input: Optional[str],
        paid: bool,
        now: datetime,
    ) -> Payment:
        """Mark a member's dues for a period; no period means the current one"""
        if not period_input or not period_input.strip():
            period_input = period_label(now)

        member = self.members.load_member(member_id)
        payment = ledger.mark_paid(member, period_input, paid, now)
        self.members.save_member(member)
        return payment

    # Loans

    def grant_loan(
        self,
        member_id: str,
        principal: Number,
        now: datetime,
        rate: Optional[Number] = None,
    ) -> Loan:
        member = self.members.load_member(member_id)
        loan = lifecycle.grant_loan(
            principal,
            settings.loan_monthly_rate if rate is None else rate,
            now,
        )
        member.loans.append(loan)
        self.members.save_member(member)
        return loan

    def pay_loan_interest(self, member_id: str, loan_id: str, now: datetime) -> Loan:
        """Settle outstanding interest; the new payment is the loan's last interest payment"""
        member = self.members.load_member(member_id)
        loan = lifecycle.find_loan(member.loans, loan_id)
        lifecycle.pay_interest(loan, now)
        self.members.save_member(member)
        return loan

    def mark_loan_principal_paid(self, member_id: str, loan_id: str, now: datetime) -> Loan:
        member = self.members.load_member(member_id)
        loan = lifecycle.find_loan(member.loans, loan_id)
        lifecycle.mark_principal_paid(loan, now)
        self.members.save_member(member)
        return loan

    def get_loans(self, member_id: str, now: datetime) -> List[LoanSummary]:
        member = self.members.load_member(member_id)
        return [lifecycle.summarize_loan(loan, now) for loan in member.loans]

    # Collection and expenses

    def get_collection_summary(self, now: datetime) -> CollectionSummary:
        return summarize_collection(
            members=self.members.list_members(role=ROLE_MEMBER),
            expenses=self.expenses.list_expenses(),
            now=now,
            collection_start_period=settings.collection_start_period,
            opening_collection=settings.opening_collection_balance,
            opening_interest=settings.opening_interest_balance,
        )

    def record_expense(
        self,
        amount: Number,
        description: Optional[str],
        created_by: str,
        now: datetime,
        date: Optional[datetime] = None,
    ) -> Expense:
        amount = to_decimal(amount)
        if amount <= 0:
            raise ValidationError(f"Expense amount must be positive, got {amount}")

        expense = Expense(
            amount=round_money(amount),
            created_by=created_by,
            date=date or now,
            description=description or "No description",
        )
        self.expenses.save_expense(expense)
        return expense

    def list_expenses(self, created_by: Optional[str] = None) -> List[Expense]:
        return self.expenses.list_expenses(created_by=created_by)


def total_expense(expenses: List[Expense]) -> Decimal:
    return round_money(sum((e.amount for e in expenses), Decimal("0")))
