"""Data access layer for ledger entities"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from circle_ledger.infrastructure.database.models import (
    ExpenseRecord,
    InterestPaymentRecord,
    LoanRecord,
    MemberRecord,
    PaymentRecord,
)
from circle_ledger.domain.exceptions import NotFoundError, StorageError
from circle_ledger.domain.models import Expense, InterestPayment, Loan, Member, Payment
from circle_ledger.utils.date_utils import ensure_utc
from circle_ledger.utils.money import from_cents, to_cents


def _as_uuid(value: str, kind: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(value))
    except ValueError as e:
        raise NotFoundError(f"{kind} {value} not found") from e


def _utc(value: Optional[datetime]) -> Optional[datetime]:
    return ensure_utc(value) if value is not None else None


def _to_domain(record: MemberRecord) -> Member:
    return Member(
        id=str(record.id),
        name=record.name,
        number=record.number,
        address=record.address,
        monthly_amount=from_cents(record.monthly_amount_cents),
        role=record.role,
        payments=[
            Payment(period=p.period, paid=p.paid, paid_date=_utc(p.paid_date))
            for p in record.payments
        ],
        loans=[
            Loan(
                id=str(l.id),
                principal=from_cents(l.principal_cents),
                monthly_rate=Decimal(str(l.monthly_rate)),
                taken_date=_utc(l.taken_date),
                principal_paid=l.principal_paid,
                principal_paid_date=_utc(l.principal_paid_date),
                closed=l.closed,
                closed_date=_utc(l.closed_date),
                interest_payments=[
                    InterestPayment(
                        amount=from_cents(ip.amount_cents),
                        paid_date=_utc(ip.paid_date),
                        period_start=_utc(ip.period_start),
                        period_end=_utc(ip.period_end),
                    )
                    for ip in l.interest_payments
                ],
            )
            for l in record.loans
        ],
    )


class MemberRepository:
    """Repository for member aggregates (payments, loans and interest history)"""

    def __init__(self, db: Session):
        self.db = db

    def _get_record(self, member_id: str) -> Optional[MemberRecord]:
        return (
            self.db.query(MemberRecord)
            .filter(MemberRecord.id == _as_uuid(member_id, "Member"))
            .first()
        )

    def load_member(self, member_id: str) -> Member:
        """Fetch a member with its full history"""
        try:
            record = self._get_record(member_id)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load member {member_id}: {e}") from e

        if record is None:
            raise NotFoundError(f"Member {member_id} not found")
        return _to_domain(record)

    def list_members(self, role: Optional[str] = None) -> List[Member]:
        """Fetch members, optionally restricted to one role"""
        try:
            query = self.db.query(MemberRecord)
            if role is not None:
                query = query.filter(MemberRecord.role == role)
            return [_to_domain(r) for r in query.order_by(MemberRecord.created_at, MemberRecord.name).all()]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list members: {e}") from e

    def save_member(self, member: Member) -> None:
        """
        Persist a member aggregate.

        Payments are matched by period and loans by id; interest payments are
        append-only, so only entries beyond the stored sequence are inserted.
        """
        try:
            record = self._get_record(member.id)
            if record is None:
                record = MemberRecord(id=uuid.UUID(member.id))
                self.db.add(record)

            record.name = member.name
            record.number = member.number
            record.address = member.address
            record.monthly_amount_cents = to_cents(member.monthly_amount)
            record.role = member.role

            self._sync_payments(record, member.payments)
            self._sync_loans(record, member.loans)

            self.db.flush()  # Surface constraint errors without committing
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to save member {member.id}: {e}") from e

    def _sync_payments(self, record: MemberRecord, payments: List[Payment]) -> None:
        by_period = {p.period: p for p in record.payments}
        for position, payment in enumerate(payments):
            db_payment = by_period.get(payment.period)
            if db_payment is None:
                db_payment = PaymentRecord(period=payment.period)
                record.payments.append(db_payment)
            db_payment.position = position
            db_payment.paid = payment.paid
            db_payment.paid_date = _utc(payment.paid_date)

    def _sync_loans(self, record: MemberRecord, loans: List[Loan]) -> None:
        by_id = {str(l.id): l for l in record.loans}
        for position, loan in enumerate(loans):
            db_loan = by_id.get(loan.id)
            if db_loan is None:
                db_loan = LoanRecord(
                    id=uuid.UUID(loan.id),
                    principal_cents=to_cents(loan.principal),
                    monthly_rate=float(loan.monthly_rate),
                    taken_date=ensure_utc(loan.taken_date),
                )
                record.loans.append(db_loan)

            db_loan.position = position
            db_loan.principal_paid = loan.principal_paid
            db_loan.principal_paid_date = _utc(loan.principal_paid_date)
            db_loan.closed = loan.closed
            db_loan.closed_date = _utc(loan.closed_date)

            for sequence in range(len(db_loan.interest_payments), len(loan.interest_payments)):
                ip = loan.interest_payments[sequence]
                db_loan.interest_payments.append(
                    InterestPaymentRecord(
                        sequence=sequence,
                        amount_cents=to_cents(ip.amount),
                        paid_date=ensure_utc(ip.paid_date),
                        period_start=ensure_utc(ip.period_start),
                        period_end=ensure_utc(ip.period_end),
                    )
                )


class ExpenseRepository:
    """Repository for circle expenses"""

    def __init__(self, db: Session):
        self.db = db

    def save_expense(self, expense: Expense) -> None:
        try:
            self.db.add(
                ExpenseRecord(
                    id=uuid.UUID(expense.id),
                    amount_cents=to_cents(expense.amount),
                    description=expense.description,
                    date=ensure_utc(expense.date),
                    created_by=expense.created_by,
                )
            )
            self.db.flush()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to save expense: {e}") from e

    def list_expenses(self, created_by: Optional[str] = None) -> List[Expense]:
        """Fetch expenses, newest first"""
        try:
            query = self.db.query(ExpenseRecord)
            if created_by is not None:
                query = query.filter(ExpenseRecord.created_by == created_by)
            records = query.order_by(ExpenseRecord.date.desc()).all()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list expenses: {e}") from e

        return [
            Expense(
                id=str(r.id),
                amount=from_cents(r.amount_cents),
                description=r.description,
                date=ensure_utc(r.date),
                created_by=r.created_by,
            )
            for r in records
        ]
