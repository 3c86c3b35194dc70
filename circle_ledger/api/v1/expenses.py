"""Expense endpoints - record and list circle spending"""

from datetime import datetime
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from circle_ledger.api.v1.schemas import ExpenseCreateRequest, ExpenseSchema, ExpensesResponse
from circle_ledger.api.dependencies import Caller, get_caller, get_clock, get_ledger_service, get_request_id, require_admin
from circle_ledger.domain.exceptions import DomainException
from circle_ledger.domain.models import Expense
from circle_ledger.infrastructure.database.session import get_db
from circle_ledger.infrastructure.observability.logging import log_ledger_event
from circle_ledger.services.ledger import LedgerService, total_expense
from circle_ledger.utils.date_utils import ensure_utc

router = APIRouter()


def _expense_schema(expense: Expense) -> ExpenseSchema:
    return ExpenseSchema(
        expense_id=expense.id,
        amount=float(expense.amount),
        description=expense.description,
        date=expense.date,
        created_by=expense.created_by,
    )


@router.post("/expenses", response_model=ExpenseSchema)
def record_expense(
    body: ExpenseCreateRequest,
    request: Request,
    caller: Caller = Depends(require_admin),
    now: datetime = Depends(get_clock),
    db: Session = Depends(get_db),
    service: LedgerService = Depends(get_ledger_service),
):
    """Record an expense against the circle; date defaults to now"""
    try:
        expense = service.record_expense(
            body.amount,
            body.description,
            created_by=caller.member_id,
            now=now,
            date=ensure_utc(body.date) if body.date else None,
        )
        db.commit()
    except DomainException:
        db.rollback()
        raise

    log_ledger_event(
        "Expense recorded",
        request_id=get_request_id(request),
        step="expense_recorded",
        member_id=caller.member_id,
        amount=expense.amount,
    )
    return _expense_schema(expense)


@router.get("/expenses", response_model=ExpensesResponse)
def list_expenses(
    caller: Caller = Depends(get_caller),
    service: LedgerService = Depends(get_ledger_service),
):
    """Expenses recorded by the caller, newest first, with their total"""
    expenses = service.list_expenses(created_by=caller.member_id)
    return ExpensesResponse(
        expenses=[_expense_schema(e) for e in expenses],
        total_expense=float(total_expense(expenses)),
    )
