"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional


class MemberCreateRequest(BaseModel):
    """Request body for POST /v1/members"""

    name: str = Field(..., min_length=1, description="Member's full name")
    number: str = Field(..., min_length=1, description="Contact number")
    address: str = Field("", description="Postal address")
    monthly_amount: Decimal = Field(..., ge=0, description="Recurring due per period")


class PaymentSchema(BaseModel):
    """Dues status for one period"""

    period: str
    paid: bool
    paid_date: Optional[datetime] = None


class MemberResponse(BaseModel):
    member_id: str
    name: str
    number: str
    address: str
    monthly_amount: float
    role: str
    payments: List[PaymentSchema]


class CurrentPeriodResponse(BaseModel):
    """Response for GET /v1/payments/current-period"""

    period: str  # "2025-07-15 to 2025-08-15"
    label: str  # "2025-07"


class PaymentMarkRequest(BaseModel):
    """Request body for POST /v1/payments/mark"""

    member_id: str = Field(..., min_length=1)
    period: Optional[str] = Field(
        None,
        description="YYYY-MM, 'YYYY-MM-15 to YYYY-MM-15' or YYYY-MM-DD; defaults to the current period",
    )
    paid: bool


class PaymentMarkResponse(BaseModel):
    member_id: str
    paid: bool
    payment_period: str
    period_stored: str
    paid_date: Optional[datetime] = None


class LoanCreateRequest(BaseModel):
    """Request body for POST /v1/loans"""

    member_id: str = Field(..., min_length=1)
    principal: Decimal = Field(..., gt=0, description="Loan amount")


class LoanActionRequest(BaseModel):
    """Request body for interest and principal settlement"""

    member_id: str = Field(..., min_length=1)


class InterestPaymentSchema(BaseModel):
    amount: float
    paid_date: datetime
    period_start: datetime
    period_end: datetime


class LoanResponse(BaseModel):
    loan_id: str
    principal: float
    monthly_rate: float
    taken_date: datetime
    state: str
    principal_paid: bool
    principal_paid_date: Optional[datetime] = None
    closed: bool
    closed_date: Optional[datetime] = None
    interest_payments: List[InterestPaymentSchema]
    current_interest_due: float
    total_amount_owed: float
    total_interest_paid: float
    outstanding_since: datetime
    days_accrued: int


class LoansResponse(BaseModel):
    """Response for GET /v1/loans"""

    member_id: str
    loans: List[LoanResponse]


class InterestPaymentResponse(BaseModel):
    """Response for POST /v1/loans/{loan_id}/interest"""

    loan_id: str
    payment: InterestPaymentSchema
    loan_closed: bool


class CollectionResponse(BaseModel):
    """Response for GET /v1/collection"""

    current_period: str
    current_period_collection: float
    total_collection: float
    paid_interest: float
    total_expense: float
    total_balance: float
    total_months_of_collection: int


class ExpenseCreateRequest(BaseModel):
    """Request body for POST /v1/expenses"""

    amount: Decimal = Field(..., gt=0)
    description: Optional[str] = None
    date: Optional[datetime] = None


class ExpenseSchema(BaseModel):
    expense_id: str
    amount: float
    description: str
    date: datetime
    created_by: str


class ExpensesResponse(BaseModel):
    """Response for GET /v1/expenses"""

    expenses: List[ExpenseSchema]
    total_expense: float
