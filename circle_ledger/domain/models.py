"""Domain models - pure Python dataclasses representing ledger entities"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

ROLE_ADMIN = "admin"
ROLE_MEMBER = "member"


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class Payment:
    """Recurring due for one billing period"""

    period: str  # Short label "YYYY-MM"
    paid: bool = False
    paid_date: Optional[datetime] = None


@dataclass
class InterestPayment:
    """Interest settled for the interval [period_start, period_end]"""

    amount: Decimal
    paid_date: datetime
    period_start: datetime
    period_end: datetime


@dataclass
class Loan:
    """Short-term loan accruing simple daily interest until closed"""

    principal: Decimal
    monthly_rate: Decimal  # Percent per 30-day month
    taken_date: datetime
    id: str = field(default_factory=new_id)
    principal_paid: bool = False
    principal_paid_date: Optional[datetime] = None
    interest_payments: List[InterestPayment] = field(default_factory=list)
    closed: bool = False
    closed_date: Optional[datetime] = None


@dataclass
class Member:
    """Circle member with dues history and loans"""

    name: str
    number: str
    address: str
    monthly_amount: Decimal
    role: str = ROLE_MEMBER
    id: str = field(default_factory=new_id)
    payments: List[Payment] = field(default_factory=list)
    loans: List[Loan] = field(default_factory=list)


@dataclass
class Expense:
    """Outgoing spend recorded against the circle's balance"""

    amount: Decimal
    created_by: str
    date: datetime
    description: str = "No description"
    id: str = field(default_factory=new_id)


class LoanState(str, Enum):
    ACTIVE = "active"
    PRINCIPAL_PAID = "principal_paid"
    CLOSED = "closed"


@dataclass
class LoanSummary:
    """Loan annotated with figures computed as of a reference instant"""

    loan: Loan
    state: LoanState
    current_interest_due: Decimal
    total_amount_owed: Decimal
    total_interest_paid: Decimal
    outstanding_since: datetime
    days_accrued: int


@dataclass
class CollectionSummary:
    """Aggregate of dues, interest and expenses across the circle"""

    current_period: str
    current_period_collection: Decimal
    total_collection: Decimal
    paid_interest: Decimal
    total_expense: Decimal
    total_balance: Decimal
    total_months_of_collection: int
