"""Pytest fixtures for testing"""

import copy
import pytest
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Generator, List, Optional
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from circle_ledger.api.main import create_app
from circle_ledger.api.dependencies import get_clock
from circle_ledger.domain.exceptions import NotFoundError
from circle_ledger.domain.models import ROLE_ADMIN, Expense, Member
from circle_ledger.infrastructure.database.models import Base
from circle_ledger.infrastructure.database.repositories import MemberRepository
from circle_ledger.infrastructure.database.session import get_db
from circle_ledger.services.ledger import LedgerService


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


class FixedClock:
    """Settable stand-in for the system clock"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class InMemoryStore:
    """MemberStore/ExpenseStore backed by dicts; hands out copies like a real store"""

    def __init__(self):
        self.members: Dict[str, Member] = {}
        self.expenses: List[Expense] = []
        self.saves = 0

    def load_member(self, member_id: str) -> Member:
        if member_id not in self.members:
            raise NotFoundError(f"Member {member_id} not found")
        return copy.deepcopy(self.members[member_id])

    def save_member(self, member: Member) -> None:
        self.saves += 1
        self.members[member.id] = copy.deepcopy(member)

    def list_members(self, role: Optional[str] = None) -> List[Member]:
        return [copy.deepcopy(m) for m in self.members.values() if role is None or m.role == role]

    def list_expenses(self, created_by: Optional[str] = None) -> List[Expense]:
        return [copy.deepcopy(e) for e in self.expenses if created_by is None or e.created_by == created_by]

    def save_expense(self, expense: Expense) -> None:
        self.expenses.append(copy.deepcopy(expense))


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def service(store: InMemoryStore) -> LedgerService:
    return LedgerService(members=store, expenses=store)


@pytest.fixture
def member() -> Member:
    return Member(name="Asha", number="9800000001", address="Ward 4", monthly_amount=Decimal("1000.00"))


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(utc(2025, 1, 1, 9, 0))


@pytest.fixture
def client(db: Session, clock: FixedClock) -> TestClient:
    """Create FastAPI test client with test database and a fixed clock"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = clock
    return TestClient(app)


@pytest.fixture
def admin(db: Session) -> Member:
    """Administrator persisted in the test database"""
    admin = Member(name="Admin", number="1234567890", address="Admin Address", monthly_amount=Decimal("0"), role=ROLE_ADMIN)
    MemberRepository(db).save_member(admin)
    db.commit()
    return admin


@pytest.fixture
def admin_headers(admin: Member) -> Dict[str, str]:
    return {"X-Caller-Id": admin.id, "X-Caller-Role": "admin"}
