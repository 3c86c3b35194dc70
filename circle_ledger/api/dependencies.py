"""Dependency injection for FastAPI endpoints"""

from dataclasses import dataclass
from datetime import datetime
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session
from circle_ledger.config import settings
from circle_ledger.domain.models import ROLE_ADMIN
from circle_ledger.infrastructure.database.repositories import ExpenseRepository, MemberRepository
from circle_ledger.infrastructure.database.session import get_db
from circle_ledger.services.ledger import LedgerService
from circle_ledger.utils.date_utils import utc_now


@dataclass
class Caller:
    """Identity asserted by the authenticating gateway in front of this service"""

    member_id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_clock() -> datetime:
    """Current instant; the single place the service reads the system clock"""
    return utc_now()


def get_ledger_service(db: Session = Depends(get_db)) -> LedgerService:
    """Provide a ledger service bound to the request's session"""
    return LedgerService(members=MemberRepository(db), expenses=ExpenseRepository(db))


def get_caller(request: Request) -> Caller:
    """Caller identity from gateway headers; 401 when absent"""
    member_id = request.headers.get(settings.caller_id_header)
    role = request.headers.get(settings.caller_role_header)
    if not member_id or not role:
        raise HTTPException(status_code=401, detail="Caller identity required")
    return Caller(member_id=member_id, role=role)


def require_admin(caller: Caller = Depends(get_caller)) -> Caller:
    if not caller.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return caller
