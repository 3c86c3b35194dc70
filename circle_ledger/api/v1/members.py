"""Member enrolment and listing"""

from datetime import datetime
from typing import List
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from circle_ledger.api.v1.schemas import MemberCreateRequest, MemberResponse, PaymentSchema
from circle_ledger.api.dependencies import Caller, get_caller, get_clock, get_ledger_service, get_request_id, require_admin
from circle_ledger.domain.exceptions import DomainException
from circle_ledger.domain.models import Member
from circle_ledger.infrastructure.database.session import get_db
from circle_ledger.infrastructure.observability.logging import log_ledger_event
from circle_ledger.services.ledger import LedgerService

router = APIRouter()


def to_member_response(member: Member) -> MemberResponse:
    return MemberResponse(
        member_id=member.id,
        name=member.name,
        number=member.number,
        address=member.address,
        monthly_amount=float(member.monthly_amount),
        role=member.role,
        payments=[
            PaymentSchema(period=p.period, paid=p.paid, paid_date=p.paid_date)
            for p in member.payments
        ],
    )


@router.post("/members", response_model=MemberResponse)
def enroll_member(
    body: MemberCreateRequest,
    request: Request,
    _: Caller = Depends(require_admin),
    now: datetime = Depends(get_clock),
    db: Session = Depends(get_db),
    service: LedgerService = Depends(get_ledger_service),
):
    """Enrol a member; an unpaid dues record for the current period is created with it"""
    try:
        member = service.enroll_member(body.name, body.number, body.address, body.monthly_amount, now)
        db.commit()
    except DomainException:
        db.rollback()
        raise

    log_ledger_event(
        "Member enrolled",
        request_id=get_request_id(request),
        step="member_enrolled",
        member_id=member.id,
        amount=member.monthly_amount,
    )
    return to_member_response(member)


@router.get("/members", response_model=List[MemberResponse])
def list_members(
    _: Caller = Depends(get_caller),
    service: LedgerService = Depends(get_ledger_service),
):
    """All non-admin members with their dues history"""
    return [to_member_response(m) for m in service.list_members()]
