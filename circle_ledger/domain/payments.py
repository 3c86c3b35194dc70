"""Payment ledger - one dues record per member per billing period"""

from datetime import datetime
from circle_ledger.domain.models import Member, Payment
from circle_ledger.domain.periods import parse_period_label, period_label


def find_payment(member: Member, period_input: str) -> Payment | None:
    """Existing payment for the period, without creating one"""
    label = parse_period_label(period_input)
    for payment in member.payments:
        if payment.period == label:
            return payment
    return None


def get_or_create_payment(member: Member, period_input: str) -> Payment:
    """
    Return the member's payment for a period, appending an unpaid one if absent.

    period_input may be a short label, a range label or an ISO date; all are
    normalized to the short label, so every form maps to the same record.
    """
    payment = find_payment(member, period_input)
    if payment is None:
        payment = Payment(period=parse_period_label(period_input))
        member.payments.append(payment)
    return payment


def mark_paid(member: Member, period_input: str, paid: bool, now: datetime) -> Payment:
    """Set paid status for a period; paid_date tracks now while paid, None otherwise"""
    payment = get_or_create_payment(member, period_input)
    payment.paid = paid
    payment.paid_date = now if paid else None
    return payment


def current_period_payment(member: Member, now: datetime) -> Payment:
    return get_or_create_payment(member, period_label(now))


def is_period_paid(member: Member, period_input: str) -> bool:
    payment = find_payment(member, period_input)
    return payment is not None and payment.paid
