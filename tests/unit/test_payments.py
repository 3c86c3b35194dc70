"""Unit tests for the dues payment ledger"""

import pytest
from datetime import datetime, timezone
from circle_ledger.domain.exceptions import ParseError
from circle_ledger.domain.payments import (
    current_period_payment,
    find_payment,
    get_or_create_payment,
    is_period_paid,
    mark_paid,
)

T1 = datetime(2025, 7, 20, 10, 0, tzinfo=timezone.utc)
T2 = datetime(2025, 7, 22, 10, 0, tzinfo=timezone.utc)


def test_mark_paid_twice_keeps_one_record(member):
    mark_paid(member, "2025-07", True, T1)
    mark_paid(member, "2025-07", True, T1)

    assert len(member.payments) == 1
    assert member.payments[0].period == "2025-07"
    assert member.payments[0].paid is True
    assert member.payments[0].paid_date == T1


def test_all_period_forms_address_the_same_record(member):
    mark_paid(member, "2025-07-15 to 2025-08-15", True, T1)
    mark_paid(member, "2025-07-15", False, T2)
    payment = get_or_create_payment(member, "2025-07")

    assert len(member.payments) == 1
    assert payment.paid is False


def test_unmarking_clears_paid_date(member):
    mark_paid(member, "2025-07", True, T1)
    payment = mark_paid(member, "2025-07", False, T2)
    assert payment.paid is False
    assert payment.paid_date is None


def test_get_or_create_appends_unpaid_record(member):
    payment = get_or_create_payment(member, "2025-08")
    assert payment.paid is False
    assert payment.paid_date is None
    assert member.payments == [payment]
    assert get_or_create_payment(member, "2025-08") is payment


def test_current_period_payment_uses_15th_rule(member):
    payment = current_period_payment(member, datetime(2025, 8, 3, tzinfo=timezone.utc))
    assert payment.period == "2025-07"


def test_is_period_paid_does_not_create_records(member):
    assert is_period_paid(member, "2025-07") is False
    assert find_payment(member, "2025-07") is None
    assert member.payments == []

    mark_paid(member, "2025-07", True, T1)
    assert is_period_paid(member, "2025-07-15 to 2025-08-15") is True


def test_malformed_period_creates_nothing(member):
    with pytest.raises(ParseError):
        mark_paid(member, "next month", True, T1)
    assert member.payments == []
