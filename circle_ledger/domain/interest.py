"""Simple daily interest on loan principal"""

import math
from datetime import datetime, timedelta
from decimal import Decimal
from circle_ledger.utils.money import Number, round_money, to_decimal

DAYS_PER_MONTH = 30  # Fixed convention, not calendar months
ZERO = Decimal("0.00")


def daily_rate(monthly_rate: Number) -> Decimal:
    """Monthly percentage -> daily fraction (5 -> 0.001666...)"""
    return to_decimal(monthly_rate) / DAYS_PER_MONTH / 100


def days_elapsed(start: datetime, end: datetime) -> int:
    """
    Interest-bearing days between two instants.

    Partial days count as whole days, then the first day is dropped as a
    grace day: ceil(days) - 1, never below zero.

    Example:
        Jan 1 00:00 -> Jan 31 00:00 = 30 days -> 29 interest days
        Same instant -> -1 -> 0
    """
    days = math.ceil((end - start) / timedelta(days=1)) - 1
    return max(days, 0)


def interest_due(principal: Number, monthly_rate: Number, start: datetime, end: datetime) -> Decimal:
    """
    Interest accrued on principal from start to end, rounded half-up to cents.

    Example:
        principal=10000, rate=5, 29 interest days
        10000 * 5 * 29 / 3000 = 483.333... -> 483.33
    """
    days = days_elapsed(start, end)
    if days <= 0:
        return ZERO

    amount = to_decimal(principal) * to_decimal(monthly_rate) * days / (DAYS_PER_MONTH * 100)
    return round_money(amount)
