"""Money helpers: half-up rounding and cents conversion for storage"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

CENT = Decimal("0.01")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Coerce a number to Decimal without binary float artifacts"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(value: Number) -> Decimal:
    """Round to 2 decimal places, half-up (0.005 -> 0.01)"""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def to_cents(value: Number) -> int:
    """Decimal amount -> integer cents for BigInteger columns"""
    return int(round_money(value) * 100)


def from_cents(cents: int) -> Decimal:
    """Integer cents -> Decimal amount with 2 places"""
    return (Decimal(cents) / 100).quantize(CENT)
