"""Billing periods: the 15th-to-15th rule and period label parsing"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Union
from circle_ledger.domain.exceptions import ParseError
from circle_ledger.utils.date_utils import calendar_date, shift_month

BOUNDARY_DAY = 15

# The last period must still end on a representable date
MIN_YEAR = 1
MAX_YEAR = 9998

_SHORT_RE = re.compile(r"^(\d{4})-(\d{2})$")
_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_RANGE_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})\s+to\s+(\d{4}-\d{2}-\d{2})$")


@dataclass(frozen=True, order=True)
class Period:
    """
    Billing window from the 15th of (year, month), inclusive,
    to the 15th of the following month, exclusive.
    """

    year: int
    month: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ParseError(f"Month out of range: {self.month}")
        if not MIN_YEAR <= self.year <= MAX_YEAR:
            raise ParseError(f"Year out of range: {self.year}")

    @property
    def label(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def starts_on(self) -> date:
        return date(self.year, self.month, BOUNDARY_DAY)

    @property
    def ends_on(self) -> date:
        return date(*shift_month(self.year, self.month, 1), BOUNDARY_DAY)

    @property
    def range_label(self) -> str:
        return f"{self.starts_on.isoformat()} to {self.ends_on.isoformat()}"

    def next(self) -> "Period":
        return Period(*shift_month(self.year, self.month, 1))

    def previous(self) -> "Period":
        return Period(*shift_month(self.year, self.month, -1))

    def __str__(self) -> str:
        return self.label


def period_for(reference: Union[date, datetime]) -> Period:
    """
    Map a reference date to the period containing it.

    Before the 15th the period started last month; on or after the 15th it
    starts this month. Datetimes are bucketed on their UTC calendar date.
    """
    day = calendar_date(reference)
    if day.day < BOUNDARY_DAY:
        return Period(*shift_month(day.year, day.month, -1))
    return Period(day.year, day.month)


def period_label(reference: Union[date, datetime]) -> str:
    """Short label ("YYYY-MM") of the period containing reference"""
    return period_for(reference).label


def period_range(reference: Union[date, datetime]) -> str:
    """Range label ("YYYY-MM-15 to YYYY-MM-15") of the period containing reference"""
    return period_for(reference).range_label


def range_label(label: str) -> str:
    """Range form of a short label"""
    return parse_period(label).range_label


def _parse_date(text: str) -> date:
    try:
        return date.fromisoformat(text)
    except ValueError as e:
        raise ParseError(f"Invalid date: {text!r}") from e


def _clean(text: str) -> str:
    # Clients sometimes send the value still wrapped in JSON quotes
    cleaned = text.strip()
    cleaned = re.sub(r'",?$', "", cleaned)
    cleaned = re.sub(r'^"', "", cleaned)
    return cleaned.strip()


def parse_period(text: str) -> Period:
    """
    Parse any accepted period form into a Period.

    Accepted:
        "2025-07"                    short label
        "2025-07-15 to 2025-08-15"   range label, must span exactly one period
        "2025-07-03"                 bare ISO date, bucketed by its own year-month

    Raises:
        ParseError: for anything else
    """
    if not isinstance(text, str):
        raise ParseError(f"Period must be text, got {type(text).__name__}")

    cleaned = _clean(text)

    match = _SHORT_RE.match(cleaned)
    if match:
        return Period(int(match.group(1)), int(match.group(2)))

    match = _RANGE_RE.match(cleaned)
    if match:
        start = _parse_date(match.group(1))
        end = _parse_date(match.group(2))
        period = Period(start.year, start.month)
        if start != period.starts_on or end != period.ends_on:
            raise ParseError(f"Range must run from the 15th to the 15th of the next month: {text!r}")
        return period

    if _DATE_RE.match(cleaned):
        day = _parse_date(cleaned)
        return Period(day.year, day.month)

    raise ParseError(f"Unrecognized period format: {text!r}")


def parse_period_label(text: str) -> str:
    """Normalize any accepted period form to its short label"""
    return parse_period(text).label


def months_between(start: Period, end: Period) -> int:
    """Number of periods from start to end, both inclusive (0 if end precedes start)"""
    count = (end.year - start.year) * 12 + (end.month - start.month) + 1
    return max(count, 0)
