"""Date manipulation utilities"""

from datetime import date, datetime, timezone
from typing import Tuple, Union


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo), convert aware ones"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def calendar_date(value: Union[date, datetime]) -> date:
    """Calendar date of a reference instant, taken in UTC for datetimes"""
    if isinstance(value, datetime):
        return ensure_utc(value).date()
    return value


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move (year, month) by delta months, rolling over year boundaries"""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1
