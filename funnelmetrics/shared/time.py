from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Optional, Tuple, Union

MONTH_NAMES = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)

DateLike = Union[date, datetime, str, None]


def month_index(year: int, month: int) -> int:
    return year * 12 + (month - 1)


def month_from_index(index: int) -> Tuple[int, int]:
    """Inverse of :func:`month_index`, returns ``(year, month)``."""
    return index // 12, index % 12 + 1


def format_month_index(index: int) -> str:
    year, month = month_from_index(index)
    return f"{year:04d}-{month:02d}"


def parse_month_index(value: DateLike) -> Optional[int]:
    """Month index of a date or a ``YYYY-MM[-DD...]`` string.

    Strings are split rather than parsed as datetimes so that a bare
    ``YYYY-MM-DD`` never shifts across a month boundary through a timezone.
    Anything unreadable yields ``None``.
    """
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return month_index(value.year, value.month)
    if not isinstance(value, str):
        return None
    parts = value.strip().split("-")
    if len(parts) < 2:
        return None
    try:
        year = int(parts[0])
        month = int(parts[1][:2])
    except ValueError:
        return None
    if year < 1 or not 1 <= month <= 12:
        return None
    return month_index(year, month)


def months_elapsed(today: date) -> float:
    """Fractional months of ``today.year`` that have passed, e.g. 2.5 on Mar 16."""
    days_in_month = calendar.monthrange(today.year, today.month)[1]
    return (today.month - 1) + today.day / days_in_month
