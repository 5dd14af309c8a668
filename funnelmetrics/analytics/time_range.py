from __future__ import annotations

import re
from datetime import date
from typing import Iterable, List, Optional

from funnelmetrics.schemas.common import MonthRange
from funnelmetrics.shared.time import month_index

CURRENT_YEAR = "currentYear"
ALL_TIME = "allTime"
PAST_MONTH_WINDOWS = (3, 6, 12, 24)

_PAST_MONTHS_PATTERN = re.compile(r"^past(\d+)Months$")
_SPECIFIC_YEAR_PATTERN = re.compile(r"^year-(\d{4})$")


def past_months_selector(months: int) -> str:
    return f"past{months}Months"


def specific_year_selector(year: int) -> str:
    return f"year-{year}"


def resolve_month_range(selector: Optional[str], today: date) -> MonthRange:
    """Turn a range selector into a month-index interval relative to ``today``.

    Unknown selectors resolve to the current calendar year instead of failing.
    """
    key = selector.strip() if isinstance(selector, str) else ""
    if key == ALL_TIME:
        return MonthRange(selector=ALL_TIME)

    past_match = _PAST_MONTHS_PATTERN.match(key)
    if past_match and int(past_match.group(1)) in PAST_MONTH_WINDOWS:
        months = int(past_match.group(1))
        end = month_index(today.year, today.month)
        return MonthRange(selector=key, start=max(0, end - (months - 1)), end=end)

    year_match = _SPECIFIC_YEAR_PATTERN.match(key)
    if year_match and int(year_match.group(1)) >= 1:
        return calendar_year_range(int(year_match.group(1)), selector=key)

    return calendar_year_range(today.year, selector=CURRENT_YEAR)


def calendar_year_range(year: int, selector: Optional[str] = None) -> MonthRange:
    return MonthRange(
        selector=selector or specific_year_selector(year),
        start=month_index(year, 1),
        end=month_index(year, 12),
        full_year=True,
    )


def available_range_selectors(years_with_data: Iterable[int], today: date) -> List[str]:
    """Selectors a dashboard offers: the fixed windows, then one per year with data, newest first."""
    selectors = [CURRENT_YEAR] + [
        past_months_selector(months) for months in sorted(PAST_MONTH_WINDOWS, reverse=True)
    ]
    years = {year for year in years_with_data if year >= 1}
    years.add(today.year)
    selectors.extend(specific_year_selector(year) for year in sorted(years, reverse=True))
    selectors.append(ALL_TIME)
    return selectors
