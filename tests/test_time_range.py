from __future__ import annotations

from datetime import date

import pytest

from funnelmetrics.analytics.time_range import available_range_selectors, resolve_month_range
from funnelmetrics.shared.time import month_index

TODAY = date(2025, 3, 15)


def test_current_year_covers_all_twelve_months() -> None:
    month_range = resolve_month_range("currentYear", TODAY)
    assert month_range.start == month_index(2025, 1)
    assert month_range.end == month_index(2025, 12)
    assert month_range.full_year is True
    assert month_range.selector == "currentYear"


def test_past_months_window_ends_at_current_month() -> None:
    month_range = resolve_month_range("past6Months", TODAY)
    assert month_range.start_label() == "2024-10"
    assert month_range.end_label() == "2025-03"
    assert month_range.full_year is False


def test_past_months_window_crosses_year_boundary() -> None:
    month_range = resolve_month_range("past3Months", date(2025, 1, 2))
    assert (month_range.start_label(), month_range.end_label()) == ("2024-11", "2025-01")


def test_specific_year_is_full_year() -> None:
    month_range = resolve_month_range("year-2023", TODAY)
    assert month_range.start_label() == "2023-01"
    assert month_range.end_label() == "2023-12"
    assert month_range.full_year is True
    assert month_range.selector == "year-2023"


def test_all_time_is_unbounded() -> None:
    month_range = resolve_month_range("allTime", TODAY)
    assert month_range.is_unbounded
    assert month_range.contains(month_index(1999, 6))
    assert month_range.contains(None) is False
    assert month_range.start_label() is None


@pytest.mark.parametrize("selector", ["past5Months", "yesterday", "", None, "year-abc"])
def test_unknown_selector_falls_back_to_current_year(selector) -> None:
    assert resolve_month_range(selector, TODAY) == resolve_month_range("currentYear", TODAY)


def test_available_range_selectors_lists_years_newest_first() -> None:
    selectors = available_range_selectors({2023, 2024}, TODAY)
    assert selectors == [
        "currentYear",
        "past24Months",
        "past12Months",
        "past6Months",
        "past3Months",
        "year-2025",
        "year-2024",
        "year-2023",
        "allTime",
    ]


def test_non_string_selector_falls_back_to_current_year() -> None:
    assert resolve_month_range(6, TODAY) == resolve_month_range("currentYear", TODAY)
