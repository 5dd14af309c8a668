from __future__ import annotations

from datetime import date

from funnelmetrics.analytics.forecast import project_forecast, summarize_forecast
from funnelmetrics.analytics.goal_pacing import calculate_goal_pacing
from funnelmetrics.schemas.forecast import GoalSettings
from funnelmetrics.schemas.funnel import FunnelTotals

AVERAGES = FunnelTotals(
    inquiries=30, calls_booked=15, calls_taken=12, closes=4, bookings=250000, cash=99
)


def test_projection_starts_the_month_after_today() -> None:
    months = project_forecast(AVERAGES, 6, date(2025, 3, 15))

    assert [(month.year, month.month) for month in months] == [
        (2025, 4),
        (2025, 5),
        (2025, 6),
        (2025, 7),
        (2025, 8),
        (2025, 9),
    ]
    for month in months:
        assert (month.inquiries, month.calls_booked, month.calls_taken, month.closes, month.bookings) == (
            30,
            15,
            12,
            4,
            250000,
        )


def test_projection_wraps_year_boundaries() -> None:
    months = project_forecast(AVERAGES, 3, date(2025, 11, 30))

    assert [(month.year, month.month) for month in months] == [(2025, 12), (2026, 1), (2026, 2)]


def test_summary_is_the_sum_of_projected_months() -> None:
    summary = summarize_forecast(project_forecast(AVERAGES, 6, date(2025, 3, 15)))

    assert summary.horizon_months == 6
    assert summary.bookings == 6 * 250000
    assert summary.closes == 24


def test_empty_horizon() -> None:
    months = project_forecast(AVERAGES, 0, date(2025, 3, 15))

    assert months == []
    assert summarize_forecast(months).bookings == 0


def test_goal_pacing_requirements_and_year_end_pace() -> None:
    ytd = FunnelTotals(inquiries=100, calls_taken=30, closes=10)

    pacing = calculate_goal_pacing(GoalSettings(), ytd, date(2025, 3, 15))

    assert pacing.required_calls == 143
    assert pacing.required_inquiries == 571
    assert pacing.months_elapsed == 2.5
    assert pacing.pace_closes == 48
    assert pacing.pace_inquiries == 483
    assert pacing.goal_progress_pct == "20.0"
    assert pacing.on_track is False


def test_goal_pacing_at_year_end_matches_ytd() -> None:
    ytd = FunnelTotals(inquiries=240, calls_taken=80, closes=55)

    pacing = calculate_goal_pacing(GoalSettings(), ytd, date(2025, 12, 31))

    assert pacing.months_elapsed == 12.0
    assert pacing.pace_closes == 55
    assert pacing.on_track is True
    assert pacing.goal_progress_pct == "110.0"


def test_goal_pacing_with_zero_rates_and_goal() -> None:
    goals = GoalSettings(bookings_goal=0, inquiry_to_call=0, call_to_booking=0)

    pacing = calculate_goal_pacing(goals, FunnelTotals(), date(2025, 1, 1))

    assert pacing.required_calls == 0
    assert pacing.required_inquiries == 0
    assert pacing.pace_closes == 0
    assert pacing.goal_progress_pct == "0.0"
    assert pacing.on_track is None
