from __future__ import annotations

from datetime import date
from fractions import Fraction

from funnelmetrics.schemas.forecast import GoalPacing, GoalSettings
from funnelmetrics.schemas.funnel import FunnelTotals
from funnelmetrics.shared.numbers import one_decimal, percent_string, round_half_up
from funnelmetrics.shared.time import months_elapsed

MIN_MONTHS_ELAPSED = Fraction(1, 100)
MONTHS_PER_YEAR = 12


def _year_end_pace(ytd_value: int, elapsed: Fraction) -> int:
    return round_half_up(Fraction(ytd_value) / elapsed * MONTHS_PER_YEAR)


def calculate_goal_pacing(goals: GoalSettings, ytd: FunnelTotals, today: date) -> GoalPacing:
    call_to_booking = Fraction(goals.call_to_booking) / 100
    inquiry_to_call = Fraction(goals.inquiry_to_call) / 100

    required_calls = Fraction(goals.bookings_goal) / call_to_booking if call_to_booking > 0 else Fraction(0)
    required_inquiries = (
        required_calls / inquiry_to_call
        if inquiry_to_call > 0 and required_calls > 0
        else Fraction(0)
    )

    elapsed = min(Fraction(MONTHS_PER_YEAR), max(MIN_MONTHS_ELAPSED, Fraction(months_elapsed(today))))
    pace_closes = _year_end_pace(ytd.closes, elapsed)

    return GoalPacing(
        goals=goals,
        ytd_inquiries=ytd.inquiries,
        ytd_calls_taken=ytd.calls_taken,
        ytd_closes=ytd.closes,
        months_elapsed=one_decimal(elapsed),
        required_calls=round_half_up(required_calls),
        required_inquiries=round_half_up(required_inquiries),
        pace_inquiries=_year_end_pace(ytd.inquiries, elapsed),
        pace_calls_taken=_year_end_pace(ytd.calls_taken, elapsed),
        pace_closes=pace_closes,
        goal_progress_pct=percent_string(ytd.closes, goals.bookings_goal),
        on_track=pace_closes >= goals.bookings_goal if goals.bookings_goal > 0 else None,
    )
