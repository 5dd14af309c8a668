from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from funnelmetrics.schemas.common import MonthRange
from funnelmetrics.schemas.funnel import FunnelTotals
from funnelmetrics.shared.base import BaseSchema, FrozenSchema


class ForecastMonth(FrozenSchema):
    year: int
    month: int
    inquiries: int = 0
    calls_booked: int = 0
    calls_taken: int = 0
    closes: int = 0
    bookings: int = 0


class ForecastSummary(FrozenSchema):
    horizon_months: int
    inquiries: int = 0
    calls_booked: int = 0
    calls_taken: int = 0
    closes: int = 0
    bookings: int = 0


class ForecastResponse(BaseSchema):
    lookback: MonthRange
    monthly_averages: FunnelTotals
    months_with_data: int = 0
    months: List[ForecastMonth]
    summary: ForecastSummary


class ForecastFilters(BaseSchema):
    lookback: str = "past12Months"
    horizon_months: int = Field(default=6, ge=1, le=36)


class GoalSettings(FrozenSchema):
    bookings_goal: int = Field(default=50, ge=0)
    inquiry_to_call: float = Field(default=25.0, ge=0)
    call_to_booking: float = Field(default=35.0, ge=0)


class GoalPacing(FrozenSchema):
    goals: GoalSettings
    ytd_inquiries: int = 0
    ytd_calls_taken: int = 0
    ytd_closes: int = 0
    months_elapsed: float = 0.0
    required_calls: int = 0
    required_inquiries: int = 0
    pace_inquiries: int = 0
    pace_calls_taken: int = 0
    pace_closes: int = 0
    goal_progress_pct: str = "0.0"
    on_track: Optional[bool] = None
