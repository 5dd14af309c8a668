from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from funnelmetrics.api.dependencies import get_insights_service, get_today
from funnelmetrics.schemas.forecast import ForecastFilters, ForecastResponse, GoalPacing, GoalSettings
from funnelmetrics.services.insights_service import InsightsService
from funnelmetrics.shared.response import ResponseEnvelope, build_meta


router = APIRouter(prefix="/accounts/{account_id}", tags=["forecast"])


def get_forecast_filters(
    lookback: str = Query(default="past12Months", max_length=32),
    horizon_months: int = Query(default=6, alias="horizon_months", ge=1, le=36),
) -> ForecastFilters:
    return ForecastFilters(lookback=lookback, horizon_months=horizon_months)


def get_goal_settings(
    bookings_goal: Optional[int] = Query(default=None, alias="bookings_goal", ge=0),
    inquiry_to_call: Optional[float] = Query(default=None, alias="inquiry_to_call", ge=0, le=100),
    call_to_booking: Optional[float] = Query(default=None, alias="call_to_booking", ge=0, le=100),
    service: InsightsService = Depends(get_insights_service),
) -> GoalSettings:
    defaults = service.default_goals()
    return GoalSettings(
        bookings_goal=defaults.bookings_goal if bookings_goal is None else bookings_goal,
        inquiry_to_call=defaults.inquiry_to_call if inquiry_to_call is None else inquiry_to_call,
        call_to_booking=defaults.call_to_booking if call_to_booking is None else call_to_booking,
    )


@router.get("/forecast")
def forecast(
    account_id: str,
    filters: ForecastFilters = Depends(get_forecast_filters),
    service: InsightsService = Depends(get_insights_service),
    today: date = Depends(get_today),
) -> ResponseEnvelope[ForecastResponse]:
    data = service.get_forecast(account_id, filters.lookback, filters.horizon_months, today)
    meta = build_meta(
        today,
        time_window=data.lookback.selector,
        account_id=account_id,
        range_start=data.lookback.start_label(),
        range_end=data.lookback.end_label(),
        source="funnels,bookings,payments",
    )
    return ResponseEnvelope(data=data, meta=meta)


@router.get("/goal-pacing")
def goal_pacing(
    account_id: str,
    goals: GoalSettings = Depends(get_goal_settings),
    service: InsightsService = Depends(get_insights_service),
    today: date = Depends(get_today),
) -> ResponseEnvelope[GoalPacing]:
    data = service.get_goal_pacing(account_id, goals, today)
    meta = build_meta(today, time_window="ytd", account_id=account_id, source="funnels,bookings")
    return ResponseEnvelope(data=data, meta=meta)
