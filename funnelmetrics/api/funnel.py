from __future__ import annotations

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Path, Query

from funnelmetrics.api.dependencies import get_insights_service, get_today
from funnelmetrics.schemas.funnel import (
    FunnelFilters,
    FunnelMonthUpdateRequest,
    FunnelResponse,
    StoredFunnelMonth,
)
from funnelmetrics.services.insights_service import InsightsService
from funnelmetrics.shared.response import ResponseEnvelope, build_meta


router = APIRouter(prefix="/accounts/{account_id}", tags=["funnel"])


def get_funnel_filters(
    time_range: str = Query(default="currentYear", alias="range", max_length=32),
) -> FunnelFilters:
    return FunnelFilters(time_range=time_range)


@router.get("/funnel")
def funnel_metrics(
    account_id: str,
    filters: FunnelFilters = Depends(get_funnel_filters),
    service: InsightsService = Depends(get_insights_service),
    today: date = Depends(get_today),
) -> ResponseEnvelope[FunnelResponse]:
    data = service.get_funnel(account_id, filters.time_range, today)
    meta = build_meta(
        today,
        time_window=data.range.selector,
        account_id=account_id,
        range_start=data.range.start_label(),
        range_end=data.range.end_label(),
        source="funnels,bookings,payments",
    )
    return ResponseEnvelope(data=data, meta=meta)


@router.put("/funnel/{year}/{month}")
def save_funnel_month(
    account_id: str,
    request: FunnelMonthUpdateRequest,
    year: int = Path(ge=2000, le=2100),
    month: int = Path(ge=1, le=12),
    service: InsightsService = Depends(get_insights_service),
    today: date = Depends(get_today),
) -> ResponseEnvelope[StoredFunnelMonth]:
    data = service.save_funnel_month(account_id, year, month, request)
    meta = build_meta(today, time_window=f"{year:04d}-{month:02d}", account_id=account_id, source="funnels")
    return ResponseEnvelope(data=data, meta=meta)


@router.get("/range-selectors")
def range_selectors(
    account_id: str,
    service: InsightsService = Depends(get_insights_service),
    today: date = Depends(get_today),
) -> ResponseEnvelope[List[str]]:
    data = service.list_range_selectors(account_id, today)
    meta = build_meta(today, time_window="na", account_id=account_id, source="bookings")
    return ResponseEnvelope(data=data, meta=meta)
