from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query

from funnelmetrics.api.dependencies import get_insights_service, get_today
from funnelmetrics.schemas.attribution import (
    AdvertisingResponse,
    AttributionFilters,
    LeadSourcesResponse,
    ServiceTypeRevenueResponse,
)
from funnelmetrics.services.insights_service import InsightsService
from funnelmetrics.shared.response import ResponseEnvelope, build_meta


router = APIRouter(prefix="/accounts/{account_id}", tags=["attribution"])


def get_attribution_filters(
    time_range: str = Query(default="currentYear", alias="range", max_length=32),
) -> AttributionFilters:
    return AttributionFilters(time_range=time_range)


@router.get("/lead-sources")
def lead_sources(
    account_id: str,
    filters: AttributionFilters = Depends(get_attribution_filters),
    service: InsightsService = Depends(get_insights_service),
    today: date = Depends(get_today),
) -> ResponseEnvelope[LeadSourcesResponse]:
    data = service.get_lead_sources(account_id, filters.time_range, today)
    meta = build_meta(
        today,
        time_window=data.range.selector,
        account_id=account_id,
        range_start=data.range.start_label(),
        range_end=data.range.end_label(),
        source="bookings,lead_sources",
    )
    return ResponseEnvelope(data=data, meta=meta)


@router.get("/advertising")
def advertising(
    account_id: str,
    filters: AttributionFilters = Depends(get_attribution_filters),
    service: InsightsService = Depends(get_insights_service),
    today: date = Depends(get_today),
) -> ResponseEnvelope[AdvertisingResponse]:
    data = service.get_advertising(account_id, filters.time_range, today)
    meta = build_meta(
        today,
        time_window=data.range.selector,
        account_id=account_id,
        range_start=data.range.start_label(),
        range_end=data.range.end_label(),
        source="ad_campaigns,bookings,funnels",
    )
    return ResponseEnvelope(data=data, meta=meta)


@router.get("/service-type-revenue")
def service_type_revenue(
    account_id: str,
    year: int | None = Query(default=None, ge=2000, le=2100),
    service: InsightsService = Depends(get_insights_service),
    today: date = Depends(get_today),
) -> ResponseEnvelope[ServiceTypeRevenueResponse]:
    target_year = year or today.year
    data = service.get_service_type_revenue(account_id, target_year)
    meta = build_meta(
        today,
        time_window=str(target_year),
        account_id=account_id,
        source="payments,bookings,service_types",
    )
    return ResponseEnvelope(data=data, meta=meta)
