from __future__ import annotations

from typing import List, Optional

from funnelmetrics.schemas.common import MonthRange
from funnelmetrics.shared.base import BaseSchema, FrozenSchema


class LeadSourceShare(FrozenSchema):
    lead_source_id: Optional[str] = None
    name: str
    count: int
    revenue: int
    pct_count: int
    pct_revenue: int


class LeadSourceBreakdown(FrozenSchema):
    items: List[LeadSourceShare]
    by_count_desc: List[LeadSourceShare]
    by_revenue_desc: List[LeadSourceShare]
    total_count: int = 0
    total_revenue: int = 0


class LeadSourceAdPerformance(FrozenSchema):
    lead_source_id: Optional[str] = None
    name: str
    total_ad_spend: int = 0
    total_ad_leads: int = 0
    total_booked_from_ads: int = 0
    closes_from_ads: int = 0
    # Booked revenue as a percentage of spend, one decimal (250.0 means 2.5x).
    ad_spend_roi: Optional[float] = None
    average_booking_amount: int = 0
    cost_per_inquiry: int = 0
    cost_per_close: int = 0
    percent_of_total_inquiries: float = 0.0


class AdvertisingAttribution(FrozenSchema):
    total_ad_spend: int = 0
    total_ad_leads: int = 0
    total_booked_from_ads: int = 0
    closes_from_ads: int = 0
    # Plain ratio of booked revenue to spend (2.5 means 2.5x), unrounded.
    # None means not enough data for a ratio; render as "N/A".
    overall_roi: Optional[float] = None
    cost_per_close: int = 0
    campaign_count: int = 0
    lead_sources: List[LeadSourceAdPerformance] = []


class ServiceTypeRevenue(FrozenSchema):
    service_type_id: str
    service_type_name: str
    total_revenue: int = 0
    payment_count: int = 0


class LeadSourcesResponse(BaseSchema):
    range: MonthRange
    breakdown: LeadSourceBreakdown


class AdvertisingResponse(BaseSchema):
    range: MonthRange
    attribution: AdvertisingAttribution


class ServiceTypeRevenueResponse(BaseSchema):
    year: int
    service_types: List[ServiceTypeRevenue]
    total_revenue: int = 0


class AttributionFilters(BaseSchema):
    time_range: str = "currentYear"
