from __future__ import annotations

from collections import defaultdict
from fractions import Fraction
from typing import Dict, Iterable, List, Optional

from funnelmetrics.analytics.reconciliation import tracked_service_type_ids
from funnelmetrics.models.records import (
    AdCampaignRecord,
    BookingRecord,
    LeadSourceRecord,
    PaymentRecord,
    ServiceTypeRecord,
)
from funnelmetrics.schemas.attribution import (
    AdvertisingAttribution,
    LeadSourceAdPerformance,
    LeadSourceBreakdown,
    LeadSourceShare,
    ServiceTypeRevenue,
)
from funnelmetrics.schemas.common import MonthRange
from funnelmetrics.shared.numbers import one_decimal, round_half_up, safe_ratio
from funnelmetrics.shared.time import parse_month_index

UNKNOWN_NAME = "Unknown"


def _names_by_id(records: Iterable[LeadSourceRecord | ServiceTypeRecord]) -> Dict[str, str]:
    names: Dict[str, str] = {}
    for record in records:
        names.setdefault(record.id, record.name or UNKNOWN_NAME)
    return names


def _percent_of(part: int, total: int) -> int:
    return round_half_up(Fraction(part * 100, total)) if total > 0 else 0


def bookings_in_range(
    bookings: Iterable[BookingRecord], month_range: MonthRange
) -> List[BookingRecord]:
    return [
        booking
        for booking in bookings
        if month_range.contains(parse_month_index(booking.date_booked))
    ]


def build_lead_source_breakdown(
    bookings: Iterable[BookingRecord],
    service_types: Iterable[ServiceTypeRecord],
    lead_sources: Iterable[LeadSourceRecord],
    month_range: MonthRange,
) -> LeadSourceBreakdown:
    tracked_ids = tracked_service_type_ids(service_types)
    names = _names_by_id(lead_sources)

    counts: Dict[Optional[str], int] = defaultdict(int)
    revenue: Dict[Optional[str], int] = defaultdict(int)
    for booking in bookings_in_range(bookings, month_range):
        if booking.service_type_id not in tracked_ids:
            continue
        counts[booking.lead_source_id] += 1
        revenue[booking.lead_source_id] += booking.booked_revenue

    total_count = sum(counts.values())
    total_revenue = sum(revenue.values())
    items = [
        LeadSourceShare(
            lead_source_id=lead_source_id,
            name=names.get(lead_source_id, UNKNOWN_NAME) if lead_source_id else UNKNOWN_NAME,
            count=count,
            revenue=revenue[lead_source_id],
            pct_count=_percent_of(count, total_count),
            pct_revenue=_percent_of(revenue[lead_source_id], total_revenue),
        )
        for lead_source_id, count in counts.items()
    ]
    # sorted() is stable, so ties keep first-seen order.
    return LeadSourceBreakdown(
        items=items,
        by_count_desc=sorted(items, key=lambda item: item.count, reverse=True),
        by_revenue_desc=sorted(items, key=lambda item: item.revenue, reverse=True),
        total_count=total_count,
        total_revenue=total_revenue,
    )


def dedupe_ad_campaigns(
    campaigns: Iterable[AdCampaignRecord], month_range: MonthRange
) -> List[AdCampaignRecord]:
    """In-range, non-placeholder campaigns, one per (lead source, month); first seen wins."""
    seen = set()
    unique: List[AdCampaignRecord] = []
    for campaign in campaigns:
        if campaign.is_placeholder():
            continue
        index = campaign.month_index()
        if not month_range.contains(index):
            continue
        key = (campaign.lead_source_id, index)
        if key in seen:
            continue
        seen.add(key)
        unique.append(campaign)
    return unique


def _lead_source_performance(
    lead_source_id: str,
    name: str,
    campaigns: List[AdCampaignRecord],
    bookings: List[BookingRecord],
    total_inquiries: int,
) -> LeadSourceAdPerformance:
    spend = sum(campaign.spend for campaign in campaigns)
    leads = sum(campaign.leads_generated for campaign in campaigns)
    booked = sum(booking.booked_revenue for booking in bookings)
    closes = len(bookings)
    roi = one_decimal(Fraction(booked * 100, spend)) if spend > 0 and booked > 0 else None
    share = one_decimal(Fraction(leads * 100, total_inquiries)) if total_inquiries > 0 else 0.0
    return LeadSourceAdPerformance(
        lead_source_id=lead_source_id,
        name=name,
        total_ad_spend=spend,
        total_ad_leads=leads,
        total_booked_from_ads=booked,
        closes_from_ads=closes,
        ad_spend_roi=roi,
        average_booking_amount=safe_ratio(booked, closes),
        cost_per_inquiry=safe_ratio(spend, leads),
        cost_per_close=safe_ratio(spend, closes),
        percent_of_total_inquiries=share,
    )


def calculate_advertising_attribution(
    bookings: Iterable[BookingRecord],
    campaigns: Iterable[AdCampaignRecord],
    lead_sources: Iterable[LeadSourceRecord],
    month_range: MonthRange,
    total_inquiries: int = 0,
) -> AdvertisingAttribution:
    unique_campaigns = dedupe_ad_campaigns(campaigns, month_range)
    if not unique_campaigns:
        return AdvertisingAttribution()

    names = _names_by_id(lead_sources)
    campaigns_by_source: Dict[str, List[AdCampaignRecord]] = {}
    for campaign in unique_campaigns:
        if campaign.lead_source_id:
            campaigns_by_source.setdefault(campaign.lead_source_id, []).append(campaign)

    # Ad-driven bookings count regardless of whether the service type tracks in funnel.
    bookings_by_source: Dict[str, List[BookingRecord]] = defaultdict(list)
    for booking in bookings_in_range(bookings, month_range):
        if booking.lead_source_id in campaigns_by_source:
            bookings_by_source[booking.lead_source_id].append(booking)

    total_ad_spend = sum(campaign.spend for campaign in unique_campaigns)
    total_ad_leads = sum(campaign.leads_generated for campaign in unique_campaigns)
    ad_bookings = [booking for group in bookings_by_source.values() for booking in group]
    total_booked = sum(booking.booked_revenue for booking in ad_bookings)
    closes_from_ads = len(ad_bookings)

    overall_roi = None
    if total_ad_spend > 0 and total_booked > 0:
        overall_roi = float(Fraction(total_booked, total_ad_spend))

    return AdvertisingAttribution(
        total_ad_spend=total_ad_spend,
        total_ad_leads=total_ad_leads,
        total_booked_from_ads=total_booked,
        closes_from_ads=closes_from_ads,
        overall_roi=overall_roi,
        cost_per_close=safe_ratio(total_ad_spend, closes_from_ads),
        campaign_count=len(unique_campaigns),
        lead_sources=[
            _lead_source_performance(
                lead_source_id,
                names.get(lead_source_id, UNKNOWN_NAME),
                source_campaigns,
                bookings_by_source.get(lead_source_id, []),
                total_inquiries,
            )
            for lead_source_id, source_campaigns in campaigns_by_source.items()
        ],
    )


def calculate_service_type_revenue(
    payments: Iterable[PaymentRecord],
    bookings: Iterable[BookingRecord],
    service_types: Iterable[ServiceTypeRecord],
    month_range: MonthRange,
) -> List[ServiceTypeRevenue]:
    bookings_by_id: Dict[str, BookingRecord] = {}
    for booking in bookings:
        if booking.id:
            bookings_by_id.setdefault(booking.id, booking)
    names = _names_by_id(service_types)

    totals: Dict[str, List[int]] = {}
    for payment in payments:
        if not month_range.contains(parse_month_index(payment.resolved_date())):
            continue
        booking = bookings_by_id.get(payment.booking_id or "")
        if booking is None or not booking.service_type_id:
            continue
        bucket = totals.setdefault(booking.service_type_id, [0, 0])
        bucket[0] += payment.amount
        bucket[1] += 1

    revenue = [
        ServiceTypeRevenue(
            service_type_id=service_type_id,
            service_type_name=names.get(service_type_id, UNKNOWN_NAME),
            total_revenue=total,
            payment_count=count,
        )
        for service_type_id, (total, count) in totals.items()
    ]
    return sorted(revenue, key=lambda item: item.service_type_name.casefold())
