from __future__ import annotations

from typing import Iterable

from funnelmetrics.schemas.funnel import ConversionRates, FunnelMetrics, FunnelTotals, ReconciledMonth
from funnelmetrics.shared.numbers import percent_string, safe_ratio

TOTAL_FIELDS = ("inquiries", "calls_booked", "calls_taken", "closes", "bookings", "cash")


def sum_months(months: Iterable[ReconciledMonth]) -> FunnelTotals:
    totals = dict.fromkeys(TOTAL_FIELDS, 0)
    for month in months:
        for field in TOTAL_FIELDS:
            totals[field] += getattr(month, field)
    return FunnelTotals(**totals)


def average_totals(totals: FunnelTotals, months_with_data: int) -> FunnelTotals:
    return FunnelTotals(
        **{field: safe_ratio(getattr(totals, field), months_with_data) for field in TOTAL_FIELDS}
    )


def calculate_conversion_rates(totals: FunnelTotals) -> ConversionRates:
    return ConversionRates(
        inquiry_to_close=percent_string(totals.closes, totals.inquiries),
        inquiry_to_call_booked=percent_string(totals.calls_booked, totals.inquiries),
        inquiry_to_call_taken=percent_string(totals.calls_taken, totals.inquiries),
        call_show_up_rate=percent_string(totals.calls_taken, totals.calls_booked),
        call_taken_to_close=percent_string(totals.closes, totals.calls_taken),
        call_booked_to_close=percent_string(totals.closes, totals.calls_booked),
    )


def calculate_funnel_metrics(months: Iterable[ReconciledMonth]) -> FunnelMetrics:
    rows = list(months)
    totals = sum_months(rows)
    months_with_data = sum(1 for month in rows if month.has_data())
    return FunnelMetrics(
        totals=totals,
        averages=average_totals(totals, months_with_data),
        months_with_data=months_with_data,
        rates=calculate_conversion_rates(totals),
        revenue_per_call_taken=safe_ratio(totals.bookings, totals.calls_taken),
    )
