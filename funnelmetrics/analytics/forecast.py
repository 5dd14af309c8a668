from __future__ import annotations

from datetime import date
from typing import List, Sequence

from funnelmetrics.schemas.forecast import ForecastMonth, ForecastSummary
from funnelmetrics.schemas.funnel import FunnelTotals

PROJECTED_FIELDS = ("inquiries", "calls_booked", "calls_taken", "closes", "bookings")


def project_forecast(
    averages: FunnelTotals, horizon_months: int, today: date
) -> List[ForecastMonth]:
    """Repeat the monthly averages for each month after ``today``.

    Flat on purpose: no trend or seasonality, just the recent average.
    """
    values = {field: getattr(averages, field) for field in PROJECTED_FIELDS}
    forecast: List[ForecastMonth] = []
    for offset in range(max(0, horizon_months)):
        month_index = today.month - 1 + offset + 1
        forecast.append(
            ForecastMonth(
                year=today.year + month_index // 12,
                month=month_index % 12 + 1,
                **values,
            )
        )
    return forecast


def summarize_forecast(months: Sequence[ForecastMonth]) -> ForecastSummary:
    totals = dict.fromkeys(PROJECTED_FIELDS, 0)
    for month in months:
        for field in PROJECTED_FIELDS:
            totals[field] += getattr(month, field)
    return ForecastSummary(horizon_months=len(months), **totals)
