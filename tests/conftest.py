from __future__ import annotations

import os
from datetime import date
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")

from funnelmetrics.analytics.time_range import resolve_month_range  # noqa: E402
from funnelmetrics.api.dependencies import get_insights_service, get_today  # noqa: E402
from funnelmetrics.core.errors import BadRequestError  # noqa: E402
from funnelmetrics.main import create_app  # noqa: E402
from funnelmetrics.schemas.attribution import (  # noqa: E402
    AdvertisingAttribution,
    AdvertisingResponse,
    LeadSourceBreakdown,
    LeadSourceShare,
    LeadSourcesResponse,
    ServiceTypeRevenue,
    ServiceTypeRevenueResponse,
)
from funnelmetrics.schemas.forecast import (  # noqa: E402
    ForecastMonth,
    ForecastResponse,
    ForecastSummary,
    GoalPacing,
    GoalSettings,
)
from funnelmetrics.schemas.funnel import (  # noqa: E402
    ConversionRates,
    FunnelMetrics,
    FunnelMonthUpdateRequest,
    FunnelResponse,
    FunnelTotals,
    ReconciledMonth,
    StoredFunnelMonth,
)

TODAY = date(2025, 3, 15)


class FakeInsightsService:
    def __init__(self) -> None:
        self.calls: List[tuple] = []

    def get_funnel(self, account_id: str, time_range: str, today: date) -> FunnelResponse:
        self.calls.append(("get_funnel", account_id, time_range, today))
        month = ReconciledMonth(
            id="2025_january",
            year=2025,
            month=1,
            month_index=2025 * 12,
            inquiries=31,
            calls_booked=16,
            calls_taken=14,
            closes=4,
            bookings=2909742,
            cash=150000,
            has_stored_record=True,
        )
        return FunnelResponse(
            range=resolve_month_range(time_range, today),
            months=[month],
            metrics=FunnelMetrics(
                totals=FunnelTotals(
                    inquiries=31, calls_booked=16, calls_taken=14, closes=4, bookings=2909742, cash=150000
                ),
                averages=FunnelTotals(
                    inquiries=31, calls_booked=16, calls_taken=14, closes=4, bookings=2909742, cash=150000
                ),
                months_with_data=1,
                rates=ConversionRates(inquiry_to_close="12.9", call_show_up_rate="87.5"),
                revenue_per_call_taken=207839,
            ),
        )

    def save_funnel_month(
        self, account_id: str, year: int, month: int, request: FunnelMonthUpdateRequest
    ) -> StoredFunnelMonth:
        if year < 1:
            raise BadRequestError("Year and month must name a calendar month")
        return StoredFunnelMonth(id="funnel-1", year=year, month=month, **request.model_dump())

    def list_range_selectors(self, account_id: str, today: date) -> List[str]:
        return ["currentYear", "past24Months", "year-2025", "allTime"]

    def get_lead_sources(self, account_id: str, time_range: str, today: date) -> LeadSourcesResponse:
        share = LeadSourceShare(
            lead_source_id="ls-1", name="Instagram", count=3, revenue=450000, pct_count=100, pct_revenue=100
        )
        return LeadSourcesResponse(
            range=resolve_month_range(time_range, today),
            breakdown=LeadSourceBreakdown(
                items=[share],
                by_count_desc=[share],
                by_revenue_desc=[share],
                total_count=3,
                total_revenue=450000,
            ),
        )

    def get_advertising(self, account_id: str, time_range: str, today: date) -> AdvertisingResponse:
        return AdvertisingResponse(
            range=resolve_month_range(time_range, today),
            attribution=AdvertisingAttribution(),
        )

    def get_service_type_revenue(self, account_id: str, year: int) -> ServiceTypeRevenueResponse:
        return ServiceTypeRevenueResponse(
            year=year,
            service_types=[
                ServiceTypeRevenue(
                    service_type_id="st-1",
                    service_type_name="Weddings",
                    total_revenue=500000,
                    payment_count=2,
                )
            ],
            total_revenue=500000,
        )

    def get_forecast(
        self, account_id: str, lookback: str, horizon_months: int, today: date
    ) -> ForecastResponse:
        self.calls.append(("get_forecast", account_id, lookback, horizon_months, today))
        if horizon_months > 18:
            raise BadRequestError("Forecast horizon is limited to 18 months")
        months = [ForecastMonth(year=2025, month=4, closes=2, bookings=100000)]
        return ForecastResponse(
            lookback=resolve_month_range(lookback, today),
            monthly_averages=FunnelTotals(closes=2, bookings=100000),
            months_with_data=3,
            months=months,
            summary=ForecastSummary(horizon_months=1, closes=2, bookings=100000),
        )

    def default_goals(self) -> GoalSettings:
        return GoalSettings()

    def get_goal_pacing(
        self, account_id: str, goals: Optional[GoalSettings], today: date
    ) -> GoalPacing:
        self.calls.append(("get_goal_pacing", account_id, goals, today))
        return GoalPacing(goals=goals or GoalSettings(), ytd_closes=10, required_calls=143)


@pytest.fixture()
def fake_service() -> FakeInsightsService:
    return FakeInsightsService()


@pytest.fixture()
def client(fake_service: FakeInsightsService) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_insights_service] = lambda: fake_service
    app.dependency_overrides[get_today] = lambda: TODAY
    return TestClient(app)

