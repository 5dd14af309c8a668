from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from funnelmetrics.analytics.attribution import (
    build_lead_source_breakdown,
    calculate_advertising_attribution,
    calculate_service_type_revenue,
)
from funnelmetrics.analytics.forecast import project_forecast, summarize_forecast
from funnelmetrics.analytics.funnel_metrics import calculate_funnel_metrics, sum_months
from funnelmetrics.analytics.goal_pacing import calculate_goal_pacing
from funnelmetrics.analytics.reconciliation import index_funnel_records, reconcile_months
from funnelmetrics.analytics.time_range import (
    available_range_selectors,
    calendar_year_range,
    resolve_month_range,
)
from funnelmetrics.core.config import get_settings
from funnelmetrics.core.errors import BadRequestError
from funnelmetrics.repositories.funnel_repository import FunnelRepository
from funnelmetrics.schemas.attribution import (
    AdvertisingResponse,
    LeadSourcesResponse,
    ServiceTypeRevenueResponse,
)
from funnelmetrics.schemas.common import MonthRange
from funnelmetrics.schemas.forecast import ForecastResponse, GoalPacing, GoalSettings
from funnelmetrics.schemas.funnel import (
    FunnelMonthUpdateRequest,
    FunnelResponse,
    ReconciledMonth,
    StoredFunnelMonth,
)
from funnelmetrics.shared.time import parse_month_index

logger = logging.getLogger(__name__)


class InsightsService:
    def __init__(self, repository: FunnelRepository) -> None:
        self.repository = repository
        self.settings = get_settings()

    def _reconcile(
        self, account_id: str, month_range: MonthRange, full_year: Optional[bool] = None
    ) -> List[ReconciledMonth]:
        return reconcile_months(
            funnel_records=self.repository.list_funnel_records(account_id),
            bookings=self.repository.list_bookings(account_id),
            payments=self.repository.list_payments(account_id),
            service_types=self.repository.list_service_types(account_id),
            month_range=month_range,
            full_year=full_year,
        )

    def get_funnel(self, account_id: str, time_range: str, today: date) -> FunnelResponse:
        month_range = resolve_month_range(time_range, today)
        months = self._reconcile(account_id, month_range)
        return FunnelResponse(
            range=month_range,
            months=months,
            metrics=calculate_funnel_metrics(months),
        )

    def list_range_selectors(self, account_id: str, today: date) -> List[str]:
        years = set()
        for booking in self.repository.list_bookings(account_id):
            index = parse_month_index(booking.date_booked)
            if index is not None:
                years.add(index // 12)
        return available_range_selectors(years, today)

    def save_funnel_month(
        self,
        account_id: str,
        year: int,
        month: int,
        request: FunnelMonthUpdateRequest,
    ) -> StoredFunnelMonth:
        if year < 1 or not 1 <= month <= 12:
            raise BadRequestError("Year and month must name a calendar month")
        record = self.repository.upsert_funnel_month(
            account_id, year, month, request.model_dump(by_alias=False)
        )
        logger.info("saved funnel month %04d-%02d for account %s", year, month, account_id)
        return StoredFunnelMonth.model_validate(record.model_dump())

    def get_lead_sources(
        self, account_id: str, time_range: str, today: date
    ) -> LeadSourcesResponse:
        month_range = resolve_month_range(time_range, today)
        breakdown = build_lead_source_breakdown(
            bookings=self.repository.list_bookings(account_id),
            service_types=self.repository.list_service_types(account_id),
            lead_sources=self.repository.list_lead_sources(account_id),
            month_range=month_range,
        )
        return LeadSourcesResponse(range=month_range, breakdown=breakdown)

    def get_advertising(
        self, account_id: str, time_range: str, today: date
    ) -> AdvertisingResponse:
        month_range = resolve_month_range(time_range, today)
        stored_by_month = index_funnel_records(self.repository.list_funnel_records(account_id))
        total_inquiries = sum(
            record.inquiries
            for index, record in stored_by_month.items()
            if month_range.contains(index)
        )
        attribution = calculate_advertising_attribution(
            bookings=self.repository.list_bookings(account_id),
            campaigns=self.repository.list_ad_campaigns(account_id),
            lead_sources=self.repository.list_lead_sources(account_id),
            month_range=month_range,
            total_inquiries=total_inquiries,
        )
        return AdvertisingResponse(range=month_range, attribution=attribution)

    def get_service_type_revenue(self, account_id: str, year: int) -> ServiceTypeRevenueResponse:
        service_types = calculate_service_type_revenue(
            payments=self.repository.list_payments(account_id),
            bookings=self.repository.list_bookings(account_id),
            service_types=self.repository.list_service_types(account_id),
            month_range=calendar_year_range(year),
        )
        return ServiceTypeRevenueResponse(
            year=year,
            service_types=service_types,
            total_revenue=sum(item.total_revenue for item in service_types),
        )

    def get_forecast(
        self, account_id: str, lookback: str, horizon_months: int, today: date
    ) -> ForecastResponse:
        if horizon_months > self.settings.forecast_max_horizon_months:
            raise BadRequestError(
                f"Forecast horizon is limited to {self.settings.forecast_max_horizon_months} months"
            )
        month_range = resolve_month_range(lookback, today)
        # Averages only count months that were actually recorded, never zero-filled ones.
        history = self._reconcile(account_id, month_range, full_year=False)
        metrics = calculate_funnel_metrics(history)
        months = project_forecast(metrics.averages, horizon_months, today)
        return ForecastResponse(
            lookback=month_range,
            monthly_averages=metrics.averages,
            months_with_data=metrics.months_with_data,
            months=months,
            summary=summarize_forecast(months),
        )

    def default_goals(self) -> GoalSettings:
        return GoalSettings(
            bookings_goal=self.settings.default_bookings_goal,
            inquiry_to_call=self.settings.default_inquiry_to_call,
            call_to_booking=self.settings.default_call_to_booking,
        )

    def get_goal_pacing(
        self, account_id: str, goals: Optional[GoalSettings], today: date
    ) -> GoalPacing:
        year_months = self._reconcile(account_id, calendar_year_range(today.year))
        return calculate_goal_pacing(goals or self.default_goals(), sum_months(year_months), today)
