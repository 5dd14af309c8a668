from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from funnelmetrics.schemas.common import MonthRange
from funnelmetrics.shared.base import BaseSchema, FrozenSchema


class ReconciledMonth(FrozenSchema):
    id: str
    year: int
    month: int
    month_index: int
    inquiries: int = 0
    calls_booked: int = 0
    calls_taken: int = 0
    closes: int = 0
    bookings: int = 0
    cash: int = 0
    # True when the stored value won over the booking/payment-derived one.
    closes_manual: bool = False
    bookings_manual: bool = False
    cash_manual: bool = False
    has_stored_record: bool = False

    def has_data(self) -> bool:
        return any(
            (self.inquiries, self.calls_booked, self.calls_taken, self.closes, self.bookings)
        )


class FunnelTotals(FrozenSchema):
    inquiries: int = 0
    calls_booked: int = 0
    calls_taken: int = 0
    closes: int = 0
    bookings: int = 0
    cash: int = 0


class ConversionRates(FrozenSchema):
    inquiry_to_close: str = "0.0"
    inquiry_to_call_booked: str = "0.0"
    inquiry_to_call_taken: str = "0.0"
    call_show_up_rate: str = "0.0"
    call_taken_to_close: str = "0.0"
    call_booked_to_close: str = "0.0"


class FunnelMetrics(FrozenSchema):
    totals: FunnelTotals
    averages: FunnelTotals
    months_with_data: int = 0
    rates: ConversionRates
    revenue_per_call_taken: int = 0


class FunnelResponse(BaseSchema):
    range: MonthRange
    months: List[ReconciledMonth]
    metrics: FunnelMetrics


class FunnelFilters(BaseSchema):
    time_range: str = "currentYear"


class FunnelMonthUpdateRequest(BaseSchema):
    inquiries: int = Field(default=0, ge=0)
    calls_booked: int = Field(default=0, ge=0)
    calls_taken: int = Field(default=0, ge=0)
    closes: int = Field(default=0, ge=0)
    bookings: int = Field(default=0, ge=0)
    cash: int = Field(default=0, ge=0)
    closes_manual: bool = False
    bookings_manual: bool = False
    cash_manual: bool = False


class StoredFunnelMonth(BaseSchema):
    id: Optional[str] = None
    year: int
    month: int
    inquiries: int = 0
    calls_booked: int = 0
    calls_taken: int = 0
    closes: int = 0
    bookings: int = 0
    cash: int = 0
    closes_manual: bool = False
    bookings_manual: bool = False
    cash_manual: bool = False
