from __future__ import annotations

from datetime import date
from typing import Annotated, Any, Optional, Union

from pydantic import AliasChoices, BaseModel, BeforeValidator, Field

from funnelmetrics.shared.time import month_index, parse_month_index

PLACEHOLDER_CAMPAIGN_PREFIX = "default_"


def _none_to_zero(value: Any) -> Any:
    return 0 if value is None else value


def _none_to_false(value: Any) -> Any:
    return False if value is None else value


# Nullable columns come back from PostgREST as null; the engine treats them as 0.
Count = Annotated[int, BeforeValidator(_none_to_zero)]
Cents = Annotated[int, BeforeValidator(_none_to_zero)]
Flag = Annotated[bool, BeforeValidator(_none_to_false)]
LooseDate = Optional[Union[date, str]]


class FunnelRecord(BaseModel):
    id: Optional[str] = None
    user_id: Optional[str] = None
    year: Optional[int] = None
    month: Optional[int] = None
    inquiries: Count = 0
    calls_booked: Count = 0
    calls_taken: Count = 0
    closes: Count = 0
    bookings: Cents = 0
    cash: Cents = 0
    closes_manual: Flag = False
    bookings_manual: Flag = False
    cash_manual: Flag = False

    def month_index(self) -> Optional[int]:
        if self.year is None or self.month is None or not 1 <= self.month <= 12:
            return None
        return month_index(self.year, self.month)


class BookingRecord(BaseModel):
    id: Optional[str] = None
    service_type_id: Optional[str] = None
    lead_source_id: Optional[str] = None
    date_booked: LooseDate = Field(
        default=None, validation_alias=AliasChoices("date_booked", "booking_date")
    )
    booked_revenue: Cents = 0
    status: Optional[str] = None


class PaymentRecord(BaseModel):
    id: Optional[str] = None
    booking_id: Optional[str] = None
    expected_date: LooseDate = None
    due_date: LooseDate = None
    payment_date: LooseDate = None
    amount: Cents = Field(default=0, validation_alias=AliasChoices("amount", "amount_cents"))
    status: Optional[str] = None

    def resolved_date(self) -> LooseDate:
        """Scheduled date first, then due date, then the date it was paid."""
        for value in (self.expected_date, self.due_date, self.payment_date):
            if isinstance(value, str) and not value.strip():
                continue
            if value is not None:
                return value
        return None


class ServiceTypeRecord(BaseModel):
    id: str
    name: Optional[str] = None
    tracks_in_funnel: Flag = False


class LeadSourceRecord(BaseModel):
    id: str
    name: Optional[str] = None


class AdCampaignRecord(BaseModel):
    id: Optional[str] = None
    lead_source_id: Optional[str] = None
    year: Optional[int] = None
    month: Optional[int] = None
    month_year: Optional[str] = None
    spend: Cents = Field(default=0, validation_alias=AliasChoices("spend", "ad_spend_cents"))
    leads_generated: Count = 0
    placeholder: Flag = False

    def is_placeholder(self) -> bool:
        if self.placeholder:
            return True
        return bool(self.id and self.id.startswith(PLACEHOLDER_CAMPAIGN_PREFIX))

    def month_index(self) -> Optional[int]:
        if self.year is not None and self.month is not None and 1 <= self.month <= 12:
            return month_index(self.year, self.month)
        return parse_month_index(self.month_year)
