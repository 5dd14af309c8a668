from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple

from funnelmetrics.core.supabase import SupabaseClient
from funnelmetrics.models.records import (
    AdCampaignRecord,
    BookingRecord,
    FunnelRecord,
    LeadSourceRecord,
    PaymentRecord,
    ServiceTypeRecord,
)

FUNNEL_COLUMNS = (
    "id,user_id,year,month,inquiries,calls_booked,calls_taken,closes,bookings,cash,"
    "closes_manual,bookings_manual,cash_manual"
)


class FunnelRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def _account_filter(self, account_id: str) -> List[Tuple[str, str]]:
        return [("user_id", f"eq.{account_id}")]

    def list_funnel_records(self, account_id: str) -> List[FunnelRecord]:
        rows = self.client.select_all(
            table="funnels",
            select=FUNNEL_COLUMNS,
            filters=self._account_filter(account_id) + [("year", "not.is.null")],
            order="year.asc,month.asc",
        )
        return [FunnelRecord.model_validate(row) for row in rows]

    def list_bookings(self, account_id: str) -> List[BookingRecord]:
        rows = self.client.select_all(
            table="bookings",
            select="id,service_type_id,lead_source_id,booking_date,booked_revenue,status",
            filters=self._account_filter(account_id),
            order="booking_date.desc.nullslast,id.asc",
        )
        return [BookingRecord.model_validate(row) for row in rows]

    def list_payments(self, account_id: str) -> List[PaymentRecord]:
        rows = self.client.select_all(
            table="payments",
            select="id,booking_id,expected_date,payment_date,amount_cents,status",
            filters=self._account_filter(account_id),
            order="payment_date.desc.nullslast,id.asc",
        )
        return [self._payment_from_row(row) for row in rows]

    def _payment_from_row(self, row: Dict[str, Any]) -> PaymentRecord:
        # payment_date holds the scheduled due date; it is also the paid date once completed.
        scheduled = row.get("payment_date")
        return PaymentRecord.model_validate(
            {
                **row,
                "due_date": scheduled,
                "payment_date": scheduled if row.get("status") == "completed" else None,
            }
        )

    def list_service_types(self, account_id: str) -> List[ServiceTypeRecord]:
        rows = self.client.select_all(
            table="service_types",
            select="id,name,tracks_in_funnel",
            filters=self._account_filter(account_id),
            order="name.asc",
        )
        return [ServiceTypeRecord.model_validate(row) for row in rows]

    def list_lead_sources(self, account_id: str) -> List[LeadSourceRecord]:
        rows = self.client.select_all(
            table="lead_sources",
            select="id,name",
            filters=self._account_filter(account_id),
            order="name.asc",
        )
        return [LeadSourceRecord.model_validate(row) for row in rows]

    def list_ad_campaigns(self, account_id: str) -> List[AdCampaignRecord]:
        # Oldest first so that duplicate (lead source, month) rows resolve to the original entry.
        rows = self.client.select_all(
            table="ad_campaigns",
            select="id,lead_source_id,month_year,ad_spend_cents,leads_generated",
            filters=self._account_filter(account_id),
            order="created_at.asc,id.asc",
        )
        return [AdCampaignRecord.model_validate(row) for row in rows]

    def upsert_funnel_month(
        self, account_id: str, year: int, month: int, values: Dict[str, Any]
    ) -> FunnelRecord:
        payload = {
            **values,
            "user_id": account_id,
            "year": year,
            "month": month,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        rows = self.client.upsert("funnels", payload, on_conflict="user_id,year,month")
        if not rows:
            return FunnelRecord.model_validate(payload)
        return FunnelRecord.model_validate(rows[0])
