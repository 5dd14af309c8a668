"""Monthly reconciliation of stored funnel snapshots against live records.

Stored funnel rows carry the manually entered counts. Closes and booked
revenue can also be derived from bookings, and cash from payments. For those
three fields the stored value is used only when its ``*_manual`` flag is set;
otherwise the derived ("dynamic") value wins, even when it is zero and the
stored value is not.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set

from funnelmetrics.models.records import (
    BookingRecord,
    FunnelRecord,
    PaymentRecord,
    ServiceTypeRecord,
)
from funnelmetrics.schemas.common import MonthRange
from funnelmetrics.schemas.funnel import ReconciledMonth
from funnelmetrics.shared.time import MONTH_NAMES, month_from_index, parse_month_index

logger = logging.getLogger(__name__)


@dataclass
class DynamicMonth:
    closes: int = 0
    bookings: int = 0
    cash: int = 0


def tracked_service_type_ids(service_types: Iterable[ServiceTypeRecord]) -> Set[str]:
    return {service_type.id for service_type in service_types if service_type.tracks_in_funnel}


def compute_dynamic_months(
    bookings: Iterable[BookingRecord],
    payments: Iterable[PaymentRecord],
    service_types: Iterable[ServiceTypeRecord],
    month_range: MonthRange,
) -> Dict[int, DynamicMonth]:
    tracked_ids = tracked_service_type_ids(service_types)
    dynamic: Dict[int, DynamicMonth] = defaultdict(DynamicMonth)
    skipped = 0

    for booking in bookings:
        if booking.service_type_id not in tracked_ids:
            continue
        index = parse_month_index(booking.date_booked)
        if index is None:
            skipped += 1
            continue
        if not month_range.contains(index):
            continue
        bucket = dynamic[index]
        bucket.closes += 1
        bucket.bookings += booking.booked_revenue

    for payment in payments:
        index = parse_month_index(payment.resolved_date())
        if index is None:
            skipped += 1
            continue
        if not month_range.contains(index):
            continue
        dynamic[index].cash += payment.amount

    if skipped:
        logger.debug("skipped %d bookings/payments without a usable date", skipped)
    return dict(dynamic)


def index_funnel_records(records: Iterable[FunnelRecord]) -> Dict[int, FunnelRecord]:
    by_month: Dict[int, FunnelRecord] = {}
    for record in records:
        index = record.month_index()
        if index is None:
            continue
        # One row per month is a storage invariant; keep the first if it is broken.
        by_month.setdefault(index, record)
    return by_month


def synthetic_month_id(year: int, month: int) -> str:
    return f"{year}_{MONTH_NAMES[month - 1]}"


def reconcile_month(
    index: int,
    stored: Optional[FunnelRecord],
    dynamic: Optional[DynamicMonth],
) -> ReconciledMonth:
    year, month = month_from_index(index)
    derived = dynamic or DynamicMonth()
    closes_manual = bool(stored and stored.closes_manual)
    bookings_manual = bool(stored and stored.bookings_manual)
    cash_manual = bool(stored and stored.cash_manual)
    return ReconciledMonth(
        id=(stored.id if stored and stored.id else synthetic_month_id(year, month)),
        year=year,
        month=month,
        month_index=index,
        inquiries=stored.inquiries if stored else 0,
        calls_booked=stored.calls_booked if stored else 0,
        calls_taken=stored.calls_taken if stored else 0,
        closes=stored.closes if closes_manual else derived.closes,
        bookings=stored.bookings if bookings_manual else derived.bookings,
        cash=stored.cash if cash_manual else derived.cash,
        closes_manual=closes_manual,
        bookings_manual=bookings_manual,
        cash_manual=cash_manual,
        has_stored_record=stored is not None,
    )


def reconcile_months(
    funnel_records: Iterable[FunnelRecord],
    bookings: Iterable[BookingRecord],
    payments: Iterable[PaymentRecord],
    service_types: Iterable[ServiceTypeRecord],
    month_range: MonthRange,
    full_year: Optional[bool] = None,
) -> List[ReconciledMonth]:
    """One reconciled row per month, ordered by month.

    In full-year mode every month of the range is materialized, zero-filled
    where nothing is stored. In window mode only months with a stored funnel
    row inside the range appear. ``full_year`` defaults to the range's own
    flag; an unbounded range is always reconciled in window mode.
    """
    zero_fill = month_range.full_year if full_year is None else full_year
    stored_by_month = index_funnel_records(funnel_records)
    dynamic = compute_dynamic_months(bookings, payments, service_types, month_range)

    if zero_fill and not month_range.is_unbounded:
        indexes = range(month_range.start, month_range.end + 1)
    else:
        indexes = sorted(index for index in stored_by_month if month_range.contains(index))

    return [
        reconcile_month(index, stored_by_month.get(index), dynamic.get(index))
        for index in indexes
    ]
