from __future__ import annotations

from datetime import date
from typing import Generic, Optional, TypeVar

from funnelmetrics.shared.base import BaseSchema


T = TypeVar("T")

CALCULATION_VERSION = "v1"


class Meta(BaseSchema):
    as_of_date: str
    source: str
    time_window: str
    calculation_version: str = CALCULATION_VERSION
    account_id: Optional[str] = None
    range_start: Optional[str] = None
    range_end: Optional[str] = None
    currency_unit: Optional[str] = None


class ResponseEnvelope(BaseSchema, Generic[T]):
    data: T
    meta: Optional[Meta] = None


def build_meta(
    today: date,
    time_window: str,
    account_id: Optional[str] = None,
    range_start: Optional[str] = None,
    range_end: Optional[str] = None,
    source: str = "funnel_engine",
) -> Meta:
    return Meta(
        as_of_date=today.isoformat(),
        source=source,
        time_window=time_window,
        account_id=account_id,
        range_start=range_start,
        range_end=range_end,
        currency_unit="cents",
    )
