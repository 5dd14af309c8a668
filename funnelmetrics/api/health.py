from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends

from funnelmetrics.api.dependencies import get_today
from funnelmetrics.shared.response import ResponseEnvelope, build_meta


router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(today: date = Depends(get_today)) -> ResponseEnvelope[dict]:
    return ResponseEnvelope(
        data={"status": "ok"}, meta=build_meta(today, time_window="now", source="system")
    )
