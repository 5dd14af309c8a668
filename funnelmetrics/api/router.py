from __future__ import annotations

from fastapi import APIRouter

from funnelmetrics.api.attribution import router as attribution_router
from funnelmetrics.api.forecast import router as forecast_router
from funnelmetrics.api.funnel import router as funnel_router
from funnelmetrics.api.health import router as health_router


api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(funnel_router)
api_router.include_router(attribution_router)
api_router.include_router(forecast_router)
