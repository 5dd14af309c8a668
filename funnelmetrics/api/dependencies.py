from __future__ import annotations

from datetime import date
from functools import lru_cache

from funnelmetrics.repositories.funnel_repository import FunnelRepository
from funnelmetrics.services.insights_service import InsightsService


@lru_cache
def get_funnel_repository() -> FunnelRepository:
    return FunnelRepository()


def get_insights_service() -> InsightsService:
    return InsightsService(repository=get_funnel_repository())


def get_today() -> date:
    # Overridden in tests so every metric is computed against a fixed "now".
    return date.today()
