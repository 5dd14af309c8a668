from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Ignore unrelated env keys so a shared .env can carry frontend settings too.
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Funnel Metrics Backend"
    environment: str = "development"
    api_prefix: str = "/api/v1"
    cors_allow_origins: str = "http://localhost:5173,http://127.0.0.1:5173"
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    supabase_url: str = Field(..., alias="SUPABASE_URL")
    supabase_service_role_key: Optional[str] = Field(
        default=None, alias="SUPABASE_SERVICE_ROLE_KEY"
    )
    supabase_anon_key: Optional[str] = Field(default=None, alias="SUPABASE_ANON_KEY")
    supabase_page_size: int = Field(default=1000, alias="SUPABASE_PAGE_SIZE")

    default_bookings_goal: int = Field(default=50, alias="DEFAULT_BOOKINGS_GOAL")
    default_inquiry_to_call: float = Field(default=25.0, alias="DEFAULT_INQUIRY_TO_CALL")
    default_call_to_booking: float = Field(default=35.0, alias="DEFAULT_CALL_TO_BOOKING")
    forecast_max_horizon_months: int = Field(default=18, alias="FORECAST_MAX_HORIZON_MONTHS")


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_cors_origins() -> list[str]:
    settings = get_settings()
    return [origin.strip() for origin in settings.cors_allow_origins.split(",") if origin.strip()]
