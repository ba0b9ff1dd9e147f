"""Application configuration via pydantic-settings."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "CrewStay Booking Engine"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 4

    # Database
    database_url: str = "sqlite+aiosqlite:///./crewstay.db"
    db_echo: bool = False

    # CORS
    cors_origins: List[str] = ["http://localhost:3000"]

    # Pricing (all money in pence)
    currency: str = "GBP"
    pricing_version: str = "all_in_v2_tiers_cap_firstfree"
    stripe_var_bps: int = Field(default=150, ge=0)
    stripe_fixed_minor: int = Field(default=20, ge=0)
    min_guest_total_minor: int = Field(default=500, ge=0)

    # Commission tiers: 12% for 1-6 nights, 10% for 7-27, 8% for 28+
    commission_short_stay_bps: int = 1200
    commission_week_stay_bps: int = 1000
    commission_month_stay_bps: int = 800
    commission_week_min_nights: int = 7
    commission_month_min_nights: int = 28
    first_booking_commission_bps: int = 0
    platform_fee_cap_minor: Optional[int] = 15000  # £150 per booking

    # Availability
    availability_max_range_days: int = 120

    # External calendars
    ical_fetch_timeout_seconds: float = 10.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
