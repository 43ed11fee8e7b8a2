"""Engine configuration via pydantic-settings."""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="BOOKING_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Money (whole currency units, no fractional amounts), stamped on breakdowns
    currency: str = Field(default="XOF", pattern="^[A-Z]{3}$")

    # VAT applied to the guest service fee and the host commission only
    vat_rate: Decimal = Field(default=Decimal("0.20"), ge=0, le=1)

    # Expiry windows used by the stale-pending job
    pending_booking_ttl_hours: int = Field(default=24, ge=1)
    modification_request_ttl_hours: int = Field(default=48, ge=1)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
