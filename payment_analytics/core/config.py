"""Configuration management for the payment analytics engine."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from payment_analytics.models import Currency
from payment_analytics.schemas import TimeGranularity

_PROJECT_ROOT = Path(__file__).resolve().parent / "../.."


class Settings(BaseSettings):
    """Runtime settings, overridable through ``PAYMENT_ANALYTICS_*`` variables."""

    app_name: str = Field(default="Payment Analytics")
    version: str = Field(default="0.1.0")

    transactions_path: Path = Field(
        default=_PROJECT_ROOT / "data" / "transactions.json",
        description="JSON array of transactions loaded once at start-up.",
    )
    logging_config_path: Path = Field(default=_PROJECT_ROOT / "configs" / "logging.yaml")
    enable_metrics: bool = Field(default=True)

    default_currency: Currency = Field(default=Currency.MXN)
    percentage_decimals: int = Field(default=1, ge=0)
    week_starts_on: int = Field(
        default=6,
        ge=0,
        le=6,
        description="Weekday that opens a weekly bucket (Monday=0 ... Sunday=6).",
    )
    trend_granularity: TimeGranularity = Field(default=TimeGranularity.DAY)

    model_config = SettingsConfigDict(
        env_prefix="PAYMENT_ANALYTICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()


__all__ = ["Settings", "get_settings"]
