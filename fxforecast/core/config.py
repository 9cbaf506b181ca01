from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SUPPORTED_CURRENCIES: List[str] = [
    "USD",
    "EUR",
    "GBP",
    "JPY",
    "CAD",
    "AUD",
    "CHF",
    "CNY",
    "SEK",
    "NZD",
]

_LOG_LEVELS = {"debug", "info", "warn", "warning", "error"}


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., PORT, LOG_LEVEL,
    CURRENCY_EXCHANGE_SERVICE_URL, DEFAULT_FORECAST_PERIODS, SUPPORTED_CURRENCIES).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Basic app metadata
    app_name: str = "Financial Forecasting Service"
    debug: bool = False
    version: str = "1.0.0"
    log_level: str = "info"

    # Server
    host: str = "0.0.0.0"
    port: int = 8082

    # Upstream currency exchange service
    currency_exchange_service_url: str = "http://localhost:8081"
    currency_exchange_timeout_seconds: float = Field(30.0, gt=0)
    # Allowed: 'http' (currency exchange service), 'static' (built-in fixed rates)
    rate_source: str = "http"

    # Forecasting
    default_forecast_periods: int = Field(30, ge=1, le=365)
    # Comma separated, e.g. "USD,EUR,GBP"; use `currencies` for the parsed list
    supported_currencies: str = ",".join(DEFAULT_SUPPORTED_CURRENCIES)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        level = str(v or "").strip().lower()
        return level if level in _LOG_LEVELS else "info"

    @field_validator("rate_source")
    @classmethod
    def valid_rate_source(cls, v: str) -> str:
        allowed = {"http", "static"}
        if v not in allowed:
            raise ValueError(f"Unsupported rate_source '{v}'. Allowed: {allowed}")
        return v

    @field_validator("currency_exchange_service_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("supported_currencies", mode="before")
    @classmethod
    def normalize_currencies(cls, v) -> str:
        items = v.split(",") if isinstance(v, str) else list(v or [])
        result = [str(c).strip().upper() for c in items if str(c).strip()]
        # No valid entries -> fall back to the default set
        return ",".join(result or DEFAULT_SUPPORTED_CURRENCIES)

    @property
    def currencies(self) -> List[str]:
        return self.supported_currencies.split(",")


@lru_cache
def get_settings() -> Settings:
    return Settings()
