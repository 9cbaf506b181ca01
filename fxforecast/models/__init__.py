"""Pydantic domain models for the forecasting service."""

from .constants import (
    DEFAULT_FORECAST_TYPE,
    MAX_FORECAST_PERIODS,
    TREND_DIRECTIONS,
)  # re-export
from .forecast import (
    ForecastPeriod,
    ForecastRequest,
    ForecastResponse,
    MultiCurrencyForecastRequest,
    MultiCurrencyForecastResponse,
    TrendAnalysis,
)
from .rates import RatesResponse

__all__ = [
    "DEFAULT_FORECAST_TYPE",
    "MAX_FORECAST_PERIODS",
    "TREND_DIRECTIONS",
    "ForecastPeriod",
    "ForecastRequest",
    "ForecastResponse",
    "MultiCurrencyForecastRequest",
    "MultiCurrencyForecastResponse",
    "TrendAnalysis",
    "RatesResponse",
]
