from __future__ import annotations
from datetime import datetime
from typing import Dict, List

from pydantic import BaseModel, Field, field_validator

from .constants import MAX_FORECAST_PERIODS, TREND_DIRECTIONS


class ForecastRequest(BaseModel):
    base_currency: str = ""
    target_currency: str = ""
    # Business checks (amount > 0, period bounds) live in the validator
    amount: float = 0
    periods: int = Field(0, description="Number of periods; 0 uses the configured default")
    forecast_type: str = Field(
        "", description="linear, exponential or moving_average (default linear)"
    )


class ForecastPeriod(BaseModel):
    period: int
    date: str
    rate: float
    amount: float
    change: float = 0
    change_percent: float = 0


class ForecastResponse(BaseModel):
    base_currency: str
    target_currency: str
    current_rate: float
    amount: float
    forecast_type: str
    periods: int
    forecasts: List[ForecastPeriod]
    generated_at: datetime
    confidence_score: float


class MultiCurrencyForecastRequest(BaseModel):
    base_currency: str = Field(..., min_length=1)
    currencies: List[str] = Field(..., min_length=1)
    amount: float = Field(..., gt=0, allow_inf_nan=False)
    periods: int = Field(0, ge=0, le=MAX_FORECAST_PERIODS)
    forecast_type: str = ""


class MultiCurrencyForecastResponse(BaseModel):
    base_currency: str
    amount: float
    forecast_type: str
    periods: int
    currencies: Dict[str, List[ForecastPeriod]]
    generated_at: datetime


class TrendAnalysis(BaseModel):
    currency_pair: str
    trend: str = Field(..., description="upward, downward or sideways")
    volatility: float
    average_rate: float
    min_rate: float
    max_rate: float
    analysis_period: int
    generated_at: datetime

    @field_validator("trend")
    @classmethod
    def valid_trend(cls, v: str) -> str:
        if v not in TREND_DIRECTIONS:
            raise ValueError("unknown trend direction")
        return v
