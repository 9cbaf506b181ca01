from __future__ import annotations
import math
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator


class RatesResponse(BaseModel):
    """Current rates for one base currency as returned by the rate service."""

    base: str
    rates: Dict[str, float] = Field(default_factory=dict)
    timestamp: Optional[int] = Field(None, description="Unix seconds")
    provider: str = ""

    @field_validator("base")
    @classmethod
    def upper_base(cls, v: str) -> str:
        return v.upper()

    @field_validator("rates")
    @classmethod
    def positive_rates(cls, v: Dict[str, float]) -> Dict[str, float]:
        for code, rate in v.items():
            if not math.isfinite(rate) or rate <= 0:
                raise ValueError(f"rate for {code} must be a positive number")
        return v

    def rate_for(self, currency: str) -> Optional[float]:
        return self.rates.get(currency)
