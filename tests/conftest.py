"""Shared fixtures: isolated settings, a counting fake rate source, app client."""
import asyncio
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from fxforecast.core.config import Settings
from fxforecast.main import create_app
from fxforecast.models.rates import RatesResponse
from fxforecast.services.forecasting.service import ForecastingService
from fxforecast.services.rates.base import RateSource

DEFAULT_RATES: Dict[str, Dict[str, float]] = {
    "USD": {"EUR": 1.2, "GBP": 0.73, "JPY": 110.0},
    "EUR": {"USD": 1.18, "GBP": 0.86},
}


class FakeRateSource(RateSource):
    """Serves canned rates and records every fetch."""

    name = "fake"

    def __init__(
        self,
        rates: Optional[Dict[str, Dict[str, float]]] = None,
        error: Optional[Exception] = None,
        block: bool = False,
    ):
        self.rates = rates if rates is not None else DEFAULT_RATES
        self.error = error
        self.block = block
        self.calls: List[str] = []
        self.started = asyncio.Event() if block else None

    async def get_rates(self, base_currency: str) -> RatesResponse:  # type: ignore[override]
        self.calls.append(base_currency)
        if self.block:
            self.started.set()
            await asyncio.Event().wait()
        if self.error is not None:
            raise self.error
        return RatesResponse(
            base=base_currency,
            rates=dict(self.rates.get(base_currency, {})),
            timestamp=1640995200,
            provider=self.name,
        )

    async def health_check(self) -> None:
        if self.error is not None:
            raise self.error


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        supported_currencies="USD,EUR,GBP,JPY,SEK",
        default_forecast_periods=5,
        rate_source="static",
        version="9.9.9",
    )


@pytest.fixture
def rate_source() -> FakeRateSource:
    return FakeRateSource()


@pytest.fixture
def service(settings, rate_source) -> ForecastingService:
    return ForecastingService(settings, rate_source)


@pytest.fixture
def client(settings, rate_source) -> TestClient:
    return TestClient(create_app(settings, rate_source=rate_source))
