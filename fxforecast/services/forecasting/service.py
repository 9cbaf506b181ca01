from __future__ import annotations

"""Forecasting service.

Pipeline for a single pair: validate -> apply defaults -> cache lookup ->
fetch rates -> run model -> store -> return. Nothing is retried and nothing is
cached unless the response was fully assembled; a cancelled fetch simply
propagates asyncio.CancelledError.

Multi-currency forecasts always fetch fresh rates and are never cached; targets
the rate source does not know are skipped rather than failing the request.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from fxforecast.core.config import Settings
from fxforecast.models.constants import DEFAULT_FORECAST_TYPE
from fxforecast.models.forecast import (
    ForecastPeriod,
    ForecastRequest,
    ForecastResponse,
    MultiCurrencyForecastRequest,
    MultiCurrencyForecastResponse,
    TrendAnalysis,
)
from fxforecast.models.rates import RatesResponse
from fxforecast.services.rates.base import RateSource
from .cache import ForecastCache, make_cache_key
from .errors import CurrencyNotFoundError, DependencyError
from .projections import ForecastModel, run_model
from .validation import validate_forecast_request

logger = logging.getLogger(__name__)

TREND_BAND = 0.05
PLACEHOLDER_VOLATILITY = 0.05


class ForecastingService:
    def __init__(
        self,
        settings: Settings,
        rate_source: RateSource,
        cache: Optional[ForecastCache] = None,
    ):
        self._settings = settings
        self._rate_source = rate_source
        self._cache = cache if cache is not None else ForecastCache()

    @property
    def supported_currencies(self) -> List[str]:
        return list(self._settings.currencies)

    @property
    def cache(self) -> ForecastCache:
        return self._cache

    # Internal --------------------------------------------------
    def _default_periods(self, periods: int) -> int:
        return periods or self._settings.default_forecast_periods

    @staticmethod
    def _default_type(forecast_type: str) -> str:
        return forecast_type or DEFAULT_FORECAST_TYPE

    async def _fetch_rates(self, base_currency: str) -> RatesResponse:
        try:
            return await self._rate_source.get_rates(base_currency)
        except PydanticValidationError as e:
            raise DependencyError(
                f"unusable exchange rates for {base_currency}: {e}"
            ) from e

    # Public API -----------------------------------------------
    async def generate_forecast(self, req: ForecastRequest) -> ForecastResponse:
        validate_forecast_request(req, self._settings.currencies)
        req = req.model_copy(
            update={
                "periods": self._default_periods(req.periods),
                "forecast_type": self._default_type(req.forecast_type),
            }
        )

        cache_key = make_cache_key(
            req.base_currency,
            req.target_currency,
            req.forecast_type,
            req.amount,
            req.periods,
        )
        cached = self._cache.lookup(cache_key)
        if cached is not None:
            logger.debug(
                "returning cached forecast for %s/%s",
                req.base_currency,
                req.target_currency,
            )
            return cached

        rates = await self._fetch_rates(req.base_currency)
        current_rate = rates.rate_for(req.target_currency)
        if current_rate is None:
            raise CurrencyNotFoundError(req.target_currency)

        model = ForecastModel.parse(req.forecast_type)
        forecasts, confidence = run_model(model, current_rate, req.amount, req.periods)

        response = ForecastResponse(
            base_currency=req.base_currency,
            target_currency=req.target_currency,
            current_rate=current_rate,
            amount=req.amount,
            forecast_type=model.value,
            periods=req.periods,
            forecasts=forecasts,
            generated_at=datetime.now(timezone.utc),
            confidence_score=confidence,
        )
        self._cache.store(cache_key, response)

        logger.info(
            "generated %s forecast for %s/%s with %d periods",
            model.value,
            req.base_currency,
            req.target_currency,
            req.periods,
        )
        return response

    async def generate_multi_currency_forecast(
        self, req: MultiCurrencyForecastRequest
    ) -> MultiCurrencyForecastResponse:
        periods = self._default_periods(req.periods)
        # Unknown model names are rejected up front, same as the single-pair path
        model = ForecastModel.parse(self._default_type(req.forecast_type))

        rates = await self._fetch_rates(req.base_currency)

        currency_forecasts: Dict[str, List[ForecastPeriod]] = {}
        for currency in req.currencies:
            rate = rates.rate_for(currency)
            if rate is None:
                logger.warning(
                    "currency %s not found in exchange rates, skipping", currency
                )
                continue
            forecasts, _ = run_model(model, rate, req.amount, periods)
            currency_forecasts[currency] = forecasts

        logger.info(
            "generated multi-currency forecast for %d currencies",
            len(currency_forecasts),
        )
        return MultiCurrencyForecastResponse(
            base_currency=req.base_currency,
            amount=req.amount,
            forecast_type=model.value,
            periods=periods,
            currencies=currency_forecasts,
            generated_at=datetime.now(timezone.utc),
        )

    async def analyze_trend(
        self, base_currency: str, target_currency: str, periods: int
    ) -> TrendAnalysis:
        """Placeholder analysis around the current rate.

        There is no historical series, so the trend is always "sideways" and
        min/max are a fixed +/-5% band.
        """
        rates = await self._fetch_rates(base_currency)
        rate = rates.rate_for(target_currency)
        if rate is None:
            raise CurrencyNotFoundError(target_currency)

        return TrendAnalysis(
            currency_pair=f"{base_currency}/{target_currency}",
            trend="sideways",
            volatility=PLACEHOLDER_VOLATILITY,
            average_rate=rate,
            min_rate=rate * (1 - TREND_BAND),
            max_rate=rate * (1 + TREND_BAND),
            analysis_period=periods,
            generated_at=datetime.now(timezone.utc),
        )

    async def get_current_rates(self, base_currency: str) -> RatesResponse:
        return await self._fetch_rates(base_currency)

    async def check_rate_source(self) -> None:
        await self._rate_source.health_check()

    def clear_cache(self) -> None:
        self._cache.clear()
        logger.info("forecast cache cleared")
