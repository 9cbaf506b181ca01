"""Forecast router.

Endpoints:
    - POST /api/v1/forecast                      -> single pair forecast (cached)
    - POST /api/v1/forecast/multi-currency       -> several targets, one fetch
    - GET  /api/v1/forecast/trend/{base}/{target} -> placeholder trend analysis
    - DELETE /api/v1/forecast/cache              -> drop all cached forecasts

Service errors (ForecastError subclasses) are rendered by the app-level
exception handler, so handlers here stay thin.
"""
from fastapi import APIRouter, Depends, Query

from fxforecast.models.forecast import (
    ForecastRequest,
    ForecastResponse,
    MultiCurrencyForecastRequest,
    MultiCurrencyForecastResponse,
    TrendAnalysis,
)
from fxforecast.routers.deps import get_forecasting_service
from fxforecast.services.forecasting.service import ForecastingService

router = APIRouter(prefix="/api/v1/forecast", tags=["forecast"])


@router.post("", response_model=ForecastResponse, summary="Forecast one currency pair")
async def generate_forecast(
    payload: ForecastRequest,
    svc: ForecastingService = Depends(get_forecasting_service),
):
    return await svc.generate_forecast(payload)


@router.post(
    "/multi-currency",
    response_model=MultiCurrencyForecastResponse,
    summary="Forecast several target currencies against one base",
)
async def generate_multi_currency_forecast(
    payload: MultiCurrencyForecastRequest,
    svc: ForecastingService = Depends(get_forecasting_service),
):
    return await svc.generate_multi_currency_forecast(payload)


@router.get(
    "/trend/{base}/{target}",
    response_model=TrendAnalysis,
    summary="Trend analysis for a currency pair",
)
async def analyze_trend(
    base: str,
    target: str,
    periods: int = Query(30, description="Analysis window in periods"),
    svc: ForecastingService = Depends(get_forecasting_service),
):
    return await svc.analyze_trend(base.upper(), target.upper(), periods)


@router.delete("/cache", summary="Clear the forecast cache")
async def clear_cache(svc: ForecastingService = Depends(get_forecasting_service)):
    svc.clear_cache()
    return {"message": "Cache cleared successfully"}
