from fastapi import APIRouter, Depends

from fxforecast.models.rates import RatesResponse
from fxforecast.routers.deps import get_forecasting_service
from fxforecast.services.forecasting.service import ForecastingService

router = APIRouter(prefix="/api/v1/currencies", tags=["currencies"])


@router.get("", summary="List supported currencies")
async def list_currencies(svc: ForecastingService = Depends(get_forecasting_service)):
    return {"currencies": svc.supported_currencies}


@router.get(
    "/rates/{base}",
    response_model=RatesResponse,
    summary="Current upstream rates for a base currency",
)
async def current_rates(
    base: str, svc: ForecastingService = Depends(get_forecasting_service)
):
    return await svc.get_current_rates(base.upper())
