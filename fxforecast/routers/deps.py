from fastapi import Request

from fxforecast.services.forecasting.service import ForecastingService


def get_forecasting_service(request: Request) -> ForecastingService:
    # Built once per app in create_app(); no module-level singleton
    return request.app.state.forecasting_service
