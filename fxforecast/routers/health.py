from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from fxforecast.routers.deps import get_forecasting_service
from fxforecast.services.forecasting.errors import DependencyError
from fxforecast.services.forecasting.service import ForecastingService

router = APIRouter(prefix="/health", tags=["health"])


class HealthCheck(BaseModel):
    status: str
    timestamp: datetime
    version: str
    uptime: str


def _format_uptime(seconds: float) -> str:
    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h{minutes}m{secs}s"


@router.get("", response_model=HealthCheck, summary="Service liveness")
async def health(request: Request):
    now = datetime.now(timezone.utc)
    started_at: datetime = request.app.state.started_at
    return HealthCheck(
        status="healthy",
        timestamp=now,
        version=request.app.version,
        uptime=_format_uptime((now - started_at).total_seconds()),
    )


@router.get("/upstream", summary="Rate source reachability")
async def upstream_health(svc: ForecastingService = Depends(get_forecasting_service)):
    try:
        await svc.check_rate_source()
    except DependencyError as e:
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "detail": e.message},
        )
    return {"status": "healthy"}
