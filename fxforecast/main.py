from contextlib import asynccontextmanager
from datetime import datetime, timezone

import httpx
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings, Settings
from .core.logging import (
    init_logging,
    request_context_middleware,
    security_headers_middleware,
)
from .core import errors
from .routers import currencies, forecast, health
from .services.forecasting.errors import ForecastError
from .services.forecasting.service import ForecastingService
from .services.rates.base import RateSource
from .services.rates.providers import make_rate_source


def create_app(
    settings_override: Settings | None = None,
    rate_source: RateSource | None = None,
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment. Falls back to cached get_settings().
    rate_source: inject a RateSource (tests, fakes); otherwise one is built
    from settings.rate_source and closed on shutdown.
    """
    settings = settings_override or get_settings()
    # Initialize logging early
    init_logging(level="debug" if settings.debug else settings.log_level)

    http_client: httpx.AsyncClient | None = None
    if rate_source is None:
        http_client = httpx.AsyncClient(timeout=settings.currency_exchange_timeout_seconds)
        rate_source = make_rate_source(settings.rate_source, settings, client=http_client)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            yield
        finally:
            if http_client is not None:
                await http_client.aclose()

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.started_at = datetime.now(timezone.utc)
    app.state.forecasting_service = ForecastingService(settings, rate_source)

    # Middleware (request id / structured logging, security headers, CORS)
    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(request_context_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(ForecastError, errors.forecast_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(forecast.router)
    app.include_router(currencies.router)

    @app.get("/")
    async def root():
        return {"message": settings.app_name, "version": settings.version}

    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
