"""Forecasting error taxonomy.

Each error carries the HTTP status and short tag the API layer uses when it
renders the failure, so client-caused kinds (4xx) stay distinguishable from
upstream-caused kinds.
"""

from __future__ import annotations


class ForecastError(Exception):
    """Base exception for forecasting failures."""

    status_code: int = 500
    error: str = "forecast_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ForecastError):
    """Request failed a structural or business check."""

    status_code = 400
    error = "validation_error"


class UnsupportedModelError(ForecastError):
    """Forecast type is not one of the known models."""

    status_code = 400
    error = "unsupported_forecast_type"

    def __init__(self, forecast_type: str):
        super().__init__(f"unsupported forecast type: {forecast_type}")
        self.forecast_type = forecast_type


class CurrencyNotFoundError(ForecastError):
    """Upstream answered but had no rate for the requested currency."""

    status_code = 404
    error = "currency_not_found"

    def __init__(self, currency: str):
        super().__init__(f"target currency {currency} not found in exchange rates")
        self.currency = currency


class DependencyError(ForecastError):
    """Upstream rate source unreachable, non-OK, or returned garbage."""

    status_code = 502
    error = "dependency_error"


class RateSourceTimeoutError(DependencyError):
    status_code = 504
    error = "dependency_timeout"
