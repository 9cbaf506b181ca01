from __future__ import annotations

import math
from typing import Iterable

from fxforecast.models.constants import MAX_FORECAST_PERIODS
from fxforecast.models.forecast import ForecastRequest
from .errors import ValidationError


def validate_forecast_request(
    req: ForecastRequest, supported_currencies: Iterable[str]
) -> None:
    """Raise ValidationError for the first failed check; the request is untouched.

    periods == 0 and an empty forecast_type are valid here; defaults are
    applied afterwards by the service.
    """
    if not req.base_currency:
        raise ValidationError("base currency is required")
    if not req.target_currency:
        raise ValidationError("target currency is required")
    if not math.isfinite(req.amount):
        raise ValidationError("amount must be a finite number")
    if req.amount <= 0:
        raise ValidationError("amount must be greater than 0")
    if req.periods < 0:
        raise ValidationError("periods cannot be negative")
    if req.periods > MAX_FORECAST_PERIODS:
        raise ValidationError(f"periods cannot exceed {MAX_FORECAST_PERIODS}")

    supported = set(supported_currencies)
    if req.base_currency not in supported:
        raise ValidationError(f"base currency {req.base_currency} is not supported")
    if req.target_currency not in supported:
        raise ValidationError(
            f"target currency {req.target_currency} is not supported"
        )
