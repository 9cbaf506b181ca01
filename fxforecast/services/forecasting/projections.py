from __future__ import annotations

"""Closed-form rate projection models.

Every model is a pure function ``(current_rate, amount, periods) ->
(periods list, confidence)``. Rates are recomputed from the closed form for
each period index (never from the previous period's rounded output), then
rounded for display: rate/change to 4 places, amount/change percent to 2.

Models:
    - linear:          r * (1 + 0.001 n)              confidence 0.7
    - exponential:     r * (1 + 0.002) ** n           confidence 0.6
    - moving_average:  r * (1 + sin(0.1 n) * 0.01)    confidence 0.5
"""
import math
from datetime import date, timedelta
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from fxforecast.models.forecast import ForecastPeriod
from fxforecast.services.money import round2, round4
from .errors import UnsupportedModelError

LINEAR_TREND = 0.001  # 0.1% drift per period
EXPONENTIAL_GROWTH = 0.002  # 0.2% compounded growth per period
OSCILLATION_AMPLITUDE = 0.01  # 1% swing
OSCILLATION_FREQUENCY = 0.1

LINEAR_CONFIDENCE = 0.7
EXPONENTIAL_CONFIDENCE = 0.6
MOVING_AVERAGE_CONFIDENCE = 0.5

RateFormula = Callable[[float, int], float]
ProjectionResult = Tuple[List[ForecastPeriod], float]


class ForecastModel(str, Enum):
    LINEAR = "linear"
    EXPONENTIAL = "exponential"
    MOVING_AVERAGE = "moving_average"

    @classmethod
    def parse(cls, name: str) -> "ForecastModel":
        try:
            return cls(name)
        except ValueError:
            raise UnsupportedModelError(name) from None


def _linear_rate(current_rate: float, n: int) -> float:
    return current_rate * (1 + LINEAR_TREND * n)


def _exponential_rate(current_rate: float, n: int) -> float:
    return current_rate * math.pow(1 + EXPONENTIAL_GROWTH, n)


def _oscillating_rate(current_rate: float, n: int) -> float:
    variation = math.sin(n * OSCILLATION_FREQUENCY) * OSCILLATION_AMPLITUDE
    return current_rate * (1 + variation)


def _project(
    formula: RateFormula,
    current_rate: float,
    amount: float,
    periods: int,
    today: Optional[date] = None,
) -> List[ForecastPeriod]:
    start = today or date.today()
    forecasts: List[ForecastPeriod] = []
    for n in range(1, periods + 1):
        rate = formula(current_rate, n)
        change = change_percent = 0.0
        if n > 1:
            prev_rate = formula(current_rate, n - 1)
            change = rate - prev_rate
            change_percent = change / prev_rate * 100
        forecasts.append(
            ForecastPeriod(
                period=n,
                date=(start + timedelta(days=n)).isoformat(),
                rate=round4(rate),
                amount=round2(amount * rate),
                change=round4(change),
                change_percent=round2(change_percent),
            )
        )
    return forecasts


def linear_forecast(
    current_rate: float, amount: float, periods: int, today: Optional[date] = None
) -> ProjectionResult:
    return _project(_linear_rate, current_rate, amount, periods, today), LINEAR_CONFIDENCE


def exponential_forecast(
    current_rate: float, amount: float, periods: int, today: Optional[date] = None
) -> ProjectionResult:
    return (
        _project(_exponential_rate, current_rate, amount, periods, today),
        EXPONENTIAL_CONFIDENCE,
    )


def moving_average_forecast(
    current_rate: float, amount: float, periods: int, today: Optional[date] = None
) -> ProjectionResult:
    """Oscillating projection around the current rate; not monotonic."""
    return (
        _project(_oscillating_rate, current_rate, amount, periods, today),
        MOVING_AVERAGE_CONFIDENCE,
    )


_MODEL_FUNCTIONS: Dict[ForecastModel, Callable[..., ProjectionResult]] = {
    ForecastModel.LINEAR: linear_forecast,
    ForecastModel.EXPONENTIAL: exponential_forecast,
    ForecastModel.MOVING_AVERAGE: moving_average_forecast,
}


def run_model(
    model: ForecastModel,
    current_rate: float,
    amount: float,
    periods: int,
    today: Optional[date] = None,
) -> ProjectionResult:
    return _MODEL_FUNCTIONS[model](current_rate, amount, periods, today)
