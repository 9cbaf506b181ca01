"""Domain constants for forecast requests.

Supported currencies come from configuration (see core.config); these are the
request-shape limits that do not vary per deployment.
"""

from typing import Set

MAX_FORECAST_PERIODS: int = 365
DEFAULT_FORECAST_TYPE: str = "linear"
TREND_DIRECTIONS: Set[str] = {"upward", "downward", "sideways"}
