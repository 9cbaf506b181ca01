"""Money / rounding helpers.

Centralized so every forecast model emits identically rounded rates and
amounts: half away from zero, applied to the shortest decimal form of the
float (so 1.00005 rounds to 1.0001).
"""

from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP


def _quantize(value: float, exp: str) -> float:
    return float(Decimal(str(value)).quantize(Decimal(exp), rounding=ROUND_HALF_UP))


def round2(value: float) -> float:
    return _quantize(value, "0.01")


def round4(value: float) -> float:
    return _quantize(value, "0.0001")
