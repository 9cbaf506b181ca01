from __future__ import annotations

"""Rate source abstraction.

The forecasting service only needs "current rates for a base currency"; this
interface lets the HTTP client, the static table and test fakes plug in.
"""
from abc import ABC, abstractmethod

from fxforecast.models.rates import RatesResponse


class RateSource(ABC):
    name: str = "abstract"

    @abstractmethod
    async def get_rates(self, base_currency: str) -> RatesResponse:
        """Return target-currency -> rate for 1 unit of base_currency.

        Raises DependencyError when the rates cannot be obtained.
        """
        raise NotImplementedError

    async def health_check(self) -> None:
        """Raise DependencyError if the source is unusable."""
        return None

    async def aclose(self) -> None:
        return None
