from __future__ import annotations

"""Concrete rate sources and factory.

'http' talks to the currency exchange service; 'static' serves a fixed
USD-anchored table (cross rates computed for other bases) for local runs.
"""
import logging
import time
from typing import Dict, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from fxforecast.core.config import Settings
from fxforecast.models.rates import RatesResponse
from fxforecast.services.forecasting.errors import (
    DependencyError,
    RateSourceTimeoutError,
)
from fxforecast.services.http_client import HttpError, HttpTimeoutError, get_json
from .base import RateSource

logger = logging.getLogger(__name__)

# Units of currency per 1 USD
_STATIC_USD_RATES: Dict[str, float] = {
    "USD": 1.0,
    "EUR": 0.85,
    "GBP": 0.73,
    "JPY": 110.0,
    "CAD": 1.25,
    "AUD": 1.35,
    "CHF": 0.92,
    "CNY": 6.45,
    "SEK": 8.6,
    "NZD": 1.42,
}


class StaticRateSource(RateSource):
    name = "static"

    def __init__(self, usd_rates: Optional[Dict[str, float]] = None):
        self._usd_rates = dict(usd_rates or _STATIC_USD_RATES)

    async def get_rates(self, base_currency: str) -> RatesResponse:  # type: ignore[override]
        base = base_currency.upper()
        anchor = self._usd_rates.get(base)
        if not anchor:
            raise DependencyError(f"static rate table has no base currency {base}")
        rates = {
            code: value / anchor
            for code, value in self._usd_rates.items()
            if code != base
        }
        return RatesResponse(
            base=base, rates=rates, timestamp=int(time.time()), provider=self.name
        )


class HttpRateSource(RateSource):
    """Client for the currency exchange service.

    No retries and no caching of raw rates: one failed call is one failed
    forecast. Task cancellation aborts the in-flight request.
    """

    name = "http"

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def _fetch(self, url: str) -> RatesResponse:
        logger.debug("fetching rates from %s", url)
        try:
            data = await get_json(self._client, url, timeout=self.timeout)
        except HttpTimeoutError as e:
            raise RateSourceTimeoutError(f"failed to fetch exchange rates: {e}") from e
        except HttpError as e:
            raise DependencyError(f"failed to fetch exchange rates: {e}") from e
        try:
            return RatesResponse.model_validate(data)
        except PydanticValidationError as e:
            raise DependencyError(
                f"failed to fetch exchange rates: unexpected payload: {e}"
            ) from e

    async def get_rates(self, base_currency: str) -> RatesResponse:  # type: ignore[override]
        rates = await self._fetch(f"{self.base_url}/api/v1/rates/{base_currency}")
        logger.debug("fetched rates for base currency %s", base_currency)
        return rates

    async def get_rates_with_query(self, base_currency: str) -> RatesResponse:
        return await self._fetch(f"{self.base_url}/api/v1/rates?base={base_currency}")

    async def health_check(self) -> None:
        url = f"{self.base_url}/health"
        try:
            resp = await self._client.get(url, timeout=self.timeout)
        except httpx.TimeoutException as e:
            raise RateSourceTimeoutError(f"health check timed out: {e}") from e
        except httpx.HTTPError as e:
            raise DependencyError(f"health check failed: {e}") from e
        if resp.status_code != httpx.codes.OK:
            raise DependencyError(
                f"currency service health check failed with status: {resp.status_code}"
            )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


_SOURCE_REGISTRY = {
    "static": lambda settings, client: StaticRateSource(),
    "http": lambda settings, client: HttpRateSource(
        settings.currency_exchange_service_url,
        timeout=settings.currency_exchange_timeout_seconds,
        client=client,
    ),
}


def make_rate_source(
    kind: str, settings: Settings, client: Optional[httpx.AsyncClient] = None
) -> RateSource:
    factory = _SOURCE_REGISTRY.get(kind)
    if not factory:
        raise ValueError(f"Unknown rate source kind '{kind}'")
    return factory(settings, client)
