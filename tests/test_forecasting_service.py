"""Forecasting service tests: caching, defaults, error kinds, multi-currency, trend."""
import asyncio
import logging

import pytest

from conftest import FakeRateSource
from fxforecast.models.forecast import ForecastRequest, MultiCurrencyForecastRequest
from fxforecast.services.forecasting.cache import ForecastCache
from fxforecast.services.forecasting.errors import (
    CurrencyNotFoundError,
    DependencyError,
    UnsupportedModelError,
    ValidationError,
)
from fxforecast.services.forecasting.service import ForecastingService


def _request(**overrides) -> ForecastRequest:
    data = dict(
        base_currency="USD",
        target_currency="EUR",
        amount=1000,
        periods=5,
        forecast_type="linear",
    )
    data.update(overrides)
    return ForecastRequest(**data)


class TestGenerateForecast:
    @pytest.mark.asyncio
    async def test_linear_scenario(self, service):
        resp = await service.generate_forecast(_request())
        assert resp.current_rate == 1.2
        assert resp.forecast_type == "linear"
        assert resp.confidence_score == 0.7
        assert resp.periods == 5
        assert resp.forecasts[0].rate == 1.2012
        assert resp.forecasts[0].amount == 1201.2
        assert resp.forecasts[4].rate == 1.206

    @pytest.mark.asyncio
    async def test_exponential_scenario(self, service):
        resp = await service.generate_forecast(_request(forecast_type="exponential"))
        rates = [f.rate for f in resp.forecasts]
        assert rates[0] == 1.2024
        assert rates == sorted(set(rates))
        assert resp.confidence_score == 0.6

    @pytest.mark.asyncio
    async def test_defaults_applied(self, service, settings):
        req = _request(periods=0, forecast_type="")
        resp = await service.generate_forecast(req)
        assert resp.periods == settings.default_forecast_periods
        assert len(resp.forecasts) == settings.default_forecast_periods
        assert resp.forecast_type == "linear"
        # caller's request is left alone
        assert req.periods == 0
        assert req.forecast_type == ""

    @pytest.mark.asyncio
    async def test_second_identical_call_hits_cache(self, service, rate_source):
        first = await service.generate_forecast(_request())
        second = await service.generate_forecast(_request())
        assert rate_source.calls == ["USD"]
        assert second == first

    @pytest.mark.asyncio
    async def test_defaulted_and_explicit_share_cache(self, service, rate_source):
        await service.generate_forecast(_request(periods=0, forecast_type=""))
        await service.generate_forecast(_request(periods=5, forecast_type="linear"))
        assert len(rate_source.calls) == 1

    @pytest.mark.asyncio
    async def test_truncated_amounts_share_cache(self, service, rate_source):
        first = await service.generate_forecast(_request(amount=1000.4))
        second = await service.generate_forecast(_request(amount=1000.9))
        assert len(rate_source.calls) == 1
        assert second.amount == first.amount == 1000.4

    @pytest.mark.parametrize(
        "overrides",
        [
            {"base_currency": "EUR", "target_currency": "GBP"},
            {"target_currency": "GBP"},
            {"forecast_type": "moving_average"},
            {"amount": 1001},
            {"periods": 6},
        ],
    )
    @pytest.mark.asyncio
    async def test_changed_field_misses_cache(self, service, rate_source, overrides):
        await service.generate_forecast(_request())
        await service.generate_forecast(_request(**overrides))
        assert len(rate_source.calls) == 2

    @pytest.mark.asyncio
    async def test_clear_cache_forces_refetch(self, service, rate_source):
        await service.generate_forecast(_request())
        service.clear_cache()
        await service.generate_forecast(_request())
        assert len(rate_source.calls) == 2

    @pytest.mark.asyncio
    async def test_mutating_response_does_not_touch_cache(self, service):
        resp = await service.generate_forecast(_request())
        resp.forecasts[0].rate = 42.0
        resp.forecasts.pop()
        again = await service.generate_forecast(_request())
        assert again.forecasts[0].rate == 1.2012
        assert len(again.forecasts) == 5

    @pytest.mark.asyncio
    async def test_validation_failure_skips_fetch(self, service, rate_source):
        with pytest.raises(ValidationError):
            await service.generate_forecast(_request(amount=0))
        with pytest.raises(ValidationError):
            await service.generate_forecast(_request(target_currency="XAU"))
        assert rate_source.calls == []

    @pytest.mark.asyncio
    async def test_unsupported_model(self, service):
        with pytest.raises(UnsupportedModelError) as exc:
            await service.generate_forecast(_request(forecast_type="quadratic"))
        assert exc.value.forecast_type == "quadratic"
        assert len(service.cache) == 0

    @pytest.mark.asyncio
    async def test_target_missing_from_rates(self, service):
        # SEK is configured but the rate source has no quote for it
        with pytest.raises(CurrencyNotFoundError) as exc:
            await service.generate_forecast(_request(target_currency="SEK"))
        assert str(exc.value) == "target currency SEK not found in exchange rates"

    @pytest.mark.asyncio
    async def test_upstream_failure_not_cached(self, settings):
        source = FakeRateSource(error=DependencyError("currency service returned status 500"))
        svc = ForecastingService(settings, source)
        for _ in range(2):
            with pytest.raises(DependencyError):
                await svc.generate_forecast(_request())
        assert len(source.calls) == 2
        assert len(svc.cache) == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_rate", [0.0, -1.2, float("nan")])
    async def test_unusable_rate_is_dependency_error(self, settings, bad_rate):
        source = FakeRateSource(rates={"USD": {"EUR": bad_rate}})
        svc = ForecastingService(settings, source)
        with pytest.raises(DependencyError, match="unusable exchange rates for USD"):
            await svc.generate_forecast(_request(periods=3))
        assert len(svc.cache) == 0

    @pytest.mark.asyncio
    async def test_cancellation_leaves_cache_empty(self, settings):
        source = FakeRateSource(block=True)
        svc = ForecastingService(settings, source)
        task = asyncio.create_task(svc.generate_forecast(_request()))
        await source.started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert len(svc.cache) == 0

    @pytest.mark.asyncio
    async def test_deadline_leaves_cache_empty(self, settings):
        source = FakeRateSource(block=True)
        svc = ForecastingService(settings, source)
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(svc.generate_forecast(_request()), timeout=0.05)
        assert len(svc.cache) == 0

    @pytest.mark.asyncio
    async def test_instances_do_not_share_cache(self, settings, rate_source):
        first = ForecastingService(settings, rate_source)
        second = ForecastingService(settings, rate_source)
        await first.generate_forecast(_request())
        await second.generate_forecast(_request())
        assert len(rate_source.calls) == 2

    @pytest.mark.asyncio
    async def test_injected_cache_is_used(self, settings, rate_source):
        cache = ForecastCache()
        svc = ForecastingService(settings, rate_source, cache=cache)
        await svc.generate_forecast(_request())
        assert "USD_EUR_linear_1000_5" in cache


class TestGenerateMultiCurrencyForecast:
    @pytest.mark.asyncio
    async def test_skips_currencies_missing_from_rates(self, service, rate_source, caplog):
        req = MultiCurrencyForecastRequest(
            base_currency="USD", currencies=["EUR", "GBP", "ZZZ"], amount=1000, periods=3
        )
        with caplog.at_level(logging.WARNING):
            resp = await service.generate_multi_currency_forecast(req)
        assert set(resp.currencies) == {"EUR", "GBP"}
        assert all(len(v) == 3 for v in resp.currencies.values())
        assert rate_source.calls == ["USD"]
        assert "ZZZ" in caplog.text

    @pytest.mark.asyncio
    async def test_defaults_applied(self, service, settings):
        req = MultiCurrencyForecastRequest(base_currency="USD", currencies=["EUR"], amount=10)
        resp = await service.generate_multi_currency_forecast(req)
        assert resp.periods == settings.default_forecast_periods
        assert resp.forecast_type == "linear"
        assert resp.currencies["EUR"][0].rate == 1.2012

    @pytest.mark.asyncio
    async def test_never_cached(self, service, rate_source):
        req = MultiCurrencyForecastRequest(base_currency="USD", currencies=["EUR"], amount=10)
        await service.generate_multi_currency_forecast(req)
        await service.generate_multi_currency_forecast(req)
        assert len(rate_source.calls) == 2
        assert len(service.cache) == 0

    @pytest.mark.asyncio
    async def test_unknown_model_rejected_before_fetch(self, service, rate_source):
        req = MultiCurrencyForecastRequest(
            base_currency="USD", currencies=["EUR"], amount=10, forecast_type="nope"
        )
        with pytest.raises(UnsupportedModelError):
            await service.generate_multi_currency_forecast(req)
        assert rate_source.calls == []

    @pytest.mark.asyncio
    async def test_upstream_failure_propagates(self, settings):
        svc = ForecastingService(settings, FakeRateSource(error=DependencyError("down")))
        req = MultiCurrencyForecastRequest(base_currency="USD", currencies=["EUR"], amount=10)
        with pytest.raises(DependencyError):
            await svc.generate_multi_currency_forecast(req)


class TestAnalyzeTrend:
    @pytest.mark.asyncio
    async def test_placeholder_band(self, service):
        analysis = await service.analyze_trend("USD", "EUR", 30)
        assert analysis.currency_pair == "USD/EUR"
        assert analysis.trend == "sideways"
        assert analysis.volatility == 0.05
        assert analysis.min_rate < analysis.average_rate < analysis.max_rate
        assert analysis.min_rate == pytest.approx(1.2 * 0.95)
        assert analysis.max_rate == pytest.approx(1.2 * 1.05)
        assert analysis.analysis_period == 30

    @pytest.mark.asyncio
    async def test_missing_target(self, service):
        with pytest.raises(CurrencyNotFoundError):
            await service.analyze_trend("USD", "ZZZ", 30)

    @pytest.mark.asyncio
    async def test_upstream_failure(self, settings):
        svc = ForecastingService(settings, FakeRateSource(error=DependencyError("down")))
        with pytest.raises(DependencyError):
            await svc.analyze_trend("USD", "EUR", 30)


class TestMisc:
    def test_supported_currencies_from_settings(self, service):
        assert service.supported_currencies == ["USD", "EUR", "GBP", "JPY", "SEK"]

    @pytest.mark.asyncio
    async def test_get_current_rates(self, service):
        rates = await service.get_current_rates("USD")
        assert rates.base == "USD"
        assert rates.rates["EUR"] == 1.2
