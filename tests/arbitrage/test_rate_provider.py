from unittest.mock import AsyncMock, Mock

import aiohttp
import pytest

from arbitrage.rate_provider import RateProvider
from config.structs import RateConfig
from infrastructure.exceptions.exchange import ExchangeConnectionRestError


def make_provider(payload=None, error=None, config=None):
    client = Mock()
    client.get = AsyncMock(return_value=payload, side_effect=error)
    client.close = AsyncMock()
    return RateProvider(config or RateConfig(), rest_client=client), client


class TestDefaults:

    def test_default_rates_before_any_lookup(self):
        provider, _ = make_provider()

        assert provider.rate("USD/KRW") == 1380.0
        assert provider.rate("USDT/KRW") == pytest.approx(1377.24)
        assert provider.last_fetch_ok is False

    def test_identity_pair(self):
        provider, _ = make_provider()
        assert provider.rate("KRW/KRW") == 1.0
        assert provider.rate("usdt/usdt") == 1.0

    def test_inverse_pair(self):
        provider, _ = make_provider()
        assert provider.rate("KRW/USD") == pytest.approx(1 / 1380.0)

    def test_unknown_pair_raises(self):
        provider, _ = make_provider()
        with pytest.raises(KeyError):
            provider.rate("EUR/KRW")

    def test_convert(self):
        provider, _ = make_provider()
        assert provider.convert(2.0, "USDT") == pytest.approx(2754.48)
        assert provider.convert(5.0, "KRW") == 5.0


class TestFetch:

    @pytest.mark.asyncio
    async def test_successful_lookup_replaces_rates(self):
        provider, client = make_provider({"base": "USD", "rates": {"KRW": 1400.0, "EUR": 0.92}})

        assert await provider.fetch_rates() is True

        client.get.assert_awaited_once_with("https://api.exchangerate-api.com/v4/latest/USD")
        assert provider.rates() == {"USD/KRW": 1400.0, "USDT/KRW": pytest.approx(1397.2)}
        assert provider.last_fetch_ok is True

    @pytest.mark.asyncio
    async def test_discount_is_configurable(self):
        provider, _ = make_provider({"rates": {"KRW": 1000}}, config=RateConfig(usdt_discount=1.0))
        await provider.fetch_rates()
        assert provider.rate("USDT/KRW") == 1000.0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        ExchangeConnectionRestError(0, "connection refused"),
        aiohttp.ClientPayloadError("truncated"),
    ])
    async def test_transport_failure_keeps_defaults(self, error):
        provider, _ = make_provider(error=error)

        assert await provider.fetch_rates() is False
        assert provider.rate("USD/KRW") == 1380.0
        assert provider.last_fetch_ok is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {"rates": {}},
        {"rates": {"KRW": "abc"}},
        {"rates": {"KRW": -1}},
        None,
    ])
    async def test_unusable_payload_keeps_defaults(self, payload):
        provider, _ = make_provider(payload)
        assert await provider.fetch_rates() is False
        assert provider.rate("USD/KRW") == 1380.0

    @pytest.mark.asyncio
    async def test_failed_refresh_keeps_previous_rate(self):
        provider, client = make_provider({"rates": {"KRW": 1450.0}})
        await provider.fetch_rates()

        client.get.side_effect = ExchangeConnectionRestError(0, "timeout")
        assert await provider.fetch_rates() is False
        assert provider.rate("USD/KRW") == 1450.0

    @pytest.mark.asyncio
    async def test_close_closes_client(self):
        provider, client = make_provider()
        await provider.close()
        client.close.assert_awaited_once()
