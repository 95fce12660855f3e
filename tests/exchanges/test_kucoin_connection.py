import asyncio
from unittest.mock import AsyncMock, Mock

import aiohttp
import pytest

from exchanges.integrations.kucoin.ws_strategies import KucoinConnectionStrategy, TOKEN_ENDPOINT
from infrastructure.exceptions.exchange import AdapterSetupError, ExchangeServerError


BULLET_RESPONSE = {
    "code": "200000",
    "data": {
        "token": "2neAiuYvAU61ZDXANAGAsiL4",
        "instanceServers": [{
            "endpoint": "wss://ws-api-spot.kucoin.com/",
            "protocol": "websocket",
            "encrypt": True,
            "pingInterval": 18000,
            "pingTimeout": 10000
        }]
    }
}


def make_strategy(response=None, error=None, url=None, heartbeat_interval=None):
    rest_client = Mock()
    rest_client.post = AsyncMock(return_value=response, side_effect=error)
    rest_client.close = AsyncMock()
    return KucoinConnectionStrategy(rest_client, url, heartbeat_interval)


@pytest.mark.asyncio
async def test_token_endpoint_and_server_ping_interval():
    strategy = make_strategy(BULLET_RESPONSE)

    context = await strategy.create_connection_context()

    strategy.rest_client.post.assert_awaited_once_with(TOKEN_ENDPOINT)
    assert context.url.startswith("wss://ws-api-spot.kucoin.com/?token=2neAiuYvAU61ZDXANAGAsiL4&connectId=")
    assert context.heartbeat_interval == 18.0


@pytest.mark.asyncio
async def test_fresh_connect_id_per_connect():
    strategy = make_strategy(BULLET_RESPONSE)

    first = await strategy.create_connection_context()
    second = await strategy.create_connection_context()

    assert first.url != second.url
    assert strategy.rest_client.post.await_count == 2


@pytest.mark.asyncio
async def test_configured_overrides_win():
    strategy = make_strategy(BULLET_RESPONSE, url="wss://proxy.local/kucoin", heartbeat_interval=5.0)

    context = await strategy.create_connection_context()

    assert context.url.startswith("wss://proxy.local/kucoin?token=")
    assert context.heartbeat_interval == 5.0


@pytest.mark.asyncio
@pytest.mark.parametrize("response,error", [
    (None, ExchangeServerError(503, "maintenance")),
    ({"code": "400100", "msg": "bad request"}, None),
    ({"code": "200000", "data": {"token": "t", "instanceServers": []}}, None),
    (None, asyncio.TimeoutError()),
    (None, aiohttp.ClientPayloadError("response payload is not completed")),
])
async def test_token_failures_are_setup_errors(response, error):
    strategy = make_strategy(response, error)

    with pytest.raises(AdapterSetupError):
        await strategy.create_connection_context()


def test_heartbeat_is_json_ping():
    message = make_strategy().create_heartbeat_message()
    assert message["type"] == "ping"
    assert message["id"]


@pytest.mark.asyncio
async def test_close_releases_rest_session():
    strategy = make_strategy()
    await strategy.close()
    strategy.rest_client.close.assert_awaited_once()
