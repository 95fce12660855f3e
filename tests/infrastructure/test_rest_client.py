from unittest.mock import AsyncMock

import pytest
from aiohttp import web
from aiohttp import test_utils

from infrastructure.decorators import compute_delay, retry_decorator
from infrastructure.exceptions.exchange import (
    ExchangeConnectionRestError, ExchangeRestError, ExchangeServerError, RateLimitErrorRest
)
from infrastructure.networking.http import RestClient, RestConfig


class TestRetryDecorator:

    @pytest.mark.parametrize("backoff,expected", [
        ("exponential", [0.1, 0.2, 0.4, 0.5]),
        ("linear", [0.1, 0.2, 0.3, 0.4]),
        ("fixed", [0.1, 0.1, 0.1, 0.1]),
    ])
    def test_compute_delay(self, backoff, expected):
        delays = [compute_delay(backoff, attempt, 0.1, 0.5) for attempt in range(1, 5)]
        assert delays == pytest.approx(expected)

    def test_unknown_backoff(self):
        with pytest.raises(ValueError):
            retry_decorator(backoff="random")

    @pytest.mark.asyncio
    async def test_retries_transient_errors_then_succeeds(self):
        call = AsyncMock(side_effect=[ExchangeServerError(502, "bad gateway"), {"ok": True}])
        wrapped = retry_decorator(max_attempts=3, base_delay=0.0)(call)

        assert await wrapped() == {"ok": True}
        assert call.await_count == 2

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self):
        call = AsyncMock(side_effect=ExchangeConnectionRestError(503, "down"))
        wrapped = retry_decorator(max_attempts=2, base_delay=0.0)(call)

        with pytest.raises(ExchangeConnectionRestError):
            await wrapped()
        assert call.await_count == 2

    @pytest.mark.asyncio
    async def test_client_errors_are_not_retried(self):
        call = AsyncMock(side_effect=ExchangeRestError(404, "not found"))
        wrapped = retry_decorator(max_attempts=3, base_delay=0.0)(call)

        with pytest.raises(ExchangeRestError):
            await wrapped()
        assert call.await_count == 1

    @pytest.mark.asyncio
    async def test_rate_limit_honours_retry_after(self, monkeypatch):
        sleeps = []

        async def fake_sleep(delay):
            sleeps.append(delay)

        monkeypatch.setattr("infrastructure.decorators.retry.asyncio.sleep", fake_sleep)
        call = AsyncMock(side_effect=[RateLimitErrorRest(429, "slow down", retry_after=2), "ok"])
        wrapped = retry_decorator(max_attempts=3)(call)

        assert await wrapped() == "ok"
        assert sleeps == [2]


@pytest.fixture
async def server():
    hits = {"flaky": 0}

    async def tickers(request):
        return web.json_response([{"symbol": "BTCUSDT", "lastPrice": "50000"}])

    async def flaky(request):
        hits["flaky"] += 1
        if hits["flaky"] == 1:
            return web.Response(status=503, text="maintenance")
        return web.json_response({"rates": {"KRW": 1385.5}})

    async def missing(request):
        return web.Response(status=404, text="no such market")

    async def limited(request):
        return web.Response(status=429, headers={"Retry-After": "0"})

    async def garbage(request):
        return web.Response(text="<html>")

    async def token(request):
        body = await request.json()
        return web.json_response({"code": "200000", "echo": body})

    app = web.Application()
    app.router.add_get("/tickers", tickers)
    app.router.add_get("/flaky", flaky)
    app.router.add_get("/missing", missing)
    app.router.add_get("/limited", limited)
    app.router.add_get("/garbage", garbage)
    app.router.add_post("/token", token)

    test_server = test_utils.TestServer(app)
    await test_server.start_server()
    test_server.hits = hits
    yield test_server
    await test_server.close()


@pytest.fixture
async def client(server):
    rest = RestClient(str(server.make_url("")), RestConfig(max_retries=2, retry_delay=0.0), name="test")
    yield rest
    await rest.close()


class TestRestClient:

    @pytest.mark.asyncio
    async def test_get_decodes_json(self, client):
        assert await client.get("/tickers") == [{"symbol": "BTCUSDT", "lastPrice": "50000"}]

    @pytest.mark.asyncio
    async def test_absolute_url(self, client, server):
        payload = await client.get(str(server.make_url("/tickers")))
        assert payload[0]["symbol"] == "BTCUSDT"

    @pytest.mark.asyncio
    async def test_server_error_is_retried(self, client, server):
        assert await client.get("/flaky") == {"rates": {"KRW": 1385.5}}
        assert server.hits["flaky"] == 2

    @pytest.mark.asyncio
    async def test_client_error_maps_to_rest_error(self, client):
        with pytest.raises(ExchangeRestError) as exc_info:
            await client.get("/missing")
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_rate_limit(self, client):
        with pytest.raises(RateLimitErrorRest) as exc_info:
            await client.get("/limited")
        assert exc_info.value.retry_after == 0

    @pytest.mark.asyncio
    async def test_invalid_json(self, client):
        with pytest.raises(ExchangeRestError):
            await client.get("/garbage")

    @pytest.mark.asyncio
    async def test_post_encodes_json(self, client):
        response = await client.post("/token", json_data={"channel": "public"})
        assert response == {"code": "200000", "echo": {"channel": "public"}}

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        rest = RestClient("http://127.0.0.1:9", RestConfig(max_retries=1, connect_timeout=1.0), name="refused")
        try:
            with pytest.raises(ExchangeConnectionRestError):
                await rest.get("/")
        finally:
            await rest.close()

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, client):
        await client.get("/tickers")
        await client.close()
        await client.close()
