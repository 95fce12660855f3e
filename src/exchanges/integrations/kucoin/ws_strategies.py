"""
KuCoin websocket strategies.

KuCoin hands out websocket endpoints per session: every (re)connect first
POSTs /api/v1/bullet-public for a token, an endpoint and the ping interval
the server expects.
"""

import asyncio
import uuid
from typing import List, Optional

import aiohttp

from config.structs import ExchangeSourceConfig
from exchanges.base import (
    ConnectionContext, ConnectionStrategy, SubscriptionStrategy, WebsocketStrategySet, WsMessage, to_pair
)
from infrastructure.exceptions.exchange import AdapterSetupError, ExchangeRestError
from infrastructure.logging import get_exchange_logger
from infrastructure.networking.http import RestClient
from .message_parser import KucoinTickerParser, TICKER_TOPIC_PREFIX

REST_URL = "https://api.kucoin.com"
TOKEN_ENDPOINT = "/api/v1/bullet-public"
SUBSCRIBE_DELAY = 0.1


class KucoinConnectionStrategy(ConnectionStrategy):

    def __init__(self, rest_client: RestClient, url: Optional[str] = None,
                 heartbeat_interval: Optional[float] = None):
        super().__init__(url or "", heartbeat_interval)
        self.rest_client = rest_client
        self.logger = get_exchange_logger("kucoin", "ws.connection")

    async def create_connection_context(self) -> ConnectionContext:
        try:
            response = await self.rest_client.post(TOKEN_ENDPOINT)
            data = response["data"]
            token = data["token"]
            server = data["instanceServers"][0]
        except (ExchangeRestError, aiohttp.ClientError, asyncio.TimeoutError,
                KeyError, IndexError, TypeError) as e:
            raise AdapterSetupError("kucoin", f"Failed to obtain websocket token: {e}")

        endpoint = self.url or server["endpoint"]
        heartbeat = self.heartbeat_interval
        if heartbeat is None and server.get("pingInterval"):
            heartbeat = server["pingInterval"] / 1000.0

        self.logger.debug("Websocket token obtained", endpoint=endpoint, ping_interval=heartbeat)
        return ConnectionContext(
            url=f"{endpoint}?token={token}&connectId={uuid.uuid4().hex}",
            heartbeat_interval=heartbeat
        )

    def create_heartbeat_message(self) -> WsMessage:
        return {"id": uuid.uuid4().hex, "type": "ping"}

    async def close(self) -> None:
        await self.rest_client.close()


class KucoinSubscriptionStrategy(SubscriptionStrategy):
    """One topic per message, paced to stay under the venue's message rate."""

    def to_venue_symbol(self, symbol: str) -> str:
        return to_pair(symbol, "USDT", separator="-")

    def _create_batch_message(self, venue_symbols: List[str]) -> WsMessage:
        return {
            "id": uuid.uuid4().hex,
            "type": "subscribe",
            "topic": f"{TICKER_TOPIC_PREFIX}{','.join(venue_symbols)}",
            "privateChannel": False,
            "response": True
        }


def create_ws_strategies(source: ExchangeSourceConfig) -> WebsocketStrategySet:
    rest_client = RestClient(source.rest_url or REST_URL, name="kucoin")
    delay = source.subscribe_delay if source.subscribe_delay is not None else SUBSCRIBE_DELAY
    return WebsocketStrategySet(
        connection=KucoinConnectionStrategy(rest_client, source.url, source.heartbeat_interval),
        subscription=KucoinSubscriptionStrategy(batch_size=source.batch_size or 1, message_delay=delay),
        parser=KucoinTickerParser()
    )
