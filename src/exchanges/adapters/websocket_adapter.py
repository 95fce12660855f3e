"""
Websocket source adapter.

One persistent socket per (exchange, market type). Venue specifics come
from a WebsocketStrategySet; timers (keepalive, reconnect) go through a
Scheduler so the retry path can be driven without real sockets.
"""

import asyncio
from typing import Optional, Sequence, List

import msgspec
from websockets import connect
from websockets.exceptions import ConnectionClosed, InvalidHandshake, InvalidURI

from config.structs import WebSocketConfig, ReconnectConfig
from exchanges.base import (
    AdapterState, RetryPolicy, QuoteNormalizer, WebsocketStrategySet, ConnectionContext, WsMessage
)
from exchanges.interfaces import SourceAdapter, TickerCallback
from exchanges.structs import AdapterStatus, ExchangeEnum, MarketType, TransportType
from infrastructure.error_handling import WebSocketErrorHandler
from infrastructure.exceptions.exchange import AdapterSetupError, HandshakeError, TransportError
from infrastructure.logging import HFTLoggerInterface, get_exchange_logger
from infrastructure.utils import Scheduler, TimerHandle, cancel_tasks_with_timeout, safe_close_connection


class WebsocketSourceAdapter(SourceAdapter):
    """
    Persistent-socket adapter.

    Lifecycle:
        connect()    -> handshake, keepalive timer, reader task, full subscribe
        socket drops -> bounded fixed-delay reconnect, full re-subscribe
        retries used -> stays disconnected (get_status().reconnect_exhausted)
        disconnect() -> cancel timers and reader, close socket; idempotent
    """

    def __init__(
        self,
        exchange: ExchangeEnum,
        market_type: MarketType,
        strategies: WebsocketStrategySet,
        normalizer: QuoteNormalizer,
        scheduler: Scheduler,
        ws_config: Optional[WebSocketConfig] = None,
        reconnect_config: Optional[ReconnectConfig] = None,
        logger: Optional[HFTLoggerInterface] = None,
    ):
        self._state = AdapterState(exchange, market_type, TransportType.WEBSOCKET)
        self.strategies = strategies
        self.normalizer = normalizer
        self.scheduler = scheduler
        self.ws_config = ws_config or WebSocketConfig()

        reconnect_config = reconnect_config or ReconnectConfig()
        self.retry = RetryPolicy(delay=reconnect_config.delay, max_attempts=reconnect_config.max_attempts)

        self.logger = logger or get_exchange_logger(exchange.value, f"ws.{market_type.value}")
        self._error_handler = WebSocketErrorHandler(self.logger, f"{exchange.value}.{market_type.value}")

        self._ws = None
        self._reader_task: Optional[asyncio.Task] = None
        self._heartbeat: Optional[TimerHandle] = None
        self._reconnect_timer: Optional[TimerHandle] = None
        self._closing = False
        self._terminal = False
        self._connect_lock = asyncio.Lock()

    @property
    def exchange(self) -> ExchangeEnum:
        return self._state.exchange

    @property
    def market_type(self) -> MarketType:
        return self._state.market_type

    @property
    def is_connected(self) -> bool:
        return self._state.connected

    def on_ticker(self, callback: TickerCallback) -> None:
        self._state.set_callback(callback)

    def get_status(self) -> AdapterStatus:
        return self._state.status(self.retry.attempts, self._terminal)

    async def connect(self) -> None:
        self._closing = False
        self._terminal = False
        self.retry.reset()
        self._cancel_reconnect_timer()

        # AdapterSetupError propagates: nothing to retry without a token/endpoint
        context = await self.strategies.connection.create_connection_context()
        try:
            await self._open(context)
        except TransportError as e:
            self._handle_transport_failure(e, "connect")

    async def subscribe(self, symbols: Sequence[str]) -> None:
        added = self._state.replace_symbols(symbols)
        self.logger.info("Interest set replaced",
                         symbols=len(self._state.symbols),
                         added=len(added))

        if not self._state.connected:
            return  # sent in full on the next (re)connect

        to_send = self._state.symbols if self.strategies.subscription.replaces_previous else added
        if to_send:
            await self._send_subscriptions(to_send)

    async def disconnect(self) -> None:
        self._closing = True
        self._cancel_reconnect_timer()
        self._stop_heartbeat()

        await cancel_tasks_with_timeout([self._reader_task], timeout=self.ws_config.close_timeout, logger=self.logger)
        self._reader_task = None

        ws, self._ws = self._ws, None
        await safe_close_connection(ws, timeout=self.ws_config.close_timeout, logger=self.logger)
        await self.strategies.connection.close()

        if self._state.connected:
            self.logger.info("Disconnected")
        self._state.connected = False

    # Connection management

    async def _open(self, context: ConnectionContext) -> None:
        async with self._connect_lock:
            if self._state.connected or self._closing:
                return

            self.logger.debug("Connecting", url=context.url)
            try:
                ws = await connect(
                    context.url,
                    open_timeout=self.ws_config.connect_timeout,
                    ping_interval=self.ws_config.ping_interval,
                    ping_timeout=self.ws_config.ping_timeout,
                    close_timeout=self.ws_config.close_timeout,
                    max_size=self.ws_config.max_message_size,
                    max_queue=self.ws_config.max_queue_size,
                    compression=None,
                )
            except (InvalidHandshake, InvalidURI, OSError, asyncio.TimeoutError) as e:
                raise HandshakeError(self.exchange.value, f"Handshake with {context.url} failed: {e}")

            # disconnect() may have run while the handshake was in flight
            if self._closing:
                self.logger.debug("Handshake finished after disconnect, closing socket", url=context.url)
                await safe_close_connection(ws, timeout=self.ws_config.close_timeout, logger=self.logger)
                return

            self._ws = ws
            self._state.connected = True
            self.retry.reset()
            self.logger.info("WebSocket connected", url=context.url)

            self._reader_task = asyncio.create_task(
                self._message_reader(ws),
                name=f"{self.exchange.value}.{self.market_type.value}.reader"
            )
            self._start_heartbeat(context.heartbeat_interval)

        if self._state.symbols and not self._closing:
            await self._send_subscriptions(self._state.symbols)

    async def _reconnect(self) -> None:
        self._reconnect_timer = None
        if self._closing or self._state.connected:
            return

        self.logger.info("Reconnecting",
                         attempt=self.retry.attempts,
                         max_attempts=self.retry.max_attempts)
        try:
            context = await self.strategies.connection.create_connection_context()
            await self._open(context)
        except TransportError as e:
            self._handle_transport_failure(e, "reconnect")
        except AdapterSetupError as e:
            # A token fetch failing mid-session is retried like a dropped socket
            self._handle_transport_failure(TransportError(self.exchange.value, e.message), "reconnect")

    def _handle_transport_failure(self, error: BaseException, operation: str) -> None:
        should_retry = self._error_handler.handle_error(
            error, operation,
            attempt=self.retry.attempts,
            max_attempts=self.retry.max_attempts
        )
        if not should_retry:
            self.retry.attempts = self.retry.max_attempts
        self._schedule_reconnect()

    def _schedule_reconnect(self) -> None:
        if self._closing:
            return
        delay = self.retry.next_delay()
        if delay is None:
            self._terminal = True
            self.logger.error("Reconnect attempts exhausted, source stays disconnected",
                              attempts=self.retry.attempts)
            return
        self._reconnect_timer = self.scheduler.call_later(delay, self._reconnect)

    def _cancel_reconnect_timer(self) -> None:
        if self._reconnect_timer is not None:
            self._reconnect_timer.cancel()
            self._reconnect_timer = None

    # Keepalive

    def _start_heartbeat(self, interval: Optional[float]) -> None:
        self._stop_heartbeat()
        if interval and self.strategies.connection.create_heartbeat_message() is not None:
            self._heartbeat = self.scheduler.call_every(interval, self._send_heartbeat)

    def _stop_heartbeat(self) -> None:
        if self._heartbeat is not None:
            self._heartbeat.cancel()
            self._heartbeat = None

    async def _send_heartbeat(self) -> None:
        message = self.strategies.connection.create_heartbeat_message()
        if message is None or not self._state.connected:
            return
        try:
            await self._send(message)
        except TransportError as e:
            # The reader sees the same close and drives the reconnect
            self.logger.debug("Heartbeat send failed", error=str(e))

    # Messaging

    async def _send(self, message: WsMessage) -> None:
        if self._ws is None:
            raise TransportError(self.exchange.value, "WebSocket not connected")
        payload = message if isinstance(message, str) else msgspec.json.encode(message).decode("utf-8")
        try:
            await self._ws.send(payload)
        except ConnectionClosed as e:
            raise TransportError(self.exchange.value, f"Send failed: {e}", close_code=e.rcvd.code if e.rcvd else None)

    async def _send_subscriptions(self, symbols: List[str]) -> None:
        subscription = self.strategies.subscription
        messages = subscription.create_subscription_messages(symbols)
        try:
            for index, message in enumerate(messages):
                if index and subscription.message_delay:
                    await asyncio.sleep(subscription.message_delay)
                await self._send(message)
        except TransportError as e:
            self.logger.warning("Subscribe interrupted by transport error", error=str(e))
            return

        self.logger.info("Subscribed", symbols=len(symbols), messages=len(messages))

    async def _message_reader(self, ws) -> None:
        error: Optional[BaseException] = None
        try:
            async for raw_message in ws:
                self._handle_message(raw_message)
        except ConnectionClosed as e:
            error = e
        except asyncio.CancelledError:
            raise
        except Exception as e:
            # Reader crashes are transport failures: reconnect rather than go silent
            self.logger.error("Message reader failed", error_type=type(e).__name__, error=str(e))
            error = TransportError(self.exchange.value, f"Reader failed: {e}")

        if ws is not self._ws:
            return
        self._on_connection_lost(error or TransportError(self.exchange.value, "Connection closed by server", close_code=1000))

    def _handle_message(self, raw_message) -> None:
        for quote in self.strategies.parser.parse(raw_message):
            if not self._state.wants(quote.symbol):
                continue
            try:
                ticker = self.normalizer.normalize(quote, self._state.next_timestamp())
                self._state.emit(ticker)
            except Exception as e:
                # One bad quote must not stop the reader
                self.logger.error("Failed to process quote", symbol=quote.symbol, error=str(e))

    def _on_connection_lost(self, error: BaseException) -> None:
        self._stop_heartbeat()
        self._state.connected = False
        self._ws = None
        self._reader_task = None
        if self._closing:
            return
        self._handle_transport_failure(error, "read")
