"""
Venue strategy interfaces.

Everything that differs between venues lives behind these interfaces:
handshake (ConnectionStrategy), symbol notation and subscribe batching
(SubscriptionStrategy), payload shape (TickerParser) and, for polling
sources, the snapshot endpoint (PollingStrategy). Transport adapters
compose one set of them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

import msgspec

from exchanges.structs import AssetName, VenueQuote
from infrastructure.exceptions.exchange import ParseError
from infrastructure.logging import HFTLoggerInterface, get_logger

WsMessage = Union[str, Dict[str, Any], List[Any]]


@dataclass(frozen=True)
class ConnectionContext:
    """Resolved connection parameters for one (re)connect."""
    url: str
    heartbeat_interval: Optional[float] = None


class ConnectionStrategy(ABC):
    """
    Handshake and keepalive for one venue.

    create_connection_context() runs before every (re)connect; token-gated
    venues fetch a fresh token there and raise AdapterSetupError when they
    cannot.
    """

    def __init__(self, url: str, heartbeat_interval: Optional[float] = None):
        self.url = url
        self.heartbeat_interval = heartbeat_interval

    async def create_connection_context(self) -> ConnectionContext:
        return ConnectionContext(url=self.url, heartbeat_interval=self.heartbeat_interval)

    def create_heartbeat_message(self) -> Optional[WsMessage]:
        """Venue keepalive frame, or None when the venue needs none."""
        return None

    async def close(self) -> None:
        """Release resources held by the strategy (REST sessions)."""
        pass


class SubscriptionStrategy(ABC):
    """
    Symbol notation and subscribe message construction for one venue.

    Large symbol lists are split into messages of at most batch_size
    symbols; message_delay seconds are waited between messages.
    """

    # Venue treats every subscribe message as the full interest set
    replaces_previous: bool = False

    def __init__(self, batch_size: Optional[int] = None, message_delay: float = 0.0):
        self.batch_size = batch_size
        self.message_delay = message_delay

    @abstractmethod
    def to_venue_symbol(self, symbol: str) -> str:
        pass

    @abstractmethod
    def _create_batch_message(self, venue_symbols: List[str]) -> WsMessage:
        pass

    def create_subscription_messages(self, symbols: Sequence[str]) -> List[WsMessage]:
        venue_symbols = [self.to_venue_symbol(s) for s in symbols]
        if not venue_symbols:
            return []
        size = self.batch_size or len(venue_symbols)
        return [
            self._create_batch_message(venue_symbols[i:i + size])
            for i in range(0, len(venue_symbols), size)
        ]


class TickerParser(ABC):
    """
    Venue payload -> VenueQuote list.

    parse() never raises: keepalive acks, subscription confirmations,
    schema drift and malformed frames all yield an empty list. Subclasses
    implement _parse_payload() over the decoded JSON and may raise
    KeyError/TypeError/ValueError/ParseError freely.
    """

    exchange_name: str = ""

    def __init__(self, logger: Optional[HFTLoggerInterface] = None):
        self.logger = logger or get_logger(f"{self.exchange_name or 'source'}.parser")
        self.dropped_count = 0

    @abstractmethod
    def from_venue_symbol(self, venue_symbol: str) -> Optional[AssetName]:
        pass

    @abstractmethod
    def _parse_payload(self, payload: Any) -> List[VenueQuote]:
        pass

    def _is_control_frame(self, raw: Union[str, bytes]) -> bool:
        """Non-JSON keepalive replies such as a bare "pong"."""
        return False

    def parse(self, raw: Union[str, bytes]) -> List[VenueQuote]:
        if self._is_control_frame(raw):
            return []
        try:
            payload = msgspec.json.decode(raw)
        except (msgspec.DecodeError, TypeError, UnicodeDecodeError):
            self._drop("undecodable frame", raw)
            return []
        return self.parse_decoded(payload)

    def parse_decoded(self, payload: Any) -> List[VenueQuote]:
        try:
            return self._parse_payload(payload)
        except (KeyError, TypeError, ValueError, AttributeError, IndexError, ParseError) as e:
            self._drop(f"{type(e).__name__}: {e}", payload)
            return []

    def _drop(self, reason: str, payload: Any) -> None:
        self.dropped_count += 1
        self.logger.debug("Dropped message", reason=reason, preview=str(payload)[:200])

    @staticmethod
    def _float(value: Any) -> Optional[float]:
        """Venue number (often a string) -> float; None for missing or empty."""
        if value is None or value == "":
            return None
        return float(value)


class PollingStrategy(ABC):
    """REST snapshot endpoint and parser for a polling source."""

    def __init__(self, parser: TickerParser, endpoint: str, params: Optional[Dict[str, Any]] = None):
        self.parser = parser
        self.endpoint = endpoint
        self.params = params

    def parse_snapshot(self, payload: Any) -> List[VenueQuote]:
        return self.parser.parse_decoded(payload)


@dataclass
class WebsocketStrategySet:
    """Strategies one websocket adapter is composed of."""
    connection: ConnectionStrategy
    subscription: SubscriptionStrategy
    parser: TickerParser
