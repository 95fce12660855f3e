from typing import Dict, Optional, List

from msgspec import Struct, field

from exchanges.structs import ExchangeEnum, MarketType, TransportType
from infrastructure.logging.structs import LoggingConfig


class WebSocketConfig(Struct, frozen=True):
    """
    WebSocket connection settings shared by every socket source.

    Attributes:
        connect_timeout: Opening handshake timeout in seconds
        ping_interval: Protocol-level ping interval (None disables it)
        ping_timeout: Protocol-level pong timeout
        close_timeout: Close handshake timeout
        max_message_size: Largest accepted frame in bytes
        max_queue_size: Incoming frame queue length
    """
    connect_timeout: float = 10.0
    ping_interval: Optional[float] = 20.0
    ping_timeout: Optional[float] = 20.0
    close_timeout: float = 5.0
    max_message_size: int = 16 * 1024 * 1024
    max_queue_size: int = 1024

    def validate(self) -> None:
        if self.connect_timeout <= 0:
            raise ValueError("connect_timeout must be positive")
        if self.max_message_size <= 0:
            raise ValueError("max_message_size must be positive")


class ReconnectConfig(Struct, frozen=True):
    """
    Fixed-delay bounded reconnection.

    Attributes:
        delay: Seconds between attempts
        max_attempts: Attempts before the adapter gives up for good
    """
    delay: float = 3.0
    max_attempts: int = 5

    def validate(self) -> None:
        if self.delay < 0:
            raise ValueError("reconnect delay cannot be negative")
        if self.max_attempts < 0:
            raise ValueError("max_attempts cannot be negative")


class ExchangeSourceConfig(Struct, frozen=True):
    """
    One source to register: an (exchange, market type) pair and its transport.

    Optional fields override the venue defaults of the integration module.
    """
    exchange: ExchangeEnum
    market_type: MarketType = MarketType.SPOT
    transport: TransportType = TransportType.WEBSOCKET
    enabled: bool = True
    url: Optional[str] = None
    rest_url: Optional[str] = None
    heartbeat_interval: Optional[float] = None
    batch_size: Optional[int] = None
    subscribe_delay: Optional[float] = None
    poll_interval: float = 2.0
    reconnect: Optional[ReconnectConfig] = None

    def validate(self) -> None:
        if self.batch_size is not None and self.batch_size <= 0:
            raise ValueError(f"{self.exchange.value}: batch_size must be positive")
        if self.poll_interval <= 0:
            raise ValueError(f"{self.exchange.value}: poll_interval must be positive")
        if self.reconnect:
            self.reconnect.validate()


class SymbolUniverseConfig(Struct, frozen=True):
    """
    Canonical symbols to subscribe everywhere.

    When fetch_upbit_markets is set, the KRW market list of Upbit is fetched
    at startup and replaces `symbols`; `symbols` stays the fallback.
    """
    symbols: List[str] = field(default_factory=lambda: ["BTC", "ETH", "XRP", "SOL", "DOGE"])
    fetch_upbit_markets: bool = False
    upbit_markets_url: str = "https://api.upbit.com/v1/market/all"


class RateConfig(Struct, frozen=True):
    """
    Conversion rate lookup.

    Attributes:
        url: exchangerate-api style endpoint with USD base
        default_usd_krw: Rate held until (or if never) a lookup succeeds
        usdt_discount: USDT/KRW = USD/KRW * usdt_discount
    """
    url: str = "https://api.exchangerate-api.com/v4/latest/USD"
    default_usd_krw: float = 1380.0
    usdt_discount: float = 0.998
    timeout: float = 10.0


class PriceStoreConfig(Struct, frozen=True):
    """
    Attributes:
        blocked_symbols: Tickers known to collide across venues; never stored
        excluded_by_exchange: Extra tickers ignored only on the named exchange
        outlier_threshold: Max relative deviation from the symbol mean (5.0 = 500%)
        rejection_log_sample_rate: Fraction of rejections that are logged
    """
    blocked_symbols: List[str] = field(default_factory=lambda: ["BEAM", "GAS"])
    excluded_by_exchange: Dict[str, List[str]] = field(default_factory=dict)
    outlier_threshold: float = 5.0
    rejection_log_sample_rate: float = 0.01

    def validate(self) -> None:
        if self.outlier_threshold <= 0:
            raise ValueError("outlier_threshold must be positive")
        if not 0.0 <= self.rejection_log_sample_rate <= 1.0:
            raise ValueError("rejection_log_sample_rate must be between 0 and 1")


class GapHistoryConfig(Struct, frozen=True):
    """
    Attributes:
        max_size: Ring capacity
        record_interval: Seconds between history captures
        min_spread: Minimum spread (percent) for a gap to be recorded
    """
    max_size: int = 10000
    record_interval: float = 60.0
    min_spread: float = 0.5

    def validate(self) -> None:
        if self.max_size <= 0:
            raise ValueError("gap history max_size must be positive")
        if self.record_interval <= 0:
            raise ValueError("record_interval must be positive")


class StreamConfig(Struct, frozen=True):
    """Outbound ticker batching."""
    flush_interval: float = 1.0


class AppConfig(Struct, frozen=True):
    """Complete application configuration loaded from config.yaml."""
    environment: str = "dev"
    universe: SymbolUniverseConfig = field(default_factory=SymbolUniverseConfig)
    rates: RateConfig = field(default_factory=RateConfig)
    price_store: PriceStoreConfig = field(default_factory=PriceStoreConfig)
    gap_history: GapHistoryConfig = field(default_factory=GapHistoryConfig)
    stream: StreamConfig = field(default_factory=StreamConfig)
    websocket: WebSocketConfig = field(default_factory=WebSocketConfig)
    reconnect: ReconnectConfig = field(default_factory=ReconnectConfig)
    exchanges: List[ExchangeSourceConfig] = field(default_factory=list)
    logging: Optional[LoggingConfig] = None

    def validate(self) -> None:
        self.price_store.validate()
        self.gap_history.validate()
        self.websocket.validate()
        self.reconnect.validate()
        for source in self.exchanges:
            source.validate()
        if self.logging:
            self.logging.validate()

    def enabled_sources(self) -> List[ExchangeSourceConfig]:
        return [source for source in self.exchanges if source.enabled]
