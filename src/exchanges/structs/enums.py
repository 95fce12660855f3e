from enum import Enum

from .types import ExchangeName


class ExchangeEnum(Enum):
    """
    Enumeration of supported centralized exchanges.

    Used throughout the system for type-safe exchange identification
    and consistent naming across all components. The market side of a
    source is carried separately by MarketType.
    """
    UPBIT = ExchangeName("upbit")
    BINANCE = ExchangeName("binance")
    BYBIT = ExchangeName("bybit")
    OKX = ExchangeName("okx")
    MEXC = ExchangeName("mexc")
    GATEIO = ExchangeName("gateio")
    BITGET = ExchangeName("bitget")
    KUCOIN = ExchangeName("kucoin")
    BINGX = ExchangeName("bingx")
    HYPERLIQUID = ExchangeName("hyperliquid")
    LIGHTER = ExchangeName("lighter")
    EDGEX = ExchangeName("edgex")


class MarketType(Enum):
    """Type of exchange market a quote comes from."""
    SPOT = "spot"
    FUTURES = "futures"
    PERPETUAL = "perpetual"
    SWAP = "swap"


class TransportType(Enum):
    """How an adapter receives quotes."""
    WEBSOCKET = "websocket"
    REST_POLLING = "rest_polling"


class GapType(Enum):
    """Market-type pairing of the low and high legs of a gap."""
    SPOT_SPOT = "spot-spot"
    SPOT_FUTURES = "spot-futures"
    FUTURES_FUTURES = "futures-futures"
