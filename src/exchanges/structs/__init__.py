from .common import (
    NormalizedTicker, VenueQuote, AdapterStatus, ManagerStatus,
    GapResult, GapRecord, ArbitrageOpportunity
)
from .enums import ExchangeEnum, MarketType, TransportType, GapType
from .types import AssetName, ExchangeName

__all__ = [
    "NormalizedTicker",
    "VenueQuote",
    "AdapterStatus",
    "ManagerStatus",
    "GapResult",
    "GapRecord",
    "ArbitrageOpportunity",
    "ExchangeEnum",
    "MarketType",
    "TransportType",
    "GapType",
    "AssetName",
    "ExchangeName",
]
