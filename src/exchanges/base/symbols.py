"""
Canonical symbol helpers.

Canonical symbols are upper-case base assets ("BTC"). Venues write pairs
as BTCUSDT, BTC_USDT, BTC-USDT or KRW-BTC.
"""

from typing import Optional

from exchanges.structs import AssetName


def to_pair(symbol: str, quote: str = "USDT", separator: str = "") -> str:
    return f"{symbol.upper()}{separator}{quote}"


def from_pair(pair: str, quote: str = "USDT", separator: str = "") -> Optional[AssetName]:
    """Strip the quote suffix; None when pair is not quoted in `quote`."""
    if not pair:
        return None
    suffix = f"{separator}{quote}"
    pair = pair.upper()
    if not pair.endswith(suffix) or len(pair) == len(suffix):
        return None
    return AssetName(pair[:-len(suffix)])


def from_prefixed_pair(pair: str, quote: str = "KRW", separator: str = "-") -> Optional[AssetName]:
    """Strip a quote prefix (Upbit writes KRW-BTC); None when absent."""
    if not pair:
        return None
    prefix = f"{quote}{separator}"
    pair = pair.upper()
    if not pair.startswith(prefix) or len(pair) == len(prefix):
        return None
    return AssetName(pair[len(prefix):])
