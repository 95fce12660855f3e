from .source_adapter import SourceAdapter, TickerCallback
from .rate_source import RateSource

__all__ = [
    "SourceAdapter",
    "TickerCallback",
    "RateSource",
]
