"""
Source adapter interface.

A source adapter owns one transport to one (exchange, market type) pair,
turns venue payloads into NormalizedTicker and hands each one to a single
registered callback. Implementations share no base behaviour; common
pieces (status, retry policy, currency conversion) are composed in.
"""

from abc import ABC, abstractmethod
from typing import Callable, Sequence

from exchanges.structs import NormalizedTicker, AdapterStatus, ExchangeEnum, MarketType

TickerCallback = Callable[[NormalizedTicker], None]


class SourceAdapter(ABC):

    @property
    @abstractmethod
    def exchange(self) -> ExchangeEnum:
        pass

    @property
    @abstractmethod
    def market_type(self) -> MarketType:
        pass

    @abstractmethod
    async def connect(self) -> None:
        """
        Establish the transport and return once ready to emit ticks.

        Ordinary transport failures are handled internally (logged, retried
        per the reconnect policy). Raises AdapterSetupError only for
        unrecoverable setup failures such as a missing access token.
        """
        pass

    @abstractmethod
    async def subscribe(self, symbols: Sequence[str]) -> None:
        """Replace the interest set with the given canonical symbols."""
        pass

    @abstractmethod
    def on_ticker(self, callback: TickerCallback) -> None:
        """Register the single downstream sink; replaces any previous one."""
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Release the transport and timers. Idempotent."""
        pass

    @abstractmethod
    def get_status(self) -> AdapterStatus:
        """Read-only status snapshot. Never raises."""
        pass
