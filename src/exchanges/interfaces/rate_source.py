from abc import ABC, abstractmethod


class RateSource(ABC):
    """Read access to conversion rates, e.g. rate("USDT/KRW")."""

    @abstractmethod
    def rate(self, currency_pair: str) -> float:
        """Currently held rate for BASE/QUOTE. Raises KeyError for unknown pairs."""
        pass
