from collections import deque
from typing import Deque, Dict, List

from exchanges.structs import GapRecord

DEFAULT_MAX_SIZE = 10000


class GapHistoryLog:
    """
    Bounded in-memory log of significant gaps, oldest evicted first.

    by_symbol() scans linearly; fine at this capacity. Longer retention
    would want a per-symbol index.
    """

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE):
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self.max_size = max_size
        self._records: Deque[GapRecord] = deque(maxlen=max_size)

    def append(self, record: GapRecord) -> None:
        self._records.append(record)

    def recent(self, limit: int = 100) -> List[GapRecord]:
        """Last `limit` records, oldest first."""
        if limit <= 0:
            return []
        records = list(self._records)
        return records[-limit:]

    def by_symbol(self, symbol: str, limit: int = 100) -> List[GapRecord]:
        """Last `limit` records for one symbol, oldest first."""
        if limit <= 0:
            return []
        symbol = symbol.upper()
        matches = [r for r in self._records if r.symbol == symbol]
        return matches[-limit:]

    def count(self) -> int:
        return len(self._records)

    def stats(self) -> Dict[str, int]:
        return {"total": len(self._records), "max_size": self.max_size}
