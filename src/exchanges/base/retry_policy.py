from dataclasses import dataclass
from typing import Optional


@dataclass
class RetryPolicy:
    """
    Fixed-delay, bounded reconnection policy.

    next_delay() consumes one attempt and returns the delay to wait before
    it, or None once max_attempts are used up. After that the adapter
    stays disconnected until reset() (a successful connect or an explicit
    connect() call).
    """
    delay: float = 3.0
    max_attempts: int = 5
    attempts: int = 0

    @property
    def exhausted(self) -> bool:
        return self.attempts >= self.max_attempts

    def next_delay(self) -> Optional[float]:
        if self.exhausted:
            return None
        self.attempts += 1
        return self.delay

    def reset(self) -> None:
        self.attempts = 0
