"""
WebSocket-Specific Error Handling

Classifies transport failures of source adapters into "retry" and
"give up" and logs them with the adapter's context.
"""

from enum import Enum
from typing import Optional

from websockets.exceptions import (
    ConnectionClosed,
    ConnectionClosedOK,
    InvalidURI
)

from infrastructure.exceptions.exchange import TransportError, AdapterSetupError
from infrastructure.logging.interfaces import HFTLoggerInterface


class ErrorSeverity(Enum):
    """Error severity levels for handling decisions."""
    CRITICAL = "critical"      # Permanent failure, stop reconnecting
    MEDIUM = "medium"          # Retry with the reconnect policy
    LOW = "low"                # Graceful close, retry quietly


# Close codes that suggest reconnection might succeed
RECONNECTABLE_CLOSE_CODES = frozenset({
    1006,  # Abnormal closure
    1011,  # Server error
    1012,  # Service restart
    1013,  # Try again later
    1014,  # Bad gateway
})

# Client errors or permanent failures
PERMANENT_CLOSE_CODES = frozenset({
    1002,  # Protocol error
    1003,  # Unsupported data
    1007,  # Invalid data
    1008,  # Policy violation
    1009,  # Message too big
    1010,  # Mandatory extension
})


def close_code_of(error: BaseException) -> Optional[int]:
    """Extract the websocket close code carried by error, if any."""
    if isinstance(error, TransportError):
        return error.close_code
    if isinstance(error, ConnectionClosed):
        frame = error.rcvd or error.sent
        return frame.code if frame is not None else 1006
    return None


def should_reconnect(close_code: Optional[int]) -> bool:
    """Determine if reconnection should be attempted based on close code."""
    if close_code is None:
        return True  # Unknown closure, attempt reconnect

    if close_code in PERMANENT_CLOSE_CODES:
        return False

    # 1000/1001 are servers rotating connections; venues do that routinely
    return close_code in RECONNECTABLE_CLOSE_CODES or close_code in (1000, 1001) or close_code >= 4000


class WebSocketErrorHandler:
    """
    Error classification for websocket source adapters.

    Adapters report every transport failure here; the returned severity
    tells them whether to schedule a reconnect.
    """

    def __init__(self, logger: HFTLoggerInterface, component_name: str):
        self.logger = logger
        self.component_name = component_name

    def classify(self, error: BaseException) -> ErrorSeverity:
        if isinstance(error, (AdapterSetupError, InvalidURI)):
            return ErrorSeverity.CRITICAL
        if isinstance(error, ConnectionClosedOK):
            return ErrorSeverity.LOW
        close_code = close_code_of(error)
        if not should_reconnect(close_code):
            return ErrorSeverity.CRITICAL
        return ErrorSeverity.MEDIUM

    def handle_error(self, error: BaseException, operation: str, **context) -> bool:
        """
        Log a transport failure and decide on reconnection.

        Returns True when the adapter should retry.
        """
        severity = self.classify(error)
        close_code = close_code_of(error)

        if severity == ErrorSeverity.LOW:
            self.logger.info("WebSocket closed by server",
                             component=self.component_name,
                             operation=operation,
                             close_code=close_code,
                             **context)
        elif severity == ErrorSeverity.CRITICAL:
            self.logger.error("WebSocket failed permanently",
                              component=self.component_name,
                              operation=operation,
                              close_code=close_code,
                              error_type=type(error).__name__,
                              error=str(error),
                              **context)
        else:
            self.logger.warning("WebSocket transport error",
                                component=self.component_name,
                                operation=operation,
                                close_code=close_code,
                                error_type=type(error).__name__,
                                error=str(error),
                                **context)

        self.logger.counter("websocket_transport_error",
                            component=self.component_name,
                            severity=severity.value)
        return severity != ErrorSeverity.CRITICAL
