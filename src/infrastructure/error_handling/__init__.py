"""
Infrastructure Error Handling Module

Close-code classification and transport error logging for source adapters.
"""

from .websocket_handlers import (
    ErrorSeverity,
    WebSocketErrorHandler,
    should_reconnect,
    close_code_of,
    RECONNECTABLE_CLOSE_CODES,
    PERMANENT_CLOSE_CODES
)

__all__ = [
    'ErrorSeverity',
    'WebSocketErrorHandler',
    'should_reconnect',
    'close_code_of',
    'RECONNECTABLE_CLOSE_CODES',
    'PERMANENT_CLOSE_CODES',
]
