from .websocket_adapter import WebsocketSourceAdapter
from .polling_adapter import RestPollingSourceAdapter

__all__ = [
    "WebsocketSourceAdapter",
    "RestPollingSourceAdapter",
]
