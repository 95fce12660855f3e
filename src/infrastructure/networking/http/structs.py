from enum import Enum
from typing import Dict, Optional
import msgspec


class HTTPMethod(Enum):
    GET = "GET"
    POST = "POST"


class RestConfig(msgspec.Struct, frozen=True):
    """Configuration for the REST client."""
    timeout: float = 10.0
    connect_timeout: float = 5.0
    max_retries: int = 3
    retry_delay: float = 0.5
    max_concurrent: int = 10
    headers: Optional[Dict[str, str]] = None  # Custom headers to add/override
