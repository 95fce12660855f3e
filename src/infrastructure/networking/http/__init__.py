from .structs import HTTPMethod, RestConfig
from .rest_client import RestClient

__all__ = [
    "HTTPMethod",
    "RestConfig",
    "RestClient",
]
