class ExchangeSourceError(Exception):
    """Base exception for errors raised by an exchange source adapter."""
    def __init__(self, exchange: str, message: str) -> None:
        self.exchange = exchange
        self.message = message
        super().__init__(f"[{exchange}] {message}")


# Transport errors (retryable by the adapter's reconnect policy)
class TransportError(ExchangeSourceError):
    """Connection refused, abrupt close or send failure on a live transport."""
    def __init__(self, exchange: str, message: str, close_code: int | None = None) -> None:
        super().__init__(exchange, message)
        self.close_code = close_code


class HandshakeError(TransportError):
    """Websocket opening handshake failed."""
    pass


# Setup errors (not retryable; the only errors connect() lets escape)
class AdapterSetupError(ExchangeSourceError):
    """Unrecoverable setup failure, e.g. a required access token could not be obtained."""
    pass


class ParseError(ExchangeSourceError):
    """Malformed or unexpected venue payload. Never escapes a parser."""
    pass


class RateFetchError(Exception):
    """Conversion rate lookup failed or returned an unusable payload."""
    pass


class ExchangeRestError(Exception):
    """Base exception for REST API errors."""
    def __init__(self, code: int, message: str, api_code: int | None = None) -> None:
        self.api_code = api_code
        self.message = message
        self.status_code = code
        super().__init__(f"HTTP {code}: {message}")


# Connection and Infrastructure Errors (Retryable)
class ExchangeConnectionRestError(ExchangeRestError):
    """Network connection errors that may be temporary."""
    pass


class ExchangeServerError(ExchangeRestError):
    """Server-side errors (5xx) that may be temporary."""
    pass


# Rate Limiting Errors (Retryable with backoff)
class RateLimitErrorRest(ExchangeRestError):
    """Rate limit exceeded errors."""
    def __init__(self, code: int, message: str, api_code: int | None = None, retry_after: int | None = None) -> None:
        super().__init__(code, message, api_code)
        self.retry_after = retry_after

    def __str__(self):
        return f"RateLimitError: {self.status_code} - {self.message} - {self.retry_after}"
