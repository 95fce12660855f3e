"""
Async REST client

Thin aiohttp wrapper used for the handful of REST calls the system makes:
the KuCoin websocket token, the USD/KRW rate lookup, the Upbit market list
and the ticker snapshots of polling sources. Responses are decoded with
msgspec; failures are mapped onto the ExchangeRestError hierarchy and
retried with retry_decorator.
"""

import asyncio
from typing import Any, Dict, Optional

import aiohttp
import msgspec

from infrastructure.decorators.retry import retry_decorator
from infrastructure.exceptions.exchange import (
    ExchangeRestError, ExchangeConnectionRestError, ExchangeServerError, RateLimitErrorRest
)
from infrastructure.logging import get_logger
from .structs import HTTPMethod, RestConfig


class RestClient:
    """
    Session-reusing REST client.

    endpoint may be a path relative to base_url or an absolute URL.
    """

    def __init__(self, base_url: str = "", config: Optional[RestConfig] = None, name: str = "rest"):
        self.base_url = base_url.rstrip('/')
        self.config = config or RestConfig()
        self._session: Optional[aiohttp.ClientSession] = None
        self._semaphore = asyncio.Semaphore(self.config.max_concurrent)
        self.logger = get_logger(f"networking.http.{name}")

        self._request_with_retry = retry_decorator(
            max_attempts=self.config.max_retries,
            backoff="exponential",
            base_delay=self.config.retry_delay
        )(self._request_once)

    async def __aenter__(self):
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _ensure_session(self) -> None:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(
                total=self.config.timeout,
                connect=self.config.connect_timeout
            )
            headers = {
                'User-Agent': 'spread-monitor/1.0',
                'Accept': 'application/json',
            }
            if self.config.headers:
                headers.update(self.config.headers)

            self._session = aiohttp.ClientSession(
                timeout=timeout,
                json_serialize=lambda obj: msgspec.json.encode(obj).decode('utf-8'),
                headers=headers
            )

    def _url(self, endpoint: str) -> str:
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self.base_url}{endpoint}"

    def _parse_response(self, response_body: bytes) -> Any:
        if not response_body:
            return None
        try:
            return msgspec.json.decode(response_body)
        except msgspec.DecodeError:
            raise ExchangeRestError(400, f"Invalid JSON response: {response_body[:100]!r}")

    async def _request_once(
        self,
        method: HTTPMethod,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None
    ) -> Any:
        await self._ensure_session()
        url = self._url(endpoint)

        async with self._semaphore:
            try:
                async with self._session.request(method.value, url, params=params, json=json_data) as response:
                    body = await response.read()

                    if response.status == 429:
                        retry_after = response.headers.get('Retry-After')
                        raise RateLimitErrorRest(
                            429, f"Rate limit exceeded: {url}",
                            retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None
                        )
                    if response.status >= 500:
                        raise ExchangeServerError(response.status, f"{url}: {body[:200]!r}")
                    if response.status >= 400:
                        raise ExchangeRestError(response.status, f"{url}: {body[:200]!r}")

                    return self._parse_response(body)

            except aiohttp.ClientConnectionError as e:
                raise ExchangeConnectionRestError(503, f"Connection failed for {url}: {e}")

    async def request(
        self,
        method: HTTPMethod,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Execute HTTP request with retries; returns the decoded JSON body."""
        return await self._request_with_retry(method, endpoint, params=params, json_data=json_data)

    async def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request(HTTPMethod.GET, endpoint, params=params)

    async def post(self, endpoint: str, json_data: Optional[Dict[str, Any]] = None,
                   params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request(HTTPMethod.POST, endpoint, params=params, json_data=json_data)

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
