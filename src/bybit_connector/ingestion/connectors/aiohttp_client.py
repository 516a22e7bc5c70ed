"""Concrete HTTP client implementation for async requests.

Wraps aiohttp behind IHttpClient abstraction.
"""

import json

import aiohttp

from bybit_connector.ingestion.config.value_objects import HttpClientConfig
from bybit_connector.ingestion.ports.http import (
    HttpResponse,
    IHttpClient,
)


class AiohttpClient(IHttpClient):
    """HTTP client implementation using aiohttp."""

    def __init__(self, config: HttpClientConfig):
        """Initialize HTTP client.

        Args:
            config: HTTP client configuration
        """
        self.config = config
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout)
            headers = {}
            if self.config.user_agent:
                headers["User-Agent"] = self.config.user_agent
            self._session = aiohttp.ClientSession(timeout=timeout, headers=headers)
        return self._session

    async def send(
        self,
        url: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        body: str | None = None,
    ) -> HttpResponse:
        """Execute a pre-built request.

        Args:
            url: Full URL including query string
            method: HTTP method
            headers: HTTP headers
            body: Serialized request body

        Returns:
            HttpResponse; ``body`` is the decoded JSON or None when the
            payload is not JSON, ``text`` is always the raw payload

        Raises:
            aiohttp.ClientError: On connection errors
        """
        session = await self._get_session()

        async with session.request(
            method,
            url,
            headers=headers,
            data=body,
        ) as resp:
            text = await resp.text()
            try:
                parsed = json.loads(text) if text else None
            except ValueError:
                parsed = None
            return HttpResponse(
                status_code=resp.status,
                body=parsed,
                text=text,
                headers=dict(resp.headers),
                url=str(resp.url),
            )

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None
