"""HTTP communication abstractions for adapter plugins.

Separates HTTP transport layer from business logic (signing, error mapping).
Allows easy mocking and swapping of HTTP implementations in tests.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass
class HttpResponse:
    """HTTP response data container."""

    status_code: int
    body: Any  # JSON-decoded response body, None if not parseable
    text: str = ""  # raw response body
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""


class IHttpClient(Protocol):
    """Abstraction for HTTP client.

    Single Responsibility: Execute HTTP requests and return responses.
    Does NOT handle:
    - Request signing
    - Error mapping
    - Retry logic
    """

    async def send(
        self,
        url: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        body: str | None = None,
    ) -> HttpResponse:
        """Execute a request exactly as built by the signer.

        Args:
            url: Full URL including any query string
            method: HTTP method
            headers: HTTP headers
            body: Serialized request body (mutating methods only)

        Raises:
            aiohttp.ClientError: On network or connection errors
            asyncio.TimeoutError: When the total timeout elapses
        """
        ...

    async def close(self) -> None:
        """Release pooled connections."""
        ...
