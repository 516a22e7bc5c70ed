"""Request signing for Bybit endpoints.

Public requests carry their parameters as a plain query string. Every other
scope is authenticated: the caller's parameters are merged with
``api_key``/``recvWindow``/``timestamp``, sorted by key, url-encoded, and
signed with HMAC-SHA256 using the account secret. The signature travels in
the JSON body for mutating methods and in the query string otherwise.
"""

import hashlib
import hmac
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlencode

from bybit_connector.shared.models import ApiScope, HttpMethod

from .exceptions import AuthenticationRequiredError
from .routes import build_request_path


@dataclass(frozen=True)
class Credentials:
    api_key: str | None = None
    secret: str | None = None

    def __repr__(self) -> str:
        return f"Credentials(api_key={self.api_key!r}, secret=***)"


@dataclass(frozen=True)
class SignedRequest:
    """Transport-ready request."""

    url: str
    method: str
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None


def _encode_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def encode_params(params: Mapping[str, Any]) -> str:
    """URL-encode params in their given order."""
    return urlencode([(key, _encode_value(value)) for key, value in params.items()])


def keysort(params: Mapping[str, Any]) -> dict[str, Any]:
    return {key: params[key] for key in sorted(params)}


def hmac_sha256(message: str, secret: str) -> str:
    return hmac.new(
        secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256
    ).hexdigest()


class RequestSigner:
    """Builds signed requests. Holds only static venue settings."""

    def __init__(self, base_url: str, version: str = "v2"):
        self.base_url = base_url.rstrip("/")
        self.version = version

    def _url(self, request_path: str) -> str:
        return f"{self.base_url}/{request_path.lstrip('/')}"

    def sign(
        self,
        path: str,
        scope: ApiScope = ApiScope.PUBLIC,
        method: HttpMethod = HttpMethod.GET,
        params: Mapping[str, Any] | None = None,
        credentials: Credentials | None = None,
        timestamp: int | None = None,
        recv_window: int = 5000,
    ) -> SignedRequest:
        """Build the request for ``path`` in ``scope``.

        Args:
            path: Endpoint path within the scope (e.g. "kline/list")
            scope: Endpoint group; decides the URL prefix and whether to sign
            method: HTTP method
            params: Caller parameters
            credentials: api_key/secret, required for non-public scopes
            timestamp: Venue-adjusted milliseconds, required for non-public scopes
            recv_window: Freshness window in milliseconds

        Raises:
            AuthenticationRequiredError: Non-public scope without api_key/secret
        """
        params = dict(params or {})
        scope = ApiScope(scope)
        method = HttpMethod(method)
        request_path = build_request_path(scope, path, self.version)

        if scope.is_public:
            if params:
                request_path += "?" + encode_params(params)
            return SignedRequest(url=self._url(request_path), method=method.value)

        if credentials is None or not credentials.api_key or not credentials.secret:
            raise AuthenticationRequiredError(
                f"bybit requires api_key and secret for {scope.value} endpoints",
                endpoint=request_path,
            )
        if timestamp is None:
            raise ValueError("timestamp is required for signed requests")

        query = keysort(
            {
                **params,
                "api_key": credentials.api_key,
                "recvWindow": recv_window,
                "timestamp": timestamp,
            }
        )
        auth = encode_params(query)
        signature = hmac_sha256(auth, credentials.secret)

        if method.is_mutating:
            body = json.dumps({**query, "sign": signature}, separators=(",", ":"))
            return SignedRequest(
                url=self._url(request_path),
                method=method.value,
                headers={"Content-Type": "application/json"},
                body=body,
            )

        request_path += "?" + auth + "&sign=" + signature
        return SignedRequest(url=self._url(request_path), method=method.value)
