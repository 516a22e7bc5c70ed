"""
Test fixtures package for ingestion tests.

Provides mock venue responses, a recording fake transport, and helpers.
"""

import copy
import json
from pathlib import Path
from typing import Any
from urllib.parse import parse_qsl, urlsplit

from bybit_connector.ingestion.ports.http import HttpResponse

FIXED_MILLIS = 1583933682448


def load_fixture(fixture_name: str) -> Any:
    """
    Load fixture data from exchange_responses.json.

    Args:
        fixture_name: Name of the fixture to load

    Returns:
        Fixture data (a deep copy; tests may mutate it)

    Example:
        >>> symbols = load_fixture("bybit_symbols")
    """
    fixtures_path = Path(__file__).parent / "exchange_responses.json"

    with open(fixtures_path, encoding="utf-8") as f:
        all_fixtures = json.load(f)

    if fixture_name not in all_fixtures:
        raise KeyError(f"Fixture '{fixture_name}' not found")

    return copy.deepcopy(all_fixtures[fixture_name])


def get_mock_error_response(error_type: str) -> dict:
    """Get mock error envelope."""
    errors = load_fixture("error_responses")

    if error_type not in errors:
        raise KeyError(f"Error type '{error_type}' not found")

    return errors[error_type]


def create_mock_order_record(
    order_state: str = "filled",
    amount: float | None = 40,
    filled_amount: float | None = 40,
    price: float | None = 123.45,
    **overrides: Any,
) -> dict:
    """Create a single raw order snapshot."""
    record = {
        "order_id": "ETH-584849853",
        "instrument_name": "BTCUSD",
        "direction": "buy",
        "order_type": "limit",
        "order_state": order_state,
        "amount": amount,
        "filled_amount": filled_amount,
        "price": price,
        "creation_timestamp": 1550219749056,
        "last_update_timestamp": 1550219749900,
    }
    record.update(overrides)
    return record


class FakeHttpClient:
    """In-memory IHttpClient: answers by request path and records every call.

    ``responses`` maps a request path (e.g. "/v2/public/symbols") to either
    a JSON-able body (served with status 200) or a ready HttpResponse.
    """

    def __init__(self, responses: dict[str, Any] | None = None):
        self.responses = dict(responses or {})
        self.requests: list[dict[str, Any]] = []
        self.closed = False

    def add(self, path: str, response: Any) -> None:
        self.responses[path] = response

    async def send(
        self,
        url: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        body: str | None = None,
    ) -> HttpResponse:
        parts = urlsplit(url)
        self.requests.append(
            {
                "url": url,
                "path": parts.path,
                "query": dict(parse_qsl(parts.query)),
                "method": method,
                "headers": headers or {},
                "body": body,
            }
        )
        if parts.path not in self.responses:
            raise AssertionError(f"unexpected request to {parts.path}")

        response = self.responses[parts.path]
        if isinstance(response, HttpResponse):
            return response
        return HttpResponse(
            status_code=200, body=response, text=json.dumps(response), url=url
        )

    async def close(self) -> None:
        self.closed = True

    def paths(self) -> list[str]:
        return [request["path"] for request in self.requests]

    def last(self, path: str | None = None) -> dict[str, Any]:
        matching = [r for r in self.requests if path is None or r["path"] == path]
        return matching[-1]


__all__ = [
    "FIXED_MILLIS",
    "FakeHttpClient",
    "create_mock_order_record",
    "get_mock_error_response",
    "load_fixture",
]
