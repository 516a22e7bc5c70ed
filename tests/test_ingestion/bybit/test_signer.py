"""
Tests for Bybit request signing.

The signature covers the key-sorted, url-encoded query (caller params plus
api_key/recvWindow/timestamp); public requests are never signed.
"""

import hashlib
import hmac
import json
from urllib.parse import parse_qsl, urlsplit

import pytest

from bybit_connector.ingestion.adapters.bybit_plugin.exceptions import (
    AuthenticationRequiredError,
)
from bybit_connector.ingestion.adapters.bybit_plugin.routes import (
    Route,
    build_request_path,
)
from bybit_connector.ingestion.adapters.bybit_plugin.signer import (
    Credentials,
    RequestSigner,
    encode_params,
    keysort,
)
from bybit_connector.shared.models import ApiScope, HttpMethod

BASE_URL = "https://api.bybit.com"
CREDENTIALS = Credentials(api_key="test-key", secret="test-secret")
TIMESTAMP = 1583933682448


def expected_signature(auth: str, secret: str = "test-secret") -> str:
    return hmac.new(secret.encode(), auth.encode(), hashlib.sha256).hexdigest()


@pytest.fixture
def signer():
    return RequestSigner(BASE_URL, version="v2")


class TestPublicRequests:
    """Public scope: plain query string, no credentials needed."""

    def test_public_with_params(self, signer):
        request = signer.sign(
            "kline/list",
            scope=ApiScope.PUBLIC,
            params={"symbol": "BTCUSD", "interval": "1"},
        )

        assert request.url == f"{BASE_URL}/v2/public/kline/list?symbol=BTCUSD&interval=1"
        assert request.method == "GET"
        assert request.body is None
        assert request.headers == {}

    def test_public_without_params_has_no_query(self, signer):
        request = signer.sign("time")

        assert request.url == f"{BASE_URL}/v2/public/time"

    def test_public_ignores_missing_credentials(self, signer):
        request = signer.sign("symbols", credentials=None, timestamp=None)

        assert "sign=" not in request.url


class TestPrivateRequests:
    """Signed scopes."""

    def test_private_get_signs_sorted_query(self, signer):
        request = signer.sign(
            "wallet/balance",
            scope=ApiScope.PRIVATE,
            params={"coin": "BTC"},
            credentials=CREDENTIALS,
            timestamp=TIMESTAMP,
        )

        auth = f"api_key=test-key&coin=BTC&recvWindow=5000&timestamp={TIMESTAMP}"
        assert request.url == (
            f"{BASE_URL}/v2/private/wallet/balance?{auth}"
            f"&sign={expected_signature(auth)}"
        )
        assert request.body is None

    def test_signature_independent_of_param_order(self, signer):
        first = signer.sign(
            "order",
            scope=ApiScope.PRIVATE,
            params={"symbol": "BTCUSD", "order_id": "1", "limit": 5},
            credentials=CREDENTIALS,
            timestamp=TIMESTAMP,
        )
        second = signer.sign(
            "order",
            scope=ApiScope.PRIVATE,
            params={"limit": 5, "order_id": "1", "symbol": "BTCUSD"},
            credentials=CREDENTIALS,
            timestamp=TIMESTAMP,
        )

        assert first.url == second.url

    def test_signature_changes_with_timestamp(self, signer):
        first = signer.sign(
            "order", scope=ApiScope.PRIVATE, credentials=CREDENTIALS, timestamp=1
        )
        second = signer.sign(
            "order", scope=ApiScope.PRIVATE, credentials=CREDENTIALS, timestamp=2
        )

        assert first.url != second.url

    def test_recv_window_is_signed(self, signer):
        request = signer.sign(
            "order",
            scope=ApiScope.PRIVATE,
            credentials=CREDENTIALS,
            timestamp=TIMESTAMP,
            recv_window=10000,
        )

        query = dict(parse_qsl(urlsplit(request.url).query))
        assert query["recvWindow"] == "10000"

    def test_post_puts_signature_in_json_body(self, signer):
        request = signer.sign(
            "order/create",
            scope=ApiScope.PRIVATE,
            method=HttpMethod.POST,
            params={"symbol": "BTCUSD", "qty": 10},
            credentials=CREDENTIALS,
            timestamp=TIMESTAMP,
        )

        assert request.url == f"{BASE_URL}/v2/private/order/create"
        assert request.method == "POST"
        assert request.headers == {"Content-Type": "application/json"}

        body = json.loads(request.body)
        auth = f"api_key=test-key&qty=10&recvWindow=5000&symbol=BTCUSD&timestamp={TIMESTAMP}"
        assert body["sign"] == expected_signature(auth)
        assert body["symbol"] == "BTCUSD"
        assert body["timestamp"] == TIMESTAMP

    def test_booleans_encode_lowercase(self, signer):
        request = signer.sign(
            "get_user_trades_by_currency",
            scope=ApiScope.PRIVATE,
            params={"include_old": True},
            credentials=CREDENTIALS,
            timestamp=TIMESTAMP,
        )

        assert "include_old=true" in request.url

    def test_openapi_path(self, signer):
        request = signer.sign(
            "order/list",
            scope=ApiScope.OPENAPI,
            credentials=CREDENTIALS,
            timestamp=TIMESTAMP,
        )

        assert request.url.startswith(f"{BASE_URL}/open-api/order/list?")

    @pytest.mark.parametrize("route", [Route.CHANGE_POSITION_MARGIN, Route.LEVERAGE])
    def test_position_and_user_paths_repeat_segment(self, signer, route):
        request = signer.sign(
            route.path,
            scope=route.scope,
            method=route.method,
            credentials=CREDENTIALS,
            timestamp=TIMESTAMP,
        )

        scope = route.scope.value
        assert request.url.startswith(f"{BASE_URL}/{route.path}/{scope}/{route.path}")

    @pytest.mark.parametrize(
        "credentials",
        [None, Credentials(), Credentials(api_key="k"), Credentials(secret="s")],
    )
    def test_missing_credentials_raise(self, signer, credentials):
        with pytest.raises(AuthenticationRequiredError):
            signer.sign(
                "wallet/balance",
                scope=ApiScope.PRIVATE,
                credentials=credentials,
                timestamp=TIMESTAMP,
            )


class TestHelpers:
    def test_keysort(self):
        assert list(keysort({"b": 1, "a": 2, "C": 3})) == ["C", "a", "b"]

    def test_encode_params_keeps_order(self):
        assert encode_params({"z": 1, "a": "x y"}) == "z=1&a=x+y"

    def test_credentials_repr_masks_secret(self):
        assert "test-secret" not in repr(CREDENTIALS)

    @pytest.mark.parametrize(
        "scope,expected",
        [
            (ApiScope.PUBLIC, "/v2/public/time"),
            (ApiScope.PRIVATE, "/v2/private/time"),
            (ApiScope.OPENAPI, "/open-api/time"),
            (ApiScope.POSITION, "time/position/time"),
            (ApiScope.USER, "time/user/time"),
        ],
    )
    def test_build_request_path(self, scope, expected):
        assert build_request_path(scope, "time") == expected
