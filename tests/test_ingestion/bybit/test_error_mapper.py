"""
Tests for Bybit error classification.

Venue ret_code wins over HTTP status; any code other than 0 raises,
including a missing one.
"""

import json

import pytest
from fixtures import get_mock_error_response

from bybit_connector.ingestion.adapters.bybit_plugin.error_mapper import (
    EXACT_EXCEPTIONS,
    BybitErrorClassifier,
    normalize_code,
)
from bybit_connector.ingestion.adapters.bybit_plugin.exceptions import (
    AuthenticationError,
    BybitAPIError,
    ExchangeError,
    InsufficientFundsError,
    InvalidNonceError,
    OrderNotFoundError,
    RateLimitError,
)
from bybit_connector.ingestion.adapters.bybit_plugin.strategies import (
    ErrorMapperChain,
)


@pytest.fixture
def classifier():
    return BybitErrorClassifier()


class TestVenueCodes:
    """Tier 1: ret_code in the body."""

    @pytest.mark.parametrize("code,error_class", sorted(EXACT_EXCEPTIONS.items()))
    def test_every_mapped_code_raises_its_kind(self, classifier, code, error_class):
        body = {"ret_code": code, "ret_msg": "x", "result": None}

        error = classifier.classify(200, body, json.dumps(body), "/v2/private/order")

        assert type(error) is error_class
        assert error.code == code
        assert error.endpoint == "/v2/private/order"

    def test_unmapped_code_is_generic_exchange_error(self, classifier):
        body = get_mock_error_response("unmapped")

        error = classifier.classify(200, body)

        assert type(error) is ExchangeError
        assert error.code == 99999

    def test_zero_code_is_success(self, classifier):
        assert classifier.classify(200, {"ret_code": 0, "result": []}) is None

    def test_code_as_string(self, classifier):
        error = classifier.classify(200, {"ret_code": "10003", "ret_msg": "invalid apikey"})

        assert isinstance(error, AuthenticationError)
        assert error.code == 10003

    def test_message_quotes_raw_body(self, classifier):
        body = get_mock_error_response("invalid_sign")
        raw = json.dumps(body)

        error = classifier.classify(200, body, raw)

        assert str(error) == f"bybit {raw}"

    def test_venue_code_wins_over_http_status(self, classifier):
        body = get_mock_error_response("insufficient_balance")

        error = classifier.classify(403, body)

        assert isinstance(error, InsufficientFundsError)
        assert error.status_code == 403

    def test_expired_request_is_invalid_nonce(self, classifier):
        error = classifier.classify(200, get_mock_error_response("expired"))

        assert isinstance(error, InvalidNonceError)

    def test_order_not_found_is_an_invalid_order(self, classifier):
        error = classifier.classify(200, {"ret_code": 30034})

        assert isinstance(error, OrderNotFoundError)
        assert isinstance(error, ExchangeError)
        assert isinstance(error, BybitAPIError)


class TestHttpStatus:
    """Tier 2: HTTP status when the body is not a JSON object."""

    def test_forbidden_is_rate_limit(self, classifier):
        error = classifier.classify(403, None, "Forbidden", "/v2/public/time")

        assert isinstance(error, RateLimitError)
        assert error.status_code == 403
        assert str(error) == "bybit 403 Forbidden"

    def test_unmapped_status_is_left_to_transport(self, classifier):
        assert classifier.classify(500, None, "<html>oops</html>") is None

    def test_forbidden_json_without_code_is_exchange_error(self, classifier):
        error = classifier.classify(403, {"ret_msg": "denied"}, '{"ret_msg":"denied"}')

        assert type(error) is ExchangeError
        assert error.status_code == 403


class TestMissingCode:
    """A decoded object without ret_code == 0 is never success."""

    @pytest.mark.parametrize(
        "body",
        [{"ret_msg": "error", "result": None}, {"result": {}}, {"ret_code": None}],
    )
    def test_object_without_code_raises(self, classifier, body):
        raw = json.dumps(body)

        error = classifier.classify(200, body, raw, "/v2/public/tickers")

        assert type(error) is ExchangeError
        assert error.code is None
        assert error.endpoint == "/v2/public/tickers"
        assert str(error) == f"bybit {raw}"

    def test_non_object_body_is_left_to_http_tier(self, classifier):
        assert classifier.classify(200, [1, 2, 3], "[1,2,3]") is None


class TestChain:
    def test_empty_chain_maps_nothing(self):
        chain = ErrorMapperChain()

        assert chain.map_error(403, {"ret_code": 10003}) is None

    @pytest.mark.parametrize(
        "raw,expected",
        [(10001, 10001), ("20001", 20001), (None, None), (True, None), ("abc", "abc")],
    )
    def test_normalize_code(self, raw, expected):
        assert normalize_code(raw) == expected
