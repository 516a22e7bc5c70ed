"""
Bybit Error Mapper

Maps venue ``ret_code`` values and HTTP status codes to specific exception
types. Two tiers:

1. In-body venue code (fine-grained business faults). Every decoded JSON
   object is judged here: only ``ret_code == 0`` is success. Mapped codes
   raise their kind; unmapped or missing codes raise a generic
   ExchangeError carrying the code verbatim.
2. HTTP status (coarse transport faults), consulted when the body is not a
   decoded JSON object. No entry means the transport default path decides.
"""

import json
from typing import Any

from .exceptions import (
    AuthenticationError,
    BadRequestError,
    ExchangeError,
    InsufficientFundsError,
    InvalidNonceError,
    InvalidOrderError,
    OrderNotFoundError,
    PermissionDeniedError,
    RateLimitError,
)
from .strategies import ErrorMapperChain

EXCHANGE_ID = "bybit"

HTTP_EXCEPTIONS: dict[int, type[ExchangeError]] = {
    403: RateLimitError,  # Forbidden -- too many requests
}

EXACT_EXCEPTIONS: dict[int, type[ExchangeError]] = {
    10001: BadRequestError,  # parameter error
    10002: InvalidNonceError,  # request expired, check timestamp and recv_window
    10003: AuthenticationError,  # invalid apikey
    10004: AuthenticationError,  # invalid sign
    10005: PermissionDeniedError,  # permission denied for current apikey
    10006: RateLimitError,  # too many requests
    10007: AuthenticationError,  # api_key not found in request parameters
    10010: PermissionDeniedError,  # request ip mismatch
    10017: BadRequestError,  # request path not found or request method is invalid
    20001: InvalidOrderError,  # order not exists
    20003: InvalidOrderError,  # missing parameter side
    20004: InvalidOrderError,  # invalid parameter side
    20005: InvalidOrderError,  # missing parameter symbol
    20006: InvalidOrderError,  # invalid parameter symbol
    20007: InvalidOrderError,  # missing parameter order_type
    20008: InvalidOrderError,  # invalid parameter order_type
    20009: InvalidOrderError,  # missing parameter qty
    20010: InvalidOrderError,  # qty must be greater than 0
    20011: InvalidOrderError,  # qty must be an integer
    20012: InvalidOrderError,  # qty must be greater than zero and less than 1 million
    20013: InvalidOrderError,  # missing parameter price
    20014: InvalidOrderError,  # price must be greater than 0
    20015: InvalidOrderError,  # missing parameter time_in_force
    20016: InvalidOrderError,  # invalid value for parameter time_in_force
    20017: InvalidOrderError,  # missing parameter order_id
    20018: InvalidOrderError,  # invalid date format
    20019: InvalidOrderError,  # missing parameter stop_px
    20020: InvalidOrderError,  # missing parameter base_price
    20021: InvalidOrderError,  # missing parameter stop_order_id
    20022: BadRequestError,  # missing parameter leverage
    20023: BadRequestError,  # leverage must be a number
    20031: BadRequestError,  # leverage must be greater than zero
    20070: BadRequestError,  # missing parameter margin
    20071: BadRequestError,  # margin must be greater than zero
    20084: BadRequestError,  # order_id or order_link_id is required
    30001: BadRequestError,  # order_link_id is repeated
    30003: InvalidOrderError,  # qty must be more than the minimum allowed
    30004: InvalidOrderError,  # qty must be less than the maximum allowed
    30005: InvalidOrderError,  # price exceeds maximum allowed
    30007: InvalidOrderError,  # price exceeds minimum allowed
    30008: InvalidOrderError,  # invalid order_type
    30009: ExchangeError,  # no position found
    30010: InsufficientFundsError,  # insufficient wallet balance
    30011: PermissionDeniedError,  # position is undergoing liquidation
    30012: PermissionDeniedError,  # position is undergoing ADL
    30013: PermissionDeniedError,  # position is in liq or adl status
    30014: InvalidOrderError,  # closing order qty greater than size
    30015: InvalidOrderError,  # closing order side should be opposite
    30016: ExchangeError,  # TS and SL must be cancelled first while closing position
    30017: InvalidOrderError,  # estimated fill price lower than current Buy liq_price
    30018: InvalidOrderError,  # estimated fill price higher than current Sell liq_price
    30019: InvalidOrderError,  # cannot attach TP/SL params for non-opening order
    30020: InvalidOrderError,  # position already has TP/SL params
    30021: InvalidOrderError,  # cannot afford estimated position_margin
    30022: InvalidOrderError,  # estimated buy liq_price higher than mark_price
    30023: InvalidOrderError,  # estimated sell liq_price lower than mark_price
    30024: InvalidOrderError,  # cannot set TP/SL/TS for zero-position
    30025: InvalidOrderError,  # trigger price should be bigger than 10% of last price
    30026: InvalidOrderError,  # price too high
    30027: InvalidOrderError,  # take profit price should be higher than last price
    30028: InvalidOrderError,  # stop loss between liquidation price and last price
    30029: InvalidOrderError,  # stop loss between last price and liquidation price
    30030: InvalidOrderError,  # take profit price should be lower than last price
    30031: InsufficientFundsError,  # insufficient available balance for order cost
    30032: InvalidOrderError,  # order has been filled or cancelled
    30033: RateLimitError,  # number of stop orders exceeds maximum limit
    30034: OrderNotFoundError,  # no order found
    30035: RateLimitError,  # too fast to cancel
    30036: ExchangeError,  # expected position value exceeds current risk limit
    30037: InvalidOrderError,  # order already cancelled
    30041: ExchangeError,  # no position found
    30042: InsufficientFundsError,  # insufficient wallet balance
    30043: PermissionDeniedError,  # position is undergoing liquidation
    30044: PermissionDeniedError,  # position is undergoing ADL
    30045: PermissionDeniedError,  # position is not in normal status
    30049: InsufficientFundsError,  # insufficient available balance
    30050: ExchangeError,  # adjustment would trigger immediate liquidation
    30051: ExchangeError,  # risk limit prevents leverage adjustment
    30052: ExchangeError,  # leverage can not be less than 1
    30054: ExchangeError,  # position margin is invalid
    30057: ExchangeError,  # requested quantity exceeds risk limit
    30063: ExchangeError,  # reduce-only rule not satisfied
    30067: InsufficientFundsError,  # insufficient available balance
    30068: ExchangeError,  # exit value must be positive
    34026: ExchangeError,  # the limit is no change
}


def normalize_code(code: Any) -> int | str | None:
    """Venue codes arrive as ints or numeric strings; compare them as ints."""
    if code is None or isinstance(code, bool):
        return None
    try:
        return int(code)
    except (TypeError, ValueError):
        return str(code)


def build_feedback(body: Any, raw_body: str) -> str:
    """Identifying prefix plus the raw response, for diagnosability."""
    if not raw_body and body is not None:
        raw_body = json.dumps(body, separators=(",", ":"))
    return f"{EXCHANGE_ID} {raw_body}"


class VenueCodeHandler:
    """Classify every decoded JSON object body by its ``ret_code``."""

    def __init__(self, exceptions: dict[int, type[ExchangeError]] | None = None):
        self.exceptions = EXACT_EXCEPTIONS if exceptions is None else exceptions

    def can_handle(self, status_code: int, body: Any) -> bool:
        return isinstance(body, dict)

    def handle(
        self,
        status_code: int,
        body: Any,
        raw_body: str,
        endpoint: str | None,
    ) -> Exception | None:
        code = normalize_code(body.get("ret_code"))
        if code == 0:
            return None
        feedback = build_feedback(body, raw_body)
        error_class = self.exceptions.get(code, ExchangeError)
        return error_class(
            feedback, code=code, status_code=status_code, endpoint=endpoint
        )


class HttpStatusHandler:
    """Classify by HTTP status when the body is not a JSON object."""

    def __init__(self, exceptions: dict[int, type[ExchangeError]] | None = None):
        self.exceptions = HTTP_EXCEPTIONS if exceptions is None else exceptions

    def can_handle(self, status_code: int, body: Any) -> bool:
        return status_code in self.exceptions

    def handle(
        self,
        status_code: int,
        body: Any,
        raw_body: str,
        endpoint: str | None,
    ) -> Exception | None:
        feedback = f"{EXCHANGE_ID} {status_code} {raw_body}".rstrip()
        return self.exceptions[status_code](
            feedback, status_code=status_code, endpoint=endpoint
        )


def create_error_mapper_chain() -> ErrorMapperChain:
    """Factory to create the pre-configured two-tier chain."""
    chain = ErrorMapperChain()
    chain.register(VenueCodeHandler())
    chain.register(HttpStatusHandler())
    return chain


class BybitErrorClassifier:
    """Single point of translation from venue-shaped failures to exceptions."""

    def __init__(self, chain: ErrorMapperChain | None = None):
        self.chain = chain or create_error_mapper_chain()

    def classify(
        self,
        status_code: int,
        body: Any,
        raw_body: str = "",
        endpoint: str | None = None,
    ) -> Exception | None:
        """Return the exception for a failed response, or None.

        Args:
            status_code: HTTP status code
            body: JSON-decoded body, None when unparseable
            raw_body: Raw response text, quoted in the error message
            endpoint: Request path, attached to the exception

        Returns:
            Mapped exception, generic ExchangeError for unmapped or missing
            codes, or None when neither tier claims the response
        """
        return self.chain.map_error(status_code, body, raw_body, endpoint)
