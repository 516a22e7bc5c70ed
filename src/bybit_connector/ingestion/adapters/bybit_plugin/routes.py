"""Bybit endpoint table.

Every endpoint the connector can call is a member of ``Route``; callers
pick routes through lookup tables rather than by building method names,
so the full set is statically enumerable.
"""

import enum

from bybit_connector.shared.models import ApiScope, HttpMethod, OrderSide

_GET = HttpMethod.GET
_POST = HttpMethod.POST


class Route(enum.Enum):
    """(scope, http method, path) for one venue endpoint."""

    # ---------- public ----------
    ORDER_BOOK_L2 = (ApiScope.PUBLIC, _GET, "orderBook/L2")
    KLINE_LIST = (ApiScope.PUBLIC, _GET, "kline/list")
    TICKERS = (ApiScope.PUBLIC, _GET, "tickers")
    TRADING_RECORDS = (ApiScope.PUBLIC, _GET, "trading-records")
    SYMBOLS = (ApiScope.PUBLIC, _GET, "symbols")
    TIME = (ApiScope.PUBLIC, _GET, "time")
    ANNOUNCEMENT = (ApiScope.PUBLIC, _GET, "announcement")
    GET_ORDER_BOOK = (ApiScope.PUBLIC, _GET, "get_order_book")

    # ---------- private ----------
    ORDER = (ApiScope.PRIVATE, _GET, "order")
    STOP_ORDER = (ApiScope.PRIVATE, _GET, "stop-order")
    POSITION_LIST = (ApiScope.PRIVATE, _GET, "position/list")
    WALLET_BALANCE = (ApiScope.PRIVATE, _GET, "wallet/balance")
    EXECUTION_LIST = (ApiScope.PRIVATE, _GET, "execution/list")
    ORDER_CREATE = (ApiScope.PRIVATE, _POST, "order/create")
    ORDER_CANCEL = (ApiScope.PRIVATE, _POST, "order/cancel")
    ORDER_CANCEL_ALL = (ApiScope.PRIVATE, _POST, "order/cancelAll")
    STOP_ORDER_CANCEL_ALL = (ApiScope.PRIVATE, _POST, "stop-order/cancelAll")

    BUY = (ApiScope.PRIVATE, _GET, "buy")
    SELL = (ApiScope.PRIVATE, _GET, "sell")
    EDIT = (ApiScope.PRIVATE, _GET, "edit")
    CANCEL = (ApiScope.PRIVATE, _GET, "cancel")
    CANCEL_ALL = (ApiScope.PRIVATE, _GET, "cancel_all")
    CANCEL_ALL_BY_INSTRUMENT = (ApiScope.PRIVATE, _GET, "cancel_all_by_instrument")
    GET_ORDER_STATE = (ApiScope.PRIVATE, _GET, "get_order_state")
    GET_OPEN_ORDERS_BY_CURRENCY = (
        ApiScope.PRIVATE,
        _GET,
        "get_open_orders_by_currency",
    )
    GET_OPEN_ORDERS_BY_INSTRUMENT = (
        ApiScope.PRIVATE,
        _GET,
        "get_open_orders_by_instrument",
    )
    GET_ORDER_HISTORY_BY_CURRENCY = (
        ApiScope.PRIVATE,
        _GET,
        "get_order_history_by_currency",
    )
    GET_ORDER_HISTORY_BY_INSTRUMENT = (
        ApiScope.PRIVATE,
        _GET,
        "get_order_history_by_instrument",
    )
    GET_USER_TRADES_BY_ORDER = (ApiScope.PRIVATE, _GET, "get_user_trades_by_order")
    GET_USER_TRADES_BY_CURRENCY = (
        ApiScope.PRIVATE,
        _GET,
        "get_user_trades_by_currency",
    )
    GET_USER_TRADES_BY_CURRENCY_AND_TIME = (
        ApiScope.PRIVATE,
        _GET,
        "get_user_trades_by_currency_and_time",
    )
    GET_USER_TRADES_BY_INSTRUMENT = (
        ApiScope.PRIVATE,
        _GET,
        "get_user_trades_by_instrument",
    )
    GET_USER_TRADES_BY_INSTRUMENT_AND_TIME = (
        ApiScope.PRIVATE,
        _GET,
        "get_user_trades_by_instrument_and_time",
    )
    GET_DEPOSITS = (ApiScope.PRIVATE, _GET, "get_deposits")
    GET_WITHDRAWALS = (ApiScope.PRIVATE, _GET, "get_withdrawals")
    WITHDRAW = (ApiScope.PRIVATE, _GET, "withdraw")

    # ---------- openapi ----------
    ORDER_LIST = (ApiScope.OPENAPI, _GET, "order/list")
    STOP_ORDER_LIST = (ApiScope.OPENAPI, _GET, "stop-order/list")
    RISK_LIMIT_LIST = (ApiScope.OPENAPI, _GET, "wallet/risk-limit/list")
    RISK_LIMIT = (ApiScope.OPENAPI, _GET, "wallet/risk-limit")
    PREV_FUNDING_RATE = (ApiScope.OPENAPI, _GET, "funding/prev-funding-rate")
    PREV_FUNDING = (ApiScope.OPENAPI, _GET, "funding/prev-funding")
    PREDICTED_FUNDING = (ApiScope.OPENAPI, _GET, "funding/predicted-funding")
    API_KEY = (ApiScope.OPENAPI, _GET, "api-key")
    WALLET_FUND_RECORDS = (ApiScope.OPENAPI, _GET, "wallet/fund/records")
    WALLET_WITHDRAW_LIST = (ApiScope.OPENAPI, _GET, "wallet/withdraw/list")
    ORDER_REPLACE = (ApiScope.OPENAPI, _POST, "order/replace")
    STOP_ORDER_CREATE = (ApiScope.OPENAPI, _POST, "stop-order/create")
    STOP_ORDER_CANCEL = (ApiScope.OPENAPI, _POST, "stop-order/cancel")
    STOP_ORDER_REPLACE = (ApiScope.OPENAPI, _POST, "stop-order/replace")
    POSITION_TRADING_STOP = (ApiScope.OPENAPI, _POST, "position/trading-stop")

    # ---------- position / user ----------
    CHANGE_POSITION_MARGIN = (ApiScope.POSITION, _POST, "change-position-margin")
    LEVERAGE = (ApiScope.USER, _GET, "leverage")
    LEVERAGE_SAVE = (ApiScope.USER, _POST, "leverage/save")

    def __init__(self, scope: ApiScope, method: HttpMethod, path: str):
        self.scope = scope
        self.method = method
        self.path = path


ORDER_ROUTES_BY_SIDE: dict[OrderSide, Route] = {
    OrderSide.BUY: Route.BUY,
    OrderSide.SELL: Route.SELL,
}

OPEN_ORDER_ROUTES = {
    "currency": Route.GET_OPEN_ORDERS_BY_CURRENCY,
    "instrument": Route.GET_OPEN_ORDERS_BY_INSTRUMENT,
}

CLOSED_ORDER_ROUTES = {
    "currency": Route.GET_ORDER_HISTORY_BY_CURRENCY,
    "instrument": Route.GET_ORDER_HISTORY_BY_INSTRUMENT,
}

# (by instrument?, with start time?) -> route
MY_TRADES_ROUTES: dict[tuple[bool, bool], Route] = {
    (False, False): Route.GET_USER_TRADES_BY_CURRENCY,
    (False, True): Route.GET_USER_TRADES_BY_CURRENCY_AND_TIME,
    (True, False): Route.GET_USER_TRADES_BY_INSTRUMENT,
    (True, True): Route.GET_USER_TRADES_BY_INSTRUMENT_AND_TIME,
}


def build_request_path(scope: ApiScope, path: str, version: str = "v2") -> str:
    """Compose the request path for a scope.

    public/private: ``/{version}/{scope}/{path}``
    openapi: ``/open-api/{path}``
    position/user: ``{path}/{scope}/{path}`` (the scope name follows the
    path segment on these routes)
    """
    if scope in (ApiScope.PUBLIC, ApiScope.PRIVATE):
        return f"/{version}/{scope.value}/{path}"
    if scope is ApiScope.OPENAPI:
        return f"/open-api/{path}"
    return f"{path}/{scope.value}/{path}"
