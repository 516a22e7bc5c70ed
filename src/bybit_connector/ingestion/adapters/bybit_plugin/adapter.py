"""
Bybit adapter: the normalized trading interface.

Each operation follows the same shape: validate the caller's arguments
(before any network call), make sure markets are loaded, resolve the
symbol or currency to venue ids, send exactly one request through the
client and normalize the result. Caller ``params`` are merged last and
override the computed request fields.
"""

from collections.abc import Mapping
from typing import Any

from bybit_connector.infrastructure.observability import get_ingestion_logger
from bybit_connector.ingestion.adapters.base import BaseAdapter
from bybit_connector.ingestion.config.value_objects import CallOptions
from bybit_connector.ingestion.ports import IMarketRegistry
from bybit_connector.shared.models import (
    OHLCV,
    BalanceSnapshot,
    Market,
    MarketType,
    Order,
    OrderBook,
    OrderType,
    Ticker,
    Trade,
    Transaction,
    WithdrawalReceipt,
)

from .client import BybitClient
from .clock import seconds
from .exceptions import (
    ArgumentsRequiredError,
    BadRequestError,
    ExchangeError,
    InvalidAddressError,
)
from .fields import safe_float2, safe_string, safe_timestamp, safe_value
from .mappers import get_bybit_interval, parse_timeframe
from .normalizers import BybitNormalizer
from .precision import amount_to_precision, price_to_precision
from .registry import MarketRegistry
from .routes import (
    CLOSED_ORDER_ROUTES,
    MY_TRADES_ROUTES,
    OPEN_ORDER_ROUTES,
    ORDER_ROUTES_BY_SIDE,
    Route,
)

logger = get_ingestion_logger("bybit-adapter", exchange="bybit")

PRICED_ORDER_TYPES = {OrderType.LIMIT.value, OrderType.STOP_LIMIT.value}
STOP_ORDER_TYPES = {OrderType.STOP_LIMIT.value}
STOP_PRICE_KEYS = ("stop_price", "stopPrice")


def check_address(address: Any) -> str:
    """Reject empty addresses and addresses containing whitespace.

    Raises:
        InvalidAddressError: If the address is unusable
    """
    if not isinstance(address, str) or not address:
        raise InvalidAddressError(f"bybit address is invalid: {address!r}")
    if any(ch.isspace() for ch in address):
        raise InvalidAddressError(f"bybit address contains whitespace: {address!r}")
    return address


def _merge(request: Mapping[str, Any], params: Mapping[str, Any] | None) -> dict:
    return {**request, **(params or {})}


class BybitAdapter(BaseAdapter):
    """Normalized trading interface over the Bybit v2 inverse-perpetual API."""

    venue = "bybit"
    supported_market_types = {MarketType.FUTURE}

    def __init__(
        self,
        client: BybitClient,
        registry: IMarketRegistry | None = None,
        options: CallOptions | None = None,
        testnet: bool = False,
    ):
        """
        Args:
            client: Request client (signing, transport, error mapping)
            registry: Market registry; a MarketRegistry over ``fetch_markets``
                is created when omitted
            options: Default per-call options
            testnet: Whether the client points at the testnet host
        """
        super().__init__(
            api_key=client.config.api_key,
            api_secret=client.config.secret,
            testnet=testnet,
        )
        self.client = client
        self.clock = client.clock
        self.options = options or client.config.options
        self.registry = registry or MarketRegistry(self.fetch_markets)

    def _resolve_options(self, options: CallOptions | None) -> CallOptions:
        return options or self.options

    @property
    def normalizer(self) -> BybitNormalizer:
        return BybitNormalizer(self.registry.markets_by_id)

    # ==================== lifecycle ====================

    async def connect(self) -> None:
        """Load markets (idempotent)."""
        if self._connected:
            return
        await self.load_markets()
        self._connected = True

    async def close(self) -> None:
        await self.client.http_client.close()
        self._connected = False

    # ==================== time ====================

    async def fetch_time(
        self,
        params: Mapping[str, Any] | None = None,
        options: CallOptions | None = None,
    ) -> int | None:
        """Venue server time in milliseconds (``time_now`` is fractional seconds)."""
        response = await self.client.request(Route.TIME, params, options)
        return safe_timestamp(response, "time_now")

    async def _fetch_server_time(self) -> int:
        server_time = await self.fetch_time()
        if server_time is None:
            raise ExchangeError("bybit time response has no time_now")
        return server_time

    async def load_time_difference(self) -> int:
        """Resync the clock offset against the venue and return it."""
        return await self.clock.resync(self._fetch_server_time)

    # ==================== markets ====================

    async def fetch_markets(
        self,
        params: Mapping[str, Any] | None = None,
        options: CallOptions | None = None,
    ) -> list[Market]:
        options = self._resolve_options(options)
        if options.time_adjustment_enabled:
            await self.load_time_difference()
        response = await self.client.request(Route.SYMBOLS, params, options)
        return self.normalizer.parse_markets(safe_value(response, "result", []))

    async def load_markets(
        self, reload: bool = False, options: CallOptions | None = None
    ) -> dict[str, Market]:
        return await self.registry.load_markets(reload, options=options)

    def market(self, symbol: str) -> Market:
        return self.registry.market(symbol)

    # ==================== account ====================

    async def fetch_balance(
        self,
        params: Mapping[str, Any] | None = None,
        options: CallOptions | None = None,
    ) -> BalanceSnapshot:
        options = self._resolve_options(options)
        await self.load_markets(options=options)
        currency = self.registry.currency(options.default_currency_code)
        response = await self.client.request(
            Route.WALLET_BALANCE, _merge({"coin": currency.id}, params), options
        )
        return self.normalizer.parse_balance(response)

    # ==================== market data ====================

    async def fetch_ticker(
        self,
        symbol: str,
        params: Mapping[str, Any] | None = None,
        options: CallOptions | None = None,
    ) -> Ticker:
        await self.load_markets(options=options)
        market = self.market(symbol)
        response = await self.client.request(
            Route.TICKERS, _merge({"symbol": market.id}, params), options
        )
        result = safe_value(response, "result", {})
        if isinstance(result, list):
            matching = [
                entry for entry in result if safe_string(entry, "symbol") == market.id
            ]
            candidates = matching or result
            result = candidates[0] if candidates else {}
        return self.normalizer.parse_ticker(result, market)

    async def fetch_tickers(
        self,
        symbols: list[str] | None = None,
        params: Mapping[str, Any] | None = None,
        options: CallOptions | None = None,
    ) -> dict[str, Ticker]:
        await self.load_markets(options=options)
        response = await self.client.request(Route.TICKERS, params, options)
        return self.normalizer.parse_tickers(
            safe_value(response, "result", []), symbols
        )

    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: int | None = None,
        limit: int | None = None,
        params: Mapping[str, Any] | None = None,
        options: CallOptions | None = None,
    ) -> list[OHLCV]:
        """Candles for ``symbol``.

        The venue needs a start time in seconds: ``since // 1000`` when given,
        otherwise ``now - limit * timeframe``.

        Raises:
            ArgumentsRequiredError: If neither since nor limit is given
            BadRequestError: If the timeframe is not supported
        """
        if since is None and limit is None:
            raise ArgumentsRequiredError(
                "bybit fetch_ohlcv requires a since argument or a limit argument"
            )
        interval = get_bybit_interval(timeframe)
        duration = parse_timeframe(timeframe)

        await self.load_markets(options=options)
        market = self.market(symbol)
        request: dict[str, Any] = {"symbol": market.id, "interval": interval}
        if since is None:
            request["from"] = seconds() - limit * duration
        else:
            request["from"] = int(since // 1000)
        if limit is not None:
            request["limit"] = limit

        response = await self.client.request(
            Route.KLINE_LIST, _merge(request, params), options
        )
        return self.normalizer.parse_ohlcvs(
            safe_value(response, "result", []), since, limit
        )

    async def fetch_trades(
        self,
        symbol: str,
        since: int | None = None,
        limit: int | None = None,
        params: Mapping[str, Any] | None = None,
        options: CallOptions | None = None,
    ) -> list[Trade]:
        await self.load_markets(options=options)
        market = self.market(symbol)
        request: dict[str, Any] = {"symbol": market.id}
        if limit is not None:
            request["count"] = limit
        response = await self.client.request(
            Route.TRADING_RECORDS, _merge(request, params), options
        )
        return self.normalizer.parse_trades(
            safe_value(response, "result", []), market, since, limit
        )

    async def fetch_order_book(
        self,
        symbol: str,
        limit: int | None = None,
        params: Mapping[str, Any] | None = None,
        options: CallOptions | None = None,
    ) -> OrderBook:
        await self.load_markets(options=options)
        market = self.market(symbol)
        request: dict[str, Any] = {"instrument_name": market.id}
        if limit is not None:
            request["depth"] = limit
        response = await self.client.request(
            Route.GET_ORDER_BOOK, _merge(request, params), options
        )
        return self.normalizer.parse_order_book(
            safe_value(response, "result", {}),
            market,
            timestamp=safe_timestamp(response, "time_now"),
        )

    # ==================== orders ====================

    def _parse_order_result(self, response: Any, market: Market | None) -> Order:
        """Order responses nest {order, trades}; the trades ride along on the order."""
        result = safe_value(response, "result", {})
        order = dict(safe_value(result, "order", {}))
        order["trades"] = safe_value(result, "trades", [])
        return self.normalizer.parse_order(order, market)

    async def fetch_order(
        self,
        id: str,
        symbol: str | None = None,
        params: Mapping[str, Any] | None = None,
        options: CallOptions | None = None,
    ) -> Order:
        await self.load_markets(options=options)
        market = self.market(symbol) if symbol is not None else None
        response = await self.client.request(
            Route.GET_ORDER_STATE, _merge({"order_id": id}, params), options
        )
        return self.normalizer.parse_order(safe_value(response, "result", {}), market)

    async def create_order(
        self,
        symbol: str,
        type: str,
        side: str,
        amount: float,
        price: float | None = None,
        params: Mapping[str, Any] | None = None,
        options: CallOptions | None = None,
    ) -> Order:
        """Place an order.

        ``limit`` and ``stop_limit`` orders need ``price``; ``stop_limit``
        also needs ``stop_price`` (or ``stopPrice``) in ``params``.

        Raises:
            ArgumentsRequiredError: Missing price or stop price
            BadRequestError: Unknown side
        """
        params = dict(params or {})
        # venue payloads spell these "Buy"/"Limit"
        type = str(getattr(type, "value", type)).lower()
        side = str(getattr(side, "value", side)).lower()
        route = ORDER_ROUTES_BY_SIDE.get(side)
        if route is None:
            raise BadRequestError(f"bybit create_order does not support side {side}")
        if type in PRICED_ORDER_TYPES and price is None:
            raise ArgumentsRequiredError(
                f"bybit create_order requires a price argument for a {type} order"
            )
        stop_price = None
        if type in STOP_ORDER_TYPES:
            stop_price = safe_float2(params, *STOP_PRICE_KEYS)
            if stop_price is None:
                raise ArgumentsRequiredError(
                    "bybit create_order requires a stop_price or stopPrice param "
                    f"for a {type} order"
                )
        for key in STOP_PRICE_KEYS:
            params.pop(key, None)

        await self.load_markets(options=options)
        market = self.market(symbol)
        request: dict[str, Any] = {
            "instrument_name": market.id,
            "amount": amount_to_precision(market, amount),
            "type": type,
        }
        if type in PRICED_ORDER_TYPES:
            request["price"] = price_to_precision(market, price)
        if stop_price is not None:
            request["stop_price"] = price_to_precision(market, stop_price)

        response = await self.client.request(route, _merge(request, params), options)
        order = self._parse_order_result(response, market)
        logger.info(
            "order_created",
            symbol=market.symbol,
            side=side,
            order_type=type,
            order_id=order.id,
        )
        return order

    async def edit_order(
        self,
        id: str,
        symbol: str,
        type: str | None = None,
        side: str | None = None,
        amount: float | None = None,
        price: float | None = None,
        params: Mapping[str, Any] | None = None,
        options: CallOptions | None = None,
    ) -> Order:
        """Amend amount and price of an open order. Both are required."""
        if amount is None:
            raise ArgumentsRequiredError("bybit edit_order requires an amount argument")
        if price is None:
            raise ArgumentsRequiredError("bybit edit_order requires a price argument")

        await self.load_markets(options=options)
        market = self.market(symbol)
        request = {
            "order_id": id,
            "amount": amount_to_precision(market, amount),
            "price": price_to_precision(market, price),
        }
        response = await self.client.request(
            Route.EDIT, _merge(request, params), options
        )
        return self._parse_order_result(response, market)

    async def cancel_order(
        self,
        id: str,
        symbol: str | None = None,
        params: Mapping[str, Any] | None = None,
        options: CallOptions | None = None,
    ) -> Order:
        await self.load_markets(options=options)
        market = self.market(symbol) if symbol is not None else None
        response = await self.client.request(
            Route.CANCEL, _merge({"order_id": id}, params), options
        )
        order = self.normalizer.parse_order(safe_value(response, "result", {}), market)
        logger.info("order_canceled", order_id=id)
        return order

    async def cancel_all_orders(
        self,
        symbol: str | None = None,
        params: Mapping[str, Any] | None = None,
        options: CallOptions | None = None,
    ) -> Any:
        """Cancel every open order (for ``symbol`` when given). Returns the raw envelope."""
        await self.load_markets(options=options)
        request = {}
        route = Route.CANCEL_ALL
        if symbol is not None:
            route = Route.CANCEL_ALL_BY_INSTRUMENT
            request["instrument_name"] = self.market(symbol).id
        response = await self.client.request(route, _merge(request, params), options)
        logger.info("orders_canceled", symbol=symbol)
        return response

    def _order_query(
        self, symbol: str | None, options: CallOptions
    ) -> tuple[str, dict[str, Any], Market | None]:
        """By instrument when a symbol is given, else by the default currency."""
        if symbol is None:
            currency = self.registry.currency(options.default_currency_code)
            return "currency", {"currency": currency.id}, None
        market = self.market(symbol)
        return "instrument", {"instrument_name": market.id}, market

    async def fetch_open_orders(
        self,
        symbol: str | None = None,
        since: int | None = None,
        limit: int | None = None,
        params: Mapping[str, Any] | None = None,
        options: CallOptions | None = None,
    ) -> list[Order]:
        options = self._resolve_options(options)
        await self.load_markets(options=options)
        key, request, market = self._order_query(symbol, options)
        response = await self.client.request(
            OPEN_ORDER_ROUTES[key], _merge(request, params), options
        )
        return self.normalizer.parse_orders(
            safe_value(response, "result", []), market, since, limit
        )

    async def fetch_closed_orders(
        self,
        symbol: str | None = None,
        since: int | None = None,
        limit: int | None = None,
        params: Mapping[str, Any] | None = None,
        options: CallOptions | None = None,
    ) -> list[Order]:
        options = self._resolve_options(options)
        await self.load_markets(options=options)
        key, request, market = self._order_query(symbol, options)
        response = await self.client.request(
            CLOSED_ORDER_ROUTES[key], _merge(request, params), options
        )
        return self.normalizer.parse_orders(
            safe_value(response, "result", []), market, since, limit
        )

    # ==================== fills ====================

    @staticmethod
    def _trades_from_result(response: Any) -> list:
        result = safe_value(response, "result", {})
        if isinstance(result, list):
            return result
        return safe_value(result, "trades", [])

    async def fetch_order_trades(
        self,
        id: str,
        symbol: str | None = None,
        since: int | None = None,
        limit: int | None = None,
        params: Mapping[str, Any] | None = None,
        options: CallOptions | None = None,
    ) -> list[Trade]:
        await self.load_markets(options=options)
        market = self.market(symbol) if symbol is not None else None
        response = await self.client.request(
            Route.GET_USER_TRADES_BY_ORDER, _merge({"order_id": id}, params), options
        )
        return self.normalizer.parse_trades(
            self._trades_from_result(response), market, since, limit
        )

    async def fetch_my_trades(
        self,
        symbol: str | None = None,
        since: int | None = None,
        limit: int | None = None,
        params: Mapping[str, Any] | None = None,
        options: CallOptions | None = None,
    ) -> list[Trade]:
        options = self._resolve_options(options)
        await self.load_markets(options=options)
        key, request, market = self._order_query(symbol, options)
        request["include_old"] = True
        if since is not None:
            request["start_timestamp"] = since
        if limit is not None:
            request["count"] = limit
        route = MY_TRADES_ROUTES[(key == "instrument", since is not None)]
        response = await self.client.request(route, _merge(request, params), options)
        return self.normalizer.parse_trades(
            self._trades_from_result(response), market, since, limit
        )

    # ==================== transfers ====================

    async def _fetch_transactions(
        self,
        route: Route,
        operation: str,
        code: str | None,
        since: int | None,
        limit: int | None,
        params: Mapping[str, Any] | None,
        options: CallOptions | None,
    ) -> list[Transaction]:
        if code is None:
            raise ArgumentsRequiredError(
                f"bybit {operation} requires a currency code argument"
            )
        await self.load_markets(options=options)
        currency = self.registry.currency(code)
        request: dict[str, Any] = {"currency": currency.id}
        if limit is not None:
            request["count"] = limit
        response = await self.client.request(route, _merge(request, params), options)
        result = safe_value(response, "result", {})
        return self.normalizer.parse_transactions(
            safe_value(result, "data", []), currency, since, limit
        )

    async def fetch_deposits(
        self,
        code: str | None = None,
        since: int | None = None,
        limit: int | None = None,
        params: Mapping[str, Any] | None = None,
        options: CallOptions | None = None,
    ) -> list[Transaction]:
        return await self._fetch_transactions(
            Route.GET_DEPOSITS, "fetch_deposits", code, since, limit, params, options
        )

    async def fetch_withdrawals(
        self,
        code: str | None = None,
        since: int | None = None,
        limit: int | None = None,
        params: Mapping[str, Any] | None = None,
        options: CallOptions | None = None,
    ) -> list[Transaction]:
        return await self._fetch_transactions(
            Route.GET_WITHDRAWALS,
            "fetch_withdrawals",
            code,
            since,
            limit,
            params,
            options,
        )

    async def withdraw(
        self,
        code: str,
        amount: float,
        address: str,
        params: Mapping[str, Any] | None = None,
        options: CallOptions | None = None,
    ) -> WithdrawalReceipt:
        """Request a withdrawal to an address already in the account's address book.

        Raises:
            InvalidAddressError: Before any request, if the address is unusable
        """
        check_address(address)
        await self.load_markets(options=options)
        currency = self.registry.currency(code)
        request = {"currency": currency.id, "address": address, "amount": amount}
        response = await self.client.request(
            Route.WITHDRAW, _merge(request, params), options
        )
        result = safe_value(response, "result", {})
        withdrawal_id = safe_string(result, "id") or safe_string(response, "id")
        logger.info("withdrawal_requested", currency=currency.code, id=withdrawal_id)
        return WithdrawalReceipt(id=withdrawal_id, info=response)
