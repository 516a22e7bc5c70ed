"""Bybit payload normalizers.

One converter per entity kind, each a pure function of the raw record plus
optional market/currency context. Converters never raise for missing
optional fields: extraction goes through the typed helpers in ``fields``
and every derived value (change, vwap, cost, remaining...) is skipped, not
defaulted, when one of its inputs is absent.

Symbol resolution is the same everywhere: the venue id found in the
market-by-id index wins, then the market passed as context, then the raw
id itself.
"""

from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from bybit_connector.infrastructure.observability import get_processing_logger
from bybit_connector.shared.models import (
    OHLCV,
    Balance,
    BalanceSnapshot,
    Currency,
    Fee,
    Market,
    MarketLimits,
    MarketPrecision,
    MinMax,
    Order,
    OrderBook,
    TakerOrMaker,
    Ticker,
    Trade,
    Transaction,
    TransactionType,
)

from .fields import (
    iso8601,
    parse8601,
    safe_currency_code,
    safe_float,
    safe_float2,
    safe_integer,
    safe_integer2,
    safe_string,
    safe_string_lower,
    safe_timestamp,
    safe_value,
)
from .mappers import parse_order_status, parse_transaction_status

logger = get_processing_logger("normalizer", exchange="bybit")

T = TypeVar("T")

LIQUIDITY = {"T": TakerOrMaker.TAKER.value, "M": TakerOrMaker.MAKER.value}


class NormalizationError(Exception):
    """Raised when a record lacks the identity fields an entity cannot exist without."""

    pass


def filter_by_since_limit(
    items: Iterable[T],
    since: int | None = None,
    limit: int | None = None,
    key: str = "timestamp",
) -> list[T]:
    """Keep items at or after ``since``, then the first ``limit`` of them."""
    result = list(items)
    if since is not None:
        result = [
            item
            for item in result
            if getattr(item, key) is not None and getattr(item, key) >= since
        ]
    if limit is not None:
        result = result[:limit]
    return result


def _sort_by_timestamp(items: Iterable[T]) -> list[T]:
    return sorted(
        items,
        key=lambda item: (item.timestamp is not None, item.timestamp or 0),
    )


def _parse_level(level: Any) -> tuple[float, float] | None:
    if not isinstance(level, (list, tuple)) or len(level) < 2:
        return None
    try:
        return float(level[0]), float(level[1])
    except (TypeError, ValueError):
        return None


class BybitNormalizer:
    """Converts Bybit payloads to canonical entities."""

    def __init__(self, markets_by_id: Mapping[str, Market] | None = None):
        """
        Args:
            markets_by_id: Venue id -> Market index used for symbol resolution
        """
        self.markets_by_id = markets_by_id if markets_by_id is not None else {}

    # ==================== helpers ====================

    def _resolve_market(
        self, market_id: str | None, market: Market | None = None
    ) -> Market | None:
        if market_id is not None and market_id in self.markets_by_id:
            return self.markets_by_id[market_id]
        return market

    def _resolve_symbol(
        self, market_id: str | None, market: Market | None = None
    ) -> str | None:
        resolved = self._resolve_market(market_id, market)
        if resolved is not None:
            return resolved.symbol
        return market_id

    # ==================== markets ====================

    def parse_market(self, market: dict) -> Market:
        """Convert one entry of ``/v2/public/symbols``.

        Raises:
            NormalizationError: If name, base_currency or quote_currency is missing
        """
        market_id = safe_string(market, "name")
        base_id = safe_string(market, "base_currency")
        quote_id = safe_string(market, "quote_currency")
        if market_id is None or base_id is None or quote_id is None:
            raise NormalizationError(f"bybit market without identity fields: {market}")

        base = safe_currency_code(base_id)
        quote = safe_currency_code(quote_id)
        lot_size_filter = safe_value(market, "lot_size_filter", {})
        price_filter = safe_value(market, "price_filter", {})

        return Market(
            id=market_id,
            symbol=f"{base}/{quote}",
            base=base,
            quote=quote,
            base_id=base_id,
            quote_id=quote_id,
            active=None,
            precision=MarketPrecision(
                amount=safe_float(lot_size_filter, "qty_step"),
                price=safe_float(price_filter, "tick_size"),
            ),
            taker=safe_float(market, "taker_fee"),
            maker=safe_float(market, "maker_fee"),
            limits=MarketLimits(
                amount=MinMax(
                    min=safe_float(lot_size_filter, "min_trading_qty"),
                    max=safe_float(lot_size_filter, "max_trading_qty"),
                ),
                price=MinMax(
                    min=safe_float(price_filter, "min_price"),
                    max=safe_float(price_filter, "max_price"),
                ),
                cost=MinMax(),
            ),
            type="future",
            spot=False,
            future=True,
            option=False,
            info=market,
        )

    def parse_markets(self, markets: Iterable[dict]) -> list[Market]:
        result = []
        for raw in markets:
            try:
                result.append(self.parse_market(raw))
            except NormalizationError as e:
                logger.warning("market_skipped", reason=str(e))
        return result

    # ==================== tickers ====================

    def parse_ticker(self, ticker: dict, market: Market | None = None) -> Ticker:
        """Convert one ``/v2/public/tickers`` entry.

        ``turnover_24h`` is the base volume and ``volume_24h`` the quote
        volume on these inverse contracts. ``price_24h_pcnt`` is a fraction
        and is rescaled to percent.
        """
        market_id = safe_string(ticker, "symbol")
        symbol = self._resolve_symbol(market_id, market)

        last = safe_float(ticker, "last_price")
        open_ = safe_float(ticker, "prev_price_24h")
        percentage = safe_float(ticker, "price_24h_pcnt")
        if percentage is not None:
            percentage *= 100

        change = None
        average = None
        if last is not None and open_ is not None:
            change = last - open_
            average = (open_ + last) / 2

        base_volume = safe_float(ticker, "turnover_24h")
        quote_volume = safe_float(ticker, "volume_24h")
        vwap = None
        if quote_volume is not None and base_volume:
            vwap = quote_volume / base_volume

        return Ticker(
            symbol=symbol,
            timestamp=None,
            datetime=None,
            high=safe_float(ticker, "high_price_24h"),
            low=safe_float(ticker, "low_price_24h"),
            bid=safe_float(ticker, "bid_price"),
            bid_volume=safe_float(ticker, "best_bid_amount"),
            ask=safe_float(ticker, "ask_price"),
            ask_volume=safe_float(ticker, "best_ask_amount"),
            vwap=vwap,
            open=open_,
            close=last,
            last=last,
            previous_close=None,
            change=change,
            percentage=percentage,
            average=average,
            base_volume=base_volume,
            quote_volume=quote_volume,
            info=ticker,
        )

    def parse_tickers(
        self, tickers: Iterable[dict], symbols: list[str] | None = None
    ) -> dict[str, Ticker]:
        result = {}
        for raw in tickers:
            ticker = self.parse_ticker(raw)
            if ticker.symbol is None:
                continue
            if symbols is not None and ticker.symbol not in symbols:
                continue
            result[ticker.symbol] = ticker
        return result

    # ==================== candles ====================

    def parse_ohlcv(self, ohlcv: dict) -> OHLCV:
        """Volume is the venue ``turnover`` field, not ``volume``."""
        return OHLCV(
            timestamp=safe_timestamp(ohlcv, "open_time"),
            open=safe_float(ohlcv, "open"),
            high=safe_float(ohlcv, "high"),
            low=safe_float(ohlcv, "low"),
            close=safe_float(ohlcv, "close"),
            volume=safe_float(ohlcv, "turnover"),
        )

    def parse_ohlcvs(
        self,
        ohlcvs: Iterable[dict],
        since: int | None = None,
        limit: int | None = None,
    ) -> list[OHLCV]:
        candles = _sort_by_timestamp(self.parse_ohlcv(raw) for raw in ohlcvs)
        return filter_by_since_limit(candles, since, limit)

    # ==================== trades ====================

    def parse_trade(self, trade: dict, market: Market | None = None) -> Trade:
        """Convert a public trade or a private execution record.

        Public: id, symbol, price, qty, side, time (ISO-8601).
        Private: trade_id, instrument_name, price, amount, direction,
        timestamp (ms), order_id, order_type, liquidity, fee, fee_currency.
        """
        market_id = safe_string(trade, "symbol") or safe_string(
            trade, "instrument_name"
        )
        resolved = self._resolve_market(market_id, market)
        symbol = resolved.symbol if resolved is not None else market_id

        timestamp = parse8601(safe_string(trade, "time"))
        if timestamp is None:
            timestamp = safe_integer(trade, "timestamp")

        side = safe_string_lower(trade, "side") or safe_string_lower(
            trade, "direction"
        )
        price = safe_float(trade, "price")
        amount = safe_float2(trade, "qty", "amount")
        cost = None
        if price is not None and amount is not None:
            cost = price * amount

        fee = None
        fee_cost = safe_float(trade, "fee")
        if fee_cost is not None:
            fee = Fee(
                cost=fee_cost,
                currency=safe_currency_code(safe_string(trade, "fee_currency")),
            )

        return Trade(
            id=safe_string(trade, "id") or safe_string(trade, "trade_id"),
            symbol=symbol,
            timestamp=timestamp,
            datetime=iso8601(timestamp),
            order=safe_string(trade, "order_id"),
            type=safe_string(trade, "order_type"),
            side=side,
            taker_or_maker=LIQUIDITY.get(safe_string(trade, "liquidity")),
            price=price,
            amount=amount,
            cost=cost,
            fee=fee,
            info=trade,
        )

    def parse_trades(
        self,
        trades: Iterable[dict],
        market: Market | None = None,
        since: int | None = None,
        limit: int | None = None,
    ) -> list[Trade]:
        parsed = _sort_by_timestamp(self.parse_trade(raw, market) for raw in trades)
        return filter_by_since_limit(parsed, since, limit)

    # ==================== orders ====================

    def parse_order(self, order: dict, market: Market | None = None) -> Order:
        """Convert an order snapshot (with optional injected ``trades``)."""
        timestamp = safe_integer(order, "creation_timestamp")
        last_update = safe_integer(order, "last_update_timestamp")
        price = safe_float(order, "price")
        amount = safe_float(order, "amount")
        filled = safe_float(order, "filled_amount")

        last_trade_timestamp = None
        remaining = None
        cost = None
        if filled is not None:
            if filled > 0:
                last_trade_timestamp = last_update
            if amount is not None:
                remaining = amount - filled
            if price is not None:
                cost = price * filled

        market_id = safe_string(order, "instrument_name")
        market = self._resolve_market(market_id, market)
        symbol = market.symbol if market is not None else market_id

        fee = None
        fee_cost = safe_float(order, "commission")
        if fee_cost is not None:
            fee = Fee(
                cost=abs(fee_cost),
                currency=market.base if market is not None else None,
            )

        raw_trades = safe_value(order, "trades")
        trades = []
        if isinstance(raw_trades, list):
            trades = self.parse_trades(raw_trades, market)

        return Order(
            id=safe_string(order, "order_id"),
            symbol=symbol,
            timestamp=timestamp,
            datetime=iso8601(timestamp),
            last_trade_timestamp=last_trade_timestamp,
            type=safe_string(order, "order_type"),
            side=safe_string_lower(order, "direction"),
            price=price,
            average=safe_float(order, "average_price"),
            amount=amount,
            filled=filled,
            remaining=remaining,
            cost=cost,
            status=parse_order_status(safe_string(order, "order_state")),
            fee=fee,
            trades=trades,
            info=order,
        )

    def parse_orders(
        self,
        orders: Iterable[dict],
        market: Market | None = None,
        since: int | None = None,
        limit: int | None = None,
    ) -> list[Order]:
        parsed = _sort_by_timestamp(self.parse_order(raw, market) for raw in orders)
        return filter_by_since_limit(parsed, since, limit)

    # ==================== balances ====================

    def parse_balance(self, response: dict) -> BalanceSnapshot:
        """Convert a ``wallet/balance`` response (envelope included).

        free = available_balance, used = used_margin, total = equity; a
        missing total is derived from free + used, a missing used from
        total - free.
        """
        balances = {}
        wallets = safe_value(response, "result", {})
        if isinstance(wallets, dict):
            for currency_id, wallet in wallets.items():
                code = safe_currency_code(currency_id)
                free = safe_float(wallet, "available_balance")
                used = safe_float(wallet, "used_margin")
                total = safe_float(wallet, "equity")
                if total is None and free is not None and used is not None:
                    total = free + used
                if used is None and total is not None and free is not None:
                    used = total - free
                balances[code] = Balance(free=free, used=used, total=total)
        return BalanceSnapshot(balances=balances, info=response)

    # ==================== transfers ====================

    def parse_transaction(
        self, transaction: dict, currency: Currency | None = None
    ) -> Transaction:
        """Convert a deposit or withdrawal record.

        Withdrawals are told apart from deposits only by the presence of a
        ``fee`` field. A deposit record carrying a fee would be typed as a
        withdrawal.
        """
        code = safe_currency_code(safe_string(transaction, "currency"), currency)
        timestamp = safe_integer2(transaction, "created_timestamp", "received_timestamp")
        address = safe_string(transaction, "address")

        transaction_type = TransactionType.DEPOSIT.value
        fee = None
        fee_cost = safe_float(transaction, "fee")
        if fee_cost is not None:
            transaction_type = TransactionType.WITHDRAWAL.value
            fee = Fee(cost=fee_cost, currency=code)

        return Transaction(
            id=safe_string(transaction, "id"),
            txid=safe_string(transaction, "transaction_id"),
            timestamp=timestamp,
            datetime=iso8601(timestamp),
            address=address,
            address_to=address,
            address_from=None,
            tag=None,
            type=transaction_type,
            amount=safe_float(transaction, "amount"),
            currency=code,
            status=parse_transaction_status(safe_string(transaction, "state")),
            updated=safe_integer(transaction, "updated_timestamp"),
            fee=fee,
            info=transaction,
        )

    def parse_transactions(
        self,
        transactions: Iterable[dict],
        currency: Currency | None = None,
        since: int | None = None,
        limit: int | None = None,
    ) -> list[Transaction]:
        parsed = _sort_by_timestamp(
            self.parse_transaction(raw, currency) for raw in transactions
        )
        if currency is not None:
            parsed = [item for item in parsed if item.currency == currency.code]
        return filter_by_since_limit(parsed, since, limit)

    # ==================== order books ====================

    def parse_order_book(
        self,
        result: Any,
        market: Market | None = None,
        timestamp: int | None = None,
    ) -> OrderBook:
        """Convert an order book in either venue shape.

        Snapshot: {bids: [[price, amount]...], asks: [...], timestamp, change_id}.
        L2 list: [{price, size, side: Buy|Sell}, ...].
        ``nonce`` is the venue change id; it is only comparable within one symbol.
        """
        bids: list[tuple[float, float]] = []
        asks: list[tuple[float, float]] = []
        nonce = None
        market_id = None

        if isinstance(result, dict):
            market_id = safe_string(result, "instrument_name")
            timestamp = safe_integer(result, "timestamp", timestamp)
            nonce = safe_integer(result, "change_id")
            for raw_level in safe_value(result, "bids", []):
                level = _parse_level(raw_level)
                if level is not None:
                    bids.append(level)
            for raw_level in safe_value(result, "asks", []):
                level = _parse_level(raw_level)
                if level is not None:
                    asks.append(level)
        elif isinstance(result, list):
            for entry in result:
                market_id = market_id or safe_string(entry, "symbol")
                price = safe_float(entry, "price")
                size = safe_float(entry, "size")
                if price is None or size is None:
                    continue
                side = safe_string_lower(entry, "side")
                if side == "buy":
                    bids.append((price, size))
                elif side == "sell":
                    asks.append((price, size))

        return OrderBook(
            symbol=self._resolve_symbol(market_id, market),
            bids=sorted(bids, key=lambda level: level[0], reverse=True),
            asks=sorted(asks, key=lambda level: level[0]),
            timestamp=timestamp,
            datetime=iso8601(timestamp),
            nonce=nonce,
            info=result,
        )
