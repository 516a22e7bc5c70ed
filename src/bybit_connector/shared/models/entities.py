# bybit_connector/shared/models/entities.py

"""
Canonical (venue-agnostic) entity models.

Every entity is an immutable snapshot built fresh from one venue response.
Optional fields stay None when the venue did not supply them (or supplied
something unparseable); they are never defaulted to zero. The ``info``
field always carries the untouched raw payload.
"""

from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class _Entity(BaseModel):
    model_config = ConfigDict(frozen=True)


# ==================== MARKETS ====================


class MinMax(_Entity):
    min: float | None = None
    max: float | None = None


class MarketLimits(_Entity):
    amount: MinMax = Field(default_factory=MinMax)
    price: MinMax = Field(default_factory=MinMax)
    cost: MinMax = Field(default_factory=MinMax)


class MarketPrecision(_Entity):
    """Tick sizes (decimal steps), not digit counts."""

    amount: float | None = None
    price: float | None = None


class Market(_Entity):
    """Listed instrument. ``id`` is the only venue-specific key."""

    id: str
    symbol: str
    base: str
    quote: str
    base_id: str | None = None
    quote_id: str | None = None
    active: bool | None = None
    precision: MarketPrecision = Field(default_factory=MarketPrecision)
    limits: MarketLimits = Field(default_factory=MarketLimits)
    taker: float | None = None
    maker: float | None = None
    type: str = "future"
    spot: bool = False
    future: bool = True
    option: bool = False
    info: dict[str, Any] = Field(default_factory=dict)


class Currency(_Entity):
    id: str
    code: str


# ==================== MARKET DATA ====================


class Ticker(_Entity):
    symbol: str | None = None
    timestamp: int | None = None
    datetime: str | None = None
    high: float | None = None
    low: float | None = None
    bid: float | None = None
    bid_volume: float | None = None
    ask: float | None = None
    ask_volume: float | None = None
    vwap: float | None = None
    open: float | None = None
    close: float | None = None
    last: float | None = None
    previous_close: float | None = None
    change: float | None = None
    percentage: float | None = None
    average: float | None = None
    base_volume: float | None = None
    quote_volume: float | None = None
    info: dict[str, Any] = Field(default_factory=dict)


class OHLCV(NamedTuple):
    """Candle as the fixed 6-tuple (timestamp, open, high, low, close, volume)."""

    timestamp: int | None
    open: float | None
    high: float | None
    low: float | None
    close: float | None
    volume: float | None


class OrderBook(_Entity):
    """Bids sorted by price descending, asks ascending; levels are (price, amount)."""

    symbol: str | None = None
    bids: list[tuple[float, float]] = Field(default_factory=list)
    asks: list[tuple[float, float]] = Field(default_factory=list)
    timestamp: int | None = None
    datetime: str | None = None
    nonce: int | None = None
    info: Any = None


# ==================== TRADING ====================


class Fee(_Entity):
    cost: float | None = None
    currency: str | None = None


class Trade(_Entity):
    id: str | None = None
    symbol: str | None = None
    timestamp: int | None = None
    datetime: str | None = None
    order: str | None = None
    type: str | None = None
    side: str | None = None
    taker_or_maker: str | None = None
    price: float | None = None
    amount: float | None = None
    cost: float | None = None
    fee: Fee | None = None
    info: dict[str, Any] = Field(default_factory=dict)


class Order(_Entity):
    id: str | None = None
    symbol: str | None = None
    timestamp: int | None = None
    datetime: str | None = None
    last_trade_timestamp: int | None = None
    type: str | None = None
    side: str | None = None
    price: float | None = None
    average: float | None = None
    amount: float | None = None
    filled: float | None = None
    remaining: float | None = None
    cost: float | None = None
    status: str | None = None
    fee: Fee | None = None
    trades: list[Trade] = Field(default_factory=list)
    info: dict[str, Any] = Field(default_factory=dict)


# ==================== ACCOUNT ====================


class Balance(_Entity):
    free: float | None = None
    used: float | None = None
    total: float | None = None


class BalanceSnapshot(_Entity):
    """Balances keyed by currency code, plus the raw response."""

    balances: dict[str, Balance] = Field(default_factory=dict)
    info: Any = None

    def __getitem__(self, code: str) -> Balance:
        return self.balances[code]

    def __contains__(self, code: object) -> bool:
        return code in self.balances

    @property
    def free(self) -> dict[str, float | None]:
        return {code: balance.free for code, balance in self.balances.items()}

    @property
    def used(self) -> dict[str, float | None]:
        return {code: balance.used for code, balance in self.balances.items()}

    @property
    def total(self) -> dict[str, float | None]:
        return {code: balance.total for code, balance in self.balances.items()}


class Transaction(_Entity):
    """Deposit or withdrawal record."""

    id: str | None = None
    txid: str | None = None
    timestamp: int | None = None
    datetime: str | None = None
    address: str | None = None
    address_to: str | None = None
    address_from: str | None = None
    tag: str | None = None
    type: str | None = None
    amount: float | None = None
    currency: str | None = None
    status: str | None = None
    updated: int | None = None
    fee: Fee | None = None
    info: dict[str, Any] = Field(default_factory=dict)


class WithdrawalReceipt(_Entity):
    id: str | None = None
    info: Any = None
