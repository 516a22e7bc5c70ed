"""Canonical entity models and shared enums."""

from .entities import (
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
    Ticker,
    Trade,
    Transaction,
    WithdrawalReceipt,
)
from .enums import (
    ApiScope,
    HttpMethod,
    MarketType,
    OrderSide,
    OrderStatus,
    OrderType,
    TakerOrMaker,
    TransactionStatus,
    TransactionType,
)

__all__ = [
    "OHLCV",
    "ApiScope",
    "Balance",
    "BalanceSnapshot",
    "Currency",
    "Fee",
    "HttpMethod",
    "Market",
    "MarketLimits",
    "MarketPrecision",
    "MarketType",
    "MinMax",
    "Order",
    "OrderBook",
    "OrderSide",
    "OrderStatus",
    "OrderType",
    "TakerOrMaker",
    "Ticker",
    "Trade",
    "Transaction",
    "TransactionStatus",
    "TransactionType",
    "WithdrawalReceipt",
]
