# bybit_connector/ingestion/adapters/bybit_plugin/mappers.py

from bybit_connector.shared.models import OrderStatus, TransactionStatus

from .exceptions import BadRequestError

BYBIT_INTERVAL_MAP = {
    "1m": "1",
    "3m": "3",
    "5m": "5",
    "15m": "15",
    "30m": "30",
    "1h": "60",
    "2h": "120",
    "3h": "180",
    "6h": "360",
    "12h": "720",
    "1d": "D",
    "1w": "W",
    "1M": "M",
    "1y": "Y",
}

_UNIT_SECONDS = {
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 24 * 60 * 60,
    "w": 7 * 24 * 60 * 60,
    "M": 30 * 24 * 60 * 60,
    "y": 365 * 24 * 60 * 60,
}

ORDER_STATUSES = {
    "open": OrderStatus.OPEN.value,
    "cancelled": OrderStatus.CANCELED.value,
    "filled": OrderStatus.CLOSED.value,
    "rejected": OrderStatus.REJECTED.value,
}

TRANSACTION_STATUSES = {
    "completed": TransactionStatus.OK.value,
    "unconfirmed": TransactionStatus.PENDING.value,
}


def get_bybit_interval(timeframe: str) -> str:
    """Map internal timeframe to Bybit interval token"""
    if timeframe not in BYBIT_INTERVAL_MAP:
        raise BadRequestError(f"bybit does not support timeframe {timeframe}")
    return BYBIT_INTERVAL_MAP[timeframe]


def parse_timeframe(timeframe: str) -> int:
    """Timeframe string ("15m", "1M") -> duration in seconds."""
    amount, unit = timeframe[:-1], timeframe[-1]
    if unit not in _UNIT_SECONDS or not amount.isdigit():
        raise BadRequestError(f"bybit does not support timeframe {timeframe}")
    return int(amount) * _UNIT_SECONDS[unit]


def parse_order_status(status: str | None) -> str | None:
    """Venue order state -> canonical; unknown states pass through."""
    return ORDER_STATUSES.get(status, status)


def parse_transaction_status(status: str | None) -> str | None:
    """Venue transfer state -> canonical; unknown states pass through."""
    return TRANSACTION_STATUSES.get(status, status)
