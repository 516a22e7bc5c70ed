"""Typed optional-field extraction for loosely-typed venue payloads.

Every helper returns None (or the supplied default) when the key is
missing, the value is null, or the value cannot be converted. Zero is a
real value and is never produced for an absent field.
"""

import math
from datetime import datetime, timedelta, timezone
from typing import Any

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

COMMON_CURRENCIES = {
    "XBT": "BTC",
    "BCC": "BCH",
    "DRK": "DASH",
}


def safe_value(data: Any, key: str, default: Any = None) -> Any:
    if not isinstance(data, dict):
        return default
    value = data.get(key)
    return default if value is None else value


def safe_string(data: Any, key: str, default: str | None = None) -> str | None:
    value = safe_value(data, key)
    if value is None or isinstance(value, (dict, list)):
        return default
    return str(value)


def safe_string_lower(data: Any, key: str, default: str | None = None) -> str | None:
    value = safe_string(data, key)
    return default if value is None else value.lower()


def _to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def safe_float(data: Any, key: str, default: float | None = None) -> float | None:
    number = _to_float(safe_value(data, key))
    return default if number is None else number


def safe_float2(
    data: Any, key1: str, key2: str, default: float | None = None
) -> float | None:
    number = safe_float(data, key1)
    if number is None:
        number = safe_float(data, key2, default)
    return number


def safe_integer(data: Any, key: str, default: int | None = None) -> int | None:
    value = safe_value(data, key)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    number = _to_float(value)
    return default if number is None else int(number)


def safe_integer2(
    data: Any, key1: str, key2: str, default: int | None = None
) -> int | None:
    number = safe_integer(data, key1)
    if number is None:
        number = safe_integer(data, key2, default)
    return number


def safe_timestamp(data: Any, key: str, default: int | None = None) -> int | None:
    """Epoch seconds (int, float or decimal string) -> epoch milliseconds."""
    number = _to_float(safe_value(data, key))
    return default if number is None else int(number * 1000)


def iso8601(timestamp: int | None) -> str | None:
    if timestamp is None:
        return None
    seconds, millis = divmod(int(timestamp), 1000)
    moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    return f"{moment:%Y-%m-%dT%H:%M:%S}.{millis:03d}Z"


def parse8601(value: Any) -> int | None:
    """ISO-8601 string -> epoch milliseconds (naive strings are UTC)."""
    if not isinstance(value, str) or not value:
        return None
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        moment = datetime.fromisoformat(text)
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (moment - EPOCH) // timedelta(milliseconds=1)


def safe_currency_code(currency_id: str | None, currency: Any = None) -> str | None:
    """Venue currency id -> canonical code, falling back to the context currency."""
    if currency_id is None:
        return getattr(currency, "code", None)
    code = currency_id.upper()
    return COMMON_CURRENCIES.get(code, code)
