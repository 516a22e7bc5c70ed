"""Amount/price formatting against a market's tick sizes."""

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal

from bybit_connector.shared.models import Market


def _to_step(value: float | str, step: float | None, rounding: str) -> str:
    number = Decimal(str(value))
    if step:
        tick = Decimal(str(step))
        number = (number / tick).quantize(Decimal(1), rounding=rounding) * tick
    return format(number.normalize(), "f")


def amount_to_precision(market: Market, amount: float | str) -> str:
    """Truncate ``amount`` to the market's quantity step."""
    return _to_step(amount, market.precision.amount, ROUND_DOWN)


def price_to_precision(market: Market, price: float | str) -> str:
    """Round ``price`` to the nearest tick."""
    return _to_step(price, market.precision.price, ROUND_HALF_UP)
