"""In-memory market/currency registry for one adapter session."""

import asyncio
from collections.abc import Awaitable, Callable

from bybit_connector.infrastructure.observability import get_ingestion_logger
from bybit_connector.shared.models import Currency, Market

from .exceptions import BadSymbolError, ExchangeError
from .fields import COMMON_CURRENCIES

logger = get_ingestion_logger("market-registry", exchange="bybit")


class MarketRegistry:
    """Caches the venue market list and indexes it by symbol, venue id and currency.

    The list is fetched at most once unless ``reload=True``; concurrent
    first loads share one fetch through the lock.
    """

    def __init__(self, fetch_markets: Callable[..., Awaitable[list[Market]]]):
        self._fetch_markets = fetch_markets
        self._lock = asyncio.Lock()
        self.markets: dict[str, Market] = {}
        self.markets_by_id: dict[str, Market] = {}
        self.currencies: dict[str, Currency] = {}
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def load_markets(
        self, reload: bool = False, **fetch_kwargs
    ) -> dict[str, Market]:
        """Fetch and index markets once; ``fetch_kwargs`` go to the fetch callable."""
        async with self._lock:
            if self._loaded and not reload:
                return self.markets

            markets = await self._fetch_markets(**fetch_kwargs)
            self._index(markets)
            self._loaded = True
            logger.info(
                "markets_loaded",
                market_count=len(self.markets),
                currency_count=len(self.currencies),
            )
            return self.markets

    def _index(self, markets: list[Market]) -> None:
        by_symbol = {}
        by_id = {}
        currencies = {}
        for market in markets:
            by_symbol[market.symbol] = market
            by_id[market.id] = market
            for currency_id, code in (
                (market.base_id, market.base),
                (market.quote_id, market.quote),
            ):
                if code not in currencies:
                    currencies[code] = Currency(id=currency_id or code, code=code)
        self.markets = by_symbol
        self.markets_by_id = by_id
        self.currencies = currencies

    def market(self, symbol: str) -> Market:
        """Look up a market by canonical symbol (or by venue id).

        Raises:
            BadSymbolError: If the symbol is unknown
        """
        if symbol in self.markets:
            return self.markets[symbol]
        if symbol in self.markets_by_id:
            return self.markets_by_id[symbol]
        raise BadSymbolError(f"bybit does not have market symbol {symbol}")

    def currency(self, code: str) -> Currency:
        """Look up a currency by canonical code; venue aliases such as XBT resolve too.

        Raises:
            ExchangeError: If the code is unknown
        """
        canonical = COMMON_CURRENCIES.get(code.upper(), code.upper())
        if canonical in self.currencies:
            return self.currencies[canonical]
        raise ExchangeError(f"bybit does not have currency code {code}")
