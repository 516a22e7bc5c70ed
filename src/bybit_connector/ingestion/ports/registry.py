"""Market registry abstraction.

The orchestration layer only needs to resolve canonical symbols and
currency codes to venue ids; how markets are fetched and cached is the
registry's business.
"""

from typing import Protocol

from bybit_connector.shared.models import Currency, Market


class IMarketRegistry(Protocol):
    """Abstraction for market/currency lookup.

    Single Responsibility: Load the venue's market list once per session and
    answer symbol, id and currency lookups against it.
    """

    @property
    def markets_by_id(self) -> dict[str, Market]:
        """Venue id -> Market. Empty until markets are loaded."""
        ...

    async def load_markets(
        self, reload: bool = False, **fetch_kwargs
    ) -> dict[str, Market]:
        """Load markets (idempotent unless reload=True).

        Args:
            reload: Refetch even if already loaded
            **fetch_kwargs: Forwarded to the underlying market fetch

        Returns:
            Canonical symbol -> Market
        """
        ...

    def market(self, symbol: str) -> Market:
        """Resolve a canonical symbol.

        Raises:
            BadSymbolError: If the symbol is not listed
        """
        ...

    def currency(self, code: str) -> Currency:
        """Resolve a currency code.

        Raises:
            ExchangeError: If the code is not known
        """
        ...
