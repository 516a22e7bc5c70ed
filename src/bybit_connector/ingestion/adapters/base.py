"""
Base adapter for venue connectors.

Adapters return normalized entities; transport, signing and error mapping
live in injected collaborators.
"""

from abc import ABC, abstractmethod
from typing import Any

from bybit_connector.infrastructure.observability import get_ingestion_logger
from bybit_connector.shared.models import MarketType

logger = get_ingestion_logger("base-adapter")


class BaseAdapter(ABC):
    """
    Base adapter shared by venue connectors.

    Attributes:
        venue: Venue id ("bybit") used in logs and error messages
        supported_market_types: MarketType values this adapter lists
    """

    venue: str
    supported_market_types: set[MarketType] = set()

    def __init__(
        self,
        api_key: str | None = None,
        api_secret: str | None = None,
        testnet: bool = False,
        config: dict[str, Any] | None = None,
    ):
        """Initialize adapter state and credentials."""
        self.api_key = api_key
        self.api_secret = api_secret
        self.testnet = testnet
        self.config = config or {}
        self._connected = False

    @abstractmethod
    async def connect(self) -> None:
        """Prepare the adapter for use (idempotent)."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close connection and clean up resources (idempotent)."""
        pass

    @property
    def is_connected(self) -> bool:
        return self._connected

    def supports_market_type(self, market_type: MarketType) -> bool:
        """Check if this adapter lists markets of the given type."""
        return market_type in self.supported_market_types

    def check_required_credentials(self) -> bool:
        if not (self.api_key and self.api_secret):
            logger.warning(
                "credentials_missing", adapter=self.__class__.__name__
            )
            return False
        return True

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"venue={self.venue}, "
            f"authenticated={bool(self.api_key)}, "
            f"testnet={self.testnet})"
        )
