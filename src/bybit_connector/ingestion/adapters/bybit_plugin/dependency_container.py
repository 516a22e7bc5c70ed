"""Dependency injection container for the Bybit connector.

Wires the request collaborators into a client and an adapter. This is the
single place where concrete implementations are chosen.

Usage:
    container = BybitDependencyContainer(config)
    adapter = container.create_adapter()
"""

from bybit_connector.config.state import ConfigState
from bybit_connector.ingestion.adapters.bybit_plugin.adapter import BybitAdapter
from bybit_connector.ingestion.adapters.bybit_plugin.client import BybitClient
from bybit_connector.ingestion.adapters.bybit_plugin.clock import ClockSynchronizer
from bybit_connector.ingestion.adapters.bybit_plugin.error_mapper import (
    BybitErrorClassifier,
)
from bybit_connector.ingestion.adapters.bybit_plugin.signer import RequestSigner
from bybit_connector.ingestion.config.value_objects import (
    BybitConfig,
    CallOptions,
    HttpClientConfig,
)
from bybit_connector.ingestion.connectors.aiohttp_client import AiohttpClient
from bybit_connector.ingestion.ports import (
    IErrorClassifier,
    IHttpClient,
)


class BybitDependencyContainer:
    """Dependency injection container for the Bybit client and adapter.

    Responsible for:
    1. Choosing concrete implementations for each protocol
    2. Wiring dependencies together
    3. Providing factory methods for components

    Tests can subclass this and override methods to inject fakes.
    """

    def __init__(self, config: BybitConfig | None = None, testnet: bool = False):
        """Initialize container with configuration.

        Args:
            config: Bybit configuration (optional, uses defaults)
            testnet: Whether ``config.base_url`` points at the testnet host
        """
        self.config = config or BybitConfig()
        self.testnet = testnet

    def create_http_client(self) -> IHttpClient:
        """Create HTTP client implementation.

        Override this in tests to inject a fake transport.
        """
        return AiohttpClient(self.config.http_config)

    def create_signer(self) -> RequestSigner:
        return RequestSigner(self.config.base_url, self.config.version)

    def create_classifier(self) -> IErrorClassifier:
        return BybitErrorClassifier()

    def create_clock(self) -> ClockSynchronizer:
        return ClockSynchronizer(offset=self.config.time_difference)

    def create_client(self) -> BybitClient:
        """Create fully-wired BybitClient."""
        return BybitClient(
            config=self.config,
            http_client=self.create_http_client(),
            signer=self.create_signer(),
            classifier=self.create_classifier(),
            clock=self.create_clock(),
        )

    def create_adapter(self) -> BybitAdapter:
        """Create BybitAdapter on top of a fresh client."""
        return BybitAdapter(
            client=self.create_client(),
            options=self.config.options,
            testnet=self.testnet,
        )


def create_adapter_from_settings(settings: ConfigState) -> BybitAdapter:
    """Factory function to create BybitAdapter from the loaded config state.

    Args:
        settings: ConfigState with bybit configuration

    Returns:
        Fully configured BybitAdapter
    """
    bybit = settings.bybit
    config = BybitConfig(
        base_url=bybit.api_url,
        version=bybit.version,
        api_key=bybit.api_key,
        secret=bybit.secret,
        options=CallOptions(
            default_currency_code=bybit.default_code,
            recv_window_millis=bybit.recv_window,
            time_adjustment_enabled=bybit.adjust_for_time_difference,
        ),
        http_config=HttpClientConfig(timeout=bybit.timeout),
    )
    container = BybitDependencyContainer(config, testnet=bybit.testnet)
    return container.create_adapter()
