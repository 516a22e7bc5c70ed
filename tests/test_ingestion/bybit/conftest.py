"""Shared fixtures for Bybit connector tests."""

import pytest
from fixtures import FIXED_MILLIS, FakeHttpClient, load_fixture

from bybit_connector.ingestion.adapters.bybit_plugin import BybitDependencyContainer
from bybit_connector.ingestion.adapters.bybit_plugin.clock import ClockSynchronizer
from bybit_connector.ingestion.config.value_objects import BybitConfig, CallOptions


class FakeTransportContainer(BybitDependencyContainer):
    """Container wired to an in-memory transport and a frozen clock."""

    def __init__(self, http_client: FakeHttpClient, config: BybitConfig):
        super().__init__(config)
        self.http_client = http_client

    def create_http_client(self) -> FakeHttpClient:
        return self.http_client

    def create_clock(self) -> ClockSynchronizer:
        return ClockSynchronizer(
            offset=self.config.time_difference, clock=lambda: FIXED_MILLIS
        )


@pytest.fixture
def fake_http():
    """Transport that already serves the market list."""
    return FakeHttpClient({"/v2/public/symbols": load_fixture("bybit_symbols")})


@pytest.fixture
def make_adapter(fake_http):
    """Factory: adapter over ``fake_http`` with optional credentials/options."""

    def _make(
        api_key: str | None = "test-key",
        secret: str | None = "test-secret",
        options: CallOptions | None = None,
        time_difference: int = 0,
    ):
        config = BybitConfig(
            base_url="https://api.bybit.com",
            api_key=api_key,
            secret=secret,
            time_difference=time_difference,
            options=options,
        )
        return FakeTransportContainer(fake_http, config).create_adapter()

    return _make


@pytest.fixture
def adapter(make_adapter):
    return make_adapter()
