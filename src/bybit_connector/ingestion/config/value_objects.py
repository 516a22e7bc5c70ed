"""Configuration value objects for dependency injection.

Instead of injecting the global settings object, inject specific
configuration dataclasses into each component. Enables:
- Easy testing with different configurations
- Clear constructor contracts
- Validation at composition root
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class HttpClientConfig:
    """Configuration for HTTP client."""

    timeout: float = 10.0
    user_agent: str | None = None


@dataclass(frozen=True)
class CallOptions:
    """Per-call configuration passed into every orchestration method.

    Attributes:
        default_currency_code: Currency used when an operation needs one and
            the caller supplied neither a symbol nor a code (balances, open
            orders, trades by currency)
        recv_window_millis: Freshness window sent with every signed request
        time_adjustment_enabled: Resync the clock offset before loading markets
    """

    default_currency_code: str = "BTC"
    recv_window_millis: int = 5000
    time_adjustment_enabled: bool = False


@dataclass(frozen=True)
class BybitConfig:
    """Configuration for the Bybit client."""

    base_url: str = "https://api.bybit.com"
    version: str = "v2"
    api_key: str | None = None
    secret: str | None = None
    time_difference: int = 0
    options: CallOptions = None
    http_config: HttpClientConfig = None

    def __post_init__(self):
        """Set defaults for nested configs."""
        if self.options is None:
            object.__setattr__(self, "options", CallOptions())
        if self.http_config is None:
            object.__setattr__(self, "http_config", HttpClientConfig())
