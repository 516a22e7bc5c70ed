"""Bybit v2 inverse-perpetual connector."""

from .adapter import BybitAdapter
from .client import BybitClient
from .dependency_container import BybitDependencyContainer, create_adapter_from_settings
from .error_mapper import BybitErrorClassifier
from .exceptions import (
    ArgumentsRequiredError,
    AuthenticationError,
    AuthenticationRequiredError,
    BadRequestError,
    BadSymbolError,
    BybitAPIError,
    ExchangeError,
    InsufficientFundsError,
    InvalidAddressError,
    InvalidNonceError,
    InvalidOrderError,
    OrderNotFoundError,
    PermissionDeniedError,
    RateLimitError,
    TransportError,
)
from .normalizers import BybitNormalizer
from .registry import MarketRegistry

__all__ = [
    "ArgumentsRequiredError",
    "AuthenticationError",
    "AuthenticationRequiredError",
    "BadRequestError",
    "BadSymbolError",
    "BybitAPIError",
    "BybitAdapter",
    "BybitClient",
    "BybitDependencyContainer",
    "BybitErrorClassifier",
    "BybitNormalizer",
    "ExchangeError",
    "InsufficientFundsError",
    "InvalidAddressError",
    "InvalidNonceError",
    "InvalidOrderError",
    "MarketRegistry",
    "OrderNotFoundError",
    "PermissionDeniedError",
    "RateLimitError",
    "TransportError",
    "create_adapter_from_settings",
]
