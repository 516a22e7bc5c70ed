"""Configuration package for bybit_connector."""

from .state import BybitSettings, ConfigLoader, ConfigState, LoggingConfig, get_config

__all__ = [
    "BybitSettings",
    "ConfigLoader",
    "ConfigState",
    "LoggingConfig",
    "get_config",
]
