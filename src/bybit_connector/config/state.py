"""
Unified configuration state management.

Single source of truth for connector configuration, combining YAML files
with environment overrides, type validation, and sensible defaults.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from bybit_connector.infrastructure.observability import get_infrastructure_logger

logger = get_infrastructure_logger("config-loader")


# =============================================================================
# PYDANTIC MODELS - Type-Safe Configuration
# =============================================================================


class BybitSettings(BaseModel):
    """Bybit venue access configuration."""

    model_config = ConfigDict(extra="allow")

    base_url: str = Field(default="https://api.bybit.com")
    testnet_url: str = Field(default="https://api-testnet.bybit.com")
    testnet: bool = Field(default=False)
    version: str = Field(default="v2")

    api_key: str | None = Field(default=None)
    secret: str | None = Field(default=None)

    recv_window: int = Field(default=5000, ge=1)
    adjust_for_time_difference: bool = Field(default=False)
    default_code: str = Field(default="BTC")
    timeout: float = Field(default=10.0, gt=0)

    @field_validator("base_url", "testnet_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Strip trailing slashes so paths join cleanly."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Bybit URLs must start with http:// or https://")
        return v.rstrip("/")

    @property
    def api_url(self) -> str:
        return self.testnet_url if self.testnet else self.base_url


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(extra="allow")

    level: str = Field(default="INFO")
    json_logs: bool = Field(default=True)
    include_timestamp: bool = Field(default=True)


class ConfigState(BaseModel):
    """
    Root configuration state - single source of truth for connector config.
    """

    model_config = ConfigDict(extra="allow")

    bybit: BybitSettings = Field(default_factory=BybitSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    env: str = Field(default="dev")
    config_dir: str = Field(default="./config")


# =============================================================================
# CONFIG LOADER - Clean, Validated Loading
# =============================================================================


class ConfigLoader:
    """
    Load and validate configuration from YAML files.

    Merges:
      1. Defaults (model field defaults)
      2. YAML files from config_dir
      3. Environment-specific YAML (env/<BYBIT_ENV>.yaml)
      4. Environment variable overrides
    """

    def __init__(self, config_dir: str = "./config"):
        self.config_dir = Path(config_dir)
        self._yaml_cache: dict[Path, Any] = {}
        self.env = os.getenv("BYBIT_ENV", "dev")

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        """Load YAML file with caching."""
        if path in self._yaml_cache:
            return self._yaml_cache[path]

        if not path.exists():
            logger.debug("config_file_missing", path=str(path))
            return {}

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        self._yaml_cache[path] = data
        logger.debug("config_file_loaded", path=str(path))
        return data

    def _apply_env_overrides(self, config: dict[str, Any]) -> dict[str, Any]:
        """Apply environment variable overrides to config."""
        if api_key := os.getenv("BYBIT_API_KEY"):
            config.setdefault("bybit", {})["api_key"] = api_key

        if secret := os.getenv("BYBIT_SECRET"):
            config.setdefault("bybit", {})["secret"] = secret

        if testnet := os.getenv("BYBIT_TESTNET"):
            config.setdefault("bybit", {})["testnet"] = testnet.lower() in (
                "1",
                "true",
                "yes",
            )

        if log_level := os.getenv("LOG_LEVEL"):
            config.setdefault("logging", {})["level"] = log_level

        return config

    def _merge_dicts(self, base: dict, override: dict) -> dict:
        """Deep merge override into base dict."""
        result = base.copy()
        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._merge_dicts(result[key], value)
            else:
                result[key] = value
        return result

    def load(self) -> ConfigState:
        """
        Load complete configuration state.

        Returns:
            ConfigState: Validated configuration object

        Raises:
            pydantic.ValidationError: If configuration is invalid
        """
        logger.info("config_loading", config_dir=str(self.config_dir), env=self.env)

        config: dict[str, Any] = {}

        for config_file in ["bybit.yaml", "logging.yaml"]:
            file_config = self._load_yaml(self.config_dir / config_file)
            config = self._merge_dicts(config, file_config)

        env_config = self._load_yaml(self.config_dir / "env" / f"{self.env}.yaml")
        config = self._merge_dicts(config, env_config)

        config = self._apply_env_overrides(config)

        state = ConfigState(env=self.env, config_dir=str(self.config_dir), **config)
        logger.info(
            "config_loaded",
            testnet=state.bybit.testnet,
            authenticated=bool(state.bybit.api_key),
            time_adjustment=state.bybit.adjust_for_time_difference,
        )
        return state


def get_config(config_dir: str | None = None) -> ConfigState:
    """
    Load and return the configuration state.

    Args:
        config_dir: Override config directory. Defaults to $BYBIT_CONFIG_DIR or ./config

    Returns:
        ConfigState: Validated configuration object
    """
    if config_dir is None:
        config_dir = os.getenv("BYBIT_CONFIG_DIR", "./config")
        if not Path(config_dir).exists():
            logger.warning("config_dir_missing", config_dir=config_dir)

    loader = ConfigLoader(config_dir=config_dir)
    return loader.load()


__all__ = [
    "BybitSettings",
    "ConfigLoader",
    "ConfigState",
    "LoggingConfig",
    "get_config",
]
