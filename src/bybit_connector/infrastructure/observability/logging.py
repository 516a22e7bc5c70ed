"""
Structured logging infrastructure for bybit-connector.
Provides consistent, machine-readable logs across all components.

Log Structure:
    {
        "app": "bybit-connector",      # Application identifier
        "layer": "ingestion",          # Architectural layer
        "component": "bybit-client",   # Specific component
        "module": "...",               # Python module (optional)
        "exchange": "bybit",           # Domain context
        "event": "request_sent",       # What happened
        ...
    }

Architectural Layers:
    - infrastructure: Cross-cutting (config, registry caches)
    - ingestion: Venue access (transport, signing, error mapping)
    - processing: Normalization of venue payloads
"""

import logging
import sys
from typing import Any, Literal

import structlog
from structlog.types import EventDict

Layer = Literal["infrastructure", "ingestion", "processing"]

APP_NAME = "bybit-connector"


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add application-wide context to every log entry."""
    event_dict["app"] = APP_NAME
    return event_dict


def add_severity_level(
    logger: Any, method_name: str, event_dict: EventDict
) -> EventDict:
    """
    Add severity level for cloud logging compatibility.
    Maps Python log levels to standard severity levels.
    """
    level = event_dict.get("level")
    if level:
        severity_map = {
            "debug": "DEBUG",
            "info": "INFO",
            "warning": "WARNING",
            "error": "ERROR",
            "critical": "CRITICAL",
        }
        event_dict["severity"] = severity_map.get(level, "INFO")
    return event_dict


def setup_logging(
    level: str = "INFO",
    json_logs: bool = True,
    include_timestamp: bool = True,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: If True, output JSON. If False, use human-readable format (dev mode).
        include_timestamp: Whether to include ISO timestamps in logs

    Usage:
        >>> from bybit_connector.infrastructure.observability import setup_logging
        >>> setup_logging(level="DEBUG", json_logs=False)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )
    # basicConfig is a no-op once the root logger has handlers
    logging.root.setLevel(log_level)

    processors = [
        structlog.contextvars.merge_contextvars,
        add_app_context,
        structlog.stdlib.add_log_level,
        add_severity_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(
    name: str | None = None,
    layer: Layer | None = None,
    component: str | None = None,
    **initial_context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a configured logger instance with architectural context.

    Args:
        name: Logger name (typically __name__ of the calling module)
        layer: Architectural layer (infrastructure, ingestion, processing)
        component: Specific component within the layer
        **initial_context: Additional context key-value pairs to bind to logger

    Returns:
        Configured structlog logger with bound context

    Usage:
        >>> log = get_logger(__name__, layer="ingestion", component="bybit-client")
        >>> log.info("request_sent", path="/v2/public/time")
    """
    context = {"layer": layer, "component": component, "module": name}
    context = {key: value for key, value in context.items() if value}
    return structlog.get_logger(name).bind(**{**context, **initial_context})


# ============================================================================
# Layer-Specific Logger Factories
# ============================================================================


def get_infrastructure_logger(
    component: str,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for infrastructure layer (config loading, registry caches).

    Usage:
        >>> log = get_infrastructure_logger("config-loader")
        >>> log.info("config_loaded", env="dev")
    """
    return get_logger(
        "infrastructure",
        layer="infrastructure",
        component=component,
        **context,
    )


def get_ingestion_logger(
    component: str,
    exchange: str | None = None,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for ingestion layer (venue access).

    Args:
        component: Component name (e.g., "bybit-client", "clock-sync", "http-client")
        exchange: Exchange name (e.g., "bybit") - optional
        **context: Additional context (symbol, route, etc.)

    Usage:
        >>> log = get_ingestion_logger("bybit-client", exchange="bybit")
        >>> log.info("request_sent", route="kline/list")
    """
    if exchange:
        context["exchange"] = exchange
    return get_logger("ingestion", layer="ingestion", component=component, **context)


def get_processing_logger(
    component: str,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for processing layer (normalization of venue payloads).

    Usage:
        >>> log = get_processing_logger("normalizer", exchange="bybit")
        >>> log.debug("tickers_normalized", count=12)
    """
    return get_logger(
        "processing",
        layer="processing",
        component=component,
        **context,
    )
