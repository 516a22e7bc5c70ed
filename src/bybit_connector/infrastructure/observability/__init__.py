"""
Observability for the connector: structured logging configured once per
process, with layer-specific logger factories that bind architectural
context (layer, component, exchange) to every entry.
"""

from .logging import (
    # Layer-specific logger factories
    get_infrastructure_logger,
    get_ingestion_logger,
    # Base logger factory
    get_logger,
    get_processing_logger,
    # Setup
    setup_logging,
)

__all__ = [
    # Setup
    "setup_logging",
    # Base
    "get_logger",
    # Layer-specific
    "get_infrastructure_logger",
    "get_ingestion_logger",
    "get_processing_logger",
]
