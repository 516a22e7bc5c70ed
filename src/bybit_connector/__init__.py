"""
Bybit derivatives connector.
Normalized trading interface over the Bybit v2 REST API.

Modules:
- ingestion: Venue adapter, request signing, error mapping, normalization
- shared: Canonical entity models and enums
- infrastructure: Logging
- config: Configuration state and loading
"""

__version__ = "0.1.0"
