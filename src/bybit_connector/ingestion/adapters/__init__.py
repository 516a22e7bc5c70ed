"""
Venue adapters package.
Exports the BaseAdapter and the Bybit adapter.
"""

from bybit_connector.ingestion.adapters.base import BaseAdapter
from bybit_connector.ingestion.adapters.bybit_plugin import BybitAdapter

__all__ = [
    "BaseAdapter",
    "BybitAdapter",
]
