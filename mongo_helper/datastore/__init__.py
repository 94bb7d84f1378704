"""
Data Store - Connection handling for a named MongoDB database.

This package provides:
- DataStore: Owns the MongoClient and the bound database
- open_data_store: Open a DataStore from a URI and database name
- DataStoreOptions / with_timeout / with_use_ping: Connection tuning
"""

from .options import (
    DEFAULT_TIMEOUT,
    DataStoreOption,
    DataStoreOptions,
    with_timeout,
    with_use_ping,
)
from .store import DataStore, open_data_store, sanitize_mongodb_uri

__all__ = [
    "DEFAULT_TIMEOUT",
    "DataStoreOption",
    "DataStoreOptions",
    "with_timeout",
    "with_use_ping",
    "DataStore",
    "open_data_store",
    "sanitize_mongodb_uri",
]
