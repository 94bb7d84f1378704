"""
mongo_helper - Less boilerplate for common MongoDB collection operations.

This package provides:
- DataStore: Connection handle for one database
- Repository: Typed CRUD/aggregate/bulk operations over one collection
- BaseDocument: _id, created_at and updated_at managed by the repository
- new_filter and options: Query condition builder

Usage:
    from mongo_helper import BaseDocument, open_data_store, mongo_id_filter

    class User(BaseDocument):
        name: str
        email: str

    with open_data_store("mongodb://localhost:27017", "app_db") as store:
        users = store.repository("users", User)
        user = users.insert_one(User(name="Willy", email="willy@example.com"))
        found = users.find_one(mongo_id_filter(user.mongo_id))
"""

from .errors import (
    ConnectionError,
    DataStoreError,
    DisconnectError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from .datastore import (
    DataStore,
    DataStoreOptions,
    open_data_store,
    with_timeout,
    with_use_ping,
)
from .mongodb import (
    BaseDocument,
    Document,
    Repository,
    RepositoryInterface,
    in_,
    mongo_id_filter,
    new_filter,
    with_field,
    with_in,
    with_mongo_id,
)

__all__ = [
    # Errors
    "ConnectionError",
    "DataStoreError",
    "DisconnectError",
    "NotFoundError",
    "StoreError",
    "ValidationError",
    # Data store
    "DataStore",
    "DataStoreOptions",
    "open_data_store",
    "with_timeout",
    "with_use_ping",
    # MongoDB
    "BaseDocument",
    "Document",
    "Repository",
    "RepositoryInterface",
    "in_",
    "mongo_id_filter",
    "new_filter",
    "with_field",
    "with_in",
    "with_mongo_id",
]
