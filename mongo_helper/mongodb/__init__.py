"""
MongoDB Layer - Typed repositories, document model and filter helpers.

This package provides:
- Repository: Generic CRUD/aggregate/bulk operations over one collection
- BaseDocument / Document: Lifecycle fields and the protocol behind them
- new_filter and options: Query condition builder

Usage:
    from mongo_helper.mongodb import BaseDocument, Repository, mongo_id_filter

    class User(BaseDocument):
        name: str

    repo = Repository(db.users, User)
    user = repo.insert_one(User(name="Willy"))
    repo.find_one(mongo_id_filter(user.mongo_id))
"""

from .model import NIL_OBJECT_ID, BaseDocument, Document, utc_now
from .filter import (
    FilterOption,
    in_,
    mongo_id_filter,
    new_filter,
    with_field,
    with_in,
    with_mongo_id,
)
from .interfaces import (
    Aggregator,
    BulkWrite,
    Counter,
    DeleteMany,
    DeleteOne,
    FindMany,
    FindOne,
    InsertMany,
    InsertOne,
    ReplaceOne,
    RepositoryInterface,
    UpdateMany,
    UpdateOne,
)
from .repository import Repository, empty_bulk_write_result

__all__ = [
    # Documents
    "NIL_OBJECT_ID",
    "BaseDocument",
    "Document",
    "utc_now",
    # Filters
    "FilterOption",
    "in_",
    "mongo_id_filter",
    "new_filter",
    "with_field",
    "with_in",
    "with_mongo_id",
    # Interfaces
    "Aggregator",
    "BulkWrite",
    "Counter",
    "DeleteMany",
    "DeleteOne",
    "FindMany",
    "FindOne",
    "InsertMany",
    "InsertOne",
    "ReplaceOne",
    "RepositoryInterface",
    "UpdateMany",
    "UpdateOne",
    # Repository
    "Repository",
    "empty_bulk_write_result",
]
