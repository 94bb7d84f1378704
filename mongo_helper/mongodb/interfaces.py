"""
Repository Interfaces - One protocol per group of collection operations.

Code that only reads should depend on FindOne / FindMany rather than the
whole repository, which keeps fakes in tests small.

All protocols are runtime checkable, so isinstance() tells whether an object
provides the methods (signatures are not compared).
"""

from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, TypeVar, runtime_checkable

from pymongo.command_cursor import CommandCursor
from pymongo.results import BulkWriteResult, UpdateResult

from .model import Document

T = TypeVar("T", bound=Document)


@runtime_checkable
class FindOne(Protocol[T]):
    def find_one(self, filter: Mapping[str, Any], *, timeout: Optional[float] = None, **kwargs: Any) -> T:
        """Find a single document matching the filter."""
        ...


@runtime_checkable
class FindMany(Protocol[T]):
    def find_many(self, filter: Mapping[str, Any], *, timeout: Optional[float] = None, **kwargs: Any) -> List[T]:
        """Find all documents matching the filter."""
        ...


@runtime_checkable
class InsertOne(Protocol[T]):
    def insert_one(self, doc: T, *, timeout: Optional[float] = None, **kwargs: Any) -> T:
        """Insert a document, initialising its id and timestamps."""
        ...


@runtime_checkable
class InsertMany(Protocol[T]):
    def insert_many(self, docs: Sequence[T], *, timeout: Optional[float] = None, **kwargs: Any) -> List[T]:
        """Insert documents, initialising their ids and timestamps."""
        ...


@runtime_checkable
class UpdateOne(Protocol):
    def update_one(
        self,
        filter: Mapping[str, Any],
        data: Mapping[str, Any],
        *,
        timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> UpdateResult:
        """$set fields on one document and refresh updated_at."""
        ...


@runtime_checkable
class UpdateMany(Protocol):
    def update_many(
        self,
        filter: Mapping[str, Any],
        data: Mapping[str, Any],
        *,
        timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> None:
        """$set fields on all matching documents and refresh updated_at."""
        ...


@runtime_checkable
class ReplaceOne(Protocol[T]):
    def replace_one(self, filter: Mapping[str, Any], doc: T, *, timeout: Optional[float] = None, **kwargs: Any) -> T:
        """Replace one document."""
        ...


@runtime_checkable
class DeleteOne(Protocol):
    def delete_one(self, filter: Mapping[str, Any], *, timeout: Optional[float] = None, **kwargs: Any) -> None:
        """Delete one document. Empty filters are rejected."""
        ...


@runtime_checkable
class DeleteMany(Protocol):
    def delete_many(
        self,
        filter: Mapping[str, Any],
        *,
        allow_empty_filter: bool = False,
        timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> int:
        """Delete matching documents and return how many were deleted."""
        ...


@runtime_checkable
class BulkWrite(Protocol):
    def bulk_write(self, requests: Sequence[Any], *, timeout: Optional[float] = None, **kwargs: Any) -> BulkWriteResult:
        """Run several write operations in one go."""
        ...


@runtime_checkable
class Aggregator(Protocol):
    def aggregate(
        self,
        pipeline: Sequence[Dict[str, Any]],
        *,
        timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> CommandCursor:
        """Run an aggregation pipeline."""
        ...


@runtime_checkable
class Counter(Protocol):
    def count_documents(self, filter: Mapping[str, Any], *, timeout: Optional[float] = None, **kwargs: Any) -> int:
        """Count documents matching the filter."""
        ...


@runtime_checkable
class RepositoryInterface(
    FindOne[T],
    FindMany[T],
    InsertOne[T],
    InsertMany[T],
    UpdateOne,
    UpdateMany,
    ReplaceOne[T],
    DeleteOne,
    DeleteMany,
    BulkWrite,
    Aggregator,
    Counter,
    Protocol[T],
):
    """
    All operations on a single MongoDB collection.

    A collection usually holds data for many tenants, so most filters
    should include a tenant field, see new_filter().
    """
