"""
Generic Repository - Typed operations over a single MongoDB collection.

Wraps a pymongo Collection and converts results to the repository's
document class. On the way in it stamps the document lifecycle:
- insert_one / insert_many: new _id if unset, created_at and updated_at
- replace_one: updated_at, plus _id and created_at when missing
- update_one / update_many: updated_at via $currentDate on the server

Every operation takes an optional ``timeout`` in seconds, applied with
pymongo.timeout(). Remaining keyword arguments go straight to the pymongo
method (session, sort, projection, upsert, ...).

Usage:
    repo = Repository(db.users, User)

    user = repo.insert_one(User(name="Willy", email="willy@example.com"))
    same = repo.find_one(mongo_id_filter(user.mongo_id))
    repo.update_one(mongo_id_filter(user.mongo_id), {"name": "Willy2"})
"""

import logging
from contextlib import nullcontext
from datetime import datetime
from typing import Any, Dict, Generic, List, Mapping, Optional, Sequence, Type, TypeVar

import pymongo
from bson import ObjectId
from pymongo.collection import Collection
from pymongo.command_cursor import CommandCursor
from pymongo.errors import PyMongoError
from pymongo.results import BulkWriteResult, UpdateResult

from ..errors import NotFoundError, StoreError, ValidationError
from .model import Document, as_utc, utc_now

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Document)

UPDATED_AT_FIELD = "updated_at"


def _deadline(timeout: Optional[float]):
    """Client-side operation timeout, or a no-op when no timeout is given."""
    if timeout is None:
        return nullcontext()
    return pymongo.timeout(timeout)


def _stamped_update(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Wrap plain field values in $set and refresh updated_at server-side.

    A caller-supplied updated_at is dropped; $set and $currentDate on the
    same path is a conflicting update.
    """
    fields = {key: value for key, value in data.items() if key != UPDATED_AT_FIELD}
    return {
        "$set": fields,
        "$currentDate": {UPDATED_AT_FIELD: True},
    }


def empty_bulk_write_result() -> BulkWriteResult:
    """Acknowledged result for a bulk write with no operations."""
    return BulkWriteResult(
        {
            "nInserted": 0,
            "nUpserted": 0,
            "nMatched": 0,
            "nModified": 0,
            "nRemoved": 0,
            "upserted": [],
        },
        True,
    )


class Repository(Generic[T]):
    """
    Repository for one MongoDB collection holding documents of type T.

    The repository keeps no state besides the collection and document
    class, so one instance can be shared between threads.

    A collection usually holds data for many tenants. Most filters should
    therefore include a tenant field, see new_filter().
    """

    def __init__(self, collection: Collection, document_class: Type[T]):
        """
        Initialize repository for a collection.

        Args:
            collection: pymongo (or API compatible) collection
            document_class: Class used to decode stored documents
        """
        self.collection = collection
        self.document_class = document_class

    @property
    def name(self) -> str:
        return self.collection.name

    def _decode(self, raw: Mapping[str, Any]) -> T:
        return self.document_class.from_mongo(raw)

    # =========================================================================
    # Reads
    # =========================================================================

    def find_one(self, filter: Mapping[str, Any], *, timeout: Optional[float] = None, **kwargs: Any) -> T:
        """
        Find a document that matches the given filter.

        Raises:
            NotFoundError: If no document matches
        """
        with _deadline(timeout):
            raw = self.collection.find_one(filter, **kwargs)
        if raw is None:
            raise NotFoundError(f"mongodb.Repository.find_one: no document in '{self.name}' matches {dict(filter)}")
        return self._decode(raw)

    def find_many(self, filter: Mapping[str, Any], *, timeout: Optional[float] = None, **kwargs: Any) -> List[T]:
        """Find all documents that match the given filter, as a list."""
        with _deadline(timeout):
            docs = [self._decode(raw) for raw in self.collection.find(filter, **kwargs)]
        logger.debug(f"[DB] find_many: {len(docs)} documents from {self.name}")
        return docs

    def count_documents(self, filter: Mapping[str, Any], *, timeout: Optional[float] = None, **kwargs: Any) -> int:
        """Return the number of documents that match the given filter."""
        with _deadline(timeout):
            return int(self.collection.count_documents(filter, **kwargs))

    def aggregate(
        self,
        pipeline: Sequence[Dict[str, Any]],
        *,
        timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> CommandCursor:
        """
        Run an aggregation pipeline.

        The returned cursor is still open. The caller iterates it and closes
        it, preferably as a context manager.
        """
        with _deadline(timeout):
            return self.collection.aggregate(list(pipeline), **kwargs)

    # =========================================================================
    # Writes
    # =========================================================================

    def insert_one(self, doc: T, *, timeout: Optional[float] = None, **kwargs: Any) -> T:
        """
        Insert a document.

        The document gets a new _id if none is set, and created_at and
        updated_at are set to the current time.

        Returns:
            The same document, with lifecycle fields populated
        """
        doc.init_document()
        with _deadline(timeout):
            self.collection.insert_one(doc.to_mongo(), **kwargs)
        logger.debug(f"[DB] insert_one: {self.name} _id={doc.get_mongo_id()}")
        return doc

    def insert_many(self, docs: Sequence[T], *, timeout: Optional[float] = None, **kwargs: Any) -> List[T]:
        """
        Insert multiple documents.

        Every document gets a new _id if none is set, and created_at and
        updated_at are set to the current time. An empty sequence is a
        no-op, although MongoDB itself rejects empty inserts.

        Returns:
            The documents in input order
        """
        documents = list(docs)
        if not documents:
            return []

        for doc in documents:
            doc.init_document()

        with _deadline(timeout):
            self.collection.insert_many([doc.to_mongo() for doc in documents], **kwargs)
        logger.debug(f"[DB] insert_many: {len(documents)} documents into {self.name}")
        return documents

    def update_one(
        self,
        filter: Mapping[str, Any],
        data: Mapping[str, Any],
        *,
        timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> UpdateResult:
        """
        Update a single document that matches the given filter.

        ``data`` holds the field values to $set; other update operators are
        not supported. updated_at is set to the server's current date.

        Raises:
            StoreError: If the driver reports a failure
        """
        try:
            with _deadline(timeout):
                result = self.collection.update_one(filter, _stamped_update(data), **kwargs)
        except PyMongoError as e:
            raise StoreError("mongodb.Repository.update_one", e) from e
        logger.debug(
            f"[DB] update_one: {self.name} matched={result.matched_count} modified={result.modified_count}"
        )
        return result

    def update_many(
        self,
        filter: Mapping[str, Any],
        data: Mapping[str, Any],
        *,
        timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> None:
        """
        Update all documents that match the given filter.

        updated_at is set to the server's current date on every match.

        Raises:
            StoreError: If the driver reports a failure
        """
        try:
            with _deadline(timeout):
                self.collection.update_many(filter, _stamped_update(data), **kwargs)
        except PyMongoError as e:
            raise StoreError("mongodb.Repository.update_many", e) from e

    def replace_one(self, filter: Mapping[str, Any], doc: T, *, timeout: Optional[float] = None, **kwargs: Any) -> T:
        """
        Replace the document matching the filter.

        updated_at of the replacement is set to the current time. A missing
        _id or created_at is taken from the stored document, so replacing
        never wipes them. Without a match (an upsert), _id comes from the
        filter when it holds a plain ObjectId, else a new one is generated,
        and created_at is the current time.

        Returns:
            The replacement document, with lifecycle fields populated
        """
        now = utc_now()
        with _deadline(timeout):
            if doc.is_new() or doc.get_created_at() is None:
                self._fill_from_stored(filter, doc, now, session=kwargs.get("session"))
            doc.set_updated_at(now)
            self.collection.replace_one(filter, doc.to_mongo(), **kwargs)
        logger.debug(f"[DB] replace_one: {self.name} _id={doc.get_mongo_id()}")
        return doc

    def _fill_from_stored(self, filter: Mapping[str, Any], doc: T, now: datetime, session: Any = None) -> None:
        stored = self.collection.find_one(filter, {"created_at": 1}, session=session)
        if stored is None:
            filter_id = filter.get("_id")
            if doc.is_new():
                if isinstance(filter_id, ObjectId):
                    doc.set_mongo_id(filter_id)
                else:
                    doc.init_mongo_id()
            if doc.get_created_at() is None:
                doc.set_created_at(now)
            return

        if doc.is_new():
            doc.set_mongo_id(stored["_id"])
        if doc.get_created_at() is None:
            doc.set_created_at(as_utc(stored.get("created_at")) or now)

    def delete_one(self, filter: Mapping[str, Any], *, timeout: Optional[float] = None, **kwargs: Any) -> None:
        """
        Delete one document that matches the given filter.

        Raises:
            ValidationError: If the filter is empty
        """
        if not filter:
            logger.warning(f"[DB] delete_one: rejected empty filter on {self.name}")
            raise ValidationError(f"delete_one: filter can not be empty. Filter: {dict(filter)}")
        with _deadline(timeout):
            self.collection.delete_one(filter, **kwargs)

    def delete_many(
        self,
        filter: Mapping[str, Any],
        *,
        allow_empty_filter: bool = False,
        timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> int:
        """
        Delete all documents that match the given filter.

        An empty filter would wipe the whole collection and is rejected
        unless ``allow_empty_filter`` is set.

        Returns:
            Number of deleted documents

        Raises:
            ValidationError: If the filter is empty and not explicitly allowed
        """
        if not filter and not allow_empty_filter:
            logger.warning(f"[DB] delete_many: rejected empty filter on {self.name}")
            raise ValidationError(f"delete_many: filter can not be empty. Filter: {dict(filter)}")
        with _deadline(timeout):
            result = self.collection.delete_many(filter, **kwargs)
        logger.debug(f"[DB] delete_many: {result.deleted_count} documents from {self.name}")
        return int(result.deleted_count)

    def bulk_write(self, requests: Sequence[Any], *, timeout: Optional[float] = None, **kwargs: Any) -> BulkWriteResult:
        """
        Run multiple write operations in one go.

        MongoDB rejects an empty list of operations; here it returns an
        empty result instead.
        """
        operations = list(requests)
        if not operations:
            return empty_bulk_write_result()
        with _deadline(timeout):
            return self.collection.bulk_write(operations, **kwargs)
