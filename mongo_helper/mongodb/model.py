"""
Document Model - Lifecycle fields shared by all stored documents.

Provides:
- Document: Protocol every document handled by a Repository must satisfy
- BaseDocument: Pydantic model carrying _id, created_at and updated_at

Usage:
    class User(BaseDocument):
        name: str
        email: str

    user = User(name="Willy", email="willy@example.com")
    user.init_document()
    collection.insert_one(user.to_mongo())
"""

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Protocol, Type, TypeVar, runtime_checkable

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator

NIL_OBJECT_ID = ObjectId("0" * 24)

D = TypeVar("D", bound="BaseDocument")


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes, as pymongo returns them unless tz_aware."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@runtime_checkable
class Document(Protocol):
    """
    Capabilities a document needs so a Repository can stamp its lifecycle.

    BaseDocument implements all of them; embed it in your own models
    instead of implementing the protocol by hand.
    """

    def is_new(self) -> bool: ...

    def init_mongo_id(self) -> None: ...

    def set_mongo_id(self, mongo_id: ObjectId) -> None: ...

    def set_updated_at(self, updated_at: datetime) -> None: ...

    def set_created_at(self, created_at: datetime) -> None: ...

    def init_document(self) -> None: ...

    def reset_mongo_id(self) -> None: ...

    def get_mongo_id(self) -> Optional[ObjectId]: ...

    def get_created_at(self) -> Optional[datetime]: ...

    def to_mongo(self) -> Dict[str, Any]: ...

    @classmethod
    def from_mongo(cls, raw: Mapping[str, Any]) -> "Document": ...


class BaseDocument(BaseModel):
    """
    Fields that most documents should have.

    The identifier is stored as ``_id`` and left out of the stored mapping
    while it is unset, so MongoDB never sees a null ``_id``.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        populate_by_name=True,
    )

    mongo_id: Optional[ObjectId] = Field(default=None, alias="_id")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)

    def is_new(self) -> bool:
        """True while the document has no identifier yet."""
        return self.mongo_id is None or self.mongo_id == NIL_OBJECT_ID

    def init_mongo_id(self) -> None:
        """Create a new ObjectId if the current one is unset."""
        if self.is_new():
            self.mongo_id = ObjectId()

    def init_document(self) -> None:
        """
        Prepare a new document for insertion.

        A new ObjectId is generated if needed, and created_at and updated_at
        are both set to the current time.
        """
        self.init_mongo_id()
        now = utc_now()
        self.set_created_at(now)
        self.set_updated_at(now)

    def set_mongo_id(self, mongo_id: ObjectId) -> None:
        self.mongo_id = mongo_id

    def reset_mongo_id(self) -> None:
        """Clear the identifier so the document is treated as not persisted."""
        self.mongo_id = None

    def set_created_at(self, created_at: datetime) -> None:
        self.created_at = created_at

    def set_updated_at(self, updated_at: datetime) -> None:
        self.updated_at = updated_at

    def get_mongo_id(self) -> Optional[ObjectId]:
        return self.mongo_id

    def get_created_at(self) -> Optional[datetime]:
        return self.created_at

    def get_updated_at(self) -> Optional[datetime]:
        return self.updated_at

    def to_mongo(self) -> Dict[str, Any]:
        """Mapping ready for the driver, keyed by field alias."""
        data = self.model_dump(by_alias=True)
        if self.is_new():
            data.pop("_id", None)
        return data

    @classmethod
    def from_mongo(cls: Type[D], raw: Mapping[str, Any]) -> D:
        """Build a document from a raw driver result."""
        return cls.model_validate(dict(raw))
