from datetime import datetime, timezone

from bson import ObjectId

from mongo_helper.mongodb import NIL_OBJECT_ID, Document

from tests.models import User


def test_base_document_satisfies_protocol():
    assert isinstance(User(name="Willy", email="TestEmail"), Document)


def test_init_mongo_id_only_when_unset():
    user = User(name="Willy", email="TestEmail")
    assert user.is_new()

    user.init_mongo_id()
    first = user.mongo_id
    user.init_mongo_id()

    assert isinstance(first, ObjectId)
    assert user.mongo_id == first
    assert not user.is_new()


def test_nil_object_id_counts_as_unset():
    user = User(_id=NIL_OBJECT_ID, name="Willy", email="TestEmail")
    assert user.is_new()

    user.init_mongo_id()
    assert user.mongo_id != NIL_OBJECT_ID


def test_init_document_sets_equal_timestamps():
    user = User(name="Willy", email="TestEmail")
    user.init_document()

    assert user.get_mongo_id() is not None
    assert user.get_created_at() is not None
    assert user.get_created_at() == user.get_updated_at()
    assert user.created_at.tzinfo is not None


def test_reset_mongo_id():
    user = User(name="Willy", email="TestEmail")
    user.init_document()
    user.reset_mongo_id()

    assert user.mongo_id is None
    assert user.is_new()


def test_to_mongo_omits_unset_id():
    user = User(name="Willy", email="TestEmail")
    data = user.to_mongo()

    assert "_id" not in data
    assert data["name"] == "Willy"
    assert data["created_at"] is None


def test_to_mongo_uses_id_alias():
    user = User(name="Willy", email="TestEmail")
    user.init_document()
    data = user.to_mongo()

    assert data["_id"] == user.mongo_id
    assert "mongo_id" not in data
    assert data["created_at"] == user.created_at


def test_from_mongo_treats_naive_datetimes_as_utc():
    oid = ObjectId()
    raw = {
        "_id": oid,
        "name": "Willy",
        "email": "TestEmail",
        "created_at": datetime(2024, 5, 1, 12, 0, 0),
        "updated_at": datetime(2024, 5, 2, 12, 0, 0),
        "unknown_field": 1,
    }
    user = User.from_mongo(raw)

    assert user.mongo_id == oid
    assert user.created_at == datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
    assert user.updated_at > user.created_at
