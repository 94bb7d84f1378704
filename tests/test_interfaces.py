from typing import Any, List, Mapping

import pytest
from pymongo import InsertOne as InsertOneOp

from mongo_helper.errors import ValidationError
from mongo_helper.mongodb import (
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
    Repository,
    RepositoryInterface,
    UpdateMany,
    UpdateOne,
    mongo_id_filter,
    new_filter,
    with_field,
)

from tests.models import User

CAPABILITIES = [
    FindOne,
    FindMany,
    InsertOne,
    InsertMany,
    UpdateOne,
    UpdateMany,
    ReplaceOne,
    DeleteOne,
    DeleteMany,
    BulkWrite,
    Aggregator,
    Counter,
    RepositoryInterface,
]


class StaticFinder:
    """Read-only stand-in holding users in memory."""

    def __init__(self, users: List[User]):
        self.users = users

    def find_many(self, filter: Mapping[str, Any], **kwargs: Any) -> List[User]:
        return [u for u in self.users if all(getattr(u, k) == v for k, v in filter.items())]


def emails_of(finder: FindMany[User], name: str) -> List[str]:
    return [u.email for u in finder.find_many(new_filter(with_field("name", name)))]


@pytest.mark.parametrize("capability", CAPABILITIES, ids=lambda c: c.__name__)
def test_repository_provides_capability(repo, capability):
    assert isinstance(repo, capability)


def test_partial_fake_provides_only_its_capability(users):
    finder = StaticFinder(users)

    assert isinstance(finder, FindMany)
    assert not isinstance(finder, FindOne)
    assert not isinstance(finder, RepositoryInterface)
    assert emails_of(finder, "Willy") == ["TestEmail"]


def test_read_helper_accepts_repository(repo, users):
    repo.insert_many(users)

    assert emails_of(repo, "Name1") == ["TestEmail1"]


def test_operations_through_interface(collection, users):
    store: RepositoryInterface[User] = Repository(collection, User)

    inserted = store.insert_many(users)
    single = store.insert_one(User(name="Name3", email="TestEmail3", age=50))
    assert store.count_documents({}) == 4

    found = store.find_one(mongo_id_filter(single.mongo_id))
    assert found.name == "Name3"
    assert len(store.find_many({"age": {"$gte": 31}})) == 3

    result = store.update_one(mongo_id_filter(single.mongo_id), {"age": 51})
    assert result.modified_count == 1
    store.update_many({"age": {"$lt": 35}}, {"email": "young"})
    assert store.count_documents({"email": "young"}) == 2

    replaced = store.replace_one(mongo_id_filter(single.mongo_id), User(name="Name3", email="Replaced"))
    assert replaced.mongo_id == single.mongo_id
    assert store.find_one(mongo_id_filter(single.mongo_id)).email == "Replaced"

    cursor = store.aggregate([{"$group": {"_id": None, "n": {"$sum": 1}}}])
    assert list(cursor) == [{"_id": None, "n": 4}]

    bulk = store.bulk_write([InsertOneOp({"name": "Name4", "email": "e4"})])
    assert bulk.inserted_count == 1

    store.delete_one(mongo_id_filter(inserted[0].mongo_id))
    assert store.count_documents({}) == 4

    with pytest.raises(ValidationError):
        store.delete_many({})
    assert store.delete_many({}, allow_empty_filter=True) == 4
