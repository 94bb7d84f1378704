"""Shared fixtures: mongomock-backed collections and sample users."""

import mongomock
import pytest

from mongo_helper.mongodb import Repository

from tests.models import User


@pytest.fixture(autouse=True)
def clean_mongo_env(monkeypatch):
    for name in ("MONGODB_URI", "MONGODB_DATABASE", "MONGODB_TIMEOUT", "MONGODB_USE_PING"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def client():
    client = mongomock.MongoClient()
    yield client
    client.close()


@pytest.fixture()
def collection(client):
    return client["testdb"]["user"]


@pytest.fixture()
def repo(collection):
    return Repository(collection, User)


@pytest.fixture()
def users():
    return [
        User(name="Willy", email="TestEmail", age=31),
        User(name="Name1", email="TestEmail1", age=25),
        User(name="Name2", email="TestEmail2", age=40),
    ]
