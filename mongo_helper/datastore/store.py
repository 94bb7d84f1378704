"""
Data Store - Connection handle for one logical MongoDB database.

Opens a MongoClient, optionally pings the server, and binds the named
database. The handle owns the client: call disconnect() exactly once when
done, or use it as a context manager.

Usage:
    with open_data_store("mongodb://localhost:27017", "app_db") as store:
        users = store.repository("users", User)
        users.insert_one(User(name="Willy"))
"""

import logging
import os
from typing import Optional, Type, TypeVar

import pymongo
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from ..errors import ConnectionError, DisconnectError
from ..mongodb.interfaces import RepositoryInterface
from ..mongodb.model import Document
from ..mongodb.repository import Repository
from .options import DataStoreOption, DataStoreOptions

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Document)

DEFAULT_URI = "mongodb://localhost:27017"
DEFAULT_DATABASE = "mongo_helper"


def sanitize_mongodb_uri(uri: str) -> str:
    """
    Hide the password in a MongoDB URI for safe logging.
    """
    if "://" not in uri or "@" not in uri:
        return uri

    scheme, rest = uri.split("://", 1)
    credentials, host = rest.rsplit("@", 1)
    if ":" in credentials:
        username = credentials.split(":", 1)[0]
        return f"{scheme}://{username}:***@{host}"
    return uri


class DataStore:
    """
    Handle on a MongoDB client and one of its databases.

    Attributes:
        client: The underlying MongoClient
        database: The bound database
        database_name: Name of the bound database
        options: Options used for the lifetime of the connection
    """

    def __init__(
        self,
        connection_string: Optional[str] = None,
        database_name: Optional[str] = None,
        *options: DataStoreOption,
    ):
        """
        Connect to MongoDB and bind the database.

        Args:
            connection_string: MongoDB URI (default: MONGODB_URI env var or localhost)
            database_name: Database name (default: MONGODB_DATABASE env var or mongo_helper)
            *options: DataStore options, applied in order over the defaults
                      and MONGODB_TIMEOUT / MONGODB_USE_PING

        Raises:
            ConnectionError: If the client cannot be created or the ping fails
        """
        self.connection_string = connection_string or os.environ.get("MONGODB_URI", DEFAULT_URI)
        self.database_name = database_name or os.environ.get("MONGODB_DATABASE", DEFAULT_DATABASE)

        self.options = DataStoreOptions.from_env()
        for option in options:
            option(self.options)

        safe_uri = sanitize_mongodb_uri(self.connection_string)

        try:
            self.client: MongoClient = MongoClient(
                self.connection_string,
                serverSelectionTimeoutMS=self.options.timeout_ms,
                connectTimeoutMS=self.options.timeout_ms,
            )
        except PyMongoError as e:
            logger.error(f"[DATASTORE] Could not create client for {safe_uri}: {e}")
            raise ConnectionError(f"Could not connect to {safe_uri}: {e}", e) from e

        if self.options.use_ping:
            self._ping(safe_uri)

        self.database: Database = self.client[self.database_name]
        logger.info(f"[DATASTORE] Connected to {safe_uri} (database={self.database_name})")

    def _ping(self, safe_uri: str) -> None:
        """Check the connection, closing the client if the server is unreachable."""
        try:
            with pymongo.timeout(self.options.timeout):
                self.client.admin.command("ping")
        except PyMongoError as e:
            logger.error(f"[DATASTORE] Ping to {safe_uri} failed: {e}")
            self.client.close()
            raise ConnectionError(f"MongoDB at {safe_uri} is unreachable: {e}", e) from e

    @classmethod
    def open(
        cls,
        connection_string: Optional[str] = None,
        database_name: Optional[str] = None,
        *options: DataStoreOption,
    ) -> "DataStore":
        return cls(connection_string, database_name, *options)

    @property
    def timeout(self) -> float:
        return self.options.timeout

    def collection(self, name: str) -> Collection:
        """Get a collection by name."""
        return self.database[name]

    def repository(self, name: str, document_class: Type[T]) -> RepositoryInterface[T]:
        """Get a repository for the named collection."""
        return Repository(self.collection(name), document_class)

    def disconnect(self) -> None:
        """
        Release the client connection.

        Raises:
            DisconnectError: If the client does not close cleanly
        """
        try:
            self.client.close()
        except PyMongoError as e:
            raise DisconnectError(f"Could not disconnect from {self.database_name}: {e}", e) from e
        logger.info(f"[DATASTORE] Disconnected (database={self.database_name})")

    close = disconnect

    def __enter__(self) -> "DataStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()


def open_data_store(
    connection_string: Optional[str] = None,
    database_name: Optional[str] = None,
    *options: DataStoreOption,
) -> DataStore:
    """
    Open a DataStore.

    Example:
        store = open_data_store(uri, "app_db", with_timeout(5))
        ...
        store.disconnect()
    """
    return DataStore(connection_string, database_name, *options)
