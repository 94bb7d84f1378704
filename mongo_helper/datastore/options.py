"""
Data Store Options - Connection tuning for DataStore.

Options are small callables applied in order to a DataStoreOptions
instance that starts from the defaults:
- timeout: 10 seconds, bounds connecting and the initial ping
- use_ping: True, verify the server is reachable when opening

Usage:
    store = open_data_store(
        "mongodb://localhost:27017",
        "app_db",
        with_timeout(5),
        with_use_ping(False),
    )
"""

import logging
import os
from datetime import timedelta
from typing import Callable, Union

from pydantic import BaseModel, field_validator

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

_TRUTHY = {"1", "true", "yes", "on"}


class DataStoreOptions(BaseModel):
    """Settings used for the lifetime of a DataStore connection."""

    timeout: float = DEFAULT_TIMEOUT
    use_ping: bool = True

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            return DEFAULT_TIMEOUT
        return value

    @property
    def timeout_ms(self) -> int:
        return int(self.timeout * 1000)

    @classmethod
    def from_env(cls) -> "DataStoreOptions":
        """
        Build options from environment variables.

        MONGODB_TIMEOUT: seconds (default: 10). Values that are not a
            positive number are ignored.
        MONGODB_USE_PING: 1/true/yes/on to ping on open (default: true)
        """
        options = cls()
        raw_timeout = os.environ.get("MONGODB_TIMEOUT")
        if raw_timeout:
            try:
                with_timeout(float(raw_timeout))(options)
            except ValueError:
                logger.warning(f"[DATASTORE] Ignoring invalid MONGODB_TIMEOUT={raw_timeout!r}")
        raw_ping = os.environ.get("MONGODB_USE_PING")
        if raw_ping:
            with_use_ping(raw_ping.strip().lower() in _TRUTHY)(options)
        return options


DataStoreOption = Callable[[DataStoreOptions], None]


def with_timeout(duration: Union[float, timedelta]) -> DataStoreOption:
    """
    Set the connection timeout.

    Non-positive durations are ignored and the current value is kept.
    """
    seconds = duration.total_seconds() if isinstance(duration, timedelta) else float(duration)

    def apply(options: DataStoreOptions) -> None:
        if seconds <= 0:
            return
        options.timeout = seconds

    return apply


def with_use_ping(use_ping: bool) -> DataStoreOption:
    """Enable or disable the reachability check when opening."""

    def apply(options: DataStoreOptions) -> None:
        options.use_ping = bool(use_ping)

    return apply
