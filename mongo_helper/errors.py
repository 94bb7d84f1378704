"""
Errors raised by the data store handle and the repositories.

Driver errors that carry no extra meaning are not wrapped; they reach the
caller as the original pymongo exception.
"""

from typing import Optional


class DataStoreError(Exception):
    """
    Base exception for mongo_helper errors.

    Attributes:
        message: Human-readable error message
        original_error: Underlying driver exception, if any
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ConnectionError(DataStoreError):
    """Raised when the store cannot be reached while opening a handle."""
    pass


class DisconnectError(DataStoreError):
    """Raised when the client connection is not released cleanly."""
    pass


class ValidationError(DataStoreError):
    """Raised when a filter violates a safety precondition."""
    pass


class NotFoundError(DataStoreError):
    """Raised when no document matches a single-result query."""
    pass


class StoreError(DataStoreError):
    """Raised for driver failures annotated with the failing operation."""

    def __init__(self, operation: str, original_error: Exception):
        self.operation = operation
        super().__init__(f"{operation}: {original_error}", original_error)
