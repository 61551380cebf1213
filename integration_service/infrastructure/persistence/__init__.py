"""Local store implementation."""

from .exceptions import PersistenceError, StorageError

__all__ = ["PersistenceError", "StorageError"]
