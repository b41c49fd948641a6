"""
Abstract Settings Storage Interface

DESIGN DECISION: Persistence is a plain key-value settings store,
the same shape as a platform "user defaults" facility. Each record
collection is one serialized blob under its own key.
This allows us to:
1. Keep the blobs in a local JSON file for the app
2. Use in-memory storage for testing
3. Swap in another settings backend without touching the stores

There are no transactions across keys. Each collection is written
independently and fully overwritten on every write.
"""

from abc import ABC, abstractmethod
from typing import Optional


class SettingsStore(ABC):
    """
    Abstract interface for key-value settings storage.

    Values are opaque strings; the record stores decide their format.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Returns:
            The stored value, or None if the key is missing

        Raises:
            StorageReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a value, replacing any previous value under the key.

        Raises:
            StorageWriteError: If the write fails
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove a key. Removing a missing key is not an error."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Could not read from the storage backend."""
    pass


class StorageWriteError(StorageError):
    """Could not write to the storage backend."""
    pass
