"""
Storage Services Package

Provides the abstract settings-store interface and its implementations.
The app uses a local JSON file; tests use the in-memory store.
"""

from ram.services.storage.interface import (
    SettingsStore,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from ram.services.storage.json_file import JsonFileSettingsStore
from ram.services.storage.memory import InMemorySettingsStore

__all__ = [
    # Interface
    "SettingsStore",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemorySettingsStore",
    "JsonFileSettingsStore",
]
