"""Services package."""

from ram.services.biometric import (
    BiometricAuthenticator,
    PasscodeAuthenticator,
    UnavailableAuthenticator,
    hash_passcode,
)
from ram.services.storage import (
    InMemorySettingsStore,
    JsonFileSettingsStore,
    SettingsStore,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    # Authentication services
    "BiometricAuthenticator",
    "PasscodeAuthenticator",
    "UnavailableAuthenticator",
    "hash_passcode",
    # Storage services
    "InMemorySettingsStore",
    "JsonFileSettingsStore",
    "SettingsStore",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
