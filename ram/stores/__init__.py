"""Record stores package."""

from ram.stores.record_store import (
    CredentialStore,
    DebtStore,
    DuplicateRecordError,
    InvalidPositionError,
    RecordStore,
    RecordStoreError,
)

__all__ = [
    "CredentialStore",
    "DebtStore",
    "DuplicateRecordError",
    "InvalidPositionError",
    "RecordStore",
    "RecordStoreError",
]
