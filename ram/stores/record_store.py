"""
Record Stores

A RecordStore owns one ordered collection of records and keeps it
in sync with the settings store:

- load() reads the whole collection once at startup
- append() / delete_at() mutate in memory, then persist() rewrites
  the whole collection under the collection key

DESIGN DECISION: No batching and no write-behind. Every mutation is
durable when the call returns, or the failure is in the audit log.

Failures at the storage boundary degrade instead of raising:
an unreadable collection loads as empty and a failed write is logged.
Contract violations by the caller (bad positions, reused ids) raise.
"""

import threading
from decimal import Decimal
from typing import Generic, Iterable, Iterator, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel, TypeAdapter, ValidationError

from ram.audit import AuditLogger
from ram.models.records import CredentialRecord, DebtRecord
from ram.services.storage import SettingsStore, StorageError


RecordT = TypeVar("RecordT", bound=BaseModel)


class RecordStoreError(Exception):
    """Base exception for record store operations."""
    pass


class InvalidPositionError(RecordStoreError, ValueError):
    """Delete was asked for positions outside the collection."""

    def __init__(self, positions: list[int], size: int):
        self.positions = positions
        self.size = size
        super().__init__(
            f"Positions {positions} out of range for collection of {size} records"
        )


class DuplicateRecordError(RecordStoreError, ValueError):
    """A record with the same id is already in the collection."""

    def __init__(self, record_id: UUID):
        self.record_id = record_id
        super().__init__(f"Record {record_id} is already in the collection")


class RecordStore(Generic[RecordT]):
    """
    Ordered collection of one record type, persisted under one key.

    All mutations are serialized behind a re-entrant lock so callers
    on different threads still see a single writer.
    """

    def __init__(
        self,
        settings_store: SettingsStore,
        collection_key: str,
        record_type: type[RecordT],
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._settings_store = settings_store
        self._key = collection_key
        self._record_type = record_type
        self._adapter = TypeAdapter(list[record_type])
        self._audit_logger = audit_logger or AuditLogger()
        self._records: list[RecordT] = []
        self._lock = threading.RLock()

    @property
    def collection_key(self) -> str:
        return self._key

    @property
    def records(self) -> tuple[RecordT, ...]:
        """Snapshot of the collection in insertion order."""
        with self._lock:
            return tuple(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __iter__(self) -> Iterator[RecordT]:
        return iter(self.records)

    def _decode(self, blob: str) -> list[RecordT]:
        """Decode a stored blob, dropping any repeated id after its first use."""
        records = self._adapter.validate_json(blob)
        seen: set[UUID] = set()
        unique = []
        for record in records:
            if record.id in seen:
                continue
            seen.add(record.id)
            unique.append(record)
        return unique

    def load(self) -> list[RecordT]:
        """
        Replace the in-memory collection with the persisted one.

        A missing key, an unreadable backend or a blob that does not
        decode all yield an empty collection. Nothing is raised.
        """
        with self._lock:
            records: list[RecordT] = []
            try:
                blob = self._settings_store.get(self._key)
                if blob is not None:
                    records = self._decode(blob)
            except (StorageError, ValidationError) as e:
                self._audit_logger.log_collection_load_failed(self._key, str(e))
                records = []

            self._records = records
            self._audit_logger.log_collection_loaded(self._key, len(records))
            return list(records)

    def append(self, record: RecordT) -> None:
        """Add `record` at the end and persist the collection."""
        if not isinstance(record, self._record_type):
            raise TypeError(
                f"Expected {self._record_type.__name__}, got {type(record).__name__}"
            )

        with self._lock:
            if any(existing.id == record.id for existing in self._records):
                raise DuplicateRecordError(record.id)

            self._records.append(record)
            self.persist()
            self._audit_logger.log_record_appended(self._key, record.id, len(self._records))

    def delete_at(self, positions: Iterable[int]) -> list[RecordT]:
        """
        Remove the records at `positions` and persist the collection.

        Positions are zero-based and refer to the collection before
        removal. If any position is out of range nothing is removed.

        Returns:
            The removed records, in collection order

        Raises:
            InvalidPositionError: If a position is negative or too large
        """
        with self._lock:
            wanted = sorted(set(positions))
            size = len(self._records)
            invalid = [p for p in wanted if p < 0 or p >= size]
            if invalid:
                raise InvalidPositionError(invalid, size)

            doomed = set(wanted)
            removed = [self._records[p] for p in wanted]
            self._records = [r for i, r in enumerate(self._records) if i not in doomed]
            self.persist()
            self._audit_logger.log_records_deleted(
                self._key,
                wanted,
                [r.id for r in removed],
                len(self._records),
            )
            return removed

    def persist(self) -> bool:
        """
        Write the whole collection under the collection key.

        Returns:
            True if the write succeeded. A failed write is logged.
        """
        with self._lock:
            blob = self._adapter.dump_json(self._records).decode("utf-8")
            try:
                self._settings_store.set(self._key, blob)
            except StorageError as e:
                self._audit_logger.log_persist_failed(self._key, str(e))
                return False
            return True


class DebtStore(RecordStore[DebtRecord]):
    """Debts owed to the user."""

    def __init__(
        self,
        settings_store: SettingsStore,
        collection_key: str = "debts",
        audit_logger: Optional[AuditLogger] = None,
    ):
        super().__init__(settings_store, collection_key, DebtRecord, audit_logger)

    def outstanding(self) -> list[tuple[int, DebtRecord]]:
        """
        Debts rendered as "owed to you" (amount > 0).

        Each debt is paired with its position in the full collection,
        which is what delete_at() expects.
        """
        return [
            (position, debt)
            for position, debt in enumerate(self.records)
            if debt.is_outstanding
        ]

    def total_amount(self) -> Decimal:
        """Sum of every stored amount, positive or not."""
        return sum((debt.amount for debt in self.records), Decimal("0"))


class CredentialStore(RecordStore[CredentialRecord]):
    """Stored website credentials."""

    def __init__(
        self,
        settings_store: SettingsStore,
        collection_key: str = "passwords",
        audit_logger: Optional[AuditLogger] = None,
    ):
        super().__init__(settings_store, collection_key, CredentialRecord, audit_logger)
