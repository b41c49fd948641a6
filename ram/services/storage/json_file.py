"""
JSON File Settings Storage

DESIGN DECISION: All keys live in a single JSON document on disk,
mirroring a per-user preferences file. The document is small (two
collections), so it is rewritten as a whole on every write.

TRADEOFFS:
- No encryption: values are stored as written
- No cross-key transactions: each write replaces the whole file,
  but callers write one key at a time
- Writes are atomic (temp file + rename), so a crash leaves either
  the old or the new document, never a torn one
"""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional

import structlog

from ram.services.storage.interface import (
    SettingsStore,
    StorageReadError,
    StorageWriteError,
)


logger = structlog.get_logger(__name__)


class JsonFileSettingsStore(SettingsStore):
    """
    Settings store backed by one JSON object in a file.

    The file is read once, on first access, and kept in memory.
    A missing file is an empty store; an unparsable file is also
    treated as empty (with a warning) rather than blocking startup.
    """

    def __init__(self, path: Path):
        self._path = Path(path)
        self._values: Optional[dict[str, str]] = None
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._path

    def _read_document(self) -> dict[str, str]:
        """Read the document from disk."""
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageReadError(f"Failed to read settings file {self._path}: {e}")

        try:
            document = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(
                "settings_file_unreadable",
                path=str(self._path),
                error=str(e),
            )
            return {}

        if not isinstance(document, dict):
            logger.warning(
                "settings_file_unreadable",
                path=str(self._path),
                error=f"expected a JSON object, got {type(document).__name__}",
            )
            return {}

        # Only string values are ours; anything else is ignored
        return {k: v for k, v in document.items() if isinstance(v, str)}

    def _values_loaded(self) -> dict[str, str]:
        if self._values is None:
            self._values = self._read_document()
        return self._values

    def _write_document(self, values: dict[str, str]) -> None:
        """Atomically replace the file with `values`."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                dir=self._path.parent,
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                    json.dump(values, tmp, ensure_ascii=False, indent=2)
                    tmp.flush()
                    os.fsync(tmp.fileno())
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageWriteError(f"Failed to write settings file {self._path}: {e}")

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._values_loaded().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            updated = dict(self._values_loaded())
            updated[key] = value
            self._write_document(updated)
            self._values = updated

    def remove(self, key: str) -> None:
        with self._lock:
            values = self._values_loaded()
            if key not in values:
                return
            updated = {k: v for k, v in values.items() if k != key}
            self._write_document(updated)
            self._values = updated
