"""
JSON File Storage Implementation

DESIGN DECISION: The whole store is one JSON document on disk.
A write serializes the complete document to a temp file in the same
directory and swaps it in with os.replace, so a reader only ever sees
the old document or the new one. That makes `save_many` atomic: the
earnings list and the savings balance land together or not at all.

TRADEOFFS:
- Every write rewrites the file (fine: one record per day)
- Single process only; there is no file locking
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

import structlog

from earnings_ledger.services.storage.interface import (
    CorruptDataError,
    KeyValueStoreInterface,
    Scalar,
    StorageError,
)


logger = structlog.get_logger(__name__)


class JsonFileKeyValueStore(KeyValueStoreInterface):
    """Key-value store persisted as a single JSON object in a file."""

    supports_atomic_writes = True

    def __init__(self, path: str):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_document(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            raise CorruptDataError(f"Store file {self._path} is not valid JSON: {e}")
        except OSError as e:
            raise StorageError(f"Failed to read {self._path}: {e}")

        if not isinstance(document, dict):
            raise CorruptDataError(f"Store file {self._path} does not hold a JSON object")
        return document

    def _write_document(self, document: dict[str, Any]) -> None:
        directory = self._path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=directory,
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(document, f, ensure_ascii=False, indent=2)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, self._path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except (OSError, TypeError, ValueError) as e:
            logger.error("json_store_write_failed", path=str(self._path), error=str(e))
            raise StorageError(f"Failed to write {self._path}: {e}")

    def load_list(self, key: str) -> list:
        value = self._read_document().get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise CorruptDataError(f"Value under '{key}' is not a list")
        return value

    def save_list(self, key: str, records: list) -> bool:
        return self.save_many({key: list(records)})

    def load_scalar(self, key: str) -> Optional[Scalar]:
        return self._read_document().get(key)

    def save_scalar(self, key: str, value: Scalar) -> bool:
        return self.save_many({key: value})

    def remove(self, key: str) -> bool:
        document = self._read_document()
        if key not in document:
            return False
        del document[key]
        self._write_document(document)
        return True

    def save_many(self, items: dict[str, Any]) -> bool:
        document = self._read_document()
        document.update(items)
        self._write_document(document)
        return True
