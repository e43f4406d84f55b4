"""
In-Memory Storage Implementation

Used in tests and for throwaway sessions. Values are deep-copied on the
way in and out so callers can never alias the stored state.
"""

import copy
from typing import Any, Iterable, Optional

from earnings_ledger.services.storage.interface import (
    CorruptDataError,
    KeyValueStoreInterface,
    Scalar,
    StorageError,
)


class InMemoryKeyValueStore(KeyValueStoreInterface):
    """
    Dict-backed key-value store.

    `failing_keys` makes every write to those keys raise StorageError,
    which is how tests exercise partial-failure paths.
    """

    def __init__(
        self,
        initial: Optional[dict[str, Any]] = None,
        failing_keys: Iterable[str] = (),
        atomic: bool = True,
    ):
        self._data: dict[str, Any] = copy.deepcopy(initial or {})
        self.failing_keys = set(failing_keys)
        self.supports_atomic_writes = atomic

    def _check_writable(self, key: str) -> None:
        if key in self.failing_keys:
            raise StorageError(f"Write to '{key}' failed")

    def load_list(self, key: str) -> list:
        value = self._data.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise CorruptDataError(f"Value under '{key}' is not a list")
        return copy.deepcopy(value)

    def save_list(self, key: str, records: list) -> bool:
        self._check_writable(key)
        self._data[key] = copy.deepcopy(list(records))
        return True

    def load_scalar(self, key: str) -> Optional[Scalar]:
        return self._data.get(key)

    def save_scalar(self, key: str, value: Scalar) -> bool:
        self._check_writable(key)
        self._data[key] = value
        return True

    def remove(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def save_many(self, items: dict[str, Any]) -> bool:
        if not self.supports_atomic_writes:
            return super().save_many(items)
        # Check every key first so a failure writes nothing
        for key in items:
            self._check_writable(key)
        self._data.update(copy.deepcopy(items))
        return True

    def dump(self) -> dict[str, Any]:
        """Snapshot of everything stored."""
        return copy.deepcopy(self._data)
