"""Resident key/value store."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from threading import RLock
from typing import Any

from ..core.interfaces import KeyValueStore

LOGGER = logging.getLogger(__name__)

_ABSENT = object()


class MemoryStorage(KeyValueStore):
    """Key/value table held in a dict.

    Every mutation runs under a re-entrant lock that is held until
    :meth:`flush` returns, so subclasses persisting the whole table never
    interleave two writers.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(data) if data else {}
        self._lock = RLock()

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key`` or ``default``."""
        with self._lock:
            return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key`` and flush.

        If the flush fails the previous value is put back before the error
        propagates, so one rejected write leaves the table usable.
        """
        with self._lock:
            previous = self._data.get(key, _ABSENT)
            self._data[key] = value
            try:
                self.flush()
            except Exception:
                self._restore({key: previous})
                raise

    def delete(self, key: str) -> bool:
        """Remove ``key``. Returns ``True`` if it existed."""
        with self._lock:
            if key not in self._data:
                return False
            previous = self._data.pop(key)
            try:
                self.flush()
            except Exception:
                self._restore({key: previous})
                raise
            return True

    def delete_many(self, keys: Iterable[str]) -> int:
        """Remove every key in ``keys`` with a single flush."""
        with self._lock:
            removed: dict[str, Any] = {}
            for key in list(keys):
                if key in self._data:
                    removed[key] = self._data.pop(key)
            if removed:
                try:
                    self.flush()
                except Exception:
                    self._restore(removed)
                    raise
            return len(removed)

    def keys(self) -> Iterator[str]:
        """Iterate over a snapshot of the stored keys."""
        with self._lock:
            snapshot = list(self._data)
        return iter(snapshot)

    def flush(self) -> None:
        """Nothing to persist for the resident table."""

    def _restore(self, previous: dict[str, Any]) -> None:
        for key, value in previous.items():
            if value is _ABSENT:
                self._data.pop(key, None)
            else:
                self._data[key] = value
        LOGGER.debug("Rolled back %d key(s) after a failed flush", len(previous))

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


__all__ = ["MemoryStorage"]
