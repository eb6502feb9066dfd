"""JSON file backed key/value store."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from .memory import MemoryStorage

LOGGER = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when the persisted table cannot be loaded or written."""


class DiskStorage(MemoryStorage):
    """Key/value table loaded from and persisted to a single JSON file.

    The file is read once at construction; afterwards every mutation rewrites
    the complete table. Writes go to a temporary file in the same directory
    which then replaces the target, so a reader never sees a partial table.
    Rewriting the whole file on each mutation is fine for the small tables
    used here; large datasets would need an append-only format instead.
    """

    def __init__(self, filename: Path | str) -> None:
        self.filename = Path(filename)
        super().__init__(self._load(self.filename))
        LOGGER.debug("Loaded %d key(s) from %s", len(self), self.filename)

    @staticmethod
    def _load(path: Path) -> dict[str, Any]:
        try:
            if not path.exists():
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text("{}", encoding="utf-8")
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            msg = f"Unable to open storage file '{path}'"
            raise StorageError(msg) from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            msg = f"Storage file '{path}' does not contain valid JSON"
            raise StorageError(msg) from exc
        if not isinstance(data, dict):
            msg = f"Storage file '{path}' must contain a JSON object"
            raise StorageError(msg)
        return data

    def flush(self) -> None:
        """Atomically rewrite the storage file with the current table."""
        with self._lock:
            try:
                payload = json.dumps(self._data, indent=2)
            except (TypeError, ValueError) as exc:
                msg = f"Storage file '{self.filename}' only holds JSON values: {exc}"
                raise StorageError(msg) from exc
            directory = self.filename.parent
            try:
                fd, tmp_name = tempfile.mkstemp(
                    prefix=f".{self.filename.name}.", suffix=".tmp", dir=directory
                )
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as handle:
                        handle.write(payload)
                    os.replace(tmp_name, self.filename)
                except BaseException:
                    Path(tmp_name).unlink(missing_ok=True)
                    raise
            except OSError as exc:
                msg = f"Unable to write storage file '{self.filename}'"
                raise StorageError(msg) from exc


__all__ = ["DiskStorage", "StorageError"]
