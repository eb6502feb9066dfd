"""Saved searches persisted in the application state store."""

from __future__ import annotations

from ..core.interfaces import KeyValueStore
from ..core.models import Report

REPORTS_KEY = "reports"


class SavedReports:
    """Named JQL searches kept under one key of the state store."""

    def __init__(self, storage: KeyValueStore) -> None:
        self._storage = storage

    def _table(self) -> dict[str, dict[str, str]]:
        return dict(self._storage.get(REPORTS_KEY) or {})

    def save(self, report: Report) -> None:
        """Create or replace the report with the same name."""
        table = self._table()
        table[report.name] = report.serialize()
        self._storage.set(REPORTS_KEY, table)

    def get(self, name: str) -> Report | None:
        data = self._table().get(name)
        return Report.unserialize(data) if data else None

    def delete(self, name: str) -> bool:
        table = self._table()
        if name not in table:
            return False
        del table[name]
        self._storage.set(REPORTS_KEY, table)
        return True

    def list_reports(self) -> list[Report]:
        """Return all reports sorted by name."""
        return [Report.unserialize(data) for _, data in sorted(self._table().items())]


__all__ = ["SavedReports"]
