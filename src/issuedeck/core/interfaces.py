"""Protocol interfaces for decoupling components."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any, Protocol, runtime_checkable

from .models import Issue


@runtime_checkable
class Serializable(Protocol):
    """Domain object that round-trips through a JSON-only store."""

    def serialize(self) -> Any:
        """Return a JSON-compatible representation of the object."""
        raise NotImplementedError

    @classmethod
    def unserialize(cls, data: Any) -> Serializable:
        """Rebuild an instance from :meth:`serialize` output."""
        raise NotImplementedError


class KeyValueStore(Protocol):
    """Minimal mapping abstraction backing caches and application state."""

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key`` or ``default``."""
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key`` and flush."""
        raise NotImplementedError

    def delete(self, key: str) -> bool:
        """Remove ``key``. Returns ``True`` if it existed."""
        raise NotImplementedError

    def delete_many(self, keys: Iterable[str]) -> int:
        """Remove several keys with a single flush; return how many existed."""
        raise NotImplementedError

    def keys(self) -> Iterator[str]:
        """Iterate over a snapshot of the stored keys."""
        raise NotImplementedError

    def flush(self) -> None:
        """Persist the table."""
        raise NotImplementedError

    def __contains__(self, key: object) -> bool:
        raise NotImplementedError


class TrackerClient(Protocol):
    """Read access to the issue tracker REST API."""

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Perform a GET request and return the decoded JSON body."""
        raise NotImplementedError


class IssueSource(Protocol):
    """Looks up issues in the tracker."""

    def get_issue(self, key: str) -> Issue:
        """Return a single issue by key."""
        raise NotImplementedError

    def search(self, jql: str, max_results: int = 50) -> list[Issue]:
        """Return issues matching a JQL query."""
        raise NotImplementedError


__all__ = [
    "IssueSource",
    "KeyValueStore",
    "Serializable",
    "TrackerClient",
]
