"""Namespaced TTL cache over a key/value store."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from ..core.interfaces import KeyValueStore

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class _Missing:
    """Sentinel type returned for cache misses."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def serialize_value(value: Any) -> Any:
    """Map ``value`` to its JSON form using each object's ``serialize``."""
    if isinstance(value, (list, tuple)):
        return [serialize_value(item) for item in value]
    serialize = getattr(value, "serialize", None)
    if callable(serialize):
        return serialize()
    return value


def unserialize_value(payload: Any, codec: Any) -> Any:
    """Inverse of :func:`serialize_value` for payloads of a single type."""
    if isinstance(payload, list):
        return [codec.unserialize(item) for item in payload]
    return codec.unserialize(payload)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class Cache:
    """TTL-aware cache whose keys are namespaced by an immutable prefix.

    Entries record the time they were stored along with the TTL given by the
    writer. Freshness is checked lazily on :meth:`get`; stale entries look
    exactly like absent ones. Several caches may share one store as long as
    their prefixes differ.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        prefix: str,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not prefix:
            raise ValueError("Cache prefix must not be empty")
        self._storage = storage
        self._prefix = prefix
        self._clock = clock

    @property
    def prefix(self) -> str:
        return self._prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}.{key}"

    def get(self, key: str, invalidate: bool = False, ttl: float | None = None) -> Any:
        """Return the fresh value for ``key`` or :data:`MISSING`.

        ``ttl`` overrides the TTL recorded by the writer for this access only.
        """
        if invalidate:
            LOGGER.debug("Cache bypassed for key: %s", key)
            return MISSING
        entry = self._storage.get(self._key(key))
        stored_at = entry.get("storedAt") if isinstance(entry, dict) else None
        max_age = entry.get("ttl") if ttl is None and isinstance(entry, dict) else ttl
        if not (_is_number(stored_at) and _is_number(max_age)):
            LOGGER.debug("Cache miss for key: %s", key)
            return MISSING
        if self._clock() - stored_at >= max_age:
            LOGGER.debug("Cache expired for key: %s", key)
            return MISSING
        LOGGER.debug("Cache hit for key: %s", key)
        return entry.get("value")

    def set(self, key: str, value: Any, ttl: float) -> None:
        """Store ``value`` under ``key`` with the current timestamp."""
        entry = {"storedAt": self._clock(), "ttl": ttl, "value": value}
        self._storage.set(self._key(key), entry)
        LOGGER.debug("Cache set for key: %s (TTL: %ss)", key, ttl)

    def set_thenable(self, key: str, ttl: float) -> Callable[[T], T]:
        """Return a callback storing its argument and passing it through."""

        def store(value: T) -> T:
            self.set(key, value, ttl)
            return value

        return store

    def set_serialized_thenable(self, key: str, ttl: float) -> Callable[[T], T]:
        """Like :meth:`set_thenable` but stores the serialized form."""

        def store(value: T) -> T:
            self.set(key, serialize_value(value), ttl)
            return value

        return store

    def memoize(
        self,
        key: str,
        ttl: float,
        producer: Callable[[], T],
        *,
        invalidate: bool = False,
        codec: Any = None,
    ) -> T:
        """Return the cached value for ``key`` or store what ``producer`` makes."""
        cached = self.get(key, invalidate)
        if cached is not MISSING:
            return unserialize_value(cached, codec) if codec else cached
        store = self.set_serialized_thenable if codec else self.set_thenable
        return store(key, ttl)(producer())

    async def amemoize(
        self,
        key: str,
        ttl: float,
        producer: Callable[[], Awaitable[T]],
        *,
        invalidate: bool = False,
        codec: Any = None,
    ) -> T:
        """Awaitable counterpart of :meth:`memoize`."""
        cached = self.get(key, invalidate)
        if cached is not MISSING:
            return unserialize_value(cached, codec) if codec else cached
        store = self.set_serialized_thenable if codec else self.set_thenable
        return store(key, ttl)(await producer())

    def invalidate(self, key: str) -> bool:
        """Remove a single entry. Returns ``True`` if it existed."""
        removed = self._storage.delete(self._key(key))
        LOGGER.debug("Cache invalidated key: %s", key)
        return removed

    def invalidate_all(self) -> int:
        """Remove every entry under this cache's prefix."""
        namespace = f"{self._prefix}."
        keys = [key for key in self._storage.keys() if key.startswith(namespace)]
        count = self._storage.delete_many(keys)
        LOGGER.info("Invalidated all %d cache entries under '%s'", count, self._prefix)
        return count


__all__ = ["Cache", "MISSING", "serialize_value", "unserialize_value"]
