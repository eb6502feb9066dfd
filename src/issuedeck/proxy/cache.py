"""Behaviour memoizing selected method calls through a :class:`Cache`."""

from __future__ import annotations

import functools
import hashlib
import inspect
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..storage.cache import MISSING, Cache, unserialize_value
from .base import ProxyConfigurationError, ServiceProxy, resolve_methods

LOGGER = logging.getLogger(__name__)

KeyRule = Callable[[str, tuple[Any, ...], dict[str, Any]], str]


def default_cache_key(method: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> str:
    """Derive a cache key from the method name and call arguments.

    Calls without arguments use the bare method name; otherwise the ``repr``
    of every argument is hashed and appended.
    """
    if not args and not kwargs:
        return method
    parts = [repr(arg) for arg in args]
    parts.extend(f"{name}={value!r}" for name, value in sorted(kwargs.items()))
    digest = hashlib.md5("|".join(parts).encode("utf-8")).hexdigest()
    return f"{method}:{digest}"


@dataclass(frozen=True, slots=True)
class CachePolicy:
    """How one intercepted method is cached."""

    ttl: float
    key: KeyRule | None = None
    codec: Any = None
    invalidate_kwarg: str | None = None

    def __post_init__(self) -> None:
        if self.ttl < 0:
            raise ProxyConfigurationError("Cache TTL must not be negative")
        if self.codec is not None and not callable(getattr(self.codec, "unserialize", None)):
            msg = f"Codec {self.codec!r} does not define unserialize()"
            raise ProxyConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class CacheOptions:
    """Methods intercepted by a cache proxy, keyed by name."""

    methods: Mapping[str, CachePolicy] = field(default_factory=dict)


def _coerce_options(options: Any) -> CacheOptions:
    if isinstance(options, CacheOptions):
        opts = options
    elif isinstance(options, Mapping):
        opts = CacheOptions(methods=dict(options))
    else:
        msg = f"Cache proxy options must be CacheOptions or a mapping, got {options!r}"
        raise ProxyConfigurationError(msg)
    for name, policy in opts.methods.items():
        if not isinstance(policy, CachePolicy):
            msg = f"Cache policy for '{name}' must be a CachePolicy, got {policy!r}"
            raise ProxyConfigurationError(msg)
    return opts


class CacheProxy:
    """Builds proxies whose intercepted methods read through ``cache``."""

    def __init__(self, cache: Cache) -> None:
        self._cache = cache

    def create_proxy(self, target: Any, options: Any) -> ServiceProxy:
        """Wrap ``target`` so the methods named in ``options`` are memoized."""
        opts = _coerce_options(options)
        methods = resolve_methods(target, opts.methods)
        wrappers = {
            name: self._wrap(name, method, opts.methods[name])
            for name, method in methods.items()
        }
        return ServiceProxy(target, wrappers)

    def _lookup(
        self, name: str, policy: CachePolicy, args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> tuple[str, Any]:
        key_kwargs = dict(kwargs)
        invalidate = False
        if policy.invalidate_kwarg is not None:
            invalidate = bool(key_kwargs.pop(policy.invalidate_kwarg, False))
        key = (policy.key or default_cache_key)(name, args, key_kwargs)
        cached = self._cache.get(key, invalidate)
        if cached is not MISSING and policy.codec is not None:
            cached = unserialize_value(cached, policy.codec)
        return key, cached

    def _store(self, key: str, policy: CachePolicy) -> Callable[[Any], Any]:
        if policy.codec is not None:
            return self._cache.set_serialized_thenable(key, policy.ttl)
        return self._cache.set_thenable(key, policy.ttl)

    def _wrap(
        self, name: str, method: Callable[..., Any], policy: CachePolicy
    ) -> Callable[..., Any]:
        if inspect.iscoroutinefunction(method):

            @functools.wraps(method)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                key, cached = self._lookup(name, policy, args, kwargs)
                if cached is not MISSING:
                    return cached
                return self._store(key, policy)(await method(*args, **kwargs))

            return async_wrapper

        @functools.wraps(method)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            key, cached = self._lookup(name, policy, args, kwargs)
            if cached is not MISSING:
                return cached
            return self._store(key, policy)(method(*args, **kwargs))

        return wrapper


__all__ = ["CacheOptions", "CachePolicy", "CacheProxy", "default_cache_key"]
