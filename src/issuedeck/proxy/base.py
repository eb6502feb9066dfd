"""Delegating proxy shared by the cache and retry behaviours."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any


class ProxyConfigurationError(ValueError):
    """Raised when a behaviour is asked to intercept an unusable attribute."""


def resolve_methods(target: Any, names: Iterable[str]) -> dict[str, Callable[..., Any]]:
    """Return the bound callables ``names`` on ``target``.

    Fails when a name is absent or not callable, so a misconfigured proxy is
    reported when it is built instead of on first use.
    """
    methods: dict[str, Callable[..., Any]] = {}
    for name in names:
        method = getattr(target, name, None)
        if method is None:
            msg = f"{type(target).__name__} has no method '{name}' to intercept"
            raise ProxyConfigurationError(msg)
        if not callable(method):
            msg = f"{type(target).__name__}.{name} is not callable"
            raise ProxyConfigurationError(msg)
        methods[name] = method
    return methods


class ServiceProxy:
    """Stand-in for ``target`` with some of its methods replaced.

    Attribute reads and writes not covered by ``wrappers`` go straight to the
    wrapped object, so the proxy offers the same operations with the same
    signatures. Dunder protocol methods (``len()``, iteration, ...) are not
    forwarded.
    """

    __slots__ = ("__wrapped__", "_wrappers")

    def __init__(self, target: Any, wrappers: Mapping[str, Callable[..., Any]]) -> None:
        object.__setattr__(self, "__wrapped__", target)
        object.__setattr__(self, "_wrappers", dict(wrappers))

    def __getattr__(self, name: str) -> Any:
        wrappers = object.__getattribute__(self, "_wrappers")
        if name in wrappers:
            return wrappers[name]
        return getattr(object.__getattribute__(self, "__wrapped__"), name)

    def __setattr__(self, name: str, value: Any) -> None:
        setattr(object.__getattribute__(self, "__wrapped__"), name, value)

    def __dir__(self) -> list[str]:
        target = object.__getattribute__(self, "__wrapped__")
        return sorted(set(dir(target)) | set(self._wrappers))

    def __repr__(self) -> str:
        target = object.__getattribute__(self, "__wrapped__")
        return f"<{type(self).__name__} of {target!r}>"


__all__ = ["ProxyConfigurationError", "ServiceProxy", "resolve_methods"]
