"""Service container wiring named services and proxy behaviours."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

LOGGER = logging.getLogger(__name__)


class ContainerError(RuntimeError):
    """Base class for wiring errors raised by :class:`ServiceContainer`."""


class DuplicateRegistration(ContainerError):
    """Raised when a service or behaviour name is registered twice."""


class UnknownService(ContainerError, KeyError):
    """Raised when resolving a name that was never registered."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message instead.
        return RuntimeError.__str__(self)


class UnknownBehaviour(UnknownService):
    """Raised when creating a proxy from an unregistered behaviour."""


class CyclicDependency(ContainerError):
    """Raised when resolving a service re-enters its own resolution."""


@dataclass(frozen=True, slots=True)
class Registration:
    """Factory plus the ordered names of the services it receives."""

    name: str
    factory: Callable[..., Any]
    dependencies: tuple[str, ...] = ()


class ServiceContainer:
    """Dependency container with lazy singleton semantics.

    Services are registered under a unique name together with the names of the
    services their factory expects. Nothing is built until :meth:`resolve` asks
    for it; each name is then constructed once, dependencies first, and the
    instance reused for the lifetime of the container.

    Behaviours live in a separate namespace. A behaviour is a factory taking a
    target object, an options value and its own resolved dependencies, and
    returning a proxy that wraps the target.
    """

    def __init__(self) -> None:
        """Initialise container storage."""
        self._services: dict[str, Registration] = {}
        self._behaviours: dict[str, Registration] = {}
        self._instances: dict[str, Any] = {}
        self._resolving: list[str] = []

    # Services -----------------------------------------------------------------
    def register_service(
        self,
        name: str,
        factory: Callable[..., Any],
        dependencies: Sequence[str] = (),
    ) -> None:
        """Register ``factory`` under ``name``.

        Dependencies are looked up lazily, so they may be registered later as
        long as they exist by the time ``name`` is first resolved.
        """
        if name in self._services:
            msg = f"Service '{name}' is already registered"
            raise DuplicateRegistration(msg)
        self._services[name] = Registration(name, factory, tuple(dependencies))
        LOGGER.debug("Registered service %s -> %s", name, list(dependencies))

    def resolve(self, name: str) -> Any:
        """Resolve a service by name, invoking its factory once."""
        if name in self._instances:
            return self._instances[name]
        registration = self._services.get(name)
        if registration is None:
            msg = f"Service '{name}' is not registered"
            if self._resolving:
                msg += f" (required by '{self._resolving[-1]}')"
            raise UnknownService(msg)
        if name in self._resolving:
            cycle = self._resolving[self._resolving.index(name) :] + [name]
            msg = "Cyclic dependency detected: " + " -> ".join(cycle)
            raise CyclicDependency(msg)

        self._resolving.append(name)
        try:
            arguments = [self.resolve(dep) for dep in registration.dependencies]
            instance = registration.factory(*arguments)
        finally:
            self._resolving.pop()

        self._instances[name] = instance
        LOGGER.debug("Constructed service %s", name)
        return instance

    def try_resolve(self, name: str) -> Any | None:
        """Resolve a service if registered; return ``None`` otherwise."""
        if name not in self._services:
            return None
        return self.resolve(name)

    def has_service(self, name: str) -> bool:
        """Return ``True`` when ``name`` is a registered service."""
        return name in self._services

    def __contains__(self, name: object) -> bool:
        return name in self._services

    # Behaviours ---------------------------------------------------------------
    def register_behaviour(
        self,
        name: str,
        apply: Callable[..., Any],
        dependencies: Sequence[str] = (),
    ) -> None:
        """Register a proxy factory ``apply(target, options, *deps)``."""
        if name in self._behaviours:
            msg = f"Behaviour '{name}' is already registered"
            raise DuplicateRegistration(msg)
        self._behaviours[name] = Registration(name, apply, tuple(dependencies))
        LOGGER.debug("Registered behaviour %s -> %s", name, list(dependencies))

    def has_behaviour(self, name: str) -> bool:
        """Return ``True`` when ``name`` is a registered behaviour."""
        return name in self._behaviours

    def create_proxy(self, name: str, target: Any, options: Any = None) -> Any:
        """Wrap ``target`` with the behaviour registered as ``name``.

        Stacking behaviours means feeding one proxy into the next call; the
        outermost behaviour runs first on every invocation.
        """
        registration = self._behaviours.get(name)
        if registration is None:
            msg = f"Behaviour '{name}' is not registered"
            raise UnknownBehaviour(msg)
        arguments = [self.resolve(dep) for dep in registration.dependencies]
        return registration.factory(target, options, *arguments)


__all__ = [
    "ContainerError",
    "CyclicDependency",
    "DuplicateRegistration",
    "Registration",
    "ServiceContainer",
    "UnknownBehaviour",
    "UnknownService",
]
