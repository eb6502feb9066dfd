"""Core utilities for configuration, logging, and dependency wiring."""

from .config import (
    BootstrapParams,
    Config,
    ConfigError,
    TrackerSettings,
    load_bootstrap_params,
)
from .container import (
    CyclicDependency,
    DuplicateRegistration,
    ServiceContainer,
    UnknownBehaviour,
    UnknownService,
)
from .logging import configure_logging, get_logger

__all__ = [
    "BootstrapParams",
    "Config",
    "ConfigError",
    "CyclicDependency",
    "DuplicateRegistration",
    "ServiceContainer",
    "TrackerSettings",
    "UnknownBehaviour",
    "UnknownService",
    "configure_logging",
    "get_logger",
    "load_bootstrap_params",
]
