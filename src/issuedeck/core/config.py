"""Bootstrap parameters, tracker configuration and loader utilities."""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, ValidationError


class ConfigError(RuntimeError):
    """Raised when the tracker configuration file cannot be used."""


class LoggingSettings(BaseModel):
    """Logging preferences."""

    level: str = Field(default="INFO", description="Level of the issuedeck logger tree")
    structured: bool = Field(
        default=False, description="Toggle JSON structured logging"
    )


class BootstrapParams(BaseModel):
    """Options supplied once at process start; immutable for the run."""

    model_config = ConfigDict(frozen=True)

    config_file: Path = Field(
        default=Path("./.issuedeck/config.json"),
        description="Tracker configuration (domain and credentials)",
    )
    cache_file: Path = Field(
        default=Path("./.issuedeck/cache.json"),
        description="Persisted cache table",
    )
    state_file: Path = Field(
        default=Path("./.issuedeck/state.json"),
        description="Persisted application state table",
    )
    log_level: str = Field(default="WARNING", description="Level of the issuedeck logger tree")
    log_structured: bool = Field(
        default=False, description="Toggle JSON structured logging"
    )
    clear_cache: bool = Field(
        default=False, description="Drop every cached entry on startup"
    )
    cache_prefix: str = Field(
        default="cache", min_length=1, description="Namespace for cache keys"
    )
    cache_ttl: int = Field(
        default=300, ge=0, description="TTL in seconds for cached issue lookups"
    )
    retry_attempts: int = Field(
        default=3, ge=1, description="Attempts for retryable tracker requests"
    )

    @property
    def logging(self) -> LoggingSettings:
        """Return the logging section derived from the flat parameters."""
        return LoggingSettings(level=self.log_level, structured=self.log_structured)


class TrackerSettings(BaseModel):
    """Connection details for the issue tracker."""

    domain: str = Field(description="Tracker host, e.g. example.atlassian.net")
    username: str = Field(description="Account used for basic auth")
    password: str = Field(description="Password or API token")
    project: str | None = Field(default=None, description="Default project key")
    timeout_seconds: float = Field(
        default=30.0, gt=0, description="Request timeout for tracker calls"
    )


class Config:
    """Tracker configuration read from a JSON file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._settings: TrackerSettings | None = None

    def initialize(self) -> Config:
        """Load and validate the configuration file; return ``self``."""
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            msg = f"Configuration file '{self.path}' does not exist"
            raise ConfigError(msg) from exc
        except (OSError, json.JSONDecodeError) as exc:
            msg = f"Configuration file '{self.path}' is not readable JSON"
            raise ConfigError(msg) from exc
        try:
            self._settings = TrackerSettings.model_validate(raw)
        except ValidationError as exc:
            msg = f"Configuration file '{self.path}' is invalid: {exc}"
            raise ConfigError(msg) from exc
        return self

    @property
    def settings(self) -> TrackerSettings:
        if self._settings is None:
            raise ConfigError("Configuration has not been initialized")
        return self._settings

    def get(self, key: str, default: Any = None) -> Any:
        """Return a single configuration field."""
        return getattr(self.settings, key, default)


ENV_PREFIX = "ISSUEDECK_"


def _normalize_key(raw_key: str) -> str:
    """Convert an environment variable key into a field name."""
    return raw_key.removeprefix(ENV_PREFIX).lower()


def _normalize_value(value: Any) -> Any:
    if isinstance(value, str) and value == "":
        return None
    if isinstance(value, str):
        lowercase_value = value.lower()
        if lowercase_value == "true":
            return True
        if lowercase_value == "false":
            return False
    return value


def _collect_env_values(
    env_file: Path | str | None, include_environment: bool
) -> dict[str, Any]:
    """Load parameter values from an optional env file and the environment."""
    file_values = {}
    if env_file:
        env_path = Path(env_file)
        if env_path.is_file():
            file_values = {
                key: value
                for key, value in dotenv_values(env_path).items()
                if key and key.startswith(ENV_PREFIX)
            }

    env_values = {}
    if include_environment:
        env_values = {
            key: value
            for key, value in os.environ.items()
            if key.startswith(ENV_PREFIX)
        }

    combined: dict[str, Any] = {**file_values, **env_values}
    collected: dict[str, Any] = {}
    for key, value in combined.items():
        field = _normalize_key(key)
        normalized = _normalize_value(value)
        if not field or normalized is None:
            continue
        collected[field] = normalized
    return collected


@lru_cache(maxsize=1)
def load_bootstrap_params(
    env_file: Path | str | None = None,
    *,
    include_environment: bool = True,
    **overrides: Any,
) -> BootstrapParams:
    """Load bootstrap parameters, applying env files and overrides."""
    collected = _collect_env_values(env_file, include_environment)
    collected.update({k: v for k, v in overrides.items() if v is not None})
    return BootstrapParams.model_validate(collected)


__all__ = [
    "BootstrapParams",
    "Config",
    "ConfigError",
    "LoggingSettings",
    "TrackerSettings",
    "load_bootstrap_params",
]
