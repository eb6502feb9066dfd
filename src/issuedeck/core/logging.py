"""Logging configuration for the issuedeck logger tree."""

from __future__ import annotations

import logging
import logging.config
from typing import Any

from .config import LoggingSettings

APP_LOGGER = "issuedeck"

# Third-party loggers whose INFO output duplicates the client's own request logs.
QUIET_LOGGERS = ("httpx", "httpcore")

FORMATS: dict[bool, dict[str, Any]] = {
    False: {"format": "%(asctime)s %(levelname)-7s %(name)s: %(message)s"},
    True: {
        "format": "ts={asctime} level={levelname} logger={name} msg={message!r}",
        "style": "{",
    },
}


def build_logging_config(settings: LoggingSettings) -> dict[str, Any]:
    """Return the dictConfig mapping for ``settings``.

    Only the ``issuedeck`` tree is configured; it writes to stderr and does
    not propagate, so the host's root logger is left alone. Request logging
    from the HTTP stack stays at WARNING unless DEBUG is asked for.
    """
    level = settings.level.upper()
    quiet_level = "DEBUG" if level == "DEBUG" else "WARNING"
    loggers: dict[str, Any] = {
        APP_LOGGER: {"handlers": ["stderr"], "level": level, "propagate": False},
    }
    for name in QUIET_LOGGERS:
        loggers[name] = {"handlers": ["stderr"], "level": quiet_level, "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"issuedeck": FORMATS[settings.structured]},
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "issuedeck",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": loggers,
    }


def configure_logging(settings: LoggingSettings) -> None:
    """Apply :func:`build_logging_config` for ``settings``."""
    logging.config.dictConfig(build_logging_config(settings))


def get_logger(level: str = "INFO", *, structured: bool = False) -> logging.Logger:
    """Configure logging at ``level`` and return the application logger."""
    configure_logging(LoggingSettings(level=level, structured=structured))
    return logging.getLogger(APP_LOGGER)


__all__ = ["APP_LOGGER", "build_logging_config", "configure_logging", "get_logger"]
