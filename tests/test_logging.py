"""Tests for logging utilities."""

from __future__ import annotations

import logging

from issuedeck.core.config import LoggingSettings
from issuedeck.core.logging import (
    APP_LOGGER,
    build_logging_config,
    configure_logging,
    get_logger,
)


def test_configure_logging_sets_application_level() -> None:
    """configure_logging should set the issuedeck logger level, not the root's."""

    root_level = logging.getLogger().level
    configure_logging(LoggingSettings(level="debug", structured=False))

    app_logger = logging.getLogger(APP_LOGGER)
    assert app_logger.level == logging.DEBUG
    assert app_logger.propagate is False
    assert logging.getLogger().level == root_level
    assert logging.getLogger("issuedeck.storage.cache").getEffectiveLevel() == logging.DEBUG


def test_get_logger_returns_application_logger() -> None:
    logger = get_logger("warning")

    assert logger.name == APP_LOGGER
    assert logger.level == logging.WARNING
    assert logging.getLogger("httpx").level == logging.WARNING


def test_http_stack_follows_debug_level() -> None:
    config = build_logging_config(LoggingSettings(level="DEBUG"))

    assert config["loggers"]["httpx"]["level"] == "DEBUG"
    assert "root" not in config


def test_structured_format_uses_key_value_pairs() -> None:
    config = build_logging_config(LoggingSettings(level="INFO", structured=True))

    formatter = config["formatters"]["issuedeck"]
    assert formatter["style"] == "{"
    assert formatter["format"].startswith("ts=")
