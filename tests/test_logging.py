"""Tests for logging utilities."""

from __future__ import annotations

import logging

from inbox_mime.core.config import LoggingSettings
from inbox_mime.core.logging import PACKAGE_LOGGER, configure_logging


def test_configure_logging_sets_root_level() -> None:
    """configure_logging should set the root logger level according to settings."""

    settings = LoggingSettings(level="DEBUG", structured=False)
    configure_logging(settings)
    assert logging.getLogger().level == logging.DEBUG


def test_configure_logging_can_target_package_logger() -> None:
    settings = LoggingSettings(level="WARNING", structured=True)
    configure_logging(settings, package_only=True)

    logger = logging.getLogger(PACKAGE_LOGGER)
    assert logger.level == logging.WARNING
    assert logger.propagate is False
    assert len(logger.handlers) == 1
