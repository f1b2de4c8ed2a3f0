"""Logging configuration helpers."""

from __future__ import annotations

import logging
import logging.config
from typing import Any

from .config import LoggingSettings

PACKAGE_LOGGER = "inbox_mime"


def _structured_formatter() -> dict[str, Any]:
    """Return a dictConfig fragment emitting one JSON object per record."""
    return {
        "format": (
            '{{"time": "{asctime}", "level": "{levelname}", '
            '"logger": "{name}", "message": "{message}"}}'
        ),
        "style": "{",
    }


def _plain_formatter() -> dict[str, Any]:
    """Return a dictConfig fragment for human readable logs."""
    return {
        "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
    }


def configure_logging(settings: LoggingSettings, *, package_only: bool = False) -> None:
    """Configure logging according to ``settings``.

    By default the root logger receives the console handler. With
    ``package_only`` the handler is attached to the ``inbox_mime`` logger
    instead and records stop propagating to the root logger.
    """
    formatter = _structured_formatter() if settings.structured else _plain_formatter()

    dict_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": formatter,
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "level": settings.level,
            },
        },
    }
    target = {"handlers": ["console"], "level": settings.level}
    if package_only:
        dict_config["loggers"] = {PACKAGE_LOGGER: {**target, "propagate": False}}
    else:
        dict_config["root"] = target

    logging.config.dictConfig(dict_config)


__all__ = ["PACKAGE_LOGGER", "configure_logging"]
