"""Core utilities for configuration, logging, errors and result models."""

from .config import AppSettings, LoggingSettings, ParserSettings, load_app_settings
from .logging import configure_logging

__all__ = [
    "AppSettings",
    "LoggingSettings",
    "ParserSettings",
    "configure_logging",
    "load_app_settings",
]
