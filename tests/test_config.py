"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from inbox_mime.core.config import ParserSettings, load_app_settings


@pytest.fixture(autouse=True)
def clear_settings_cache() -> None:
    """Ensure each test sees a fresh settings instance."""

    load_app_settings.cache_clear()


def test_defaults_loaded_without_env_file() -> None:
    """Default values should be returned when no overrides are present."""

    settings = load_app_settings(include_environment=False)
    assert settings.parser.max_mixed_depth == 3
    assert settings.parser.max_message_bytes == 32 * 1024 * 1024
    assert settings.logging.level == "INFO"
    assert settings.logging.structured is False


def test_env_file_overrides(tmp_path: Path) -> None:
    """Values defined in an env file should override defaults."""

    env_file = tmp_path / "test.env"
    env_file.write_text(
        "INBOX_MIME_PARSER__MAX_MIXED_DEPTH=5\n"
        "INBOX_MIME_PARSER__MAX_MESSAGE_BYTES=\n"
        "INBOX_MIME_LOGGING__STRUCTURED=true\n"
        "UNRELATED_KEY=ignored\n",
        encoding="utf-8",
    )

    settings = load_app_settings(env_file=env_file, include_environment=False)
    assert settings.parser.max_mixed_depth == 5
    assert settings.parser.max_message_bytes is None
    assert settings.logging.structured is True


def test_environment_overrides_env_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Process environment should win over values from an env file."""

    env_file = tmp_path / "test.env"
    env_file.write_text("INBOX_MIME_LOGGING__LEVEL=WARNING\n", encoding="utf-8")
    monkeypatch.setenv("INBOX_MIME_LOGGING__LEVEL", "DEBUG")

    settings = load_app_settings(env_file=env_file)
    assert settings.logging.level == "DEBUG"


def test_environment_ignored_when_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INBOX_MIME_PARSER__MAX_MIXED_DEPTH", "7")

    settings = load_app_settings(include_environment=False)
    assert settings.parser.max_mixed_depth == 3


def test_depth_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        ParserSettings(max_mixed_depth=0)
