"""Unit tests for configuration module."""

import logging
from pathlib import Path

import pytest

from hypermail.config import Settings, get_settings
from hypermail.utils import resolve_log_level


class TestSettings:
    """Test suite for Settings class."""

    def test_default_settings(self) -> None:
        """Test that default settings are properly initialized."""
        settings = Settings()

        assert settings.resend_api_url == "https://api.resend.com"
        assert settings.resend_timeout == 30.0
        assert settings.log_level == "INFO"
        assert settings.debug is False
        assert settings.config_path == Path.home() / ".config" / "hypermail" / "config.json"
        assert settings.log_file.parent == settings.config_path.parent

    def test_settings_from_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test loading settings from environment variables."""
        monkeypatch.setenv("HYPERMAIL_RESEND_API_URL", "http://localhost:9999")
        monkeypatch.setenv("HYPERMAIL_CONFIG_PATH", str(tmp_path / "state.json"))
        monkeypatch.setenv("HYPERMAIL_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("HYPERMAIL_DEBUG", "true")

        # Clear the cache to ensure fresh settings
        get_settings.cache_clear()

        settings = get_settings()

        assert settings.resend_api_url == "http://localhost:9999"
        assert settings.config_path == tmp_path / "state.json"
        assert settings.log_level == "DEBUG"
        assert settings.debug is True

        # Clean up
        get_settings.cache_clear()

    def test_get_settings_returns_cached_instance(self) -> None:
        """Test that get_settings returns the same cached instance."""
        get_settings.cache_clear()

        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

        # Clean up
        get_settings.cache_clear()

    def test_poll_interval_must_be_positive(self) -> None:
        """Test that a zero poll interval is rejected."""
        with pytest.raises(ValueError):
            Settings(poll_interval=0)


class TestLogLevel:
    """Test suite for log level resolution."""

    def test_debug_forces_debug_level(self) -> None:
        assert resolve_log_level(Settings(log_level="ERROR", debug=True)) == logging.DEBUG

    def test_named_level(self) -> None:
        assert resolve_log_level(Settings(log_level="warning")) == logging.WARNING

    def test_unknown_level_falls_back_to_info(self) -> None:
        assert resolve_log_level(Settings(log_level="chatty")) == logging.INFO
