"""
Unit Tests for Settings
=======================

Tests for environment driven configuration and its validators.
"""

import pytest
from pydantic import ValidationError

from mermaid_cli.config import settings as settings_module
from mermaid_cli.config.settings import Settings, get_settings, reload_settings


class TestSettings:
    """Test settings defaults and validation."""

    def test_defaults(self, monkeypatch):
        """Test default values."""
        for name in ("LOG_LEVEL", "RENDER_TIMEOUT_MS", "POLL_INTERVAL_MS", "SERVER_HOST"):
            monkeypatch.delenv(f"MERMAID_CLI_{name}", raising=False)
        settings = Settings(_env_file=None)
        assert settings.server_host == "127.0.0.1"
        assert settings.default_width == 1960
        assert settings.default_height == 2160
        assert settings.render_timeout_ms == 30000
        assert settings.poll_interval_ms == 100
        assert settings.browser_headless is True

    def test_only_used_fields(self):
        """Test that settings carry no fields the converter never reads."""
        assert "app_name" not in Settings.model_fields

    def test_environment_variables(self, monkeypatch):
        """Test MERMAID_CLI_ prefixed overrides."""
        monkeypatch.setenv("MERMAID_CLI_RENDER_TIMEOUT_MS", "1234")
        monkeypatch.setenv("MERMAID_CLI_LOG_LEVEL", "debug")
        settings = Settings(_env_file=None)
        assert settings.render_timeout_ms == 1234
        assert settings.log_level == "DEBUG"

    def test_invalid_environment(self):
        """Test environment validation."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, environment="staging")

    def test_invalid_log_level(self):
        """Test log level validation."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="LOUD")

    def test_invalid_log_format(self):
        """Test log format validation."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_format="xml")

    @pytest.mark.parametrize("field", ["render_timeout_ms", "poll_interval_ms", "default_width"])
    def test_non_positive_values_rejected(self, field):
        """Test positive value validation."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: 0})

    def test_browser_args_from_comma_string(self):
        """Test comma separated browser switches."""
        settings = Settings(_env_file=None, browser_args="--a, --b")
        assert settings.browser_args == ["--a", "--b"]

    def test_browser_args_from_json_string(self):
        """Test JSON list browser switches."""
        settings = Settings(_env_file=None, browser_args='["--x"]')
        assert settings.browser_args == ["--x"]


class TestSettingsAccessors:
    """Test the global settings accessors."""

    def test_get_settings_returns_override(self, override_settings):
        """Test that the fixture instance is returned."""
        assert get_settings() is override_settings

    def test_reload_settings_replaces_instance(self, monkeypatch, override_settings):
        """Test reloading from the environment."""
        monkeypatch.setenv("MERMAID_CLI_POLL_INTERVAL_MS", "42")
        reloaded = reload_settings()
        assert reloaded is not override_settings
        assert reloaded.poll_interval_ms == 42
        assert settings_module.settings is reloaded
