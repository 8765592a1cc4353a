"""Tests for configuration management."""

import pytest
from pydantic import ValidationError

from fetchproxy.config import Settings


class TestSettings:
    """Tests for Settings configuration."""

    def test_settings_defaults(self, monkeypatch, tmp_path):
        """Test default values are set correctly."""
        monkeypatch.chdir(tmp_path)
        settings = Settings()

        assert settings.log_level == "INFO"
        assert settings.debug is False
        assert settings.api_host == "0.0.0.0"
        assert settings.api_port == 8000
        assert settings.upstream_timeout is None
        assert settings.max_redirects == 20

    def test_settings_overrides(self):
        """Test explicit values."""
        settings = Settings(
            log_level="DEBUG",
            debug=True,
            api_port=9000,
            upstream_timeout=2.5,
            max_redirects=3,
        )

        assert settings.log_level == "DEBUG"
        assert settings.debug is True
        assert settings.api_port == 9000
        assert settings.upstream_timeout == 2.5
        assert settings.max_redirects == 3

    def test_settings_log_level_validation(self):
        """Invalid log level should raise validation error."""
        with pytest.raises(ValidationError):
            Settings(log_level="INVALID")

    def test_settings_from_environment(self, monkeypatch):
        """Environment variables are read case-insensitively."""
        monkeypatch.setenv("UPSTREAM_TIMEOUT", "7")
        monkeypatch.setenv("api_port", "8081")

        settings = Settings()

        assert settings.upstream_timeout == 7.0
        assert settings.api_port == 8081

    def test_settings_from_env_file(self, monkeypatch, tmp_path):
        """Test loading settings from environment file."""
        env_file = tmp_path / ".env"
        env_file.write_text("""
LOG_LEVEL=WARNING
MAX_REDIRECTS=5
UNRELATED_KEY=ignored
""")
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.log_level == "WARNING"
        assert settings.max_redirects == 5
