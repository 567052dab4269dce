"""Tests for settings models and the settings loader."""

import pytest
from pydantic import ValidationError

from ipvault.config import (
    APISettings,
    CacheSettings,
    LoggingSettings,
    Settings,
    load_settings,
)
from ipvault.shared.errors import ConfigurationError


class TestSettingsModels:
    """Test cases for the configuration models."""

    def test_defaults(self):
        """Test the documented defaults."""
        settings = Settings()

        assert settings.cache.max_size == 4096
        assert settings.cache.ttl == 86400
        assert settings.api.base_url == "https://ipinfo.io"
        assert settings.api.batch_chunk_size == 1000
        assert settings.api.access_token is None

    @pytest.mark.parametrize("values", [{"max_size": 0}, {"ttl": -1}])
    def test_cache_bounds(self, values):
        """Test that invalid cache values fail validation."""
        with pytest.raises(ValidationError):
            CacheSettings(**values)

    def test_api_repr_masks_token(self):
        """Test that the token never appears in repr."""
        settings = APISettings(access_token="super-secret")

        assert "super-secret" not in repr(settings)
        assert "****" in repr(settings)

    def test_log_level_normalized(self):
        """Test that log levels are upper-cased and validated."""
        assert LoggingSettings(level="debug").level == "DEBUG"
        with pytest.raises(ValidationError):
            LoggingSettings(level="verbose")


class TestEnvironmentOverrides:
    """Test cases for IPVAULT_ environment variables."""

    def test_nested_env_vars(self, monkeypatch):
        """Test double-underscore nesting."""
        monkeypatch.setenv("IPVAULT_CACHE__TTL", "60")
        monkeypatch.setenv("IPVAULT_API__ACCESS_TOKEN", "env-token")

        settings = Settings()

        assert settings.cache.ttl == 60
        assert settings.api.access_token == "env-token"

    def test_constructor_beats_env(self, monkeypatch):
        """Test that explicit arguments win over the environment."""
        monkeypatch.setenv("IPVAULT_CACHE__MAX_SIZE", "10")

        settings = Settings(cache={"max_size": 20})

        assert settings.cache.max_size == 20


class TestTomlFiles:
    """Test cases for TOML round-trips and load_settings."""

    def test_round_trip(self, tmp_path):
        """Test saving and loading a settings file."""
        path = tmp_path / "ipvault.toml"
        original = Settings(api={"access_token": "tok", "timeout": 4.0}, cache={"ttl": 120})

        original.to_toml_file(path)
        loaded = Settings.from_toml_file(path)

        assert loaded.api.access_token == "tok"
        assert loaded.api.timeout == 4.0
        assert loaded.cache.ttl == 120

    def test_load_settings_with_overrides(self, tmp_path):
        """Test that overrides merge into file sections."""
        path = tmp_path / "ipvault.toml"
        path.write_text("[cache]\nmax_size = 50\nttl = 30\n", encoding="utf-8")

        settings = load_settings(path, cache={"ttl": 5})

        assert settings.cache.max_size == 50
        assert settings.cache.ttl == 5

    def test_load_settings_without_file(self, tmp_path, monkeypatch):
        """Test that defaults are used when no file exists."""
        monkeypatch.chdir(tmp_path)

        settings = load_settings(cache={"ttl": 7})

        assert settings.cache.ttl == 7

    def test_missing_file(self, tmp_path):
        """Test that an explicit missing path raises ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(tmp_path / "missing.toml")

        assert isinstance(exc_info.value.original_error, FileNotFoundError)

    def test_invalid_values(self, tmp_path):
        """Test that validation failures become ConfigurationError."""
        path = tmp_path / "ipvault.toml"
        path.write_text("[cache]\nmax_size = 0\n", encoding="utf-8")

        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(path)

        assert isinstance(exc_info.value.original_error, ValidationError)

    def test_malformed_toml(self, tmp_path):
        """Test that a syntax error becomes ConfigurationError."""
        path = tmp_path / "ipvault.toml"
        path.write_text("[cache\nmax_size = ", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_settings(path)
