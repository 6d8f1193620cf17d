"""Tests for configuration validation"""
import pytest

from quizhub import config
from quizhub.exceptions import ConfigurationError


class TestConfigValidation:

    def test_defaults_are_valid(self, monkeypatch):
        monkeypatch.setattr(config, "STORE_BACKEND", "memory")

        config.validate_config()

    def test_unknown_store_backend(self, monkeypatch):
        monkeypatch.setattr(config, "STORE_BACKEND", "sqlite")

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate_config()

        assert exc_info.value.config_key == "STORE_BACKEND"

    def test_postgres_requires_database_url(self, monkeypatch):
        monkeypatch.setattr(config, "STORE_BACKEND", "postgres")
        monkeypatch.setattr(config, "DATABASE_URL", "")

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate_config()

        assert exc_info.value.config_key == "DATABASE_URL"

    def test_speed_threshold_must_be_positive(self, monkeypatch):
        monkeypatch.setattr(config, "STORE_BACKEND", "memory")
        monkeypatch.setattr(config, "SPEED_THRESHOLD_SECONDS", 0)

        with pytest.raises(ConfigurationError):
            config.validate_config()
