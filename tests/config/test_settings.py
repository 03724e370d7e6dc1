"""Tests for src/config/settings.py — environment-driven settings."""

import logging

import pytest
from pydantic import ValidationError

from src.config.settings import Settings, configure_logging, get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.setenv("GRAPHQL_URL", "https://dixit.test/graphql")

        settings = Settings(_env_file=None)

        assert settings.graphql_url == "https://dixit.test/graphql"
        assert settings.poll_interval == 2.0
        assert settings.graphql_token is None
        assert settings.analytics_enabled is True
        assert settings.log_level == "INFO"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("GRAPHQL_URL", "https://dixit.test/graphql")
        monkeypatch.setenv("POLL_INTERVAL", "0.5")
        monkeypatch.setenv("ANALYTICS_ENABLED", "false")

        settings = Settings(_env_file=None)

        assert settings.poll_interval == 0.5
        assert settings.analytics_enabled is False

    def test_url_required(self, monkeypatch):
        monkeypatch.delenv("GRAPHQL_URL", raising=False)

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_get_settings_cached(self, monkeypatch):
        monkeypatch.setenv("GRAPHQL_URL", "https://dixit.test/graphql")

        assert get_settings() is get_settings()


class TestConfigureLogging:
    def test_debug_forces_debug_level(self, monkeypatch):
        monkeypatch.setenv("GRAPHQL_URL", "https://dixit.test/graphql")
        root = logging.getLogger()
        previous = root.level
        with monkeypatch.context() as m:
            m.setattr(root, "handlers", [])
            configure_logging(Settings(_env_file=None, debug=True))
            assert root.level == logging.DEBUG
        root.setLevel(previous)
