"""Tests for environment-driven settings."""

import pytest

from tasksync.api.client import ApiClient
from tasksync.config import Settings, get_settings

ENV_VARS = (
    "TASKSYNC_SERVER_URL",
    "TASKSYNC_API_BASE",
    "TASKSYNC_REQUEST_TIMEOUT_SEC",
    "TASKSYNC_LOG_LEVEL",
    "TASKSYNC_LOG_FILE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_defaults(self):
        settings = get_settings()
        assert settings.base_url == "http://localhost:8000/api"
        assert settings.request_timeout_sec is None
        assert settings.log_level == "INFO"
        assert settings.log_file is None

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("TASKSYNC_SERVER_URL", "https://tasks.example.com/")
        monkeypatch.setenv("TASKSYNC_API_BASE", "v2/")
        monkeypatch.setenv("TASKSYNC_REQUEST_TIMEOUT_SEC", "2.5")
        monkeypatch.setenv("TASKSYNC_LOG_LEVEL", "debug")
        settings = get_settings()
        assert settings.base_url == "https://tasks.example.com/v2"
        assert settings.request_timeout_sec == 2.5
        assert settings.log_level == "DEBUG"

    def test_absolute_api_base_wins(self):
        settings = Settings(server_url="http://ignored", api_base="http://api.example.com/api/")
        assert settings.base_url == "http://api.example.com/api"

    def test_empty_api_base(self):
        assert Settings(api_base="").base_url == "http://localhost:8000"

    def test_bad_timeout(self, monkeypatch):
        monkeypatch.setenv("TASKSYNC_REQUEST_TIMEOUT_SEC", "soon")
        with pytest.raises(ValueError):
            get_settings()

    def test_client_uses_settings(self, monkeypatch):
        monkeypatch.setenv("TASKSYNC_SERVER_URL", "http://example.test:9000")
        monkeypatch.setenv("TASKSYNC_REQUEST_TIMEOUT_SEC", "3")
        client = ApiClient()
        assert client.base_url == "http://example.test:9000/api"
        assert client.timeout == 3.0
        client.close()
