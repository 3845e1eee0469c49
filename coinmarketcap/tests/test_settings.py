from __future__ import annotations

import pytest

from coinmarketcap.config import settings as settings_module
from coinmarketcap.config.settings import DEFAULT_API_URL, Settings, get_settings, reset_settings
from coinmarketcap.services.client import MarketDataClient


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    for key in ("CMC_API_URL", "CMC_TIMEOUT_SECONDS", "CMC_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


def test_defaults():
    s = Settings.from_env()
    assert s.CMC_API_URL == DEFAULT_API_URL
    assert s.CMC_TIMEOUT_SECONDS == 10.0
    assert s.CMC_LOG_LEVEL == "INFO"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("CMC_API_URL", "http://localhost:8080/v2/")
    monkeypatch.setenv("CMC_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("CMC_LOG_LEVEL", "debug")
    s = Settings.from_env()
    assert s.CMC_API_URL == "http://localhost:8080/v2"
    assert s.CMC_TIMEOUT_SECONDS == 2.5
    assert s.CMC_LOG_LEVEL == "DEBUG"


def test_bad_timeout_rejected(monkeypatch):
    monkeypatch.setenv("CMC_TIMEOUT_SECONDS", "0")
    with pytest.raises(ValueError):
        Settings.from_env()


def test_get_settings_is_cached(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("CMC_TIMEOUT_SECONDS", "3")
    assert get_settings() is first
    reset_settings()
    assert get_settings().CMC_TIMEOUT_SECONDS == 3.0
    assert settings_module._settings is not first


def test_client_falls_back_to_settings(monkeypatch):
    monkeypatch.setenv("CMC_API_URL", "http://mirror.test/v2")
    monkeypatch.setenv("CMC_TIMEOUT_SECONDS", "4")
    client = MarketDataClient()
    assert client.base_url == "http://mirror.test/v2"
    assert client.timeout == 4.0

    explicit = MarketDataClient("http://other.test/v2", timeout=1)
    assert explicit.base_url == "http://other.test/v2"
    assert explicit.timeout == 1.0
