from __future__ import annotations

from pathlib import Path

from devfinder.config import DirectorySettings, get_settings


def test_settings_read_nested_environment(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DEVFINDER_TELEGRAM_TOKEN", "123:abc")
    monkeypatch.setenv("DEVFINDER_LOG_LEVEL", " debug ")
    monkeypatch.setenv("DEVFINDER_LISTING__BACKEND", "fixture")
    monkeypatch.setenv("DEVFINDER_LISTING__FIXTURE_PATH", "data/devs.json")
    monkeypatch.setenv("DEVFINDER_LISTING__MAX_ATTEMPTS", "2")

    settings = DirectorySettings()

    assert settings.telegram_token.get_secret_value() == "123:abc"
    assert settings.log_level == "DEBUG"
    assert settings.listing.backend == "fixture"
    assert settings.listing.fixture_path == Path("data/devs.json")
    assert settings.listing.max_attempts == 2


def test_settings_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("DEVFINDER_TELEGRAM_TOKEN", "DEVFINDER_LISTING__BACKEND"):
        monkeypatch.delenv(name, raising=False)

    settings = DirectorySettings()

    assert settings.environment == "dev"
    assert settings.telegram_token is None
    assert settings.listing.backend == "supabase"
    assert settings.listing.table == "developers"
    assert settings.listing.max_attempts == 1


def test_get_settings_is_cached():
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()
