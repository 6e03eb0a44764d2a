"""Tests for settings loading."""

import pytest

from sedbot.config import SettingsError, load_settings

_VARS = [
    "TELEGRAM_BOT_TOKEN",
    "TELEGRAM_BOT_HANDLE",
    "TELEGRAM_BOT_MAX_FAILURES_PER_MINUTE",
    "TELEGRAM_BOT_RESTART_DELAY",
    "TELEGRAM_BOT_POLL_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for key in _VARS:
        monkeypatch.delenv(key, raising=False)
    # Keep a developer's .env out of the way.
    monkeypatch.chdir(tmp_path)


class TestLoadSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123:abc")
        settings = load_settings()
        assert settings.token == "123:abc"
        assert settings.handle is None
        assert settings.max_failures_per_minute == 30
        assert settings.restart_delay == 1.0
        assert settings.poll_timeout == 30

    def test_all_values(self, monkeypatch):
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123:abc")
        monkeypatch.setenv("TELEGRAM_BOT_HANDLE", "sedbot")
        monkeypatch.setenv("TELEGRAM_BOT_MAX_FAILURES_PER_MINUTE", "5")
        monkeypatch.setenv("TELEGRAM_BOT_RESTART_DELAY", "0")
        settings = load_settings()
        assert settings.handle == "sedbot"
        assert settings.max_failures_per_minute == 5
        assert settings.restart_delay == 0

    def test_env_file(self, tmp_path):
        (tmp_path / ".env").write_text("TELEGRAM_BOT_TOKEN=from-file\n", encoding="utf-8")
        assert load_settings().token == "from-file"

    def test_missing_token(self):
        with pytest.raises(SettingsError) as exc:
            load_settings()
        assert "TELEGRAM_BOT_TOKEN" in str(exc.value)

    def test_invalid_failure_budget(self, monkeypatch):
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123:abc")
        monkeypatch.setenv("TELEGRAM_BOT_MAX_FAILURES_PER_MINUTE", "lots")
        with pytest.raises(SettingsError) as exc:
            load_settings()
        assert "TELEGRAM_BOT_MAX_FAILURES_PER_MINUTE" in str(exc.value)
