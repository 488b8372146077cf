"""
Tests for settings loading.
"""

import pytest
from pydantic import ValidationError

from podinbox.core.config import Settings, get_config, get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    # Keep a developer's .env or exported variables out of the tests
    monkeypatch.chdir(tmp_path)
    for name in [
        "PODINBOX_AUTH_TOKEN",
        "PODINBOX_HTTP_TIMEOUT_SECS",
        "PODINBOX_VERIFY_TLS",
        "PODINBOX_USER_AGENT",
        "PODINBOX_OWNER_WEBID",
        "PODINBOX_DEFAULT_INBOX",
        "PODINBOX_NOTIFICATION_SHAPE",
        "PODINBOX_LOG_LEVEL",
    ]:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings()

    assert settings.auth_token == ""
    assert settings.http_timeout_secs == 30.0
    assert settings.verify_tls is True
    assert settings.log_level == "WARNING"


def test_environment(monkeypatch):
    monkeypatch.setenv("PODINBOX_AUTH_TOKEN", "secret")
    monkeypatch.setenv("PODINBOX_HTTP_TIMEOUT_SECS", "5")
    monkeypatch.setenv("PODINBOX_VERIFY_TLS", "false")
    monkeypatch.setenv("PODINBOX_OWNER_WEBID", "https://pod.example/alice/profile/card#me")

    config = get_config()

    assert config.pod.auth_token == "secret"
    assert config.pod.http_timeout_secs == 5.0
    assert config.pod.verify_tls is False
    assert config.owner_webid == "https://pod.example/alice/profile/card#me"


def test_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("PODINBOX_DEFAULT_INBOX=https://pod.example/alice/inbox\n")

    assert get_config().default_inbox == "https://pod.example/alice/inbox"


def test_settings_are_cached():
    assert get_settings() is get_settings()


def test_log_level_is_case_insensitive(monkeypatch):
    monkeypatch.setenv("PODINBOX_LOG_LEVEL", "debug")

    assert get_settings().log_level == "DEBUG"


def test_unknown_log_level_rejected(monkeypatch):
    monkeypatch.setenv("PODINBOX_LOG_LEVEL", "verbose")

    with pytest.raises(ValidationError):
        get_settings()
