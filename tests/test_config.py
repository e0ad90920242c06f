"""Tests for configuration helpers."""

import pytest
from dynaconf import Dynaconf
from sso_audit import config


_ENV_KEYS = (
    "SSO_AUDIT_SERVICE_NAME",
    "SSO_AUDIT_HOST",
    "SSO_AUDIT_PORT",
    "SSO_AUDIT_CORS_ALLOW_ORIGIN",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    yield
    monkeypatch.undo()
    config.get_settings(refresh=True)


def test_settings_defaults() -> None:
    """Defaults apply when no environment overrides are present."""

    settings = config.get_settings(refresh=True)

    assert settings.service_name == "sso-audit"
    assert settings.host == "0.0.0.0"
    assert settings.port == 8000
    assert settings.cors_allow_origin == "*"


def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """SSO_AUDIT_* variables override the defaults."""

    monkeypatch.setenv("SSO_AUDIT_SERVICE_NAME", "federation-audit")
    monkeypatch.setenv("SSO_AUDIT_PORT", "9001")
    monkeypatch.setenv("SSO_AUDIT_CORS_ALLOW_ORIGIN", "https://admin.example.com")

    settings = config.get_settings(refresh=True)

    assert settings.service_name == "federation-audit"
    assert settings.port == 9001
    assert settings.cors_allow_origin == "https://admin.example.com"


@pytest.mark.parametrize("port", ["not-a-port", "0", "70000"])
def test_settings_invalid_port(monkeypatch: pytest.MonkeyPatch, port: str) -> None:
    """Ports outside the valid range fail fast."""

    monkeypatch.setenv("SSO_AUDIT_PORT", port)

    with pytest.raises(ValueError):
        config.get_settings(refresh=True)


def test_normalize_blank_service_name() -> None:
    """Blank service names fall back to the default."""

    source = Dynaconf(settings_files=[], load_dotenv=False, environments=False)
    source.set("SERVICE_NAME", "   ")

    normalized = config._normalize_settings(source)

    assert normalized.service_name == "sso-audit"


def test_get_settings_refresh(monkeypatch: pytest.MonkeyPatch) -> None:
    """get_settings refresh flag should reload cached values."""

    monkeypatch.setenv("SSO_AUDIT_HOST", "127.0.0.1")
    settings = config.get_settings(refresh=True)
    assert settings.host == "127.0.0.1"

    monkeypatch.setenv("SSO_AUDIT_HOST", "10.0.0.5")
    assert config.get_settings().host == "127.0.0.1"
    refreshed = config.get_settings(refresh=True)
    assert refreshed.host == "10.0.0.5"
