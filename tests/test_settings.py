"""Tests for configuration and shared utilities."""

import pytest
from pydantic import ValidationError

from cloudinventory.config.settings import (
    Environment,
    LogLevel,
    Settings,
    SyncSettings,
    validate_environment,
)
from cloudinventory.core.exceptions import ConfigurationException
from cloudinventory.core.utils import format_currency, safe_get


def test_defaults(monkeypatch):
    for name in ("SYNC_SIMULATED_LATENCY_SECONDS", "LOG_LEVEL", "ENVIRONMENT", "SYNC_INTERVAL_MINUTES"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings()

    assert settings.environment == Environment.DEVELOPMENT
    assert settings.log_level == LogLevel.INFO
    assert settings.advisor.model == "gemini-3-flash-preview"
    assert settings.sync.interval_minutes == 15
    assert settings.sync.simulated_latency_seconds == 1.5
    assert settings.sync.auto_sync_enabled is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("ENVIRONMENT", "Production")
    monkeypatch.setenv("GEMINI_API_KEY", "secret")
    monkeypatch.setenv("SYNC_INTERVAL_MINUTES", "5")
    monkeypatch.setenv("SYNC_AUTO_SYNC_ENABLED", "true")

    settings = Settings.create_from_env()

    assert settings.log_level == LogLevel.DEBUG
    assert settings.environment == Environment.PRODUCTION
    assert settings.advisor.api_key == "secret"
    assert settings.sync.interval_minutes == 5
    assert settings.sync.auto_sync_enabled is True


def test_interval_must_be_positive(monkeypatch):
    monkeypatch.setenv("SYNC_INTERVAL_MINUTES", "0")

    with pytest.raises(ValidationError):
        SyncSettings()


def test_validate_environment_warns_without_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    report = validate_environment(Settings())

    assert report["has_advisor_key"] is False
    assert report["warnings"] == ["Gemini API key not found. AI Advisor features will be disabled."]


def test_validate_environment_with_key(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "secret")

    report = validate_environment(Settings())

    assert report == {"has_advisor_key": True, "warnings": []}


def test_safe_get():
    data = {"a": {"b": {"c": 1}}}

    assert safe_get(data, "a.b.c") == 1
    assert safe_get(data, "a.x", "missing") == "missing"
    assert safe_get({"a": None}, "a.b") is None


def test_format_currency():
    assert format_currency(2552.95) == "$2,552.95"
    assert format_currency(0) == "$0.00"
    assert format_currency(10, "EUR") == "EUR 10.00"


def test_create_from_env_reports_invalid_values(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "chatty")

    with pytest.raises(ConfigurationException) as exc_info:
        Settings.create_from_env()

    assert exc_info.value.message == "Invalid configuration"
    assert any(error.startswith("log_level") for error in exc_info.value.details["errors"])
