"""Tests for environment-driven configuration."""

import pytest
from pydantic import ValidationError

from orca.config.settings import Settings, get_settings


def test_missing_token_is_fatal(monkeypatch):
    monkeypatch.delenv("DATABRICKS_TOKEN", raising=False)
    get_settings.cache_clear()

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_empty_token_is_fatal(monkeypatch):
    monkeypatch.setenv("DATABRICKS_TOKEN", "")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_defaults(settings):
    assert settings.databricks_token == "test-token"
    assert settings.allowed_question_counts == [5, 10, 15]
    assert settings.default_question_count in settings.allowed_question_counts
    assert settings.langfuse_enabled is False


def test_cors_origins_parsed_from_env(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test,")

    assert Settings(_env_file=None).cors_origins == ["http://a.test", "http://b.test"]


def test_settings_are_cached():
    assert get_settings() is get_settings()
