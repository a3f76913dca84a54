"""Unit tests for Settings."""

import pytest
from pydantic import ValidationError

from tollgate.core.config import DEFAULT_SECRET_KEY, Settings


def test_defaults():
    settings = Settings()

    assert settings.session_token_expire_hours == 24
    assert settings.email_verification_required is True
    assert settings.verification_token_expire_hours == 24
    assert settings.password_reset_token_expire_hours == 24
    assert settings.api_prefix == "/api/v1"


def test_environment_variables(monkeypatch):
    monkeypatch.setenv("TOLLGATE_SESSION_TOKEN_EXPIRE_HOURS", "2")
    monkeypatch.setenv("TOLLGATE_EMAIL_VERIFICATION_REQUIRED", "false")

    settings = Settings()

    assert settings.session_token_expire_hours == 2
    assert settings.email_verification_required is False


def test_production_requires_secret():
    with pytest.raises(ValidationError):
        Settings(environment="production", secret_key=DEFAULT_SECRET_KEY)

    settings = Settings(environment="production", secret_key="x" * 64)
    assert settings.is_production


def test_app_url_trailing_slash_removed():
    assert Settings(app_url="https://example.com/").app_url == "https://example.com"


def test_cors_origins_from_string():
    settings = Settings(cors_origins="https://a.example, https://b.example")

    assert settings.cors_origins == ["https://a.example", "https://b.example"]


def test_sqlite_with_many_workers_refused():
    with pytest.raises(ValidationError):
        Settings(workers=4, database_url="sqlite+aiosqlite:///./x.db")


def test_non_positive_session_lifetime_refused():
    with pytest.raises(ValidationError):
        Settings(session_token_expire_hours=0)
