import pytest
from pydantic import ValidationError

from src.common.config import Settings


def test_allowed_origins_accepts_a_comma_separated_list(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.com,https://b.com")

    assert Settings().ALLOWED_ORIGINS == ["https://a.com", "https://b.com"]


def test_allowed_origins_ignores_blanks_and_spaces(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", " https://app.economiza.com.br , ,http://localhost:5173,")

    assert Settings().ALLOWED_ORIGINS == ["https://app.economiza.com.br", "http://localhost:5173"]


def test_allowed_origins_defaults_to_everything(monkeypatch):
    monkeypatch.delenv("ALLOWED_ORIGINS", raising=False)

    assert Settings().ALLOWED_ORIGINS == ["*"]


def test_production_refuses_default_secrets(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("JWT_SECRET", "change-me")
    monkeypatch.setenv("CRON_SECRET", "a-real-cron-secret")

    with pytest.raises(ValidationError, match="JWT_SECRET"):
        Settings()
