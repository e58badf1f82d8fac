"""Tests for application configuration."""

import pytest

from app.config import DEFAULT_JWT_SECRET, Settings


class TestSettings:
    """Tests for Settings class - only the parsing and guard logic."""

    def test_settings_loads_from_env(self, monkeypatch):
        """Settings reads values from environment variables."""
        monkeypatch.setenv("API_TITLE", "Test API")
        monkeypatch.setenv("DEBUG", "true")
        monkeypatch.setenv("PORT", "9000")

        test_settings = Settings()
        assert test_settings.API_TITLE == "Test API"
        assert test_settings.DEBUG is True
        assert test_settings.PORT == 9000

    def test_settings_debug_parses_boolean(self, monkeypatch):
        monkeypatch.setenv("DEBUG", "True")
        assert Settings().DEBUG is True

        monkeypatch.setenv("DEBUG", "false")
        assert Settings().DEBUG is False

    def test_cors_origins_split_on_commas(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test,")
        assert Settings().CORS_ORIGINS == ["http://a.test", "http://b.test"]

    def test_token_lifetime_defaults_to_one_week(self, monkeypatch):
        monkeypatch.delenv("JWT_EXPIRE_HOURS", raising=False)
        assert Settings().JWT_EXPIRE_HOURS == 168

    def test_default_secret_rejected_outside_development(self, monkeypatch):
        """Production must not start with the placeholder signing secret."""
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("JWT_SECRET", DEFAULT_JWT_SECRET)

        with pytest.raises(RuntimeError, match="JWT_SECRET"):
            Settings()

    def test_production_with_real_secret(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "Production")
        monkeypatch.setenv("JWT_SECRET", "a-real-secret")

        test_settings = Settings()
        assert test_settings.is_production is True
