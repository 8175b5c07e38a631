"""Unit tests for application settings."""

import pytest
from pydantic import SecretStr, ValidationError

from src.shared.config.settings import (
    APISettings,
    CacheSettings,
    DatabaseSettings,
    SearchProviderSettings,
    Settings,
)
from src.shared.exceptions import ConfigurationError


class TestCacheSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("CACHE_TTL_HOURS", raising=False)
        settings = CacheSettings(_env_file=None)

        assert settings.cache_ttl_hours == 24
        assert settings.cache_single_flight is False

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("CACHE_TTL_HOURS", "6")
        assert CacheSettings(_env_file=None).cache_ttl_hours == 6

    @pytest.mark.parametrize("ttl", [0, -1])
    def test_non_positive_ttl_is_rejected(self, ttl):
        with pytest.raises(ValidationError):
            CacheSettings(cache_ttl_hours=ttl)


class TestDatabaseSettings:
    def test_plain_postgres_url_is_upgraded_to_asyncpg(self):
        settings = DatabaseSettings(database_url="postgresql://u:p@db:5432/uniscout")
        assert (
            settings.async_database_url == "postgresql+asyncpg://u:p@db:5432/uniscout"
        )

    def test_other_async_urls_are_kept(self):
        url = "sqlite+aiosqlite:///./cache.db"
        assert DatabaseSettings(database_url=url).async_database_url == url

    def test_url_built_from_components(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        settings = DatabaseSettings(
            _env_file=None,
            postgres_host="pg",
            postgres_user="app",
            postgres_password=SecretStr("secret"),
            postgres_db="uni",
        )
        assert (
            settings.async_database_url == "postgresql+asyncpg://app:secret@pg:5432/uni"
        )


class TestAPISettings:
    def test_cors_origins_list(self):
        settings = APISettings(cors_origins="http://a.test, http://b.test,")
        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]


class TestValidateRequired:
    def test_missing_api_key_is_fatal(self):
        settings = Settings(
            environment="development",
            search_provider=SearchProviderSettings(tavily_api_key=SecretStr("")),
        )

        with pytest.raises(ConfigurationError, match="TAVILY_API_KEY"):
            settings.validate_required()

    def test_production_requires_database_url(self):
        settings = Settings(
            environment="production",
            database=DatabaseSettings(database_url=None),
            search_provider=SearchProviderSettings(tavily_api_key=SecretStr("k")),
        )

        with pytest.raises(ConfigurationError, match="DATABASE_URL"):
            settings.validate_required()

    def test_complete_settings_pass(self):
        settings = Settings(
            environment="development",
            search_provider=SearchProviderSettings(tavily_api_key=SecretStr("k")),
        )
        settings.validate_required()

    def test_test_environment_skips_checks(self):
        settings = Settings(
            environment="test",
            search_provider=SearchProviderSettings(tavily_api_key=SecretStr("")),
        )
        settings.validate_required()
