"""Application settings and configuration management."""

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.shared.exceptions.infrastructure_exceptions import ConfigurationError


class DatabaseSettings(BaseSettings):
    """Database-specific settings."""

    # Full URL takes precedence over the individual postgres_* components
    database_url: str | None = None

    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "uniscout_db"
    postgres_user: str = "uniscout"
    postgres_password: SecretStr = SecretStr("uniscout_password")

    # Connection pool settings
    db_pool_size: int = Field(default=10, ge=1)
    db_max_overflow: int = Field(default=10, ge=0)
    db_pool_timeout: float = Field(default=30.0, gt=0)
    db_pool_recycle: int = Field(default=3600)

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="allow"
    )

    @property
    def async_database_url(self) -> str:
        """Get the async SQLAlchemy URL.

        A plain ``postgresql://`` URL is upgraded to the asyncpg driver so the
        same DATABASE_URL can be shared with tools that expect the sync form.
        """
        if self.database_url:
            if self.database_url.startswith("postgresql://"):
                return self.database_url.replace(
                    "postgresql://", "postgresql+asyncpg://", 1
                )
            return self.database_url
        return (
            f"postgresql+asyncpg://{self.postgres_user}:"
            f"{self.postgres_password.get_secret_value()}@"
            f"{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


class CacheSettings(BaseSettings):
    """Result cache settings."""

    cache_ttl_hours: int = Field(default=24, gt=0)
    cache_cleanup_interval_minutes: int = Field(default=60, ge=0)  # 0 disables
    cache_single_flight: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="allow"
    )


class SearchProviderSettings(BaseSettings):
    """Tavily search provider settings."""

    tavily_api_key: SecretStr = SecretStr("")
    tavily_base_url: str = "https://api.tavily.com"
    tavily_timeout: float = Field(default=60.0, gt=0)
    tavily_max_results: int = Field(default=30, ge=1, le=100)
    tavily_search_depth: str = Field(default="advanced", pattern="^(basic|advanced)$")
    tavily_max_retries: int = Field(default=3, ge=1, le=10)
    tavily_retry_wait_min: float = Field(default=1.0, ge=0)  # seconds
    tavily_retry_wait_max: float = Field(default=10.0, ge=0)  # seconds

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="allow"
    )


class APISettings(BaseSettings):
    """API-specific settings."""

    api_host: str = Field(default="127.0.0.1")
    api_port: int = Field(default=3000)
    api_reload: bool = Field(default=False)
    cors_origins: str = Field(default="http://localhost:5173")

    # Search endpoint: 10 requests per 15 minutes per client
    search_rate_limit_requests: int = Field(default=10, ge=1)
    search_rate_limit_window_minutes: int = Field(default=15, ge=1)
    # Everything else: 60 requests per minute per client
    general_rate_limit_requests: int = Field(default=60, ge=1)
    general_rate_limit_window_minutes: int = Field(default=1, ge=1)
    rate_limit_enabled: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="allow"
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Get allowed CORS origins as a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


class MonitoringSettings(BaseSettings):
    """Monitoring and observability settings."""

    otel_exporter_otlp_endpoint: str | None = None
    otel_service_name: str = "uniscout"
    otel_enabled: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="allow"
    )


class Settings(BaseSettings):
    """Main application settings."""

    # Application metadata
    app_name: str = "UniScout"
    app_version: str = "1.0.0"
    environment: str = "development"

    # Sub-settings
    database: DatabaseSettings = DatabaseSettings()
    cache: CacheSettings = CacheSettings()
    search_provider: SearchProviderSettings = SearchProviderSettings()
    api: APISettings = APISettings()
    monitoring: MonitoringSettings = MonitoringSettings()

    # Feature flags
    debug_mode: bool = False

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="allow"
    )

    def validate_required(self) -> None:
        """Check settings that have no usable default.

        Raises:
            ConfigurationError: If a required setting is missing
        """
        if self.environment == "test":
            return

        missing = []
        if not self.search_provider.tavily_api_key.get_secret_value():
            missing.append("TAVILY_API_KEY")
        # Component defaults point at a local database; production must be explicit
        if self.environment == "production" and not self.database.database_url:
            missing.append("DATABASE_URL")

        if missing:
            raise ConfigurationError(
                f"Missing required environment variable(s): {', '.join(missing)}"
            )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings instance with all configuration loaded.
    """
    return Settings()


# Global settings instance for convenience
settings = get_settings()
