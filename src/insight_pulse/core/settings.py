"""Application settings and configuration.

This module defines all configuration options for the Insight Pulse service.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Insight Pulse", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./insight_pulse.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Upper bound for any single store operation; callers treat expiry as unknown outcome.
    db_statement_timeout_seconds: float = Field(
        default=5.0,
        alias="DB_STATEMENT_TIMEOUT_SECONDS",
    )

    # Reaction toggling
    reaction_toggle_max_attempts: int = Field(default=3, alias="REACTION_TOGGLE_MAX_ATTEMPTS")
    recent_reactors_limit: int = Field(default=10, alias="RECENT_REACTORS_LIMIT")

    # Read-side paging
    popular_default_limit: int = Field(default=20, alias="POPULAR_DEFAULT_LIMIT")
    popular_max_limit: int = Field(default=100, alias="POPULAR_MAX_LIMIT")
    leaderboard_default_limit: int = Field(default=10, alias="LEADERBOARD_DEFAULT_LIMIT")

    # Aggregate drift reconciliation
    reconciliation_enabled: bool = Field(default=False, alias="RECONCILIATION_ENABLED")
    reconciliation_interval_seconds: float = Field(
        default=300.0,
        alias="RECONCILIATION_INTERVAL_SECONDS",
    )
    reconciliation_batch_size: int = Field(default=200, alias="RECONCILIATION_BATCH_SIZE")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()
