"""Application configuration from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment (and .env file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GYMLOG_",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "gymlog"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # API
    api_v1_prefix: str = "/api/v1"

    # Database: local SQLite file by default, any async SQLAlchemy URL works
    database_url: str = "sqlite+aiosqlite:///./gymlog.db"

    # Pool (ignored for SQLite)
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # CORS: comma-separated list of extra allowed origins
    cors_origins: str = ""

    # Calendar days (streaks, monthly stats) are computed in this zone
    timezone: str = "UTC"

    # Rest timer
    rest_timer_tick_seconds: float = 1.0

    # Query limits
    checkin_lookback_limit: int = 60
    history_limit: int = 50

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
