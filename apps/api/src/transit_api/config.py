"""API configuration via environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiSettings(BaseSettings):
    """Application settings loaded from environment / .env file."""

    database_url: str = "postgresql+asyncpg://localhost:5432/transitdb"
    host: str = "0.0.0.0"
    port: int = 5030
    log_level: str = "INFO"

    # Create tables on startup
    setup_tables: bool = True

    # Quotes
    default_limit: int = 100
    cheapest_window_days: int = 30

    model_config = SettingsConfigDict(
        env_prefix="TRANSIT_", env_file=".env", extra="ignore"
    )


settings = ApiSettings()
