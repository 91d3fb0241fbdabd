"""Application configuration using Pydantic settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BOOKSTORE_",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Bookstore"
    debug: bool = False

    # Storage
    store_provider: str = "mem"

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    startup_grace_seconds: float = 1.0
    shutdown_timeout_seconds: float = 5.0

    # Logging
    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"

    # Metrics
    metrics_enabled: bool = True


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
