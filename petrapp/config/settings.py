"""Application configuration settings."""
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PETRAPP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "petrapp"
    debug: bool = False
    log_json: bool = True

    # How far back the service loads history before invoking the generator
    history_window_days: int = 180

    # Overrides the bundled progression_config.yaml
    progression_config_path: Path | None = None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
