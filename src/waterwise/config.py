"""Configuration and environment loading for WaterWise."""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Firebase
    firebase_api_key: str
    firebase_auth_url: str = "https://identitytoolkit.googleapis.com/v1"
    firebase_token_url: str = "https://securetoken.googleapis.com/v1"

    # WaterWise API
    api_base_url: str = "https://waterwise-api.azurewebsites.net/api"
    api_timeout: float = 10.0

    # Local session storage
    storage_dir: Path = Path.home() / ".waterwise"

    # User-facing messages
    locale: str = "pt-BR"

    debug: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Set up log output; ``debug`` turns on request-level logging."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("waterwise").setLevel(
        logging.DEBUG if settings.debug else logging.INFO
    )
