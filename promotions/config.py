"""Configuration for the promotions service."""

from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings

DEFAULT_PROMOTIONS_DIR = Path(__file__).parent / "definitions"


class Settings(BaseSettings):
    """Promotions service settings."""

    # App
    app_name: str = "Promotions Service"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8002

    # API
    api_prefix: str = "/api/v1"

    # Promotion definitions (JSON files)
    promotions_dir: Path = DEFAULT_PROMOTIONS_DIR

    # CORS
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    class Config:
        env_prefix = "PROMOTIONS_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
