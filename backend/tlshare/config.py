"""
Configuration settings using Pydantic Settings.
"""

from pathlib import Path
from pydantic import model_validator
from pydantic_settings import BaseSettings
from functools import lru_cache

BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    CACHE_DATABASE_PATH: str = "database/tl_cache.db"
    CACHE_KEY: str = "dlf2_tl_cache_v1"
    CACHE_MAX_ENTRIES: int = 50

    CATALOG_PATH: str = "tlshare/data/catalog.json"

    PUBLIC_BASE_URL: str = "http://localhost:5173/"
    SHARE_MAX_DECODED_BYTES: int = 1024 * 1024

    DEFAULT_TITLE: str = "新規TL"

    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
    ]

    DEBUG: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore"
    }

    @model_validator(mode="after")
    def resolve_relative_paths(self):
        db_path = Path(self.CACHE_DATABASE_PATH)
        if not db_path.is_absolute():
            self.CACHE_DATABASE_PATH = str((BASE_DIR / db_path).resolve())

        catalog_path = Path(self.CATALOG_PATH)
        if not catalog_path.is_absolute():
            self.CATALOG_PATH = str((BASE_DIR / catalog_path).resolve())

        return self


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    :return: Cached Settings instance
    :rtype: Settings
    """
    return Settings()


settings = get_settings()
