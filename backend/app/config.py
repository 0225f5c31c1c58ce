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

    DATABASE_PATH: str = "database/album.db"

    NOTE_MAX_CHARS: int = 10_000
    NOTE_MUTATION_MAX_ATTEMPTS: int = 3
    NOTE_MUTATION_RETRY_SECONDS: float = 1.0
    NOTE_TEMP_ID_PREFIX: str = "temp-"
    NOTE_COORDINATOR_CACHE_SIZE: int = 256
    NOTE_COORDINATOR_IDLE_SECONDS: float = 1800.0

    PHOTO_MAX_BYTES: int = 10 * 1024 * 1024

    ACTIVITY_FEED_LIMIT: int = 50

    # Username -> password. Set as JSON, e.g. FAMILY_CREDENTIALS='{"Dad": "..."}'
    FAMILY_CREDENTIALS: dict[str, str] = {}
    SESSION_MAX_AGE_SECONDS: int = 30 * 24 * 3600

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    DEBUG: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore"
    }

    @model_validator(mode="after")
    def resolve_relative_paths(self):
        db_path = Path(self.DATABASE_PATH)
        if not db_path.is_absolute():
            self.DATABASE_PATH = str((BASE_DIR / db_path).resolve())
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
