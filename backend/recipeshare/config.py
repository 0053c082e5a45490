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

    DATABASE_PATH: str = "database/recipeshare.db"

    RECIPES_PAGE_SIZE: int = 25
    FOLLOWING_RECIPES_PAGE_SIZE: int = 10

    USERS_INDEX: str = "users"
    RECIPES_INDEX: str = "recipes"
    SEARCH_HIT_LIMIT: int = 20
    HIGHLIGHT_PRE_TAG: str = "<em>"
    HIGHLIGHT_POST_TAG: str = "</em>"

    MISSING_USER_LABEL: str = "Unknown user"

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
