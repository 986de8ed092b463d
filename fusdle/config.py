"""
Configuration and settings for the puzzle API.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.constants import (
    DEFAULT_ARCHIVE_LIMIT,
    DEFAULT_DIFFICULTY,
    PATCH_NOTES_COLLECTION,
    PUZZLES_COLLECTION,
)


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")

    # Firebase credentials: a service account JSON blob (FIREBASE_SERVICE_ACCOUNT)
    # takes precedence over the key file on disk.
    firebase_service_account: Optional[str] = Field(default=None)
    firebase_credentials_file: str = Field(default="serviceAccountKey.json")
    firebase_app_name: str = Field(default="fusdle")
    puzzles_collection: str = Field(default=PUZZLES_COLLECTION)
    patch_notes_collection: str = Field(default=PATCH_NOTES_COLLECTION)

    default_difficulty: str = Field(default=DEFAULT_DIFFICULTY)
    archive_limit: int = Field(default=DEFAULT_ARCHIVE_LIMIT, ge=1)

    # Development toggles
    use_in_memory_store: bool = Field(default=False)
    puzzle_seed_file: Optional[str] = Field(default=None)

    log_level: str = Field(default="INFO")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
