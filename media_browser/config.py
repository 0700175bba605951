"""Application configuration helpers for media-browser-api.

Usage:
    from media_browser.config import get_settings
    settings = get_settings()
    print(settings.root_directory)
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import BaseModel, ConfigDict, Field


def _parse_origins(raw: str | None) -> List[str]:
    if not raw:
        return []
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class Settings(BaseModel):
    """Strongly-typed settings loaded from environment variables."""

    model_config = ConfigDict(frozen=True)

    root_directory: Path = Field(default_factory=lambda: Path(
        os.getenv("MEDIA_BROWSER_ROOT_DIRECTORY")
        or os.getenv("ROOT_DIRECTORY", "/data/media")
    ))
    host: str = Field(default_factory=lambda: os.getenv("MEDIA_BROWSER_HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: int(os.getenv("MEDIA_BROWSER_PORT", os.getenv("PORT", "5000"))))
    cors_origins: List[str] = Field(
        default_factory=lambda: _parse_origins(os.getenv("MEDIA_BROWSER_CORS_ORIGINS", ""))
    )
    stream_chunk_size: int = Field(
        default_factory=lambda: int(os.getenv("MEDIA_BROWSER_STREAM_CHUNK_SIZE", "65536")),
        gt=0,
    )
    cache_max_age: int = Field(
        default_factory=lambda: int(os.getenv("MEDIA_BROWSER_CACHE_MAX_AGE", "31536000")),
        ge=0,
    )
    log_level: str = Field(default_factory=lambda: os.getenv("MEDIA_BROWSER_LOG_LEVEL", "INFO").upper())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings loaded from environment variables."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear cached settings and the root store (useful for tests when environment changes)."""

    from media_browser.storage.root import get_root_store

    get_settings.cache_clear()
    get_root_store.cache_clear()
