"""
Configuration helpers for the popup backend.

Settings are read from environment variables once and cached; call
``get_settings.cache_clear()`` after changing the environment (tests do).
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    host: str
    port: int
    data_dir: str
    data_file: str
    static_dir: str
    storage_backend: str
    database_url: str
    cors_origins: tuple[str, ...]
    max_body_bytes: int
    log_level: str
    log_file: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str | None, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _list(value: str | None) -> tuple[str, ...]:
        items = [item.strip() for item in (value or "").split(",")]
        return tuple(item for item in items if item)

    cwd = os.getcwd()
    data_dir = os.getenv("POPUP_DATA_DIR") or os.path.join(cwd, "data")
    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        host=os.getenv("POPUP_HOST", "0.0.0.0"),
        port=_int(os.getenv("POPUP_PORT", "3000"), 3000),
        data_dir=data_dir,
        data_file=os.getenv("POPUP_DATA_FILE") or os.path.join(data_dir, "popups.json"),
        static_dir=os.getenv("POPUP_STATIC_DIR", cwd),
        storage_backend=(os.getenv("POPUP_STORAGE") or "json").strip().lower(),
        database_url=os.getenv("DATABASE_URL", ""),
        cors_origins=_list(os.getenv("CORS_ORIGINS", "*")),
        max_body_bytes=_int(os.getenv("MAX_BODY_BYTES", str(10 * 1024 * 1024)), 10 * 1024 * 1024),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        log_file=os.getenv("LOG_FILE", ""),
    )
