"""
Configuration helpers for the tool shed service.

Settings are read from environment variables once and cached; tests
call ``get_settings.cache_clear()`` after changing the environment.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    data_file: Path
    admin_secret: str
    page_size: int
    log_level: str
    log_file: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    return Settings(
        data_file=Path(os.getenv("TOOLSHED_DATA_FILE", "data/tools.json")),
        admin_secret=os.getenv("TOOLSHED_ADMIN_SECRET", "reparations"),
        page_size=max(1, _int(os.getenv("TOOLSHED_PAGE_SIZE", "24"), 24)),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        log_file=os.getenv("LOG_FILE", ""),
    )
