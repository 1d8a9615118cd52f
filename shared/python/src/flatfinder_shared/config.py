"""
config.py — pydantic-settings Settings class.

All environment variables for flatfinder are declared here. The CLI reads
its defaults from `settings`; the transforms never do, every mode flag is
passed to them explicitly.

Usage:
    from flatfinder_shared.config import settings
    print(settings.catalog_path)
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_dotenv() -> Path | None:
    """Walk up from CWD to find the nearest .env file."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        candidate = parent / ".env"
        if candidate.is_file():
            return candidate
    return None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_find_dotenv() or ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Local data files
    # -------------------------------------------------------------------------
    data_dir: str = Field(default="./data")
    catalog_file: str = Field(default="catalog.json")
    demand_file: str = Field(default="demand.json")

    # -------------------------------------------------------------------------
    # Dashboard defaults
    # -------------------------------------------------------------------------
    secondary_transit_mode: bool = Field(default=False)
    view_mode: Literal["all-applicants", "first-timer-families-only"] = Field(
        default="all-applicants"
    )

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    log_format: Literal["json", "console"] = Field(default="console")

    # -------------------------------------------------------------------------
    # Derived / computed
    # -------------------------------------------------------------------------
    @property
    def catalog_path(self) -> Path:
        return Path(self.data_dir) / self.catalog_file

    @property
    def demand_path(self) -> Path:
        return Path(self.data_dir) / self.demand_file

    @field_validator("data_dir", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/") or "/" if isinstance(v, str) else v


# ---------------------------------------------------------------------------
# Module-level singleton; import this everywhere
# ---------------------------------------------------------------------------
settings = Settings()
