"""
Environment-backed settings.

Settings are read once at startup into an immutable `Settings` object that is
handed to `create_app()` and `run()` (see `api/main.py`).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from . import columns


DEFAULT_PORT = 3000
DEFAULT_HOST = "0.0.0.0"
DEFAULT_CMS_BASE_URL = "https://data.cms.gov/api/views"
DEFAULT_HOMES_DATASET = "homes"
DEFAULT_DEFICIENCIES_DATASET = "wvyx-sxba"
DEFAULT_TIMEOUT_S = 30.0
DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_log_level(name: str, default: str) -> str:
    level = os.environ.get(name, "").strip().upper()
    if level not in LOG_LEVELS:
        return default
    return level


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return list(default)
    items = [item.strip() for item in raw.split(",")]
    return [item for item in items if item] or list(default)


@dataclass(frozen=True)
class Settings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL
    cors_origins: tuple[str, ...] = ("*",)
    cms_base_url: str = DEFAULT_CMS_BASE_URL
    homes_dataset: str = DEFAULT_HOMES_DATASET
    deficiencies_dataset: str = DEFAULT_DEFICIENCIES_DATASET
    cms_timeout_s: float = DEFAULT_TIMEOUT_S
    facility_columns: dict[str, int] = field(default_factory=lambda: dict(columns.FACILITY_COLUMNS))
    deficiency_columns: dict[str, int] = field(default_factory=lambda: dict(columns.DEFICIENCY_COLUMNS))

    @property
    def local_url(self) -> str:
        return f"http://localhost:{self.port}"


def load_settings() -> Settings:
    """
    Build `Settings` from the process environment.

    Malformed numbers fall back to defaults; malformed column tables raise
    `ValueError` so a bad deployment fails at startup rather than per request.
    """
    return Settings(
        host=_env_str("HOST", DEFAULT_HOST),
        port=_env_int("PORT", DEFAULT_PORT),
        log_level=_env_log_level("LOG_LEVEL", DEFAULT_LOG_LEVEL),
        cors_origins=tuple(_env_list("CORS_ORIGINS", ["*"])),
        cms_base_url=_env_str("CMS_BASE_URL", DEFAULT_CMS_BASE_URL),
        homes_dataset=_env_str("CMS_HOMES_DATASET", DEFAULT_HOMES_DATASET),
        deficiencies_dataset=_env_str("CMS_DEFICIENCIES_DATASET", DEFAULT_DEFICIENCIES_DATASET),
        cms_timeout_s=_env_float("CMS_TIMEOUT_S", DEFAULT_TIMEOUT_S),
        facility_columns=columns.load_columns(
            os.environ.get("CMS_FACILITY_COLUMNS", ""),
            columns.FACILITY_COLUMNS,
        ),
        deficiency_columns=columns.load_columns(
            os.environ.get("CMS_DEFICIENCY_COLUMNS", ""),
            columns.DEFICIENCY_COLUMNS,
        ),
    )
