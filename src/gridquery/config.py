"""Runtime settings for gridquery, read once from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass


def _getenv_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _normalize_level(raw: str | None) -> str:
    value = (raw or "WARNING").strip().upper()
    return value if value in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "WARNING"


@dataclass(frozen=True)
class Settings:
    max_range_cells: int
    log_level: str
    default_sheet: str


def load_settings() -> Settings:
    """Build a Settings instance from the current environment."""
    return Settings(
        max_range_cells=_getenv_int("GRIDQUERY_MAX_RANGE_CELLS", 1_000_000),
        log_level=_normalize_level(os.getenv("GRIDQUERY_LOG_LEVEL")),
        default_sheet=os.getenv("GRIDQUERY_DEFAULT_SHEET", "Data").strip() or "Data",
    )


settings = load_settings()
