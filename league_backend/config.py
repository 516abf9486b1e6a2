"""
Environment-driven settings. Read at call time so tests can patch os.environ.
"""
from __future__ import annotations

import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent

DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


def db_path() -> Path:
    """LEAGUE_DB_PATH, or <project root>/data/league.db."""
    raw = os.environ.get("LEAGUE_DB_PATH", "").strip()
    if raw:
        return Path(raw)
    return PROJECT_ROOT / "data" / "league.db"


def log_level() -> str:
    return os.environ.get("LEAGUE_LOG_LEVEL", "INFO").strip().upper() or "INFO"


def cors_origins() -> list[str]:
    raw = os.environ.get("LEAGUE_CORS_ORIGINS", "").strip()
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [o.strip() for o in raw.split(",") if o.strip()]
