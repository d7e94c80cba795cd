"""Application settings and environment helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv(override=False)

_PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer") from exc


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number") from exc


def _split_csv(raw: str | None) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


# Storage --------------------------------------------------------------------
DATABASE_URL = os.getenv("DATABASE_URL") or f"sqlite:///{_PROJECT_ROOT / 'data' / 'app.db'}"
DB_RESET = _env_bool("DB_RESET", False)


# HTTP -----------------------------------------------------------------------
# The submission endpoint is public; restrict only when explicitly configured.
ALLOWED_CORS_ORIGINS = _split_csv(os.getenv("ALLOWED_CORS_ORIGINS")) or ["*"]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


# Submission plausibility limits ---------------------------------------------
MAX_CLOCK_SKEW_MS = _env_int("MAX_CLOCK_SKEW_MS", 10_000)
MIN_PLAY_SECONDS = _env_float("MIN_PLAY_SECONDS", 0.1)
MAX_PLAY_SECONDS = _env_float("MAX_PLAY_SECONDS", 600.0)
MAX_INPUT_RATIO = _env_float("MAX_INPUT_RATIO", 1.5)
MAX_CPM = _env_float("MAX_CPM", 600.0)
MAX_USERNAME_LENGTH = _env_int("MAX_USERNAME_LENGTH", 20)


# Ranking --------------------------------------------------------------------
LEADERBOARD_LIMIT = _env_int("LEADERBOARD_LIMIT", 100)
RANKING_TIME_LIMIT_SEC = _env_int("RANKING_TIME_LIMIT_SEC", 180)


# Client ---------------------------------------------------------------------
RANKING_API_URL = os.getenv("RANKING_API_URL", "").rstrip("/")
TEXTS_DIR = Path(os.getenv("TEXTS_DIR", str(_PROJECT_ROOT / "texts")))
HISTORY_PATH = Path(os.getenv("HISTORY_PATH", str(_PROJECT_ROOT / "data" / "history.json")))


__all__ = [
    "ALLOWED_CORS_ORIGINS",
    "DATABASE_URL",
    "DB_RESET",
    "HISTORY_PATH",
    "LEADERBOARD_LIMIT",
    "LOG_LEVEL",
    "MAX_CLOCK_SKEW_MS",
    "MAX_CPM",
    "MAX_INPUT_RATIO",
    "MAX_PLAY_SECONDS",
    "MAX_USERNAME_LENGTH",
    "MIN_PLAY_SECONDS",
    "RANKING_API_URL",
    "RANKING_TIME_LIMIT_SEC",
    "TEXTS_DIR",
]
