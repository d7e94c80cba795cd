"""Core configuration and infrastructure helpers."""

from .config import (
    ALLOWED_CORS_ORIGINS,
    DATABASE_URL,
    DB_RESET,
    HISTORY_PATH,
    LEADERBOARD_LIMIT,
    LOG_LEVEL,
    MAX_CLOCK_SKEW_MS,
    MAX_CPM,
    MAX_INPUT_RATIO,
    MAX_PLAY_SECONDS,
    MAX_USERNAME_LENGTH,
    MIN_PLAY_SECONDS,
    RANKING_API_URL,
    RANKING_TIME_LIMIT_SEC,
    TEXTS_DIR,
)
from .database import engine, get_session
from .time import now_ms, utcnow

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
    "engine",
    "get_session",
    "now_ms",
    "utcnow",
]
