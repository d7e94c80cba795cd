"""System-level API endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter

from ...core import config

router = APIRouter(tags=["system"])


@router.get("/health")
def health() -> Dict[str, bool]:
    """Simple readiness probe."""

    return {"ok": True}


@router.get("/config")
def get_config() -> Dict[str, Any]:
    """Expose the limits the client should respect before submitting."""

    return {
        "max_username_length": config.MAX_USERNAME_LENGTH,
        "max_cpm": config.MAX_CPM,
        "max_play_seconds": config.MAX_PLAY_SECONDS,
        "ranking_time_limit_sec": config.RANKING_TIME_LIMIT_SEC,
        "leaderboard_limit": config.LEADERBOARD_LIMIT,
    }


__all__ = ["router"]
