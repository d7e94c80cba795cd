"""Leaderboard read endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from ...core import LEADERBOARD_LIMIT, get_session
from ...services.ranking import rank_for_score, score_to_dict, top_scores

router = APIRouter(tags=["leaderboard"])


@router.get("/leaderboard")
def get_leaderboard(
    limit: int = Query(LEADERBOARD_LIMIT, ge=1),
    session: Session = Depends(get_session),
) -> Dict[str, Any]:
    """Best scores, highest first."""

    entries = top_scores(session, min(limit, LEADERBOARD_LIMIT))
    return {"entries": [score_to_dict(entry) for entry in entries]}


@router.get("/leaderboard/rank")
def get_rank(score: int = Query(...), session: Session = Depends(get_session)) -> Dict[str, int]:
    """Rank a hypothetical score against the stored records."""

    return {"score": score, "rank": rank_for_score(session, score)}


__all__ = ["router"]
