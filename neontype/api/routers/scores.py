"""Competitive score submission endpoint."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlmodel import Session

from ...core import get_session
from ...core.time import now_ms
from ...services.ranking import record_attempt
from ...services.validation import SubmissionRejected, describe_payload, validate_submission

logger = logging.getLogger(__name__)

router = APIRouter(tags=["scores"])


@router.options("/submit-score")
def submit_score_preflight() -> PlainTextResponse:
    """Answer bare preflight requests that bypass the CORS middleware."""

    return PlainTextResponse("ok")


@router.post("/submit-score")
def submit_score(body: Dict[str, Any], session: Session = Depends(get_session)):
    """Validate a raw attempt, recompute its score and update the ranking."""

    received_at = now_ms()
    try:
        validated = validate_submission(body, received_at_ms=received_at)
    except SubmissionRejected as exc:
        logger.info("Rejected submission (%s): %s", exc.reason, describe_payload(body))
        raise

    result = record_attempt(session, validated.username, validated.metrics)
    return result.to_response()


__all__ = ["router"]
