"""Ranking store reconciliation and read queries."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from sqlalchemy import update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, func, select

from ..core.time import utcnow
from ..models import ScoreRecord
from .scoring import ScoreMetrics

logger = logging.getLogger(__name__)

_DIALECT_INSERTS: Dict[str, Callable[..., Any]] = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


@dataclass(frozen=True)
class RankedResult:
    """Outcome of recording one validated attempt."""

    metrics: ScoreMetrics
    rank: int
    is_high_score: bool

    def to_response(self) -> Dict[str, Any]:
        return {
            "success": True,
            "score": self.metrics.score,
            "cpm": self.metrics.cpm,
            "accuracy": self.metrics.accuracy,
            "rank": self.rank,
            "isHighScore": self.is_high_score,
        }


def _insert_for(session: Session):
    dialect = session.get_bind().dialect.name
    try:
        return _DIALECT_INSERTS[dialect]
    except KeyError as exc:
        raise RuntimeError(f"Unsupported database dialect for upsert: {dialect}") from exc


def upsert_best_score(session: Session, username: str, metrics: ScoreMetrics) -> bool:
    """Store ``metrics`` for ``username`` if it beats the stored best.

    Runs as a single ``INSERT ... ON CONFLICT DO UPDATE WHERE`` against the
    unique ``username`` column, so concurrent submissions for the same name
    cannot overwrite a higher score or create a second row. Returns True when
    a row was inserted or raised, False when the stored best stands (in which
    case only ``last_played_at`` is touched).
    """

    table = ScoreRecord.__table__
    now = utcnow()
    insert = _insert_for(session)
    stmt = insert(table).values(
        username=username,
        score=metrics.score,
        cpm=metrics.cpm,
        accuracy=metrics.accuracy,
        created_at=now,
        last_played_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[table.c.username],
        set_={
            "score": stmt.excluded.score,
            "cpm": stmt.excluded.cpm,
            "accuracy": stmt.excluded.accuracy,
            "created_at": stmt.excluded.created_at,
            "last_played_at": stmt.excluded.last_played_at,
        },
        where=stmt.excluded.score > table.c.score,
    )
    changed = session.execute(stmt).rowcount > 0

    if not changed:
        session.execute(
            update(table)
            .where(table.c.username == username)
            .values(last_played_at=now)
        )
    return changed


def rank_for_score(session: Session, score: int) -> int:
    """One plus the number of stored records strictly above ``score``."""

    higher = session.exec(
        select(func.count()).select_from(ScoreRecord).where(ScoreRecord.score > score)
    ).one()
    return int(higher) + 1


def record_attempt(session: Session, username: str, metrics: ScoreMetrics) -> RankedResult:
    """Reconcile the ranking store with a validated attempt and rank it."""

    try:
        is_high_score = upsert_best_score(session, username, metrics)
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Failed to store score for %r", username)
        raise

    rank = rank_for_score(session, metrics.score)
    if is_high_score:
        logger.info("New best for %r: score=%s rank=%s", username, metrics.score, rank)
    return RankedResult(metrics=metrics, rank=rank, is_high_score=is_high_score)


def top_scores(session: Session, limit: int) -> List[ScoreRecord]:
    """Records ordered by descending score."""

    return list(
        session.exec(
            select(ScoreRecord)
            .order_by(ScoreRecord.score.desc(), ScoreRecord.created_at.asc())
            .limit(limit)
        ).all()
    )


def score_to_dict(record: ScoreRecord) -> Dict[str, Any]:
    """Serialise a score record for the leaderboard API."""

    return {
        "id": record.id,
        "username": record.username,
        "score": record.score,
        "cpm": record.cpm,
        "accuracy": record.accuracy,
        "created_at": record.created_at.isoformat() if record.created_at else None,
        "last_played_at": record.last_played_at.isoformat() if record.last_played_at else None,
    }


__all__ = [
    "RankedResult",
    "rank_for_score",
    "record_attempt",
    "score_to_dict",
    "top_scores",
    "upsert_best_score",
]
