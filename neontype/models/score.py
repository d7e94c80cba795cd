"""Database model for the ranking store."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class ScoreRecord(SQLModel, table=True):
    """Best submitted attempt for one participant."""

    __tablename__ = "scores"

    id: Optional[int] = ORMField(default=None, primary_key=True)
    username: str = ORMField(index=True, unique=True)
    score: int = ORMField(index=True)
    cpm: int
    accuracy: float
    created_at: datetime = ORMField(default_factory=utcnow)
    last_played_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["ScoreRecord"]
