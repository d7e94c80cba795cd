"""Competitive submission to the ranking API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import httpx

from ..core import config
from ..core.time import now_ms, utcnow
from .session import CompletedAttempt
from .storage import HistoryEntry, LocalStore

logger = logging.getLogger(__name__)


class RankingUnavailable(RuntimeError):
    """No ranking backend is configured; practice scoring still works."""


class SubmissionFailed(Exception):
    """The ranking API refused or failed to store the attempt."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


@dataclass(frozen=True)
class SubmissionResult:
    score: int
    cpm: int
    accuracy: float
    rank: int
    is_high_score: bool

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "SubmissionResult":
        return cls(
            score=int(data["score"]),
            cpm=int(data["cpm"]),
            accuracy=float(data["accuracy"]),
            rank=int(data["rank"]),
            is_high_score=bool(data["isHighScore"]),
        )


class RankingClient:
    """Sends finished attempts to ``POST {base_url}/submit-score``.

    Submissions are not idempotent: a retry after a timeout may already have
    been stored, so nothing here retries on its own.
    """

    def __init__(
        self,
        store: LocalStore,
        base_url: Optional[str] = None,
        *,
        timeout: float = 20,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.store = store
        self.base_url = (config.RANKING_API_URL if base_url is None else base_url).rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._clock = clock

    @property
    def available(self) -> bool:
        return bool(self.base_url)

    def _check_username(self, username: str) -> str:
        name = (username or "").strip()
        if not 1 <= len(name) <= config.MAX_USERNAME_LENGTH:
            raise ValueError(f"Username must be 1-{config.MAX_USERNAME_LENGTH} characters")
        return name

    async def submit(self, attempt: CompletedAttempt, username: str) -> SubmissionResult:
        if not self.available:
            raise RankingUnavailable("Ranking backend is not configured (set RANKING_API_URL)")
        name = self._check_username(username)

        payload = attempt.to_payload(name, submitted_at=self._clock())
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            r = await client.post(f"{self.base_url}/submit-score", json=payload)

        if r.status_code != 200:
            try:
                data = r.json()
            except ValueError:
                data = None
            message = (data.get("error") if isinstance(data, dict) else None) or r.text
            logger.warning("Score submission failed (%s): %s", r.status_code, message)
            raise SubmissionFailed(r.status_code, message)

        result = SubmissionResult.from_response(r.json())
        self.store.set_username(name)
        self.store.append_history(
            HistoryEntry(
                date=utcnow().isoformat(),
                score=result.score,
                cpm=result.cpm,
                accuracy=result.accuracy,
            )
        )
        return result


__all__ = ["RankingClient", "RankingUnavailable", "SubmissionFailed", "SubmissionResult"]
