"""Typing session lifecycle: idle -> playing -> finished -> (reset) -> idle."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from ..core import config
from ..core.time import now_ms
from ..services.scoring import ScoreMetrics, compute_metrics
from .scheduler import AsyncioScheduler, Scheduler, TickHandle

logger = logging.getLogger(__name__)

TICK_SECONDS = 1.0
MAX_TIME_LIMIT_SECONDS = 60 * 60


class SessionState(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"
    FINISHED = "finished"


class GameMode(str, Enum):
    CHALLENGE = "challenge"
    RANKING = "ranking"


@dataclass(frozen=True)
class CompletedAttempt:
    """Immutable record of one finished attempt."""

    target_text: str
    input: str
    start_time: int
    end_time: int
    time_limit_seconds: Optional[int] = None

    @property
    def elapsed_seconds(self) -> float:
        return (self.end_time - self.start_time) / 1000

    def metrics(self) -> ScoreMetrics:
        """Provisional metrics; the server recomputes the authoritative ones."""
        return compute_metrics(
            self.input,
            self.target_text,
            self.elapsed_seconds,
            self.time_limit_seconds,
        )

    def to_payload(self, username: str, submitted_at: Optional[int] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "input": self.input,
            "targetText": self.target_text,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "username": username,
        }
        if submitted_at is not None:
            payload["submittedAt"] = submitted_at
        return payload


class GameSession:
    """Client-side state machine for one participant.

    Operations called in the wrong state are ignored and return ``False``
    (or ``None`` for :meth:`finish`). The countdown tick is bound to the
    playing state: every way out of it cancels the pending tick.
    """

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        clock: Callable[[], int] = now_ms,
        on_finish: Optional[Callable[[CompletedAttempt], None]] = None,
    ) -> None:
        self._scheduler = scheduler or AsyncioScheduler()
        self._clock = clock
        self._on_finish = on_finish
        self._ticker: Optional[TickHandle] = None
        self._clear()

    def _clear(self) -> None:
        self.state = SessionState.IDLE
        self.mode = GameMode.CHALLENGE
        self.target_text = ""
        self.input = ""
        self.start_time: Optional[int] = None
        self.end_time: Optional[int] = None
        self.time_limit_seconds: Optional[int] = None
        self.time_left_seconds: Optional[int] = None
        self.attempt: Optional[CompletedAttempt] = None

    def _cancel_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    @property
    def is_playing(self) -> bool:
        return self.state is SessionState.PLAYING

    @property
    def is_timed(self) -> bool:
        return self.time_limit_seconds is not None

    @property
    def progress(self) -> float:
        """Share of the target typed so far, 0-100."""
        if not self.target_text:
            return 0.0
        return min(100.0, len(self.input) / len(self.target_text) * 100)

    def start(
        self,
        text: str,
        time_limit_seconds: Optional[int] = None,
        mode: GameMode = GameMode.CHALLENGE,
    ) -> bool:
        if self.state is not SessionState.IDLE:
            logger.debug("start() ignored in state %s", self.state.value)
            return False
        if not text:
            raise ValueError("Target text must not be empty")

        mode = GameMode(mode)
        if mode is GameMode.RANKING:
            time_limit_seconds = config.RANKING_TIME_LIMIT_SEC
        if time_limit_seconds is not None:
            if not 0 <= time_limit_seconds <= MAX_TIME_LIMIT_SECONDS:
                raise ValueError(f"Time limit must be between 0 and {MAX_TIME_LIMIT_SECONDS} seconds")
            time_limit_seconds = int(time_limit_seconds) or None

        # A scheduler failure must leave the session idle.
        ticker = None
        if time_limit_seconds is not None:
            ticker = self._scheduler.every(TICK_SECONDS, self.tick)

        self.mode = mode
        self.target_text = text
        self.input = ""
        self.start_time = self._clock()
        self.end_time = None
        self.attempt = None
        self.time_limit_seconds = time_limit_seconds
        self.time_left_seconds = time_limit_seconds
        self.state = SessionState.PLAYING
        self._ticker = ticker
        return True

    def update_input(self, new_input: str) -> bool:
        if self.state is not SessionState.PLAYING:
            return False
        self.input = new_input
        return True

    def tick(self) -> bool:
        """Advance the countdown by one second; finishes the session at zero."""

        if self.state is not SessionState.PLAYING or self.time_left_seconds is None:
            return False
        if self.time_left_seconds <= 1:
            self.time_left_seconds = 0
            self.finish()
        else:
            self.time_left_seconds -= 1
        return True

    def finish(self) -> Optional[CompletedAttempt]:
        if self.state is not SessionState.PLAYING or self.start_time is None:
            logger.debug("finish() ignored in state %s", self.state.value)
            return None

        self._cancel_ticker()
        self.end_time = max(self._clock(), self.start_time)
        self.state = SessionState.FINISHED
        self.attempt = CompletedAttempt(
            target_text=self.target_text,
            input=self.input,
            start_time=self.start_time,
            end_time=self.end_time,
            time_limit_seconds=self.time_limit_seconds,
        )
        if self._on_finish is not None:
            self._on_finish(self.attempt)
        return self.attempt

    def complete(self) -> Optional[CompletedAttempt]:
        """The participant's explicit "done" gesture.

        Ranking attempts only count once the whole text has been typed.
        """

        if self.state is not SessionState.PLAYING:
            return None
        if self.mode is GameMode.RANKING and len(self.input) < len(self.target_text):
            return None
        return self.finish()

    def reset(self) -> None:
        """Discard everything and return to idle. Nothing is scored or submitted."""

        self._cancel_ticker()
        self._clear()

    def close(self) -> None:
        """Tear-down hook: make sure no tick outlives the owner."""

        self._cancel_ticker()

    def preview_metrics(self) -> Optional[ScoreMetrics]:
        if self.attempt is None:
            return None
        return self.attempt.metrics()


__all__ = [
    "CompletedAttempt",
    "GameMode",
    "GameSession",
    "MAX_TIME_LIMIT_SECONDS",
    "SessionState",
]
