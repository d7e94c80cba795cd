"""Server-side plausibility checks for submitted attempts.

Client-computed metrics are never trusted: everything is re-derived from the
raw text and timestamps, and the first failing check rejects the submission
with a named reason.
"""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Real
from typing import Any, Dict, Mapping, Optional

from ..core import config
from .scoring import ScoreMetrics, compute_metrics

MISSING_PARAMETERS = "Missing required parameters"
INVALID_USERNAME = "Invalid username (must be 1-{max} characters)"
INVALID_TIMESTAMPS = "Invalid timestamps"
END_BEFORE_START = "End time must be after start time"
FUTURE_TIMESTAMPS = "Timestamps cannot be in the future"
CLOCK_MISMATCH = "Client time mismatch (possible time manipulation)"
INVALID_DURATION = "Invalid play duration"
INPUT_TOO_LONG = "Input too long"
CPM_TOO_HIGH = "CPM too high (physically impossible)"
INVALID_TARGET = "Invalid target text"

_REQUIRED_FIELDS = ("input", "targetText", "startTime", "endTime", "username")


class SubmissionRejected(Exception):
    """Raised when a submission fails a plausibility check."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


@dataclass(frozen=True)
class ValidatedSubmission:
    """A submission that passed every check, with server-derived metrics."""

    username: str
    elapsed_seconds: float
    metrics: ScoreMetrics


def _is_timestamp(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _check_required(payload: Mapping[str, Any]) -> None:
    for name in _REQUIRED_FIELDS:
        value = payload.get(name)
        if not value:
            raise SubmissionRejected(MISSING_PARAMETERS)
    for name in ("input", "targetText", "username"):
        if not isinstance(payload[name], str):
            raise SubmissionRejected(MISSING_PARAMETERS)
    for name in ("startTime", "endTime"):
        if not _is_timestamp(payload[name]):
            raise SubmissionRejected(INVALID_TIMESTAMPS)


def _check_username(raw: str) -> str:
    username = raw.strip()
    if not 1 <= len(username) <= config.MAX_USERNAME_LENGTH:
        raise SubmissionRejected(INVALID_USERNAME.format(max=config.MAX_USERNAME_LENGTH))
    return username


def check_timing(
    start_time: float,
    end_time: float,
    *,
    received_at_ms: int,
    submitted_at_ms: Optional[Any] = None,
) -> float:
    """Validate the attempt's timestamps and return elapsed seconds."""

    if start_time <= 0 or end_time <= 0:
        raise SubmissionRejected(INVALID_TIMESTAMPS)
    if end_time <= start_time:
        raise SubmissionRejected(END_BEFORE_START)
    if start_time > received_at_ms or end_time > received_at_ms:
        raise SubmissionRejected(FUTURE_TIMESTAMPS)

    if submitted_at_ms is not None and not _is_timestamp(submitted_at_ms):
        raise SubmissionRejected(CLOCK_MISMATCH)
    declared = received_at_ms if submitted_at_ms is None else submitted_at_ms
    if abs(received_at_ms - declared) > config.MAX_CLOCK_SKEW_MS:
        raise SubmissionRejected(CLOCK_MISMATCH)

    elapsed_seconds = (end_time - start_time) / 1000
    if not config.MIN_PLAY_SECONDS <= elapsed_seconds <= config.MAX_PLAY_SECONDS:
        raise SubmissionRejected(INVALID_DURATION)
    return elapsed_seconds


def check_text(input_text: str, target_text: str, elapsed_seconds: float) -> None:
    """Reject oversized input, inhuman typing speed and empty targets."""

    if len(input_text) > len(target_text) * config.MAX_INPUT_RATIO:
        raise SubmissionRejected(INPUT_TOO_LONG)
    if len(input_text) / elapsed_seconds * 60 > config.MAX_CPM:
        raise SubmissionRejected(CPM_TOO_HIGH)
    if not target_text:
        raise SubmissionRejected(INVALID_TARGET)


def validate_submission(
    payload: Mapping[str, Any], *, received_at_ms: int
) -> ValidatedSubmission:
    """Run every check in order and recompute the score.

    ``received_at_ms`` is the server's clock when the request arrived. An
    optional ``submittedAt`` in the payload is the client's declared submit
    time; when absent the receive time stands in for it.
    """

    if not isinstance(payload, Mapping):
        raise SubmissionRejected(MISSING_PARAMETERS)

    _check_required(payload)
    username = _check_username(payload["username"])

    elapsed_seconds = check_timing(
        payload["startTime"],
        payload["endTime"],
        received_at_ms=received_at_ms,
        submitted_at_ms=payload.get("submittedAt"),
    )

    input_text: str = payload["input"]
    target_text: str = payload["targetText"]
    check_text(input_text, target_text, elapsed_seconds)

    metrics = compute_metrics(input_text, target_text, elapsed_seconds)
    return ValidatedSubmission(
        username=username,
        elapsed_seconds=elapsed_seconds,
        metrics=metrics,
    )


def describe_payload(payload: Dict[str, Any]) -> str:
    """Short, log-safe summary of a submission (never the full texts)."""

    input_text = payload.get("input")
    target_text = payload.get("targetText")
    return (
        f"username={str(payload.get('username'))[:40]!r} "
        f"input_len={len(input_text) if isinstance(input_text, str) else None} "
        f"target_len={len(target_text) if isinstance(target_text, str) else None}"
    )


__all__ = [
    "CLOCK_MISMATCH",
    "CPM_TOO_HIGH",
    "END_BEFORE_START",
    "FUTURE_TIMESTAMPS",
    "INPUT_TOO_LONG",
    "INVALID_DURATION",
    "INVALID_TARGET",
    "INVALID_TIMESTAMPS",
    "INVALID_USERNAME",
    "MISSING_PARAMETERS",
    "SubmissionRejected",
    "ValidatedSubmission",
    "check_text",
    "check_timing",
    "describe_payload",
    "validate_submission",
]
