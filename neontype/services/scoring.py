"""Speed, accuracy and score calculations.

The same functions back the client's provisional result screen and the
server's authoritative recomputation, so the two can never disagree.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

MIN_ELAPSED_SECONDS = 0.1


@dataclass(frozen=True)
class ScoreMetrics:
    """Derived result of one attempt."""

    cpm: int
    accuracy: float
    score: int

    def to_dict(self) -> dict:
        return {"cpm": self.cpm, "accuracy": self.accuracy, "score": self.score}


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like JavaScript's ``Math.round`` (ties go towards +infinity)."""

    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance with unit substitution, insertion and deletion."""

    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            if char_a == char_b:
                current.append(previous[j - 1])
            else:
                current.append(
                    min(
                        previous[j - 1] + 1,  # substitution
                        current[j - 1] + 1,  # insertion
                        previous[j] + 1,  # deletion
                    )
                )
        previous = current
    return previous[-1]


def accuracy(input_text: str, target_prefix: str) -> float:
    """Percentage similarity of ``input_text`` to ``target_prefix``.

    Returns 0 when either side is empty; otherwise a value in ``[0, 100]``
    rounded to one decimal place.
    """

    if not input_text or not target_prefix:
        return 0.0

    distance = edit_distance(input_text, target_prefix)
    max_length = max(len(input_text), len(target_prefix))
    percent = (max_length - distance) / max_length * 100
    return max(0.0, round_half_up(percent, 1))


def attempt_accuracy(input_text: str, target_text: str) -> float:
    """Accuracy over the span actually typed; untyped remainder is ignored."""

    return accuracy(input_text, target_text[: len(input_text)])


def cpm(
    input_length: int,
    elapsed_seconds: float,
    time_limit_seconds: Optional[float] = None,
) -> int:
    """Characters per minute, with the elapsed time clamped to sane bounds."""

    elapsed = max(MIN_ELAPSED_SECONDS, elapsed_seconds)
    if time_limit_seconds:
        elapsed = min(elapsed, max(MIN_ELAPSED_SECONDS, float(time_limit_seconds)))
    return int(round_half_up(input_length / elapsed * 60))


def composite_score(cpm_value: int, accuracy_percent: float, input_length: int) -> int:
    """Speed x accuracy x a logarithmic length bonus.

    Ten times the text gives roughly twice the score, a hundred times roughly
    three times.
    """

    raw = cpm_value * (accuracy_percent / 100) * math.log10(input_length + 1) * 100
    return int(round_half_up(raw))


def compute_metrics(
    input_text: str,
    target_text: str,
    elapsed_seconds: float,
    time_limit_seconds: Optional[float] = None,
) -> ScoreMetrics:
    """Compute every metric for a finished attempt."""

    speed = cpm(len(input_text), elapsed_seconds, time_limit_seconds)
    acc = attempt_accuracy(input_text, target_text)
    return ScoreMetrics(
        cpm=speed,
        accuracy=acc,
        score=composite_score(speed, acc, len(input_text)),
    )


__all__ = [
    "MIN_ELAPSED_SECONDS",
    "ScoreMetrics",
    "accuracy",
    "attempt_accuracy",
    "composite_score",
    "compute_metrics",
    "cpm",
    "edit_distance",
    "round_half_up",
]
