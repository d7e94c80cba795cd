"""Service layer: scoring, submission validation and the ranking store."""

from .ranking import RankedResult, rank_for_score, record_attempt, score_to_dict, top_scores
from .scoring import ScoreMetrics, compute_metrics
from .validation import SubmissionRejected, ValidatedSubmission, validate_submission

__all__ = [
    "RankedResult",
    "ScoreMetrics",
    "SubmissionRejected",
    "ValidatedSubmission",
    "compute_metrics",
    "rank_for_score",
    "record_attempt",
    "score_to_dict",
    "top_scores",
    "validate_submission",
]
