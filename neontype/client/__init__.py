"""Client-side session, device storage and ranking submission."""

from .scheduler import AsyncioScheduler, ManualScheduler
from .session import CompletedAttempt, GameMode, GameSession, SessionState
from .storage import HistoryEntry, JsonFileStore, LocalStore, MemoryStore
from .submit import RankingClient, RankingUnavailable, SubmissionFailed, SubmissionResult
from .texts import DEFAULT_TEXT, TextLibrary

__all__ = [
    "AsyncioScheduler",
    "CompletedAttempt",
    "DEFAULT_TEXT",
    "GameMode",
    "GameSession",
    "HistoryEntry",
    "JsonFileStore",
    "LocalStore",
    "ManualScheduler",
    "MemoryStore",
    "RankingClient",
    "RankingUnavailable",
    "SessionState",
    "SubmissionFailed",
    "SubmissionResult",
    "TextLibrary",
]
