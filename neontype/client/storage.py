"""Device-local settings and score history."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    date: str
    score: int
    cpm: int
    accuracy: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryEntry":
        return cls(
            date=str(data["date"]),
            score=int(data["score"]),
            cpm=int(data["cpm"]),
            accuracy=float(data["accuracy"]),
        )


class LocalStore(Protocol):
    """What the client needs from device storage."""

    def get_username(self) -> Optional[str]: ...

    def set_username(self, username: str) -> None: ...

    def append_history(self, entry: HistoryEntry) -> None: ...

    def read_history(self) -> List[HistoryEntry]: ...


class MemoryStore:
    def __init__(self, username: Optional[str] = None) -> None:
        self._username = username
        self._history: List[HistoryEntry] = []

    def get_username(self) -> Optional[str]:
        return self._username

    def set_username(self, username: str) -> None:
        self._username = username

    def append_history(self, entry: HistoryEntry) -> None:
        self._history.append(entry)

    def read_history(self) -> List[HistoryEntry]:
        return list(self._history)


class JsonFileStore:
    """Keeps ``{"username": ..., "history": [...]}`` in a single JSON file.

    History is append-only. A missing or unreadable file reads as empty.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {"username": None, "history": []}
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable local store %s: %s", self.path, e)
            return {"username": None, "history": []}
        if not isinstance(data, dict):
            return {"username": None, "history": []}
        data.setdefault("username", None)
        if not isinstance(data.get("history"), list):
            data["history"] = []
        return data

    def _save(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp, self.path)

    def get_username(self) -> Optional[str]:
        return self._load()["username"]

    def set_username(self, username: str) -> None:
        data = self._load()
        data["username"] = username
        self._save(data)

    def append_history(self, entry: HistoryEntry) -> None:
        data = self._load()
        data["history"].append(entry.to_dict())
        self._save(data)

    def read_history(self) -> List[HistoryEntry]:
        entries: List[HistoryEntry] = []
        for item in self._load()["history"]:
            try:
                entries.append(HistoryEntry.from_dict(item))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed history entry: %r", item)
        return entries


__all__ = ["HistoryEntry", "JsonFileStore", "LocalStore", "MemoryStore"]
