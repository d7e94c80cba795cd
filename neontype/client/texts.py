"""Reference passages for typing sessions."""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import List, Optional

from ..core import config

logger = logging.getLogger(__name__)

DEFAULT_TEXT = (
    "Programming is the craft of writing instructions for a computer to carry out. "
    "Software runs almost everywhere today, from phone apps to household devices "
    "and the control systems inside cars. Learning to program trains logical "
    "thinking and problem solving, and it is fun to turn your own ideas into "
    "something that works. It may feel hard at first, but a little code every day "
    "is the shortest road to getting better."
)


class TextLibrary:
    """Loads every ``*.txt`` file in a directory as one passage."""

    def __init__(self, directory: Optional[Path] = None, rng: Optional[random.Random] = None) -> None:
        self.directory = Path(directory) if directory is not None else config.TEXTS_DIR
        self._rng = rng or random.Random()
        self._texts: Optional[List[str]] = None

    def load(self) -> List[str]:
        texts: List[str] = []
        if self.directory.is_dir():
            for path in sorted(self.directory.glob("*.txt")):
                try:
                    text = path.read_text(encoding="utf-8").replace("\r\n", "\n").strip()
                except OSError as e:
                    logger.warning("Failed to read %s: %s", path, e)
                    continue
                if text:
                    texts.append(text)
        self._texts = texts
        return texts

    @property
    def texts(self) -> List[str]:
        if self._texts is None:
            self.load()
        return list(self._texts or [])

    def random_text(self) -> str:
        texts = self.texts
        if not texts:
            return DEFAULT_TEXT
        return self._rng.choice(texts)


__all__ = ["DEFAULT_TEXT", "TextLibrary"]
