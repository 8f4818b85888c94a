"""
Tool: Mood Log
Purpose: Append-only collection of mood observations for one user

Entries are validated on the way in (MoodEntry.create) and never modified
or removed afterwards. Callers take snapshots for analysis.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import datetime

from coach.learning.models import MoodEntry

logger = logging.getLogger(__name__)


class MoodLog:
    """Append-only mood entries for a single user, kept in timestamp order."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        self._entries: list[MoodEntry] = []

    def log(
        self,
        emotion: str,
        intensity: int,
        trigger: str,
        context: str | None = None,
        timestamp: datetime | None = None,
    ) -> MoodEntry:
        """
        Validate and append a new entry.

        Raises:
            ValidationError: Bad fields; nothing is stored
        """
        entry = MoodEntry.create(self.user_id, emotion, intensity, trigger, context, timestamp)
        self.append(entry)
        return entry

    def append(self, entry: MoodEntry) -> None:
        if entry.user_id != self.user_id:
            raise ValueError(f"Entry belongs to {entry.user_id}, not {self.user_id}")

        # Backdated entries are inserted in place so snapshots stay chronological
        if self._entries and entry.timestamp < self._entries[-1].timestamp:
            index = len(self._entries)
            while index > 0 and self._entries[index - 1].timestamp > entry.timestamp:
                index -= 1
            self._entries.insert(index, entry)
        else:
            self._entries.append(entry)

        logger.debug(
            f"Mood logged for {self.user_id}: {entry.emotion}/{entry.trigger} "
            f"intensity={entry.intensity}"
        )

    def snapshot(self) -> list[MoodEntry]:
        """Copy of all entries, oldest first."""
        return list(self._entries)

    def latest(self) -> MoodEntry | None:
        return self._entries[-1] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[MoodEntry]:
        return iter(self.snapshot())
