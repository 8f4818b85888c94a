"""
Mood Models

Data structures for self-reported mood observations and the pattern
profile derived from them.

Usage:
    from coach.learning.models import MoodEntry, PatternProfile

    entry = MoodEntry.create("alice", "stressed", 7, "work deadline")
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from coach.errors import ValidationError
from coach.learning import DAY_NAMES, MAX_INTENSITY, MIN_INTENSITY


def _require_text(name: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} is required")
    return value.strip()


def as_local_time(value: datetime) -> datetime:
    """Naive local time for any datetime; aware values are converted first."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


@dataclass(frozen=True)
class MoodEntry:
    """
    One timestamped self-report of emotion, intensity and trigger.

    Attributes:
        id: Unique entry ID
        user_id: Owner of the entry
        emotion: Emotion label as reported ("stressed", "sad", ...)
        intensity: 1-10 inclusive
        trigger: Trigger label ("work deadline", "loneliness", ...)
        context: Optional freeform note
        timestamp: When the mood was observed (naive local time; aware values are converted)
    """
    id: str
    user_id: str
    emotion: str
    intensity: int
    trigger: str
    context: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if isinstance(self.intensity, bool) or not isinstance(self.intensity, int):
            raise ValidationError(f"intensity must be an integer, got {self.intensity!r}")
        if not MIN_INTENSITY <= self.intensity <= MAX_INTENSITY:
            raise ValidationError(
                f"intensity must be between {MIN_INTENSITY} and {MAX_INTENSITY}, got {self.intensity}"
            )
        if not isinstance(self.timestamp, datetime):
            raise ValidationError(f"timestamp must be a datetime, got {self.timestamp!r}")
        # Entries are compared with each other and with datetime.now()
        object.__setattr__(self, "timestamp", as_local_time(self.timestamp))

    @property
    def hour(self) -> int:
        return self.timestamp.hour

    @property
    def day_of_week(self) -> str:
        return DAY_NAMES[self.timestamp.weekday()]

    @classmethod
    def create(
        cls,
        user_id: str,
        emotion: str,
        intensity: int,
        trigger: str,
        context: str | None = None,
        timestamp: datetime | None = None,
    ) -> MoodEntry:
        """Validate fields and build a new entry with a fresh ID.

        Raises:
            ValidationError: Missing user/emotion/trigger or intensity outside 1-10
        """
        return cls(
            id=str(uuid.uuid4()),
            user_id=_require_text("user_id", user_id),
            emotion=_require_text("emotion", emotion),
            intensity=intensity,
            trigger=_require_text("trigger", trigger),
            context=context.strip() if isinstance(context, str) and context.strip() else None,
            timestamp=timestamp or datetime.now(),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "emotion": self.emotion,
            "intensity": self.intensity,
            "trigger": self.trigger,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "hour": self.hour,
            "day_of_week": self.day_of_week,
        }


@dataclass
class PatternProfile:
    """
    Behavioral patterns derived from a mood log snapshot.

    Recomputed on demand; treat as stale once new entries arrive.
    """
    trigger_frequency: dict[str, int] = field(default_factory=dict)
    emotion_frequency: dict[str, int] = field(default_factory=dict)
    day_frequency: dict[str, int] = field(default_factory=dict)
    dominant_trigger: str | None = None
    dominant_emotion: str | None = None
    mean_intensity: float = 0.0
    risk_hour_values: list[int] = field(default_factory=list)
    total_entries: int = 0

    @property
    def risk_hours(self) -> list[str]:
        """Risk hours as clock labels ("14:00", "9:00")."""
        return [f"{h}:00" for h in self.risk_hour_values]

    @property
    def is_empty(self) -> bool:
        return self.total_entries == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_entries": self.total_entries,
            "dominant_trigger": self.dominant_trigger,
            "dominant_emotion": self.dominant_emotion,
            "mean_intensity": round(self.mean_intensity, 2),
            "risk_hours": self.risk_hours,
            "trigger_frequency": dict(self.trigger_frequency),
            "emotion_frequency": dict(self.emotion_frequency),
            "day_frequency": dict(self.day_frequency),
        }
