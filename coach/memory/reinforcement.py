"""
Reinforcement Store

Records of interventions a user explicitly marked as helpful. This is a
tagged lookup table, not a ranking model: selection takes the first record
whose emotion or risk level matches the current turn.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class InterventionRecord:
    emotion: str
    risk_level: str
    intervention_text: str
    helpful: bool = True
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "emotion": self.emotion,
            "risk_level": self.risk_level,
            "intervention_text": self.intervention_text,
            "helpful": self.helpful,
            "created_at": self.created_at.isoformat(),
        }


class ReinforcementStore:
    """Append-only list of helpful interventions for one user."""

    def __init__(self):
        self._records: list[InterventionRecord] = []

    def add(self, emotion: str, risk_level: str, intervention_text: str) -> InterventionRecord:
        if not intervention_text or not intervention_text.strip():
            raise ValueError("intervention_text is required")
        record = InterventionRecord(
            emotion=emotion.strip().lower(),
            risk_level=risk_level.strip().lower(),
            intervention_text=intervention_text.strip(),
        )
        self._records.append(record)
        return record

    def records(self) -> list[InterventionRecord]:
        """All records, oldest first."""
        return list(self._records)

    def preferred_interventions(self, limit: int = 3) -> list[str]:
        """Distinct helpful texts, most recently confirmed first."""
        seen: list[str] = []
        for record in reversed(self._records):
            if record.intervention_text not in seen:
                seen.append(record.intervention_text)
            if len(seen) >= limit:
                break
        return seen

    def __len__(self) -> int:
        return len(self._records)
