"""
Agent Models

Value objects passed through one turn of the pipeline: the emotional
analysis of the incoming message and the action chosen for it.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any


class RiskLevel(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ActionType(StrEnum):
    EMERGENCY_INTERVENTION = "emergency_intervention"
    PATTERN_BASED_SUPPORT = "pattern_based_support"
    PREVENTIVE_CHECK_IN = "preventive_check_in"
    SUPPORTIVE_CONVERSATION = "supportive_conversation"


class Priority(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def _clamp_scale(value: Any, default: int) -> int:
    try:
        number = int(round(float(value)))
    except (TypeError, ValueError):
        return default
    return max(1, min(10, number))


def _normalize_risk(value: Any) -> RiskLevel:
    try:
        return RiskLevel(str(value).strip().lower())
    except ValueError:
        return RiskLevel.MEDIUM


@dataclass
class EmotionalAnalysis:
    """
    Emotional reading of a single message.

    Attributes:
        primary_emotion: Main emotion label
        intensity: 1-10
        triggers: Trigger labels mentioned or implied
        eating_urge: 1-10
        risk_level: low | medium | high
        context: Short description of the situation
        confidence: Classifier confidence, when it reports one
        source: "llm" or "fallback"
    """
    primary_emotion: str = "neutral"
    intensity: int = 5
    triggers: list[str] = field(default_factory=list)
    eating_urge: int = 3
    risk_level: RiskLevel = RiskLevel.MEDIUM
    context: str = ""
    confidence: float | None = None
    source: str = "llm"

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: str = "llm") -> EmotionalAnalysis:
        """Build from classifier JSON, clamping scales and normalizing labels."""
        triggers = data.get("triggers") or []
        if isinstance(triggers, str):
            triggers = [triggers]

        confidence = data.get("confidence")
        try:
            confidence = float(confidence) if confidence is not None else None
        except (TypeError, ValueError):
            confidence = None

        return cls(
            primary_emotion=str(data.get("primaryEmotion") or data.get("primary_emotion") or "neutral")
            .strip()
            .lower(),
            intensity=_clamp_scale(data.get("intensity"), 5),
            triggers=[str(t).strip() for t in triggers if str(t).strip()],
            eating_urge=_clamp_scale(data.get("eatingUrge", data.get("eating_urge")), 3),
            risk_level=_normalize_risk(data.get("riskLevel", data.get("risk_level"))),
            context=str(data.get("context") or ""),
            confidence=confidence,
            source=source,
        )

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["risk_level"] = str(self.risk_level)
        return d


@dataclass(frozen=True)
class AgentAction:
    type: ActionType
    priority: Priority
    focus: str

    def to_dict(self) -> dict[str, str]:
        return {"type": str(self.type), "priority": str(self.priority), "focus": self.focus}
