"""
Tool: Intervention Selector
Purpose: Pick one coping suggestion for the current turn

Decision order:
1. Reinforcement - the first helpful record matching the current emotion
   or risk level wins outright (the only "learning" in the system)
2. Emergency - intensity >= 8 or high risk draws from the emergency bucket
3. Emotion - draw from the emotion's bucket, stress bucket if it has none

Always returns a non-empty string.
"""

from __future__ import annotations

import random
from collections.abc import Sequence

from coach.agent.models import AgentAction, EmotionalAnalysis, RiskLevel
from coach.interventions.catalog import get_bucket, get_emergency_bucket, normalize_emotion
from coach.learning.models import PatternProfile
from coach.memory.reinforcement import InterventionRecord

REINFORCED_SUFFIX = " (This worked for you before!)"
EMERGENCY_INTENSITY = 8


def find_reinforced(
    analysis: EmotionalAnalysis, history: Sequence[InterventionRecord]
) -> InterventionRecord | None:
    """First helpful record sharing the current emotion or risk level."""
    emotion = normalize_emotion(analysis.primary_emotion)
    risk = str(analysis.risk_level)
    for record in history:
        if not record.helpful:
            continue
        if normalize_emotion(record.emotion) == emotion or record.risk_level == risk:
            return record
    return None


def select(
    analysis: EmotionalAnalysis,
    profile: PatternProfile,
    action: AgentAction,
    reinforcement_history: Sequence[InterventionRecord],
    rng: random.Random | None = None,
) -> str:
    """
    Choose a coping suggestion.

    Args:
        analysis: Emotional analysis of the current message
        profile: Current pattern profile
        action: Action chosen for this turn
        reinforcement_history: User's helpful records, oldest first
        rng: Random source; pass a seeded Random for reproducible picks

    Returns:
        Suggestion text
    """
    rng = rng or random.Random()

    record = find_reinforced(analysis, reinforcement_history)
    if record is not None:
        return record.intervention_text + REINFORCED_SUFFIX

    if analysis.intensity >= EMERGENCY_INTENSITY or analysis.risk_level == RiskLevel.HIGH:
        return rng.choice(get_emergency_bucket())

    return rng.choice(get_bucket(analysis.primary_emotion))
