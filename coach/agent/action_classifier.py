"""
Tool: Action Classifier
Purpose: Decide what kind of support the current turn needs

Priority chain, first match wins:
1. emergency_intervention - high risk or eating urge >= 8
2. pattern_based_support  - the user's dominant trigger is in play
3. preventive_check_in    - within +/-1 hour of a known risk hour
4. supportive_conversation - everything else

Risk always comes first. A named, confirmed trigger outranks a
time-of-day correlation.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from coach.agent.models import ActionType, AgentAction, EmotionalAnalysis, Priority, RiskLevel
from coach.learning.models import PatternProfile
from coach.learning.pattern_analyzer import RISK_HOUR_WINDOW, is_near_risk_hour

URGE_THRESHOLD = 8

EMERGENCY = AgentAction(ActionType.EMERGENCY_INTERVENTION, Priority.HIGH, "immediate_coping")
PATTERN_SUPPORT = AgentAction(ActionType.PATTERN_BASED_SUPPORT, Priority.MEDIUM, "known_trigger")
PREVENTIVE = AgentAction(ActionType.PREVENTIVE_CHECK_IN, Priority.MEDIUM, "risk_time")
SUPPORTIVE = AgentAction(ActionType.SUPPORTIVE_CONVERSATION, Priority.LOW, "general_support")


def current_hour(session_context: dict[str, Any] | None) -> int:
    """Hour for time-based rules: context 'now' or 'hour', else the wall clock."""
    session_context = session_context or {}
    now = session_context.get("now")
    if isinstance(now, datetime):
        return now.hour
    hour = session_context.get("hour")
    if hour is not None:
        return int(hour)
    return datetime.now().hour


def matches_dominant_trigger(analysis: EmotionalAnalysis, profile: PatternProfile) -> bool:
    return bool(profile.dominant_trigger) and profile.dominant_trigger in analysis.triggers


def decide(
    analysis: EmotionalAnalysis,
    profile: PatternProfile,
    session_context: dict[str, Any] | None = None,
) -> AgentAction:
    """
    Classify the next action.

    Args:
        analysis: Emotional analysis of the current message
        profile: Pattern profile from the user's mood log
        session_context: Optional {"now": datetime} or {"hour": int},
            plus "risk_hour_window" to widen/narrow the time rule

    Returns:
        AgentAction
    """
    if analysis.risk_level == RiskLevel.HIGH or analysis.eating_urge >= URGE_THRESHOLD:
        return EMERGENCY

    if matches_dominant_trigger(analysis, profile):
        return PATTERN_SUPPORT

    window = (session_context or {}).get("risk_hour_window", RISK_HOUR_WINDOW)
    if is_near_risk_hour(current_hour(session_context), profile, window):
        return PREVENTIVE

    return SUPPORTIVE
