"""
Insights and Recommendations

Short statements derived from the pattern profile. Insights explain the
current turn; recommendations are standing, proactive suggestions.
"""

from __future__ import annotations

from datetime import datetime

from coach.agent.action_classifier import matches_dominant_trigger
from coach.agent.models import EmotionalAnalysis
from coach.learning.models import PatternProfile
from coach.learning.pattern_analyzer import RISK_HOUR_WINDOW, is_near_risk_hour

ABOVE_BASELINE_MARGIN = 2


def generate_insights(
    profile: PatternProfile,
    analysis: EmotionalAnalysis,
    now: datetime | None = None,
    risk_hour_window: int = RISK_HOUR_WINDOW,
) -> list[str]:
    """Insights for this turn, in a fixed order: trigger, time, intensity."""
    insights = []

    if matches_dominant_trigger(analysis, profile):
        count = profile.trigger_frequency.get(profile.dominant_trigger, 0)
        insights.append(
            f"This is your most common trigger - we've worked on this {count} times"
        )

    hour = (now or datetime.now()).hour
    if is_near_risk_hour(hour, profile, risk_hour_window):
        insights.append("You're in a high-risk time period based on your patterns")

    # No baseline without entries
    if not profile.is_empty and analysis.intensity > profile.mean_intensity + ABOVE_BASELINE_MARGIN:
        insights.append("This intensity is higher than your usual - extra support might help")

    return insights


def generate_recommendations(profile: PatternProfile) -> list[str]:
    recommendations = []

    if profile.risk_hours:
        recommendations.append(
            f"Consider planning activities during your high-risk times: {', '.join(profile.risk_hours)}"
        )

    if profile.dominant_trigger:
        recommendations.append(
            f"Work on a coping plan specifically for {profile.dominant_trigger}"
        )

    return recommendations
