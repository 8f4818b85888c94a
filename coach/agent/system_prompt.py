"""
System Prompt Builder

Coach persona plus what is known about the user: primary trigger, risk
times, interventions they found helpful, and their goals. Each context
line is included only when there is something to say.
"""

from __future__ import annotations

from collections.abc import Sequence

from coach.agent.models import ActionType, AgentAction
from coach.learning.models import PatternProfile
from coach.memory.conversation import ConversationTurn

BASE_PROMPT = """You are an emotional eating coach with the following capabilities:

CORE IDENTITY:
- Empathetic, non-judgmental emotional eating specialist
- Focus on emotional regulation, not weight loss or diet culture
- Use evidence-based CBT and mindfulness techniques

AGENT CAPABILITIES:
1. ANALYZE patterns in the user's emotional eating triggers
2. REMEMBER previous conversations and progress
3. ADAPT interventions based on what worked before
4. PROACTIVELY check in on the user's emotional state
5. ESCALATE to professional help if needed
{user_context}
RESPONSE GUIDELINES:
- Keep responses 2-4 sentences max unless the user asks for details
- Always offer a specific, actionable suggestion
- Reference the user's past patterns when relevant
- Ask follow-up questions to understand context
- Celebrate small wins and progress

INTERVENTION STRATEGIES:
1. Breathing exercises (4-7-8, box breathing)
2. Grounding techniques (5-4-3-2-1 sensory)
3. Physical movement (walking, stretching)
4. Emotional expression (journaling, calling a friend)
5. Mindful alternatives (tea, music, art)
6. Cognitive reframing

ESCALATION TRIGGERS:
- Mentions of self-harm, extreme restriction, or purging
- Severe depression indicators
- Substance abuse mentions
- Requests for medical advice"""

PATTERN_NOTE = "User is experiencing a known trigger pattern. Focus on established coping strategies."


def build_system_prompt(
    profile: PatternProfile,
    preferred_interventions: Sequence[str] = (),
    goals: Sequence[str] = (),
) -> str:
    lines = []
    if profile.dominant_trigger:
        lines.append(f"- Primary trigger: {profile.dominant_trigger}")
    if profile.risk_hours:
        lines.append(f"- High-risk times: {', '.join(profile.risk_hours)}")
    if preferred_interventions:
        lines.append(f"- Preferred interventions: {', '.join(preferred_interventions)}")
    if goals:
        lines.append(f"- Current goals: {', '.join(goals)}")

    user_context = "\nUSER CONTEXT:\n" + "\n".join(lines) + "\n" if lines else ""
    return BASE_PROMPT.format(user_context=user_context)


def build_conversation_context(
    turns: Sequence[ConversationTurn], action: AgentAction
) -> list[dict[str, str]]:
    """Recent turns as role/content messages, with a lead note for known-trigger turns."""
    messages = [turn.to_message() for turn in turns]
    if action.type == ActionType.PATTERN_BASED_SUPPORT:
        messages.insert(0, {"role": "system", "content": PATTERN_NOTE})
    return messages
