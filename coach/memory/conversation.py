"""
Conversation Memory

Ordered turn history for one user. Retained history is capped (oldest turns
dropped first); a smaller window of recent turns is what the reply generator
sees as context.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

DEFAULT_MAX_RETAINED = 50
DEFAULT_CONTEXT_TURNS = 6


class TurnRole(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass
class ConversationTurn:
    """
    One turn of conversation.

    The emotion/intensity/risk_level/action_type tags are only set on
    assistant turns and record what produced the reply.
    """
    role: TurnRole
    content: str
    timestamp: datetime = field(default_factory=datetime.now)
    emotion: str | None = None
    intensity: int | None = None
    risk_level: str | None = None
    action_type: str | None = None

    def to_message(self) -> dict[str, str]:
        """Role/content pair for the reply generator."""
        return {"role": str(self.role), "content": self.content}

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "role": str(self.role),
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
        }
        for tag in ("emotion", "intensity", "risk_level", "action_type"):
            value = getattr(self, tag)
            if value is not None:
                d[tag] = value
        return d


class ConversationMemory:
    """Append-only turn history with a bounded retention window."""

    def __init__(
        self,
        max_retained: int = DEFAULT_MAX_RETAINED,
        context_turns: int = DEFAULT_CONTEXT_TURNS,
    ):
        if context_turns > max_retained:
            raise ValueError("context_turns cannot exceed max_retained")
        self.max_retained = max_retained
        self.context_turns = context_turns
        self._turns: list[ConversationTurn] = []

    def add_user_turn(self, content: str, timestamp: datetime | None = None) -> ConversationTurn:
        return self._append(ConversationTurn(TurnRole.USER, content, timestamp or datetime.now()))

    def add_assistant_turn(
        self,
        content: str,
        emotion: str | None = None,
        intensity: int | None = None,
        risk_level: str | None = None,
        action_type: str | None = None,
        timestamp: datetime | None = None,
    ) -> ConversationTurn:
        return self._append(
            ConversationTurn(
                TurnRole.ASSISTANT,
                content,
                timestamp or datetime.now(),
                emotion=emotion,
                intensity=intensity,
                risk_level=risk_level,
                action_type=action_type,
            )
        )

    def _append(self, turn: ConversationTurn) -> ConversationTurn:
        self._turns.append(turn)
        if len(self._turns) > self.max_retained:
            del self._turns[: len(self._turns) - self.max_retained]
        return turn

    def recent(self, limit: int | None = None) -> list[ConversationTurn]:
        """Most recent turns, oldest first. Defaults to the context window."""
        limit = self.context_turns if limit is None else limit
        if limit <= 0:
            return []
        return list(self._turns[-limit:])

    def history(self) -> list[ConversationTurn]:
        return list(self._turns)

    def __len__(self) -> int:
        return len(self._turns)
