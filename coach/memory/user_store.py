"""
User Store

Keyed per-user state (user ID -> UserState). State is created on first
interaction and evicted when idle longer than the TTL or when the store
grows past max_users (least recently used first).

Each UserState carries an asyncio.Lock; the engine holds it for the whole
request so appends to one user's mood log and history are serialized.
Distinct users never share a lock.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field

from coach.learning.mood_log import MoodLog
from coach.memory.conversation import (
    DEFAULT_CONTEXT_TURNS,
    DEFAULT_MAX_RETAINED,
    ConversationMemory,
)
from coach.memory.reinforcement import ReinforcementStore

logger = logging.getLogger(__name__)


@dataclass
class UserState:
    user_id: str
    mood_log: MoodLog
    conversation: ConversationMemory
    reinforcement: ReinforcementStore = field(default_factory=ReinforcementStore)
    goals: list[str] = field(default_factory=list)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    last_active: float = 0.0


class UserStore:
    """
    In-memory user state with LRU and TTL eviction.

    Args:
        max_users: Upper bound on users held at once
        ttl_minutes: Idle time after which a user's state is dropped
        max_retained_turns: History cap for new ConversationMemory instances
        context_turns: Generator context window for new ConversationMemory instances
        clock: Monotonic time source (seconds)
    """

    def __init__(
        self,
        max_users: int = 1000,
        ttl_minutes: int = 1440,
        max_retained_turns: int = DEFAULT_MAX_RETAINED,
        context_turns: int = DEFAULT_CONTEXT_TURNS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_users = max_users
        self.ttl_seconds = ttl_minutes * 60
        self.max_retained_turns = max_retained_turns
        self.context_turns = context_turns
        self._clock = clock
        self._users: OrderedDict[str, UserState] = OrderedDict()

    def get(self, user_id: str) -> UserState:
        """Get or create state for user_id, marking it most recently used."""
        now = self._clock()
        self._evict_stale(now)

        state = self._users.get(user_id)
        if state is None:
            state = UserState(
                user_id=user_id,
                mood_log=MoodLog(user_id),
                conversation=ConversationMemory(self.max_retained_turns, self.context_turns),
            )
            self._users[user_id] = state
            logger.debug(f"Created state for user {user_id}")
            self._evict_overflow(keep=user_id)
        else:
            self._users.move_to_end(user_id)

        state.last_active = now
        return state

    def peek(self, user_id: str) -> UserState | None:
        """State for user_id if present, without creating or touching it."""
        return self._users.get(user_id)

    def _evict_stale(self, now: float) -> int:
        stale = [
            user_id
            for user_id, state in self._users.items()
            if now - state.last_active > self.ttl_seconds and not state.lock.locked()
        ]
        for user_id in stale:
            del self._users[user_id]
        if stale:
            logger.info(f"Evicted {len(stale)} idle user(s)")
        return len(stale)

    def _evict_overflow(self, keep: str) -> None:
        # Oldest first; skip anyone mid-request
        for user_id in list(self._users):
            if len(self._users) <= self.max_users:
                break
            if user_id == keep or self._users[user_id].lock.locked():
                continue
            del self._users[user_id]
            logger.info(f"Evicted least recently used user {user_id}")

    def __contains__(self, user_id: str) -> bool:
        return user_id in self._users

    def __len__(self) -> int:
        return len(self._users)
