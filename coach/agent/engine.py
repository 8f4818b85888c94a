"""
Tool: Coach Engine
Purpose: Run one message through crisis screening, analysis, action and intervention

Per message:
    crisis check -> (escalate and stop) -> classify (LLM, keyword fallback)
    -> pattern analysis -> action -> intervention -> insights/recommendations
    -> reply (LLM, calm fallback) -> conversation memory

Every request for a user runs under that user's lock. External calls are
bounded by the configured timeout and guarded by a circuit breaker; a
failed call degrades to local fallbacks and never surfaces as an error.

Usage:
    from coach.agent.engine import CoachEngine

    engine = CoachEngine()
    await engine.log_mood("alice", "stressed", 7, "work deadline")
    result = await engine.submit_message("alice", "Another deadline, I want to raid the fridge")
    analytics = await engine.get_analytics("alice")
"""

from __future__ import annotations

import asyncio
import os
import random
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

from coach.agent.action_classifier import decide
from coach.agent.config_models import CoachConfig, load_coach_config
from coach.agent.insights import generate_insights, generate_recommendations
from coach.agent.llm_client import (
    AnthropicClassifier,
    AnthropicGenerator,
    Classifier,
    FallbackGenerator,
    Generator,
    KeywordClassifier,
    fallback_analysis,
)
from coach.agent.models import EmotionalAnalysis, RiskLevel
from coach.agent.system_prompt import build_conversation_context, build_system_prompt
from coach.errors import ExternalServiceError, ValidationError
from coach.interventions.catalog import FALLBACK_BREATHING
from coach.interventions.selector import REINFORCED_SUFFIX, select
from coach.learning import pattern_analyzer
from coach.learning.models import MoodEntry, PatternProfile, as_local_time
from coach.logging_config import get_logger
from coach.memory.reinforcement import InterventionRecord
from coach.memory.user_store import UserState, UserStore
from coach.ops.circuit_breaker import CircuitBreaker
from coach.safety.crisis_detector import CrisisDetector

logger = get_logger(__name__)

CLASSIFIER_SERVICE = "classifier"
GENERATOR_SERVICE = "generator"

FALLBACK_REPLY = (
    "I'm having trouble responding right now, and I'm sorry about that. "
    "Take a deep breath - you've got this. Here's something you can try in the meantime."
)
NO_DATA_MESSAGE = "No data yet - log a few moods and your patterns will start to show up here."

CHECK_IN_MESSAGES = {
    "risk_time": (
        "Hey, this time of day has been tougher for you before ({hours}). "
        "How are you feeling right now?"
    ),
    "long_absence": "It's been a little while since your last check-in. How have things been going?",
    "general": "Just checking in - how are you feeling right now?",
}


def _require_user(user_id: str) -> str:
    if not isinstance(user_id, str) or not user_id.strip():
        raise ValidationError("user_id is required")
    return user_id.strip()


class CoachEngine:
    """
    Pattern analysis and intervention decisions for many users.

    Args:
        config: Loaded CoachConfig (defaults to args/coach.yaml)
        classifier: Emotion classifier (Anthropic if an API key is set, else keywords)
        generator: Reply generator (Anthropic if an API key is set, else fallback replies)
        crisis_detector: Escalation check (keyword sets from config.safety)
        store: Per-user state store
        breaker: Circuit breaker for external calls
        rng: Random source for intervention picks
        clock: Wall-clock source for time-of-day rules
    """

    def __init__(
        self,
        config: CoachConfig | None = None,
        classifier: Classifier | None = None,
        generator: Generator | None = None,
        crisis_detector: CrisisDetector | None = None,
        store: UserStore | None = None,
        breaker: CircuitBreaker | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = config or load_coach_config()
        llm = self.config.llm
        has_key = bool(os.environ.get(llm.api_key_env))

        self.classifier = classifier or (
            AnthropicClassifier(llm.classifier_model, llm.api_key_env, llm.classifier_temperature)
            if has_key
            else KeywordClassifier()
        )
        self.generator = generator or (
            AnthropicGenerator(llm.generator_model, llm.api_key_env, llm.max_tokens, llm.temperature)
            if has_key
            else FallbackGenerator()
        )

        safety = self.config.safety
        self.crisis_detector = crisis_detector or CrisisDetector(
            safety.crisis_keywords, safety.restriction_keywords, safety.resources
        )

        memory = self.config.memory
        self.store = store or UserStore(
            max_users=memory.max_users,
            ttl_minutes=memory.user_ttl_minutes,
            max_retained_turns=memory.max_retained_turns,
            context_turns=memory.context_turns,
        )
        self.breaker = breaker or CircuitBreaker(
            failure_threshold=self.config.circuit_breaker.failure_threshold,
            recovery_timeout=self.config.circuit_breaker.recovery_timeout,
        )
        self.rng = rng or random.Random()
        self._clock = clock

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _profile(self, state: UserState) -> PatternProfile:
        patterns = self.config.patterns
        return pattern_analyzer.analyze(
            state.mood_log.snapshot(),
            risk_hour_min_count=patterns.risk_hour_min_count,
            max_risk_hours=patterns.max_risk_hours,
        )

    async def _call_external(self, service: str, coro) -> Any:
        """Await an external call under the breaker and timeout.

        Raises:
            ExternalServiceError: Circuit open, timeout, or any failure in the call
        """
        if not self.breaker.can_execute(service):
            coro.close()
            raise ExternalServiceError(service, "circuit open")
        try:
            result = await asyncio.wait_for(coro, timeout=self.config.llm.timeout_seconds)
        except TimeoutError as e:
            self.breaker.record_failure(service)
            raise ExternalServiceError(service, "timed out") from e
        except ExternalServiceError:
            self.breaker.record_failure(service)
            raise
        except Exception as e:
            self.breaker.record_failure(service)
            raise ExternalServiceError(service, str(e) or type(e).__name__) from e
        self.breaker.record_success(service)
        return result

    async def _classify(self, message: str, profile: PatternProfile) -> EmotionalAnalysis:
        try:
            return await self._call_external(
                CLASSIFIER_SERVICE, self.classifier.classify(message, profile.to_dict())
            )
        except ExternalServiceError as e:
            logger.warning("classification_fallback", reason=e.reason)
            return fallback_analysis(message)

    async def _generate(
        self, system_prompt: str, context: list[dict[str, str]], message: str
    ) -> str | None:
        try:
            return await self._call_external(
                GENERATOR_SERVICE, self.generator.generate(system_prompt, context, message)
            )
        except ExternalServiceError as e:
            logger.warning("reply_fallback", reason=e.reason)
            return None

    # -------------------------------------------------------------------------
    # Public operations
    # -------------------------------------------------------------------------

    async def submit_message(self, user_id: str, text: str) -> dict[str, Any]:
        """
        Process one user message.

        Returns:
            {reply, emotion, confidence, intervention, action, insights, recommendations}
            or, when escalated, {requires_escalation, category, resources, message}
        """
        user_id = _require_user(user_id)
        state = self.store.get(user_id)

        async with state.lock:
            now = as_local_time(self._clock())
            crisis = self.crisis_detector.check(text)
            if crisis.requires_escalation:
                state.conversation.add_user_turn(text, now)
                state.conversation.add_assistant_turn(
                    crisis.message,
                    risk_level=str(RiskLevel.HIGH),
                    action_type="escalation",
                    timestamp=now,
                )
                logger.warning("crisis_escalation", user_id=user_id, category=crisis.category)
                return crisis.to_dict()

            profile = self._profile(state)
            analysis = await self._classify(text, profile)

            window = self.config.patterns.risk_hour_window
            action = decide(analysis, profile, {"now": now, "risk_hour_window": window})
            intervention = select(
                analysis, profile, action, state.reinforcement.records(), self.rng
            )
            insights = generate_insights(profile, analysis, now, window)
            recommendations = generate_recommendations(profile)

            system_prompt = build_system_prompt(
                profile, state.reinforcement.preferred_interventions(), state.goals
            )
            context = build_conversation_context(state.conversation.recent(), action)
            reply = await self._generate(system_prompt, context, text)
            if reply is None:
                reply = FALLBACK_REPLY
                intervention = FALLBACK_BREATHING

            state.conversation.add_user_turn(text, now)
            state.conversation.add_assistant_turn(
                reply,
                emotion=analysis.primary_emotion,
                intensity=analysis.intensity,
                risk_level=str(analysis.risk_level),
                action_type=str(action.type),
                timestamp=now,
            )

        logger.info(
            "message_processed",
            user_id=user_id,
            emotion=analysis.primary_emotion,
            action=str(action.type),
            analysis_source=analysis.source,
        )
        return {
            "reply": reply,
            "emotion": analysis.primary_emotion,
            "confidence": analysis.confidence,
            "intervention": intervention,
            "action": action.to_dict(),
            "insights": insights,
            "recommendations": recommendations,
            "timestamp": now.isoformat(),
        }

    async def log_mood(
        self,
        user_id: str,
        emotion: str,
        intensity: int,
        trigger: str,
        context: str | None = None,
        timestamp: datetime | None = None,
    ) -> MoodEntry:
        """
        Record a mood entry.

        Raises:
            ValidationError: Missing fields or intensity outside 1-10
        """
        user_id = _require_user(user_id)
        # Validate before touching the store so bad input leaves no trace
        entry = MoodEntry.create(user_id, emotion, intensity, trigger, context, timestamp or self._clock())

        state = self.store.get(user_id)
        async with state.lock:
            state.mood_log.append(entry)

        logger.info("mood_logged", user_id=user_id, emotion=entry.emotion, intensity=entry.intensity)
        return entry

    async def get_analytics(self, user_id: str) -> dict[str, Any]:
        """Profile, risk factors and progress, or a no-data message."""
        user_id = _require_user(user_id)
        state = self.store.peek(user_id)
        if state is None or len(state.mood_log) == 0:
            return {"total_entries": 0, "message": NO_DATA_MESSAGE}

        async with state.lock:
            entries = state.mood_log.snapshot()
            profile = self._profile(state)

        patterns = self.config.patterns
        return {
            "total_entries": len(entries),
            "profile": profile.to_dict(),
            "risk_factors": pattern_analyzer.risk_factors(entries, patterns.high_intensity_threshold),
            "progress_indicators": pattern_analyzer.progress_indicators(entries, patterns.recent_window),
        }

    async def check_in(self, user_id: str, now: datetime | None = None) -> dict[str, str]:
        """
        Proactive check-in message.

        Priority: risk_time (near a risk hour) -> long_absence (no entry for
        more than absence_hours) -> general.
        """
        user_id = _require_user(user_id)
        now = as_local_time(now or self._clock())
        state = self.store.get(user_id)

        async with state.lock:
            profile = self._profile(state)
            latest = state.mood_log.latest()

        patterns = self.config.patterns
        if pattern_analyzer.is_near_risk_hour(now.hour, profile, patterns.risk_hour_window):
            check_type = "risk_time"
        elif latest is not None and now - latest.timestamp > timedelta(hours=patterns.absence_hours):
            check_type = "long_absence"
        else:
            check_type = "general"

        message = CHECK_IN_MESSAGES[check_type].format(hours=", ".join(profile.risk_hours))
        return {"message": message, "type": check_type}

    async def mark_intervention_helpful(
        self, user_id: str, emotion: str, risk_level: str, text: str
    ) -> InterventionRecord:
        """Remember that an intervention helped; it will be preferred next time."""
        user_id = _require_user(user_id)
        try:
            risk = RiskLevel(str(risk_level).strip().lower())
        except ValueError as e:
            raise ValidationError(f"risk_level must be low, medium or high, got {risk_level!r}") from e
        if not emotion or not str(emotion).strip():
            raise ValidationError("emotion is required")
        if not text or not text.strip():
            raise ValidationError("intervention text is required")

        # Re-marking a reinforced suggestion must not stack the suffix
        text = text.strip().removesuffix(REINFORCED_SUFFIX)

        state = self.store.get(user_id)
        async with state.lock:
            record = state.reinforcement.add(emotion, str(risk), text)

        logger.info("intervention_marked_helpful", user_id=user_id, emotion=record.emotion)
        return record

    async def set_goals(self, user_id: str, goals: list[str]) -> list[str]:
        user_id = _require_user(user_id)
        state = self.store.get(user_id)
        async with state.lock:
            state.goals = [g.strip() for g in goals if g and g.strip()]
            return list(state.goals)

    def get_mood_entries(self, user_id: str) -> list[MoodEntry]:
        state = self.store.peek(user_id)
        return state.mood_log.snapshot() if state else []

    def get_history(self, user_id: str) -> list[dict[str, Any]]:
        state = self.store.peek(user_id)
        return [turn.to_dict() for turn in state.conversation.history()] if state else []
