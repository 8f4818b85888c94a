"""Shared test fixtures for the coach tests.

This module provides common fixtures used across all test modules:
- Standard test user and a fixed clock
- Mood entry factories and the canonical stress/boredom history
- Deterministic fake classifier/generator for the engine

Usage:
    def test_something(make_entry, fixed_now):
        entry = make_entry(hour=14)
        ...
"""

import random
from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

import pytest

from coach.agent.config_models import CoachConfig
from coach.agent.engine import CoachEngine
from coach.agent.llm_client import Classifier, Generator
from coach.agent.models import EmotionalAnalysis, RiskLevel
from coach.learning.models import MoodEntry


# ─────────────────────────────────────────────────────────────────────────────
# Path Constants
# ─────────────────────────────────────────────────────────────────────────────

PROJECT_ROOT = Path(__file__).parent.parent
PACKAGE_DIR = PROJECT_ROOT / "coach"


# ─────────────────────────────────────────────────────────────────────────────
# Fakes
# ─────────────────────────────────────────────────────────────────────────────


class FakeClassifier(Classifier):
    """Returns a fixed analysis and records what it was asked."""

    def __init__(self, analysis: EmotionalAnalysis | None = None):
        self.analysis = analysis or EmotionalAnalysis(
            primary_emotion="stress",
            intensity=5,
            triggers=[],
            eating_urge=3,
            risk_level=RiskLevel.LOW,
            context="test",
            confidence=0.9,
        )
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def classify(self, message, prior_patterns):
        self.calls.append((message, prior_patterns))
        return self.analysis


class FakeGenerator(Generator):
    def __init__(self, reply: str = "That sounds hard. Let's try something together."):
        self.reply = reply
        self.calls: list[tuple[str, list[dict[str, str]], str]] = []

    async def generate(self, system_prompt, recent_turns, message):
        self.calls.append((system_prompt, recent_turns, message))
        return self.reply


class BrokenClassifier(Classifier):
    def __init__(self):
        self.calls = 0

    async def classify(self, message, prior_patterns):
        self.calls += 1
        raise ConnectionError("classification service unreachable")


class BrokenGenerator(Generator):
    def __init__(self):
        self.calls = 0

    async def generate(self, system_prompt, recent_turns, message):
        self.calls += 1
        raise ConnectionError("reply service unreachable")


# ─────────────────────────────────────────────────────────────────────────────
# User / Time Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def mock_user_id() -> str:
    """Standard test user ID."""
    return "test_user_123"


@pytest.fixture
def fixed_now() -> datetime:
    """Wednesday 2024-03-06 14:30, inside the 14:00 risk hour of the stress history."""
    return datetime(2024, 3, 6, 14, 30)


# ─────────────────────────────────────────────────────────────────────────────
# Mood Entry Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def make_entry(mock_user_id: str) -> Callable[..., MoodEntry]:
    """Factory for mood entries on consecutive days at a given hour."""
    base = datetime(2024, 3, 1)
    counter = {"n": 0}

    def _make(
        emotion: str = "stressed",
        intensity: int = 5,
        trigger: str = "work deadline",
        hour: int = 12,
        day: int | None = None,
        user_id: str | None = None,
    ) -> MoodEntry:
        if day is None:
            day = counter["n"]
        counter["n"] += 1
        return MoodEntry.create(
            user_id or mock_user_id,
            emotion,
            intensity,
            trigger,
            timestamp=base + timedelta(days=day, hours=hour),
        )

    return _make


@pytest.fixture
def stress_history(make_entry) -> list[MoodEntry]:
    """Three stressed/work-deadline entries at 14:00, then two boredom entries at 9:00."""
    entries = [make_entry("stressed", 7, "work deadline", hour=14, day=d) for d in range(3)]
    entries += [make_entry("bored", 4, "empty evening", hour=9, day=d) for d in range(3, 5)]
    return entries


# ─────────────────────────────────────────────────────────────────────────────
# Engine Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def fake_classifier() -> FakeClassifier:
    return FakeClassifier()


@pytest.fixture
def fake_generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def coach_config() -> CoachConfig:
    """Default config with a short timeout so slow fakes fail fast."""
    config = CoachConfig()
    config.llm.timeout_seconds = 0.2
    return config


@pytest.fixture
def classifier_factory() -> Callable[..., FakeClassifier]:
    """Build a FakeClassifier from EmotionalAnalysis fields."""

    def _make(**fields) -> FakeClassifier:
        fields.setdefault("confidence", 0.9)
        return FakeClassifier(EmotionalAnalysis(**fields))

    return _make


@pytest.fixture
def broken_classifier() -> BrokenClassifier:
    return BrokenClassifier()


@pytest.fixture
def broken_generator() -> BrokenGenerator:
    return BrokenGenerator()


@pytest.fixture
def engine_factory(coach_config, fake_classifier, fake_generator, fixed_now) -> Callable[..., CoachEngine]:
    """Build an engine with fakes, a seeded rng and the fixed clock; override any part."""

    def _make(**overrides) -> CoachEngine:
        kwargs = {
            "config": coach_config,
            "classifier": fake_classifier,
            "generator": fake_generator,
            "rng": random.Random(42),
            "clock": lambda: fixed_now,
        }
        kwargs.update(overrides)
        return CoachEngine(**kwargs)

    return _make


@pytest.fixture
def engine(engine_factory) -> CoachEngine:
    return engine_factory()


@pytest.fixture
def anyio_backend() -> str:
    """Backend for async tests."""
    return "asyncio"
