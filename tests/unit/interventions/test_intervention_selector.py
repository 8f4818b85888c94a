"""Tests for coach/interventions/catalog.py and coach/interventions/selector.py

Selection order: a reinforced record wins outright, then the emergency
bucket for intense or high-risk turns, then the emotion's bucket with the
stress bucket as fallback. A suggestion is always returned.
"""

import random

import pytest

from coach.agent.action_classifier import SUPPORTIVE
from coach.agent.models import EmotionalAnalysis, RiskLevel
from coach.interventions.catalog import (
    EMERGENCY,
    FALLBACK_BUCKET,
    INTERVENTION_CATALOG,
    get_bucket,
    normalize_emotion,
)
from coach.interventions.selector import REINFORCED_SUFFIX, find_reinforced, select
from coach.learning.models import PatternProfile
from coach.memory.reinforcement import InterventionRecord


def analysis(emotion="stress", intensity=5, risk=RiskLevel.LOW):
    return EmotionalAnalysis(primary_emotion=emotion, intensity=intensity, risk_level=risk)


# ─────────────────────────────────────────────────────────────────────────────
# Catalog
# ─────────────────────────────────────────────────────────────────────────────


class TestCatalog:
    def test_every_bucket_non_empty(self):
        for bucket, suggestions in INTERVENTION_CATALOG.items():
            assert suggestions, bucket
            assert all(s.strip() for s in suggestions)

    @pytest.mark.parametrize(
        "label,expected",
        [("Sadness", "sad"), ("stressed", "stress"), ("boredom", "bored"), ("frustrated", "angry"), ("joy", "joy")],
    )
    def test_normalize_emotion(self, label, expected):
        assert normalize_emotion(label) == expected

    def test_unknown_emotion_falls_back(self):
        assert get_bucket("euphoric") == INTERVENTION_CATALOG[FALLBACK_BUCKET]
        assert get_bucket(None) == INTERVENTION_CATALOG[FALLBACK_BUCKET]

    def test_emergency_label_is_not_an_emotion(self):
        assert get_bucket(EMERGENCY) == INTERVENTION_CATALOG[FALLBACK_BUCKET]


# ─────────────────────────────────────────────────────────────────────────────
# Selection
# ─────────────────────────────────────────────────────────────────────────────


class TestSelect:
    def test_reinforced_intervention_wins(self):
        history = [InterventionRecord(emotion="stress", risk_level="medium", intervention_text="Go for a walk")]

        text = select(analysis("stress", intensity=9, risk=RiskLevel.HIGH), PatternProfile(), SUPPORTIVE, history)

        assert text == "Go for a walk (This worked for you before!)"

    def test_reinforcement_matches_on_risk_level(self):
        history = [InterventionRecord(emotion="angry", risk_level="low", intervention_text="Call a friend")]
        text = select(analysis("bored"), PatternProfile(), SUPPORTIVE, history)
        assert text == "Call a friend" + REINFORCED_SUFFIX

    def test_reinforcement_matches_emotion_aliases(self):
        history = [InterventionRecord(emotion="stressed", risk_level="high", intervention_text="Stretch")]
        record = find_reinforced(analysis("stress", risk=RiskLevel.LOW), history)
        assert record is history[0]

    def test_first_matching_record_wins(self):
        history = [
            InterventionRecord(emotion="sad", risk_level="low", intervention_text="first"),
            InterventionRecord(emotion="sad", risk_level="low", intervention_text="second"),
        ]
        assert find_reinforced(analysis("sad"), history).intervention_text == "first"

    def test_unhelpful_records_ignored(self):
        history = [InterventionRecord(emotion="sad", risk_level="low", intervention_text="nope", helpful=False)]
        assert find_reinforced(analysis("sad"), history) is None

    def test_no_match_falls_through(self):
        history = [InterventionRecord(emotion="angry", risk_level="high", intervention_text="Punch a pillow")]
        text = select(analysis("sad", risk=RiskLevel.LOW), PatternProfile(), SUPPORTIVE, history, random.Random(1))
        assert text in INTERVENTION_CATALOG["sad"]

    @pytest.mark.parametrize("intensity,risk", [(8, RiskLevel.LOW), (10, RiskLevel.MEDIUM), (3, RiskLevel.HIGH)])
    def test_emergency_bucket(self, intensity, risk):
        text = select(analysis("bored", intensity, risk), PatternProfile(), SUPPORTIVE, [], random.Random(7))
        assert text in INTERVENTION_CATALOG[EMERGENCY]

    def test_emotion_bucket(self):
        text = select(analysis("bored", 4), PatternProfile(), SUPPORTIVE, [], random.Random(7))
        assert text in INTERVENTION_CATALOG["bored"]

    def test_unknown_emotion_still_returns_suggestion(self):
        text = select(analysis("wistful", 3), PatternProfile(), SUPPORTIVE, [])
        assert text
        assert text in INTERVENTION_CATALOG[FALLBACK_BUCKET]

    def test_seeded_rng_is_reproducible(self):
        picks = {
            select(analysis("stress", 4), PatternProfile(), SUPPORTIVE, [], random.Random(123))
            for _ in range(5)
        }
        assert len(picks) == 1
