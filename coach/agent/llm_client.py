"""
Tool: LLM Clients
Purpose: Emotion classification and reply generation behind injectable interfaces

The engine only sees the Classifier and Generator interfaces, so tests
swap in deterministic fakes. The Anthropic implementations wrap the sync
SDK in a worker thread; the engine applies the timeout.

When classification is unavailable the engine uses fallback_analysis(),
a keyword guess over four emotion categories with fixed neutral numbers.

Usage:
    classifier = AnthropicClassifier(model="claude-3-5-haiku-20241022")
    analysis = await classifier.classify("Deadline tomorrow and I want cookies", {})

    # Local guess, no network
    python -m coach.agent.llm_client --action fallback --content "so bored tonight"

Dependencies:
    - anthropic (Claude API)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Any

from coach.agent.models import EmotionalAnalysis, RiskLevel
from coach.errors import ExternalServiceError

logger = logging.getLogger(__name__)

FALLBACK_EMOTION_KEYWORDS: dict[str, list[str]] = {
    "stress": ["stressed", "overwhelmed", "pressure", "deadline", "anxious"],
    "sad": ["sad", "depressed", "down", "lonely", "empty"],
    "bored": ["bored", "nothing to do", "mindless", "restless"],
    "angry": ["angry", "frustrated", "mad", "annoyed"],
}
DEFAULT_EMOTION = "neutral"

CLASSIFICATION_PROMPT = """Analyze this message for emotional eating context:
"{message}"

User's typical patterns: {patterns}

Return JSON with:
{{
  "primaryEmotion": "emotion",
  "intensity": 1-10,
  "triggers": ["trigger1", "trigger2"],
  "eatingUrge": 1-10,
  "riskLevel": "low|medium|high",
  "confidence": 0.0-1.0,
  "context": "brief description"
}}

Respond with valid JSON only."""


# =============================================================================
# Interfaces
# =============================================================================


class Classifier(ABC):
    """Reads emotion, intensity, triggers and risk from a message."""

    @abstractmethod
    async def classify(self, message: str, prior_patterns: dict[str, Any]) -> EmotionalAnalysis:
        """Raise on failure; the caller decides on fallbacks."""


class Generator(ABC):
    """Writes the coach's reply."""

    @abstractmethod
    async def generate(
        self, system_prompt: str, recent_turns: list[dict[str, str]], message: str
    ) -> str:
        """Raise on failure; the caller decides on fallbacks."""


# =============================================================================
# Local fallback
# =============================================================================


def detect_emotion_fallback(message: str) -> str:
    """First category whose keywords appear in the message, else neutral."""
    lower_text = message.lower()
    for emotion, keywords in FALLBACK_EMOTION_KEYWORDS.items():
        if any(keyword in lower_text for keyword in keywords):
            return emotion
    return DEFAULT_EMOTION


def fallback_analysis(message: str) -> EmotionalAnalysis:
    """Keyword guess with fixed defaults: intensity 5, urge 3, risk medium."""
    return EmotionalAnalysis(
        primary_emotion=detect_emotion_fallback(message),
        intensity=5,
        triggers=[],
        eating_urge=3,
        risk_level=RiskLevel.MEDIUM,
        context="Unable to analyze deeply",
        source="fallback",
    )


class KeywordClassifier(Classifier):
    """Classifier that never leaves the process. Used when no API key is configured."""

    async def classify(self, message: str, prior_patterns: dict[str, Any]) -> EmotionalAnalysis:
        return fallback_analysis(message)


class FallbackGenerator(Generator):
    """Generator that always fails, forcing the engine's calm fallback reply."""

    async def generate(
        self, system_prompt: str, recent_turns: list[dict[str, str]], message: str
    ) -> str:
        raise ExternalServiceError("generator", "no reply service configured")


# =============================================================================
# Anthropic implementations
# =============================================================================


def extract_json(text: str) -> dict[str, Any]:
    """Parse a JSON object from model output, tolerating ``` fences."""
    text = text.strip()
    if "```json" in text:
        text = text.split("```json")[1].split("```")[0]
    elif "```" in text:
        text = text.split("```")[1].split("```")[0]
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object")
    return data


def to_anthropic_messages(
    system_prompt: str, recent_turns: list[dict[str, str]], message: str
) -> tuple[str, list[dict[str, str]]]:
    """
    Shape history for the Messages API.

    System-role turns are folded into the system prompt, the list starts with
    a user turn, and consecutive same-role turns are merged.
    """
    system_notes = [t["content"] for t in recent_turns if t.get("role") == "system"]
    system = "\n\n".join([system_prompt, *system_notes]) if system_notes else system_prompt

    messages: list[dict[str, str]] = []
    for turn in [*recent_turns, {"role": "user", "content": message}]:
        role = turn.get("role")
        if role not in ("user", "assistant"):
            continue
        if not messages and role == "assistant":
            continue
        if messages and messages[-1]["role"] == role:
            messages[-1] = {"role": role, "content": messages[-1]["content"] + "\n\n" + turn["content"]}
        else:
            messages.append({"role": role, "content": turn["content"]})
    return system, messages


class _AnthropicBase:
    def __init__(self, model: str, api_key_env: str = "ANTHROPIC_API_KEY", max_tokens: int = 200,
                 temperature: float = 0.7):
        self.model = model
        self.api_key_env = api_key_env
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client = None

    def _get_client(self):
        if self._client is None:
            import anthropic

            api_key = os.environ.get(self.api_key_env)
            if not api_key:
                raise ExternalServiceError(self.service, f"{self.api_key_env} not set")
            self._client = anthropic.Anthropic(api_key=api_key)
        return self._client

    def _create(self, system: str, messages: list[dict[str, str]], max_tokens: int) -> str:
        client = self._get_client()
        kwargs: dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": self.temperature,
            "messages": messages,
        }
        if system:
            kwargs["system"] = system
        response = client.messages.create(**kwargs)
        return "".join(block.text for block in response.content if getattr(block, "type", "") == "text")


class AnthropicClassifier(_AnthropicBase, Classifier):
    service = "classifier"

    def __init__(self, model: str, api_key_env: str = "ANTHROPIC_API_KEY", temperature: float = 0.3):
        super().__init__(model, api_key_env, max_tokens=300, temperature=temperature)

    async def classify(self, message: str, prior_patterns: dict[str, Any]) -> EmotionalAnalysis:
        prompt = CLASSIFICATION_PROMPT.format(
            message=message, patterns=json.dumps(prior_patterns, default=str)
        )
        text = await asyncio.to_thread(
            self._create, "", [{"role": "user", "content": prompt}], self.max_tokens
        )
        try:
            data = extract_json(text)
        except (ValueError, IndexError) as e:
            raise ExternalServiceError(self.service, f"unparseable classification: {e}") from e
        return EmotionalAnalysis.from_dict(data, source="llm")


class AnthropicGenerator(_AnthropicBase, Generator):
    service = "generator"

    async def generate(
        self, system_prompt: str, recent_turns: list[dict[str, str]], message: str
    ) -> str:
        system, messages = to_anthropic_messages(system_prompt, recent_turns, message)
        text = await asyncio.to_thread(self._create, system, messages, self.max_tokens)
        text = text.strip()
        if not text:
            raise ExternalServiceError(self.service, "empty reply")
        return text


def main():
    parser = argparse.ArgumentParser(description="LLM Clients - classify a message")
    parser.add_argument("--action", choices=["fallback", "classify"], default="fallback")
    parser.add_argument("--content", required=True, help="Message to classify")
    parser.add_argument("--model", default="claude-3-5-haiku-20241022")
    args = parser.parse_args()

    if args.action == "fallback":
        analysis = fallback_analysis(args.content)
    else:
        analysis = asyncio.run(AnthropicClassifier(args.model).classify(args.content, {}))

    print(json.dumps(analysis.to_dict(), indent=2))


if __name__ == "__main__":
    main()
