"""
Tool: Crisis Detector
Purpose: Screen messages for self-harm or severe restriction before coaching

Two disjoint keyword sets are matched as case-insensitive substrings:
- crisis: self-harm and suicidality
- severe_restriction: starving, purging, extreme restriction

A match on either set means the turn escalates: no classification, no
coping suggestion, only resources. Self-harm wins when both match.
Phrasing outside the lists will be missed; the lists lean broad because
a false alarm costs far less than a miss.

Usage:
    python -m coach.safety.crisis_detector --content "I want to kill myself"
"""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

CATEGORY_CRISIS = "crisis"
CATEGORY_SEVERE_RESTRICTION = "severe_restriction"

CRISIS_KEYWORDS = [
    "kill myself",
    "killing myself",
    "suicide",
    "suicidal",
    "end my life",
    "end it all",
    "want to die",
    "better off dead",
    "no reason to live",
    "self harm",
    "self-harm",
    "hurt myself",
    "cut myself",
    "cutting myself",
]

RESTRICTION_KEYWORDS = [
    "starve myself",
    "starving myself",
    "stop eating completely",
    "haven't eaten in days",
    "not eating for days",
    "purge",
    "purging",
    "throw up after eating",
    "make myself throw up",
    "make myself sick",
    "laxatives",
    "skip every meal",
]

CRISIS_RESOURCES = [
    {"name": "988 Suicide & Crisis Lifeline", "contact": "Call or text 988 (US)"},
    {"name": "Crisis Text Line", "contact": "Text HOME to 741741"},
    {"name": "ANAD Eating Disorder Helpline", "contact": "888-375-7767"},
    {"name": "Emergency services", "contact": "Call 911 or your local emergency number"},
]

ESCALATION_MESSAGES = {
    CATEGORY_CRISIS: (
        "I'm really glad you told me. What you're describing matters more than any eating "
        "pattern, and you deserve support from a person right now. Please reach out to one "
        "of these resources - they're available any time."
    ),
    CATEGORY_SEVERE_RESTRICTION: (
        "Thank you for sharing this with me. Going without food or purging can be serious, "
        "and a trained person can help in ways I can't. Please consider contacting one of "
        "these resources today."
    ),
}


@dataclass
class CrisisCheck:
    requires_escalation: bool
    category: str | None = None
    resources: list[dict[str, str]] = field(default_factory=list)
    message: str | None = None
    matched: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        if not self.requires_escalation:
            return {"requires_escalation": False}
        return {
            "requires_escalation": True,
            "category": self.category,
            "resources": self.resources,
            "message": self.message,
        }


def find_keywords(content: str, keywords: Sequence[str]) -> list[str]:
    """Keywords present in content (case-insensitive substring match)."""
    content_lower = content.lower()
    return [k for k in keywords if k.lower() in content_lower]


class CrisisDetector:
    """Keyword-based escalation check.

    Args:
        crisis_keywords: Self-harm terms (None means CRISIS_KEYWORDS; an empty list disables the set)
        restriction_keywords: Severe restriction terms (None means RESTRICTION_KEYWORDS; an empty list disables the set)
        resources: Contacts returned on escalation (CRISIS_RESOURCES when None or empty; an
            escalation always carries contacts)
    """

    def __init__(
        self,
        crisis_keywords: Sequence[str] | None = None,
        restriction_keywords: Sequence[str] | None = None,
        resources: Sequence[dict[str, str]] | None = None,
    ):
        self.crisis_keywords = list(CRISIS_KEYWORDS if crisis_keywords is None else crisis_keywords)
        self.restriction_keywords = list(
            RESTRICTION_KEYWORDS if restriction_keywords is None else restriction_keywords
        )
        self.resources = [dict(r) for r in (resources or CRISIS_RESOURCES)]

    def check(self, message: str) -> CrisisCheck:
        if not message:
            return CrisisCheck(requires_escalation=False)

        matched = find_keywords(message, self.crisis_keywords)
        category = CATEGORY_CRISIS
        if not matched:
            matched = find_keywords(message, self.restriction_keywords)
            category = CATEGORY_SEVERE_RESTRICTION

        if not matched:
            return CrisisCheck(requires_escalation=False)

        logger.warning(f"Escalating message: category={category} matched={len(matched)} term(s)")
        return CrisisCheck(
            requires_escalation=True,
            category=category,
            resources=[dict(r) for r in self.resources],
            message=ESCALATION_MESSAGES[category],
            matched=matched,
        )


_default_detector = CrisisDetector()


def check(message: str) -> CrisisCheck:
    """Run the default detector."""
    return _default_detector.check(message)


def main():
    parser = argparse.ArgumentParser(description="Crisis Detector - screen a message for escalation")
    parser.add_argument("--content", required=True, help="Message text to check")
    args = parser.parse_args()

    result = check(args.content)
    output = result.to_dict()
    output["matched"] = result.matched
    print(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
