"""
Tool: Pattern Analyzer
Purpose: Detect recurring emotional-eating patterns from mood history

Everything here is a pure function of the entries passed in. The same
entries always produce the same profile, so callers recompute on every
request instead of maintaining anything incrementally.

Pattern Types:
- frequency: how often each trigger and emotion appears
- dominant: the most common trigger and emotion (first to reach the max wins ties)
- risk_hours: hours of the day with repeated entries (count >= 2, top 3)
- risk_factors: share of high-intensity entries and their main trigger
- progress: recent mean intensity against the earlier baseline

Usage:
    # Analyze a JSON export of mood entries
    python -m coach.learning.pattern_analyzer --entries moods.json

    # Include risk factors and progress
    python -m coach.learning.pattern_analyzer --entries moods.json --full

Output:
    JSON result with success status and pattern data
"""

from __future__ import annotations

import argparse
import json
import sys
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from coach.errors import ValidationError
from coach.learning.models import MoodEntry, PatternProfile

# Defaults (overridable via args/coach.yaml -> patterns)
RISK_HOUR_MIN_COUNT = 2
MAX_RISK_HOURS = 3
RISK_HOUR_WINDOW = 1
HIGH_INTENSITY_THRESHOLD = 7
RECENT_WINDOW = 7

# Minimum change in mean intensity before a trend is reported
TREND_TOLERANCE = 0.5


def count_occurrences(values: Iterable[Any]) -> dict[Any, int]:
    """Count values, preserving first-encountered order."""
    counts: dict[Any, int] = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1
    return counts


def find_dominant(values: Iterable[Any]) -> Any | None:
    """
    Most frequent value.

    Ties go to the value that reached the winning count first while
    iterating, which keeps the result deterministic for a given order.
    """
    counts: dict[Any, int] = {}
    best = None
    best_count = 0
    for value in values:
        counts[value] = counts.get(value, 0) + 1
        if counts[value] > best_count:
            best = value
            best_count = counts[value]
    return best


def detect_risk_hours(
    entries: Sequence[MoodEntry],
    min_count: int = RISK_HOUR_MIN_COUNT,
    limit: int = MAX_RISK_HOURS,
) -> list[int]:
    """Hours with at least min_count entries, busiest first, at most limit."""
    hour_counts = count_occurrences(e.hour for e in entries)
    qualifying = [(hour, count) for hour, count in hour_counts.items() if count >= min_count]
    # sorted() is stable: equal counts keep first-seen order
    qualifying = sorted(qualifying, key=lambda x: x[1], reverse=True)
    return [hour for hour, _ in qualifying[:limit]]


def analyze(
    entries: Sequence[MoodEntry],
    risk_hour_min_count: int = RISK_HOUR_MIN_COUNT,
    max_risk_hours: int = MAX_RISK_HOURS,
) -> PatternProfile:
    """
    Build a pattern profile from a mood log snapshot.

    Args:
        entries: Mood entries, any number including zero
        risk_hour_min_count: Entries needed in an hour bucket to flag it
        max_risk_hours: How many risk hours to keep

    Returns:
        PatternProfile (empty maps and no dominant values when entries is empty)
    """
    if not entries:
        return PatternProfile()

    day_counts: dict[str, int] = defaultdict(int)
    for entry in entries:
        day_counts[entry.day_of_week] += 1

    return PatternProfile(
        trigger_frequency=count_occurrences(e.trigger for e in entries),
        emotion_frequency=count_occurrences(e.emotion for e in entries),
        day_frequency=dict(day_counts),
        dominant_trigger=find_dominant(e.trigger for e in entries),
        dominant_emotion=find_dominant(e.emotion for e in entries),
        mean_intensity=sum(e.intensity for e in entries) / len(entries),
        risk_hour_values=detect_risk_hours(entries, risk_hour_min_count, max_risk_hours),
        total_entries=len(entries),
    )


def is_near_risk_hour(hour: int, profile: PatternProfile, window: int = RISK_HOUR_WINDOW) -> bool:
    """True if hour is within +/- window of any risk hour.

    Hours are compared linearly: 23 and 0 are not adjacent.
    """
    return any(abs(risk_hour - hour) <= window for risk_hour in profile.risk_hour_values)


def risk_factors(
    entries: Sequence[MoodEntry], threshold: int = HIGH_INTENSITY_THRESHOLD
) -> dict[str, Any]:
    """Share of high-intensity entries and the trigger most common among them."""
    if not entries:
        return {"high_intensity_ratio": 0.0, "high_intensity_count": 0, "highest_risk_trigger": None}

    high = [e for e in entries if e.intensity >= threshold]
    return {
        "high_intensity_ratio": round(len(high) / len(entries), 3),
        "high_intensity_count": len(high),
        "highest_risk_trigger": find_dominant(e.trigger for e in high),
    }


def progress_indicators(entries: Sequence[MoodEntry], window: int = RECENT_WINDOW) -> dict[str, Any]:
    """Compare mean intensity of the most recent entries with everything before them."""
    ordered = sorted(entries, key=lambda e: e.timestamp)
    recent = ordered[-window:]
    earlier = ordered[:-window]

    recent_average = sum(e.intensity for e in recent) / len(recent) if recent else 0.0

    if not earlier:
        return {
            "recent_average": round(recent_average, 2),
            "earlier_average": None,
            "change": None,
            "trend": "insufficient_data",
        }

    earlier_average = sum(e.intensity for e in earlier) / len(earlier)
    change = recent_average - earlier_average

    if change <= -TREND_TOLERANCE:
        trend = "improving"
    elif change >= TREND_TOLERANCE:
        trend = "elevated"
    else:
        trend = "steady"

    return {
        "recent_average": round(recent_average, 2),
        "earlier_average": round(earlier_average, 2),
        "change": round(change, 2),
        "trend": trend,
    }


def load_entries(path: Path, user_id: str = "cli") -> list[MoodEntry]:
    """Load entries from a JSON list of {emotion, intensity, trigger, timestamp?, context?}.

    Raises:
        ValidationError: The file is not a list of entry objects, or an entry is invalid
    """
    with open(path) as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise ValidationError(f"{path}: expected a JSON list of mood entries")

    entries = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValidationError(f"entry {index}: expected an object, got {type(item).__name__}")
        timestamp = item.get("timestamp")
        try:
            timestamp = datetime.fromisoformat(timestamp) if timestamp else None
        except (TypeError, ValueError) as e:
            raise ValidationError(f"entry {index}: invalid timestamp {item['timestamp']!r}") from e
        entries.append(
            MoodEntry.create(
                item.get("user_id", user_id),
                item.get("emotion"),
                item.get("intensity"),
                item.get("trigger"),
                item.get("context"),
                timestamp,
            )
        )
    return sorted(entries, key=lambda e: e.timestamp)


def main():
    parser = argparse.ArgumentParser(
        description="Pattern Analyzer - Detect emotional eating patterns",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m coach.learning.pattern_analyzer --entries moods.json
    python -m coach.learning.pattern_analyzer --entries moods.json --full
        """,
    )
    parser.add_argument("--entries", required=True, type=Path, help="JSON file of mood entries")
    parser.add_argument("--full", action="store_true", help="Include risk factors and progress")

    args = parser.parse_args()

    try:
        entries = load_entries(args.entries)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        print(json.dumps({"success": False, "error": str(e)}))
        sys.exit(1)

    result: dict[str, Any] = {"success": True, "profile": analyze(entries).to_dict()}
    if args.full:
        result["risk_factors"] = risk_factors(entries)
        result["progress_indicators"] = progress_indicators(entries)

    print(json.dumps(result, indent=2, default=str))


if __name__ == "__main__":
    main()
