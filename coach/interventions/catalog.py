"""
Intervention Catalog

Static taxonomy of short, concrete coping suggestions. Buckets are keyed by
canonical emotion label; EMERGENCY holds suggestions for high-intensity or
high-risk moments. Every bucket is non-empty and "stress" doubles as the
fallback for emotions without a bucket of their own.
"""

EMERGENCY = "high_intensity"
FALLBACK_BUCKET = "stress"

INTERVENTION_CATALOG: dict[str, list[str]] = {
    EMERGENCY: [
        "STOP technique: Stop what you're doing, Take 3 deep breaths, Observe your feelings, Proceed with intention",
        "5-4-3-2-1 grounding: Name 5 things you see, 4 you can touch, 3 you hear, 2 you smell, 1 you taste",
        "Call someone who supports you right now - even a 2-minute check-in can help",
    ],
    "stress": [
        "Try progressive muscle relaxation: tense and release each muscle group for 5 seconds",
        "Write your thoughts on paper for 3 minutes - no editing, just dump everything out",
        "Do 10 jumping jacks or push-ups to release physical tension",
        "Try the 4-7-8 breathing: breathe in for 4, hold for 7, exhale for 8",
    ],
    "sad": [
        "Practice self-compassion: What would you say to a friend feeling this way?",
        "Listen to one song that usually lifts your mood",
        "Write down 3 things you're grateful for today, however small",
        "Call or text someone who cares about you",
    ],
    "bored": [
        "Set a 10-minute timer for a creative activity: draw, write, organize something",
        "Learn something new: look up a random topic you've always wondered about",
        "Text someone you haven't talked to in a while",
        "Go for a short walk, even if it's just around your room",
    ],
    "angry": [
        "Try the RAIN technique: Recognize, Accept, Investigate with kindness, Natural awareness",
        "Do something physical: dance to one song, do stretches, or clean vigorously",
        "Write an angry letter you'll never send, then tear it up",
    ],
}

# Labels the classifier or a user might produce, mapped onto bucket keys
EMOTION_ALIASES: dict[str, str] = {
    "stressed": "stress",
    "anxious": "stress",
    "anxiety": "stress",
    "overwhelmed": "stress",
    "sadness": "sad",
    "lonely": "sad",
    "loneliness": "sad",
    "depressed": "sad",
    "boredom": "bored",
    "restless": "bored",
    "anger": "angry",
    "frustrated": "angry",
    "frustration": "angry",
    "mad": "angry",
}

# Used when reply generation fails outright
FALLBACK_BREATHING = "Take a deep breath: in for 4, hold for 4, out for 6. Repeat three times."


def normalize_emotion(emotion: str | None) -> str:
    """Canonical bucket label for an emotion ("Sadness" -> "sad")."""
    label = (emotion or "").strip().lower()
    return EMOTION_ALIASES.get(label, label)


def get_bucket(emotion: str | None) -> list[str]:
    """Suggestions for an emotion, falling back to the stress bucket."""
    label = normalize_emotion(emotion)
    if label == EMERGENCY:
        label = FALLBACK_BUCKET
    return INTERVENTION_CATALOG.get(label) or INTERVENTION_CATALOG[FALLBACK_BUCKET]


def get_emergency_bucket() -> list[str]:
    return INTERVENTION_CATALOG[EMERGENCY]
