"""Learning Tools - Mood logging and pattern recognition

Philosophy:
    Patterns are recomputed from the raw log on every request.
    Nothing derived is stored as a source of truth, so a new entry
    can never leave a stale profile behind.

Components:
    models.py: MoodEntry (validated, immutable) and PatternProfile
    mood_log.py: Append-only per-user mood log
    pattern_analyzer.py: Frequencies, dominant trigger/emotion,
        mean intensity, risk hours, risk factors, progress
"""

# Intensity scale (inclusive)
MIN_INTENSITY = 1
MAX_INTENSITY = 10

# Day name mapping (datetime.weekday() order)
DAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
