"""Tests for coach/learning/models.py and coach/learning/mood_log.py

Mood entries are the raw material for every pattern. Bad entries must be
rejected before they are stored, and the log must stay append-only and
chronological.
"""

from datetime import datetime, timedelta, timezone

import pytest

from coach.errors import ValidationError
from coach.learning.models import MoodEntry, PatternProfile
from coach.learning.mood_log import MoodLog


# ─────────────────────────────────────────────────────────────────────────────
# MoodEntry Validation Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestMoodEntryValidation:
    def test_intensity_ten_accepted(self, mock_user_id):
        entry = MoodEntry.create(mock_user_id, "stressed", 10, "work deadline")
        assert entry.intensity == 10

    def test_intensity_one_accepted(self, mock_user_id):
        entry = MoodEntry.create(mock_user_id, "calm", 1, "walk")
        assert entry.intensity == 1

    @pytest.mark.parametrize("intensity", [0, 11, -3, 100])
    def test_out_of_range_rejected(self, mock_user_id, intensity):
        with pytest.raises(ValidationError):
            MoodEntry.create(mock_user_id, "stressed", intensity, "work deadline")

    @pytest.mark.parametrize("intensity", ["7", 7.5, None, True])
    def test_non_integer_rejected(self, mock_user_id, intensity):
        with pytest.raises(ValidationError):
            MoodEntry.create(mock_user_id, "stressed", intensity, "work deadline")

    @pytest.mark.parametrize("field", ["emotion", "trigger", "user_id"])
    def test_blank_required_fields_rejected(self, mock_user_id, field):
        kwargs = {"user_id": mock_user_id, "emotion": "sad", "intensity": 5, "trigger": "loneliness"}
        kwargs[field] = "   "
        with pytest.raises(ValidationError):
            MoodEntry.create(**kwargs)

    def test_validation_error_is_value_error(self, mock_user_id):
        with pytest.raises(ValueError):
            MoodEntry.create(mock_user_id, "sad", 11, "loneliness")


class TestMoodEntryFields:
    def test_derived_hour_and_day(self, mock_user_id):
        # 2024-03-06 is a Wednesday
        entry = MoodEntry.create(mock_user_id, "sad", 5, "loneliness", timestamp=datetime(2024, 3, 6, 21, 15))
        assert entry.hour == 21
        assert entry.day_of_week == "wednesday"

    def test_ids_are_unique(self, mock_user_id):
        a = MoodEntry.create(mock_user_id, "sad", 5, "loneliness")
        b = MoodEntry.create(mock_user_id, "sad", 5, "loneliness")
        assert a.id != b.id

    def test_entries_are_immutable(self, mock_user_id):
        entry = MoodEntry.create(mock_user_id, "sad", 5, "loneliness")
        with pytest.raises(AttributeError):
            entry.intensity = 9

    def test_blank_context_dropped(self, mock_user_id):
        entry = MoodEntry.create(mock_user_id, "sad", 5, "loneliness", context="  ")
        assert entry.context is None

    def test_to_dict(self, mock_user_id):
        entry = MoodEntry.create(
            mock_user_id, " bored ", 4, "nothing on TV", context="after dinner",
            timestamp=datetime(2024, 3, 4, 20, 0),
        )
        d = entry.to_dict()
        assert d["emotion"] == "bored"
        assert d["hour"] == 20
        assert d["day_of_week"] == "monday"
        assert d["timestamp"] == "2024-03-04T20:00:00"
        assert d["context"] == "after dinner"


class TestPatternProfile:
    def test_empty_profile(self):
        profile = PatternProfile()
        assert profile.is_empty
        assert profile.risk_hours == []
        assert profile.to_dict()["trigger_frequency"] == {}

    def test_risk_hour_labels(self):
        profile = PatternProfile(risk_hour_values=[14, 9, 0], total_entries=6)
        assert profile.risk_hours == ["14:00", "9:00", "0:00"]


# ─────────────────────────────────────────────────────────────────────────────
# MoodLog Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestMoodLog:
    def test_log_appends(self, mock_user_id):
        log = MoodLog(mock_user_id)
        entry = log.log("stressed", 6, "work deadline")
        assert len(log) == 1
        assert log.latest() is entry

    def test_rejected_entry_not_stored(self, mock_user_id):
        log = MoodLog(mock_user_id)
        with pytest.raises(ValidationError):
            log.log("stressed", 11, "work deadline")
        assert len(log) == 0

    def test_snapshot_is_a_copy(self, mock_user_id):
        log = MoodLog(mock_user_id)
        log.log("stressed", 6, "work deadline")
        snapshot = log.snapshot()
        snapshot.clear()
        assert len(log) == 1

    def test_backdated_entry_kept_in_order(self, mock_user_id):
        log = MoodLog(mock_user_id)
        now = datetime(2024, 3, 6, 12)
        log.log("stressed", 6, "work", timestamp=now)
        log.log("sad", 4, "rain", timestamp=now + timedelta(hours=2))
        log.log("bored", 3, "tv", timestamp=now - timedelta(days=1))

        emotions = [e.emotion for e in log.snapshot()]
        assert emotions == ["bored", "stressed", "sad"]
        assert log.latest().emotion == "sad"

    def test_rejects_other_users_entries(self, mock_user_id):
        log = MoodLog(mock_user_id)
        other = MoodEntry.create("someone_else", "sad", 5, "rain")
        with pytest.raises(ValueError):
            log.append(other)


# ─────────────────────────────────────────────────────────────────────────────
# Timestamp Normalization
# ─────────────────────────────────────────────────────────────────────────────


class TestTimestamps:
    def test_aware_timestamp_stored_as_local_naive(self, mock_user_id):
        utc_time = datetime(2024, 3, 1, 14, 0, tzinfo=timezone.utc)
        entry = MoodEntry.create(mock_user_id, "stressed", 6, "work", timestamp=utc_time)

        assert entry.timestamp.tzinfo is None
        assert entry.timestamp == utc_time.astimezone().replace(tzinfo=None)

    def test_naive_timestamp_unchanged(self, mock_user_id):
        naive = datetime(2024, 3, 1, 14, 0)
        assert MoodEntry.create(mock_user_id, "sad", 5, "rain", timestamp=naive).timestamp == naive

    def test_non_datetime_rejected(self, mock_user_id):
        with pytest.raises(ValidationError):
            MoodEntry.create(mock_user_id, "sad", 5, "rain", timestamp="2024-03-01T14:00:00")

    def test_log_mixes_aware_and_naive(self, mock_user_id):
        log = MoodLog(mock_user_id)
        log.log("stressed", 6, "work", timestamp=datetime(2024, 3, 2, 14, tzinfo=timezone.utc))
        log.log("sad", 4, "rain", timestamp=datetime(2024, 3, 1, 9))
        log.log("bored", 3, "tv", timestamp=datetime(2024, 3, 3, 20, tzinfo=timezone(timedelta(hours=-5))))

        assert [e.emotion for e in log.snapshot()] == ["sad", "stressed", "bored"]
