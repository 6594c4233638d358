"""Unit tests for the entry store using the in-memory backend."""

import json
from datetime import date, datetime, timezone

import pytest

from weightcompanion.core.models import (
    Achievement,
    HabitEntry,
    Streak,
    UserProfile,
    WeightEntry,
)
from weightcompanion.shell.store import (
    PROFILE,
    STREAK,
    WEIGHT_ENTRIES,
    CompanionStore,
    EntryStore,
    InMemoryBackend,
)


TODAY = date(2026, 10, 19)


class FailingBackend:
    """Backend whose every call raises."""

    def read(self, key):
        raise OSError("storage unavailable")

    def write(self, key, value):
        raise OSError("quota exceeded")


@pytest.fixture
def backend():
    return InMemoryBackend()


@pytest.fixture
def store(backend):
    return CompanionStore(backend)


def make_profile() -> UserProfile:
    return UserProfile(
        name="Sam",
        current_weight=200,
        target_weight=170,
        height=65,
        age=40,
        gender="female",
        activity_level="moderate",
        start_date=date(2026, 10, 1),
        daily_calorie_goal=1946,
        daily_water_goal=2960,
    )


class TestEntryStore:
    """Tests for EntryStore read/write handling."""

    def test_absent_key_returns_default(self, backend):
        result = EntryStore(backend).read(WEIGHT_ENTRIES)
        assert result.value == []
        assert result.degraded is False

    def test_round_trip(self, backend):
        entries = EntryStore(backend)
        weigh_in = WeightEntry(id="w1", date=TODAY, weight=198.5)

        assert entries.set(WEIGHT_ENTRIES, [weigh_in]) is True
        assert entries.get(WEIGHT_ENTRIES) == [weigh_in]

    def test_stored_as_camel_case_json(self, backend):
        """Documents on disk use camelCase field names."""
        EntryStore(backend).set(PROFILE, make_profile())

        stored = json.loads(backend.data["wlc_profile"])
        assert stored["currentWeight"] == 200
        assert stored["dailyWaterGoal"] == 2960
        assert stored["startDate"] == "2026-10-01"

    def test_corrupt_json_degrades_to_default(self):
        backend = InMemoryBackend({"wlc_weight_entries": "{not json"})
        result = EntryStore(backend).read(WEIGHT_ENTRIES)

        assert result.value == []
        assert result.degraded is True
        assert result.error

    def test_schema_mismatch_degrades_to_default(self):
        backend = InMemoryBackend({"wlc_streak": json.dumps({"count": "many"})})
        result = EntryStore(backend).read(STREAK)

        assert result.value == Streak()
        assert result.degraded is True

    def test_backend_read_failure_degrades(self):
        result = EntryStore(FailingBackend()).read(WEIGHT_ENTRIES)
        assert result.value == []
        assert result.degraded is True
        assert "storage unavailable" in result.error

    def test_backend_write_failure_returns_false(self):
        assert EntryStore(FailingBackend()).set(WEIGHT_ENTRIES, []) is False

    def test_defaults_not_shared(self, backend):
        """Each read of an absent list gets a fresh list."""
        entries = EntryStore(backend)
        first = entries.get(WEIGHT_ENTRIES)
        first.append(WeightEntry(weight=200))
        assert entries.get(WEIGHT_ENTRIES) == []


class TestRepository:
    """Tests for Repository CRUD."""

    def test_upsert_appends_then_replaces(self, store):
        store.weights.upsert(WeightEntry(id="w1", date=TODAY, weight=200))
        store.weights.upsert(WeightEntry(id="w1", date=TODAY, weight=198))

        entries = store.weights.all()
        assert len(entries) == 1
        assert entries[0].weight == 198

    def test_upsert_idempotent(self, store):
        entry = WeightEntry(id="w1", date=TODAY, weight=200)
        store.weights.upsert(entry)
        store.weights.upsert(entry)
        assert store.weights.all() == [entry]

    def test_get_by_id(self, store):
        store.weights.upsert(WeightEntry(id="w1", date=TODAY, weight=200))
        assert store.weights.get("w1").weight == 200
        assert store.weights.get("missing") is None

    def test_for_date(self, store):
        store.weights.upsert(WeightEntry(id="w1", date=TODAY, weight=200))
        store.weights.upsert(WeightEntry(id="w2", date=date(2026, 10, 18), weight=201))
        assert [e.id for e in store.weights.for_date(TODAY)] == ["w1"]

    def test_delete(self, store):
        store.weights.upsert(WeightEntry(id="w1", date=TODAY, weight=200))
        store.weights.upsert(WeightEntry(id="w2", date=TODAY, weight=199))

        assert store.weights.delete("w1") is True
        assert [e.id for e in store.weights.all()] == ["w2"]

    def test_delete_missing_id_is_noop(self, store):
        store.weights.upsert(WeightEntry(id="w1", date=TODAY, weight=200))
        assert store.weights.delete("missing") is True
        assert len(store.weights.all()) == 1

    def test_habits_keyed_by_type_and_day(self, store):
        """Habit upserts replace by (date, habit_type), not by id."""
        store.habits.upsert(HabitEntry(id="a", date=TODAY, habit_type="water", completed=True))
        store.habits.upsert(HabitEntry(id="b", date=TODAY, habit_type="water", completed=False))
        store.habits.upsert(HabitEntry(id="c", date=TODAY, habit_type="walk", completed=True))

        entries = store.habits.all()
        assert len(entries) == 2
        assert entries[0].id == "b"
        assert entries[0].completed is False


class TestProfile:
    """Tests for profile and onboarding flag."""

    def test_no_profile(self, store):
        assert store.get_profile() is None
        assert store.is_onboarding_complete() is False

    def test_save_and_load(self, store):
        profile = make_profile()
        assert store.save_profile(profile) is True
        assert store.get_profile() == profile

    def test_onboarding_flag(self, store):
        store.set_onboarding_complete()
        assert store.is_onboarding_complete() is True


class TestAchievements:
    """Tests for unlock_achievement."""

    def test_first_unlock_stamps_time(self, store):
        moment = datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc)
        achievement = Achievement(id="first-weigh-in", name="First Weigh-In")

        assert store.unlock_achievement(achievement, now=moment) is True

        unlocked = store.get_achievements()
        assert len(unlocked) == 1
        assert unlocked[0].unlocked_at == moment

    def test_second_unlock_is_noop(self, store):
        achievement = Achievement(id="first-weigh-in", name="First Weigh-In")
        store.unlock_achievement(achievement)
        first_time = store.get_achievements()[0].unlocked_at

        assert store.unlock_achievement(achievement) is False
        assert len(store.get_achievements()) == 1
        assert store.get_achievements()[0].unlocked_at == first_time


class TestStreak:
    """Tests for update_streak."""

    def test_first_visit(self, store):
        streak = store.update_streak(TODAY)
        assert streak.count == 1
        assert store.get_streak().last_date == "2026-10-19"

    def test_same_day_does_not_rewrite(self, store, backend):
        store.update_streak(TODAY)
        stored = backend.data["wlc_streak"]

        assert store.update_streak(TODAY).count == 1
        assert backend.data["wlc_streak"] == stored

    def test_consecutive_days(self, store):
        store.update_streak(date(2026, 10, 17))
        store.update_streak(date(2026, 10, 18))
        assert store.update_streak(TODAY).count == 3

    def test_gap_resets(self, store):
        store.update_streak(date(2026, 10, 15))
        store.update_streak(date(2026, 10, 16))
        assert store.update_streak(TODAY).count == 1
