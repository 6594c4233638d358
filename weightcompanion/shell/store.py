"""Entry Store - Typed collections over a key-value backend.

Each collection is one JSON document under a fixed key. Every write rewrites
the whole document and there is no locking: the last writer wins.

Failures never reach the caller. Unreadable documents come back as the
collection default (flagged via ReadResult.degraded) and failed writes are
logged and reported as False.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Callable, Generic, Hashable, Optional, Protocol, TypeVar

from pydantic import TypeAdapter

from ..core.collections import by_habit_day, by_id, remove, upsert
from ..core.dates import today_utc
from ..core.models import (
    Achievement,
    ExerciseEntry,
    HabitEntry,
    MealEntry,
    MoodEntry,
    SleepEntry,
    Streak,
    UserProfile,
    WaterEntry,
    WeightEntry,
)
from ..core.streak import advance_streak


logger = logging.getLogger(__name__)

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


class KeyValueBackend(Protocol):
    """Raw string storage. Implementations may raise on I/O failure."""

    def read(self, key: str) -> str | None: ...

    def write(self, key: str, value: str) -> None: ...


class InMemoryBackend:
    """Dict-backed backend for tests and local runs."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self.data.get(key)

    def write(self, key: str, value: str) -> None:
        self.data[key] = value


@dataclass(frozen=True)
class Collection(Generic[T]):
    """A named document in the store with its schema and empty value."""

    key: str
    adapter: TypeAdapter
    default: Callable[[], T]


def _collection(key: str, type_: Any, default: Callable[[], Any]) -> Collection:
    return Collection(key=key, adapter=TypeAdapter(type_), default=default)


PROFILE = _collection("wlc_profile", Optional[UserProfile], lambda: None)
WEIGHT_ENTRIES = _collection("wlc_weight_entries", list[WeightEntry], list)
MEAL_ENTRIES = _collection("wlc_meal_entries", list[MealEntry], list)
WATER_ENTRIES = _collection("wlc_water_entries", list[WaterEntry], list)
EXERCISE_ENTRIES = _collection("wlc_exercise_entries", list[ExerciseEntry], list)
HABIT_ENTRIES = _collection("wlc_habit_entries", list[HabitEntry], list)
MOOD_ENTRIES = _collection("wlc_mood_entries", list[MoodEntry], list)
SLEEP_ENTRIES = _collection("wlc_sleep_entries", list[SleepEntry], list)
ACHIEVEMENTS = _collection("wlc_achievements", list[Achievement], list)
STREAK = _collection("wlc_streak", Streak, Streak)
ONBOARDING_COMPLETE = _collection("wlc_onboarding_complete", bool, lambda: False)


@dataclass
class ReadResult(Generic[T]):
    """Value read from the store.

    Attributes:
        value: Stored value, or the collection default
        degraded: True when a stored value existed but could not be read
        error: Description of the failure when degraded
    """

    value: T
    degraded: bool = False
    error: str | None = field(default=None)


class EntryStore:
    """Serializes collections to JSON and guards every backend call."""

    def __init__(self, backend: KeyValueBackend) -> None:
        self.backend = backend

    def read(self, collection: Collection[T]) -> ReadResult[T]:
        """Read a collection, substituting its default on any failure."""
        logger.debug("Reading %s", collection.key)
        try:
            raw = self.backend.read(collection.key)
        except Exception as e:
            logger.error("Failed to read %s: %s", collection.key, str(e))
            return ReadResult(collection.default(), degraded=True, error=str(e))

        if raw is None:
            return ReadResult(collection.default())

        try:
            return ReadResult(collection.adapter.validate_json(raw))
        except ValueError as e:
            logger.warning("Discarding unreadable %s: %s", collection.key, str(e))
            return ReadResult(collection.default(), degraded=True, error=str(e))

    def get(self, collection: Collection[T]) -> T:
        return self.read(collection).value

    def set(self, collection: Collection[T], value: T) -> bool:
        """Persist a collection.

        Returns:
            True if successful
        """
        logger.info("Saving %s", collection.key)
        try:
            raw = collection.adapter.dump_json(value, by_alias=True).decode()
            self.backend.write(collection.key, raw)
            return True
        except Exception as e:
            logger.error("Failed to save %s: %s", collection.key, str(e))
            return False


class Repository(Generic[T, K]):
    """CRUD for one list collection, keyed by key_fn.

    With by_id this is upsert-by-id; with a composite key function (habits)
    it is upsert-by-composite-key.
    """

    def __init__(
        self,
        store: EntryStore,
        collection: Collection[list[T]],
        key_fn: Callable[[T], K],
    ) -> None:
        self.store = store
        self.collection = collection
        self.key_fn = key_fn

    def all(self) -> list[T]:
        return self.store.get(self.collection)

    def get(self, key: K) -> T | None:
        return next((e for e in self.all() if self.key_fn(e) == key), None)

    def for_date(self, day: date) -> list[T]:
        return [e for e in self.all() if e.date == day]

    def replace_all(self, entries: list[T]) -> bool:
        return self.store.set(self.collection, entries)

    def upsert(self, entry: T) -> bool:
        """Replace the first entry with the same key, else append."""
        return self.store.set(self.collection, upsert(self.all(), entry, self.key_fn))

    def delete(self, key: K) -> bool:
        """Remove entries with the key. A missing key still rewrites the list."""
        return self.store.set(self.collection, remove(self.all(), key, self.key_fn))


class CompanionStore:
    """All tracker state for one user, passed explicitly to whatever needs it.

    Document structure (one key each):
        wlc_profile, wlc_onboarding_complete, wlc_streak: single documents
        wlc_*_entries, wlc_achievements: JSON arrays of records
    """

    def __init__(self, backend: KeyValueBackend) -> None:
        self.entries = EntryStore(backend)
        self.weights: Repository[WeightEntry, str] = Repository(self.entries, WEIGHT_ENTRIES, by_id)
        self.meals: Repository[MealEntry, str] = Repository(self.entries, MEAL_ENTRIES, by_id)
        self.water: Repository[WaterEntry, str] = Repository(self.entries, WATER_ENTRIES, by_id)
        self.exercises: Repository[ExerciseEntry, str] = Repository(self.entries, EXERCISE_ENTRIES, by_id)
        self.habits: Repository[HabitEntry, tuple] = Repository(self.entries, HABIT_ENTRIES, by_habit_day)
        self.moods: Repository[MoodEntry, str] = Repository(self.entries, MOOD_ENTRIES, by_id)
        self.sleep: Repository[SleepEntry, str] = Repository(self.entries, SLEEP_ENTRIES, by_id)

    # ==================== Profile ====================

    def get_profile(self) -> UserProfile | None:
        return self.entries.get(PROFILE)

    def save_profile(self, profile: UserProfile) -> bool:
        """Overwrite the stored profile wholesale."""
        return self.entries.set(PROFILE, profile)

    def is_onboarding_complete(self) -> bool:
        return self.entries.get(ONBOARDING_COMPLETE)

    def set_onboarding_complete(self) -> bool:
        return self.entries.set(ONBOARDING_COMPLETE, True)

    # ==================== Achievements ====================

    def get_achievements(self) -> list[Achievement]:
        return self.entries.get(ACHIEVEMENTS)

    def unlock_achievement(self, achievement: Achievement, now: datetime | None = None) -> bool:
        """Record an achievement the first time it is unlocked.

        Args:
            achievement: Achievement to unlock
            now: Unlock timestamp (defaults to the current UTC instant)

        Returns:
            True if it was newly unlocked and saved, False if already present
            or the save failed
        """
        achievements = self.get_achievements()
        if any(a.id == achievement.id for a in achievements):
            return False

        unlocked = achievement.model_copy(
            update={"unlocked_at": now or datetime.now(timezone.utc)}
        )
        logger.info("Unlocking achievement: %s", achievement.id)
        return self.entries.set(ACHIEVEMENTS, achievements + [unlocked])

    # ==================== Streak ====================

    def get_streak(self) -> Streak:
        return self.entries.get(STREAK)

    def update_streak(self, today: date | None = None) -> Streak:
        """Count today's visit and return the resulting streak."""
        if today is None:
            today = today_utc()

        streak = self.get_streak()
        advanced = advance_streak(streak, today)
        if advanced is not streak:
            self.entries.set(STREAK, advanced)
        return advanced
