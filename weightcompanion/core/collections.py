"""Collection Operations - Pure upsert/remove over keyed entry lists.

Functions never mutate their input; they return a new list.
"""

from datetime import date
from typing import Callable, Hashable, Sequence, TypeVar

from .models import HabitEntry


T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def by_id(entry) -> str:
    """Key function for entries identified by their id."""
    return entry.id


def by_habit_day(entry: HabitEntry) -> tuple[date, str]:
    """Key function for habits: one record per habit per day."""
    return entry.date, entry.habit_type


def upsert(entries: Sequence[T], entry: T, key_fn: Callable[[T], K]) -> list[T]:
    """Replace the first entry sharing the key, otherwise append.

    Args:
        entries: Existing entries
        entry: Entry to insert or replace with
        key_fn: Extracts the identity key from an entry

    Returns:
        New list with the entry applied
    """
    key = key_fn(entry)
    result = list(entries)
    for i, existing in enumerate(result):
        if key_fn(existing) == key:
            result[i] = entry
            break
    else:
        result.append(entry)
    return result


def remove(entries: Sequence[T], key: K, key_fn: Callable[[T], K]) -> list[T]:
    """Drop every entry with the given key. Missing keys are a no-op."""
    return [e for e in entries if key_fn(e) != key]
