"""Daily Habits - checklist catalogue and completion logic."""

from datetime import date

from .formulas import round_half_up
from .models import HabitEntry, HabitProgress


DAILY_HABITS: list[dict[str, str]] = [
    {"id": "water", "label": "Drink 8 glasses of water", "icon": "💧"},
    {"id": "vegetables", "label": "Eat 5 servings of vegetables", "icon": "🥗"},
    {"id": "exercise", "label": "Exercise for 30+ minutes", "icon": "🏃"},
    {"id": "sleep", "label": "Get 7-8 hours of sleep", "icon": "😴"},
    {"id": "meditation", "label": "Meditate for 10 minutes", "icon": "🧘"},
    {"id": "meal_prep", "label": "Prep healthy meals", "icon": "🍱"},
    {"id": "no_sugar", "label": "Avoid added sugars", "icon": "🚫"},
    {"id": "walk", "label": "Take a 10-minute walk", "icon": "🚶"},
]

HABIT_IDS = [h["id"] for h in DAILY_HABITS]


def completed_habits(entries: list[HabitEntry], day: date) -> list[str]:
    """Catalogue habits marked complete on the given day, in catalogue order."""
    done = {e.habit_type for e in entries if e.date == day and e.completed}
    return [h for h in HABIT_IDS if h in done]


def toggle_habit(entries: list[HabitEntry], habit_type: str, day: date) -> HabitEntry:
    """Build the entry that flips a habit's completion for the day."""
    is_completed = habit_type in completed_habits(entries, day)
    return HabitEntry(
        id=f"{habit_type}-{day.isoformat()}",
        date=day,
        habit_type=habit_type,
        completed=not is_completed,
    )


def habit_progress(entries: list[HabitEntry], day: date) -> HabitProgress:
    completed = completed_habits(entries, day)
    total = len(DAILY_HABITS)
    return HabitProgress(
        day=day,
        completed=completed,
        completed_count=len(completed),
        total=total,
        percent=round_half_up(len(completed) / total * 100),
    )
