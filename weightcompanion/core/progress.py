"""Progress Calculations - Pure functions for dashboard totals.

All functions are pure: same input always produces same output, no side effects.
"""

from datetime import date

from .dates import week_dates
from .models import (
    DaySummary,
    ExerciseEntry,
    MealEntry,
    UserProfile,
    WaterEntry,
    WeightEntry,
    WeightProgress,
)


def summarize_day(
    meals: list[MealEntry],
    water: list[WaterEntry],
    exercises: list[ExerciseEntry],
    day: date,
) -> DaySummary:
    """Total up one day's meals, water and exercise.

    Args:
        meals: Meal entries (any dates; filtered to day)
        water: Water entries (any dates; filtered to day)
        exercises: Exercise entries (any dates; filtered to day)
        day: The day to summarize

    Returns:
        DaySummary with totals; missing macros count as zero
    """
    day_meals = [m for m in meals if m.date == day]
    day_water = [w for w in water if w.date == day]
    day_exercise = [e for e in exercises if e.date == day]

    return DaySummary(
        day=day,
        calories=sum(m.calories for m in day_meals),
        protein=round(sum(m.protein or 0 for m in day_meals), 1),
        carbs=round(sum(m.carbs or 0 for m in day_meals), 1),
        fats=round(sum(m.fats or 0 for m in day_meals), 1),
        water_ml=sum(w.amount for w in day_water),
        exercise_minutes=sum(e.duration for e in day_exercise),
        calories_burned=sum(e.calories_burned for e in day_exercise),
        meal_count=len(day_meals),
    )


def weekly_exercise_minutes(exercises: list[ExerciseEntry], today: date) -> int:
    """Minutes exercised over the seven days ending today."""
    window = set(week_dates(today))
    return sum(e.duration for e in exercises if e.date in window)


def percent_of(value: float, goal: float) -> float:
    """Progress toward a goal as a percentage (0 when there is no goal)."""
    if goal <= 0:
        return 0.0
    return round(value / goal * 100, 1)


def calculate_weight_progress(profile: UserProfile, entries: list[WeightEntry]) -> WeightProgress:
    """Compare the most recent weigh-in against the onboarding numbers.

    Args:
        profile: The user's profile (start and target weight)
        entries: All weight entries

    Returns:
        WeightProgress; the latest weight falls back to the profile weight
    """
    latest = profile.current_weight
    if entries:
        # Stable sort: same-day entries keep insertion order.
        latest = sorted(entries, key=lambda e: e.date, reverse=True)[0].weight

    weight_lost = profile.current_weight - latest
    span = profile.current_weight - profile.target_weight
    progress = round(weight_lost / span * 100, 1) if span > 0 else 0.0

    return WeightProgress(
        start_weight=profile.current_weight,
        latest_weight=latest,
        target_weight=profile.target_weight,
        weight_lost=round(weight_lost, 1),
        weight_to_go=round(latest - profile.target_weight, 1),
        progress_percent=progress,
    )
