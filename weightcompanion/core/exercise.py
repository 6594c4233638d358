"""Exercise Calories - MET based burn estimates.

Calories = MET x weight (kg) x duration (hours), using values from the
Compendium of Physical Activities.
"""

from .formulas import LBS_TO_KG, round_half_up
from .models import ExerciseEntry, Intensity


# Declaration order matters: partial matches take the first hit.
MET_VALUES: dict[str, dict[str, float]] = {
    # Cardio
    "walking": {"low": 3.5, "medium": 4.5, "high": 5.5},
    "running": {"low": 7.0, "medium": 9.0, "high": 12.0},
    "jogging": {"low": 6.0, "medium": 7.0, "high": 8.0},
    "cycling": {"low": 4.0, "medium": 8.0, "high": 12.0},
    "swimming": {"low": 6.0, "medium": 8.0, "high": 11.0},
    "hiking": {"low": 5.0, "medium": 6.5, "high": 8.0},
    # Sports
    "basketball": {"low": 6.0, "medium": 8.0, "high": 10.0},
    "soccer": {"low": 7.0, "medium": 9.0, "high": 11.0},
    "tennis": {"low": 5.0, "medium": 7.0, "high": 9.0},
    "volleyball": {"low": 4.0, "medium": 6.0, "high": 8.0},
    "golf": {"low": 3.5, "medium": 4.5, "high": 5.5},
    # Gym & fitness
    "weight training": {"low": 3.0, "medium": 5.0, "high": 6.0},
    "strength training": {"low": 3.0, "medium": 5.0, "high": 6.0},
    "yoga": {"low": 2.5, "medium": 3.0, "high": 4.0},
    "pilates": {"low": 3.0, "medium": 4.0, "high": 5.0},
    "aerobics": {"low": 5.0, "medium": 7.0, "high": 9.0},
    "zumba": {"low": 6.0, "medium": 8.0, "high": 10.0},
    "crossfit": {"low": 8.0, "medium": 10.0, "high": 12.0},
    "hiit": {"low": 8.0, "medium": 10.0, "high": 12.0},
    # Dance
    "dancing": {"low": 4.5, "medium": 6.0, "high": 7.5},
    "ballet": {"low": 5.0, "medium": 6.5, "high": 8.0},
    # Other
    "rowing": {"low": 4.0, "medium": 7.0, "high": 10.0},
    "elliptical": {"low": 5.0, "medium": 7.0, "high": 9.0},
    "stair climbing": {"low": 6.0, "medium": 8.0, "high": 10.0},
    "jump rope": {"low": 8.0, "medium": 10.0, "high": 12.0},
    "boxing": {"low": 6.0, "medium": 9.0, "high": 12.0},
    "martial arts": {"low": 6.0, "medium": 8.0, "high": 10.0},
}

DEFAULT_MET: dict[str, float] = {"low": 3.0, "medium": 5.0, "high": 7.0}


def lookup_met(activity: str, intensity: Intensity) -> float:
    """Find the MET value for an activity name.

    Exact (case-insensitive) match wins; otherwise the first table entry where
    either name contains the other ("running 5k" -> "running"). Unknown
    activities use DEFAULT_MET.

    Args:
        activity: Free-text activity name
        intensity: low, medium or high

    Returns:
        MET coefficient
    """
    name = activity.lower().strip()

    if name in MET_VALUES:
        return MET_VALUES[name][intensity]

    for key, values in MET_VALUES.items():
        if key in name or name in key:
            return values[intensity]

    return DEFAULT_MET[intensity]


def calculate_exercise_calories(
    activity: str,
    duration_minutes: float,
    intensity: Intensity,
    weight_lbs: float,
) -> float:
    """Estimate calories burned for a workout.

    Args:
        activity: Exercise activity name
        duration_minutes: Duration in minutes
        intensity: low, medium or high
        weight_lbs: User's weight in pounds

    Returns:
        Estimated calories burned, rounded to the nearest integer
    """
    weight_kg = weight_lbs * LBS_TO_KG
    duration_hours = duration_minutes / 60

    met = lookup_met(activity, intensity)
    return round_half_up(met * weight_kg * duration_hours)


def suggested_activities() -> list[str]:
    """Activity names for autocomplete, title-cased in table order."""
    return [
        " ".join(word[:1].upper() + word[1:] for word in key.split(" "))
        for key in MET_VALUES
    ]


def backfill_exercise_calories(entries: list[ExerciseEntry], weight_lbs: float) -> list[ExerciseEntry]:
    """Recompute entries that were saved with a zero calorie burn.

    Args:
        entries: Stored exercise entries
        weight_lbs: Weight to use for the estimate

    Returns:
        Only the entries that changed, as updated copies
    """
    updated: list[ExerciseEntry] = []
    for entry in entries:
        if entry.calories_burned == 0 and entry.activity and entry.duration:
            calories = calculate_exercise_calories(
                entry.activity,
                entry.duration,
                entry.intensity or "medium",
                weight_lbs,
            )
            updated.append(entry.model_copy(update={"calories_burned": calories}))
    return updated
