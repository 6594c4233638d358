"""MCP Server - Tool definitions for assistant integration.

Defines the MCP tools an assistant invokes to run onboarding, log entries and
talk to the coach on the user's behalf. Tools are thin: calculations live in
the core package, persistence in the entry store.
"""

import logging
import os
from datetime import date

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings
from pydantic import ValidationError

from ..core.dates import today_utc
from ..core.exercise import backfill_exercise_calories, calculate_exercise_calories, suggested_activities
from ..core.collections import by_id, upsert
from ..core.habits import DAILY_HABITS, HABIT_IDS, habit_progress, toggle_habit as build_habit_toggle
from ..core.insights import get_daily_insight
from ..core.models import (
    Achievement,
    CoachMeal,
    CoachProfile,
    CoachWeight,
    ExerciseEntry,
    MealEntry,
    MoodEntry,
    OnboardingInput,
    SleepEntry,
    WaterEntry,
    WeightEntry,
)
from ..core.onboarding import build_profile
from ..core.progress import calculate_weight_progress, percent_of, summarize_day, weekly_exercise_minutes
from .coach import CoachConfig, CoachGateway
from .firestore_client import FirestoreBackend, FirestoreConfig
from .store import CompanionStore, InMemoryBackend


logger = logging.getLogger(__name__)

transport_security = TransportSecuritySettings(
    enable_dns_rebinding_protection=True,
    allowed_hosts=[
        "localhost:*",
        "127.0.0.1:*",
        "*.run.app:*",
        "*.run.app",
    ],
)

mcp = FastMCP(
    "weight-companion",
    instructions="""Weight Companion - Personal weight loss tracker and coach.

Use these tools to help the user log weight, meals, water, exercise, habits,
mood and sleep, and to answer weight loss questions.

On first use, call complete_onboarding to calculate the user's goals.
Call get_dashboard once per day to keep the check-in streak going.
When logging exercise, leave calories_burned empty to estimate it.""",
    stateless_http=True,
    transport_security=transport_security,
)

NO_PROFILE = "No profile found. Please use complete_onboarding first."
SAVE_FAILED = "Failed to save. Please try again."

# Lazy-initialized clients
_store: CompanionStore | None = None
_coach: CoachGateway | None = None


def get_store() -> CompanionStore:
    """Get or create the entry store."""
    global _store
    if _store is None:
        if os.environ.get("STORAGE_BACKEND", "firestore") == "memory":
            logger.warning("Using in-memory storage; entries will not survive a restart")
            backend = InMemoryBackend()
        else:
            backend = FirestoreBackend(FirestoreConfig(
                project_id=os.environ.get("FIRESTORE_PROJECT"),
                database=os.environ.get("FIRESTORE_DATABASE", "weightcompanion"),
                namespace=os.environ.get("STORAGE_NAMESPACE", "default"),
            ))
        _store = CompanionStore(backend)
    return _store


def get_coach() -> CoachGateway:
    """Get or create the coach gateway."""
    global _coach
    if _coach is None:
        config = CoachConfig(api_key=os.environ.get("XAI_API_KEY"))
        config.base_url = os.environ.get("COACH_BASE_URL", config.base_url)
        config.model = os.environ.get("COACH_MODEL", config.model)
        _coach = CoachGateway(config)
    return _coach


def validation_message(error: ValidationError) -> str:
    """Flatten a pydantic error into one readable line."""
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


def parse_day(date_str: str | None) -> date:
    """Parse an optional YYYY-MM-DD string, defaulting to today.

    Raises:
        ValueError: If the string is not a valid ISO date
    """
    if not date_str:
        return today_utc()
    return date.fromisoformat(date_str)


# ==================== Profile Tools ====================


@mcp.tool()
def complete_onboarding(
    name: str,
    current_weight: float,
    target_weight: float,
    height: float,
    age: int,
    gender: str = "female",
    activity_level: str = "moderate",
    weekly_loss_lbs: float = 1.0,
) -> dict:
    """Create the user's profile and calculate daily calorie and water goals.

    Args:
        name: User's first name
        current_weight: Current weight in lbs (must be above target)
        target_weight: Goal weight in lbs
        height: Height in inches
        age: Age in years
        gender: male, female or other
        activity_level: sedentary, light, moderate, active or very_active
        weekly_loss_lbs: Target loss per week (default 1 lb)

    Returns:
        The saved profile with its derived goals
    """
    try:
        inputs = OnboardingInput(
            name=name,
            current_weight=current_weight,
            target_weight=target_weight,
            height=height,
            age=age,
            gender=gender,
            activity_level=activity_level,
        )
    except ValidationError as e:
        return {"error": validation_message(e)}

    profile = build_profile(inputs, weekly_loss_lbs=weekly_loss_lbs)
    store = get_store()

    if not store.save_profile(profile):
        return {"error": SAVE_FAILED}
    store.set_onboarding_complete()

    return {
        "profile": profile.model_dump(mode="json"),
        "message": (
            f"Welcome, {profile.name}! Your daily goals: "
            f"{profile.daily_calorie_goal} calories, {profile.daily_water_goal} ml water."
        ),
    }


@mcp.tool()
def get_profile() -> dict:
    """Retrieve the user's profile and goals."""
    store = get_store()
    profile = store.get_profile()
    if profile is None:
        return {"error": NO_PROFILE}
    return {
        "profile": profile.model_dump(mode="json"),
        "onboarding_complete": store.is_onboarding_complete(),
    }


# ==================== Weight Tools ====================


@mcp.tool()
def log_weight(weight: float, notes: str | None = None, date_str: str | None = None) -> dict:
    """Record a weigh-in.

    Args:
        weight: Weight in lbs
        notes: Optional notes
        date_str: Date in YYYY-MM-DD format (defaults to today)

    Returns:
        The created entry
    """
    try:
        entry = WeightEntry(weight=weight, notes=notes, date=parse_day(date_str))
    except ValidationError as e:
        return {"error": validation_message(e)}
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}

    if not get_store().weights.upsert(entry):
        return {"error": SAVE_FAILED}
    return {"entry": entry.model_dump(mode="json")}


@mcp.tool()
def delete_weight(entry_id: str) -> dict:
    """Delete a weigh-in by ID. Unknown IDs are ignored."""
    weights = get_store().weights
    existed = weights.get(entry_id) is not None
    if not weights.delete(entry_id):
        return {"error": SAVE_FAILED}
    return {"success": True, "deleted": existed}


@mcp.tool()
def get_weight_progress() -> dict:
    """Show weight history and progress toward the target weight."""
    store = get_store()
    profile = store.get_profile()
    if profile is None:
        return {"error": NO_PROFILE}

    entries = sorted(store.weights.all(), key=lambda e: e.date, reverse=True)
    progress = calculate_weight_progress(profile, entries)

    return {
        "progress": progress.model_dump(),
        "entries": [e.model_dump(mode="json") for e in entries],
    }


# ==================== Nutrition Tools ====================


@mcp.tool()
def log_meal(
    name: str,
    calories: float,
    meal_type: str = "snack",
    protein: float | None = None,
    carbs: float | None = None,
    fats: float | None = None,
    date_str: str | None = None,
) -> dict:
    """Add a meal to the log.

    Args:
        name: Name of the meal
        calories: Total calories
        meal_type: breakfast, lunch, dinner or snack
        protein: Optional protein in grams
        carbs: Optional carbohydrates in grams
        fats: Optional fat in grams
        date_str: Date in YYYY-MM-DD format (defaults to today)

    Returns:
        The created entry and the day's calorie total
    """
    try:
        entry = MealEntry(
            name=name,
            calories=calories,
            meal_type=meal_type,
            protein=protein,
            carbs=carbs,
            fats=fats,
            date=parse_day(date_str),
        )
    except ValidationError as e:
        return {"error": validation_message(e)}
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}

    store = get_store()
    if not store.meals.upsert(entry):
        return {"error": SAVE_FAILED}

    day_total = sum(m.calories for m in store.meals.for_date(entry.date))
    return {"entry": entry.model_dump(mode="json"), "calories_today": day_total}


@mcp.tool()
def delete_meal(entry_id: str) -> dict:
    """Delete a meal by ID. Unknown IDs are ignored."""
    meals = get_store().meals
    existed = meals.get(entry_id) is not None
    if not meals.delete(entry_id):
        return {"error": SAVE_FAILED}
    return {"success": True, "deleted": existed}


@mcp.tool()
def log_water(amount_ml: int) -> dict:
    """Add water intake for today.

    Args:
        amount_ml: Amount in milliliters (e.g., 250 for a glass)

    Returns:
        Today's water total against the goal
    """
    try:
        entry = WaterEntry(amount=amount_ml)
    except ValidationError as e:
        return {"error": validation_message(e)}

    store = get_store()
    if not store.water.upsert(entry):
        return {"error": SAVE_FAILED}

    total = sum(w.amount for w in store.water.for_date(entry.date))
    result: dict = {"entry": entry.model_dump(mode="json"), "water_today_ml": total}

    profile = store.get_profile()
    if profile is not None:
        result["water_goal_ml"] = profile.daily_water_goal
        result["water_progress_percent"] = percent_of(total, profile.daily_water_goal)
    return result


# ==================== Exercise Tools ====================


@mcp.tool()
def log_exercise(
    activity: str,
    duration: int,
    intensity: str = "medium",
    calories_burned: int | None = None,
) -> dict:
    """Log a workout for today.

    Calories are estimated from the activity's MET value and the profile
    weight unless calories_burned is given.

    Args:
        activity: Activity name (e.g., "Running", "Yoga")
        duration: Duration in minutes
        intensity: low, medium or high
        calories_burned: Optional manual calorie count

    Returns:
        The created entry
    """
    store = get_store()
    result: dict = {}

    if calories_burned is None:
        profile = store.get_profile()
        if profile is None:
            calories_burned = 0
            result["warning"] = "No profile configured; calories could not be estimated."
        else:
            try:
                calories_burned = calculate_exercise_calories(
                    activity, duration, intensity, profile.current_weight
                )
            except KeyError:
                return {"error": "Intensity must be low, medium or high."}

    try:
        entry = ExerciseEntry(
            activity=activity,
            duration=duration,
            intensity=intensity,
            calories_burned=calories_burned,
        )
    except ValidationError as e:
        return {"error": validation_message(e)}

    if not store.exercises.upsert(entry):
        return {"error": SAVE_FAILED}

    result["entry"] = entry.model_dump(mode="json")
    return result


@mcp.tool()
def delete_exercise(entry_id: str) -> dict:
    """Delete a workout by ID. Unknown IDs are ignored."""
    exercises = get_store().exercises
    existed = exercises.get(entry_id) is not None
    if not exercises.delete(entry_id):
        return {"error": SAVE_FAILED}
    return {"success": True, "deleted": existed}


@mcp.tool()
def recalculate_exercise_calories() -> dict:
    """Fill in estimates for past workouts saved with zero calories."""
    store = get_store()
    profile = store.get_profile()
    if profile is None:
        return {"error": NO_PROFILE}

    entries = store.exercises.all()
    updated = backfill_exercise_calories(entries, profile.current_weight)
    for entry in updated:
        entries = upsert(entries, entry, by_id)

    if updated and not store.exercises.replace_all(entries):
        return {"error": SAVE_FAILED}

    return {
        "updated": len(updated),
        "entries": [e.model_dump(mode="json") for e in updated],
    }


@mcp.tool()
def list_activities() -> list[str]:
    """List activity names with known MET values."""
    return suggested_activities()


# ==================== Habit Tools ====================


@mcp.tool()
def toggle_habit(habit_type: str) -> dict:
    """Mark a daily habit done, or undo it if already done today.

    Args:
        habit_type: Habit ID (see get_habits)

    Returns:
        The habit's new state and today's habit progress
    """
    if habit_type not in HABIT_IDS:
        return {"error": "Unknown habit. Use get_habits to see the checklist."}

    store = get_store()
    today = today_utc()

    entry = build_habit_toggle(store.habits.all(), habit_type, today)
    if not store.habits.upsert(entry):
        return {"error": SAVE_FAILED}

    return {
        "habit_type": habit_type,
        "completed": entry.completed,
        "progress": habit_progress(store.habits.all(), today).model_dump(mode="json"),
    }


@mcp.tool()
def get_habits() -> dict:
    """Show the daily habit checklist with today's completion."""
    progress = habit_progress(get_store().habits.all(), today_utc())
    return {
        "habits": DAILY_HABITS,
        "progress": progress.model_dump(mode="json"),
    }


# ==================== Wellbeing Tools ====================


@mcp.tool()
def log_mood(mood: str, notes: str | None = None) -> dict:
    """Record today's mood (great, good, okay, bad or terrible)."""
    try:
        entry = MoodEntry(mood=mood, notes=notes)
    except ValidationError as e:
        return {"error": validation_message(e)}

    if not get_store().moods.upsert(entry):
        return {"error": SAVE_FAILED}
    return {"entry": entry.model_dump(mode="json")}


@mcp.tool()
def log_sleep(hours: float, quality: str) -> dict:
    """Record last night's sleep.

    Args:
        hours: Hours slept
        quality: excellent, good, fair or poor
    """
    try:
        entry = SleepEntry(hours=hours, quality=quality)
    except ValidationError as e:
        return {"error": validation_message(e)}

    if not get_store().sleep.upsert(entry):
        return {"error": SAVE_FAILED}
    return {"entry": entry.model_dump(mode="json")}


# ==================== Dashboard Tools ====================


@mcp.tool()
def get_dashboard() -> dict:
    """Check in for today and get the daily overview.

    Updates the streak, then returns today's totals against the goals, weight
    progress and the daily quote, tip and focus.
    """
    store = get_store()
    profile = store.get_profile()
    if profile is None:
        return {"error": NO_PROFILE}

    today = today_utc()
    streak = store.update_streak(today)
    exercises = store.exercises.all()
    summary = summarize_day(store.meals.all(), store.water.all(), exercises, today)

    return {
        "date": today.isoformat(),
        "name": profile.name,
        "streak": streak.count,
        "today": summary.model_dump(mode="json"),
        "goals": {
            "calories": profile.daily_calorie_goal,
            "water_ml": profile.daily_water_goal,
        },
        "calorie_progress_percent": percent_of(summary.calories, profile.daily_calorie_goal),
        "water_progress_percent": percent_of(summary.water_ml, profile.daily_water_goal),
        "weekly_exercise_minutes": weekly_exercise_minutes(exercises, today),
        "weight": calculate_weight_progress(profile, store.weights.all()).model_dump(),
        "insight": get_daily_insight().model_dump(),
    }


@mcp.tool()
def list_achievements() -> list[dict]:
    """List unlocked achievements."""
    return [a.model_dump(mode="json") for a in get_store().get_achievements()]


@mcp.tool()
def unlock_achievement(achievement_id: str, name: str, description: str = "", icon: str = "") -> dict:
    """Unlock an achievement. Unlocking the same ID again changes nothing."""
    try:
        achievement = Achievement(id=achievement_id, name=name, description=description, icon=icon)
    except ValidationError as e:
        return {"error": validation_message(e)}

    store = get_store()
    if any(a.id == achievement_id for a in store.get_achievements()):
        return {"achievement_id": achievement_id, "newly_unlocked": False}
    if not store.unlock_achievement(achievement):
        return {"error": SAVE_FAILED}
    return {"achievement_id": achievement_id, "newly_unlocked": True}


# ==================== Coach Tools ====================


def _coach_profile(store: CompanionStore) -> CoachProfile | None:
    profile = store.get_profile()
    return CoachProfile.from_profile(profile) if profile else None


@mcp.tool()
def ask_coach(question: str) -> dict:
    """Ask the AI coach a weight loss or nutrition question.

    Args:
        question: The question, in plain language

    Returns:
        The coach's answer
    """
    reply = get_coach().answer_question(question, _coach_profile(get_store()))
    return {"answer": reply.text}


@mcp.tool()
def get_motivation(context: str | None = None) -> dict:
    """Get a short motivational message, optionally about a situation."""
    profile = _coach_profile(get_store())
    if profile is None:
        return {"error": NO_PROFILE}
    return {"message": get_coach().motivation(profile, context).text}


@mcp.tool()
def get_ai_daily_insight() -> dict:
    """Get a personalized insight based on recent weigh-ins and today's meals."""
    store = get_store()
    profile = _coach_profile(store)
    if profile is None:
        return {"error": NO_PROFILE}

    weights = sorted(store.weights.all(), key=lambda e: e.date)
    recent = [CoachWeight(weight=e.weight, date=e.date) for e in weights[-7:]]
    meals = [CoachMeal.from_entry(m) for m in store.meals.for_date(today_utc())]

    return {"insight": get_coach().daily_insight(profile, recent, meals).text}


@mcp.tool()
def suggest_meals(
    calorie_target: float,
    meal_type: str,
    dietary_preferences: list[str] | None = None,
) -> dict:
    """Suggest meals that fit a calorie budget.

    Args:
        calorie_target: Calories available for the meal
        meal_type: breakfast, lunch, dinner or snack
        dietary_preferences: Optional preferences (e.g., ["vegetarian"])
    """
    reply = get_coach().meal_suggestions(calorie_target, meal_type, dietary_preferences)
    return {"suggestions": reply.text}
