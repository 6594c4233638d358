"""Core Data Models - Pydantic models for type safety.

All models are value objects with no behavior beyond validation. Stored
records use camelCase field names on disk; attributes are snake_case and
either spelling is accepted on input.
"""

from datetime import datetime
from datetime import date as DateType
from typing import Literal, Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .dates import today_utc


Gender = Literal["male", "female", "other"]
ActivityLevel = Literal["sedentary", "light", "moderate", "active", "very_active"]
Intensity = Literal["low", "medium", "high"]
MealType = Literal["breakfast", "lunch", "dinner", "snack"]
Mood = Literal["great", "good", "okay", "bad", "terrible"]
SleepQuality = Literal["excellent", "good", "fair", "poor"]


def new_entry_id() -> str:
    return str(uuid.uuid4())


class StoredModel(BaseModel):
    """Base for records persisted in the entry store."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserProfile(StoredModel):
    """Profile created at onboarding; goals are derived once."""

    name: str = Field(min_length=1)
    current_weight: float = Field(gt=0, description="Weight at onboarding in lbs")
    target_weight: float = Field(gt=0, description="Goal weight in lbs")
    height: float = Field(gt=0, description="Height in inches")
    age: int = Field(gt=0)
    gender: Gender
    activity_level: ActivityLevel
    start_date: DateType = Field(default_factory=today_utc)
    daily_calorie_goal: int = Field(description="Derived daily calorie target")
    daily_water_goal: int = Field(description="Derived daily water target in ml")


class OnboardingInput(BaseModel):
    """Raw onboarding answers, before goals are calculated."""

    name: str = Field(min_length=1)
    current_weight: float = Field(gt=0)
    target_weight: float = Field(gt=0)
    height: float = Field(gt=0)
    age: int = Field(gt=0)
    gender: Gender = "female"
    activity_level: ActivityLevel = "moderate"

    @model_validator(mode="after")
    def check_target_below_current(self) -> "OnboardingInput":
        if self.current_weight <= self.target_weight:
            raise ValueError("target_weight must be lower than current_weight")
        if not self.name.strip():
            raise ValueError("name must not be blank")
        return self


class WeightEntry(StoredModel):
    """A single weigh-in."""

    id: str = Field(default_factory=new_entry_id)
    date: DateType = Field(default_factory=today_utc)
    weight: float = Field(gt=0, description="Weight in lbs")
    notes: Optional[str] = None


class MealEntry(StoredModel):
    """A logged meal."""

    id: str = Field(default_factory=new_entry_id)
    date: DateType = Field(default_factory=today_utc)
    meal_type: MealType
    name: str = Field(min_length=1)
    calories: float = Field(ge=0)
    protein: Optional[float] = Field(default=None, ge=0)
    carbs: Optional[float] = Field(default=None, ge=0)
    fats: Optional[float] = Field(default=None, ge=0)


class WaterEntry(StoredModel):
    id: str = Field(default_factory=new_entry_id)
    date: DateType = Field(default_factory=today_utc)
    amount: int = Field(gt=0, description="Amount in ml")


class ExerciseEntry(StoredModel):
    """A workout with its (estimated or manual) calorie burn."""

    id: str = Field(default_factory=new_entry_id)
    date: DateType = Field(default_factory=today_utc)
    activity: str = Field(min_length=1)
    duration: int = Field(gt=0, description="Duration in minutes")
    calories_burned: int = Field(ge=0)
    intensity: Optional[Intensity] = None


class HabitEntry(StoredModel):
    """Completion state of one habit on one day."""

    id: str
    date: DateType
    habit_type: str = Field(min_length=1)
    completed: bool


class MoodEntry(StoredModel):
    id: str = Field(default_factory=new_entry_id)
    date: DateType = Field(default_factory=today_utc)
    mood: Mood
    notes: Optional[str] = None


class SleepEntry(StoredModel):
    id: str = Field(default_factory=new_entry_id)
    date: DateType = Field(default_factory=today_utc)
    hours: float = Field(ge=0, le=24)
    quality: SleepQuality


class Achievement(StoredModel):
    id: str = Field(min_length=1)
    name: str
    description: str = ""
    icon: str = ""
    unlocked_at: Optional[datetime] = None


class Streak(StoredModel):
    """Consecutive-day check-in counter. last_date is ISO or empty."""

    count: int = Field(default=0, ge=0)
    last_date: str = ""


class DailyInsight(BaseModel):
    quote: str
    author: str
    tip: str
    focus: str


class DaySummary(BaseModel):
    """Totals for a single calendar day."""

    day: DateType
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fats: float = 0
    water_ml: int = 0
    exercise_minutes: int = 0
    calories_burned: int = 0
    meal_count: int = 0


class WeightProgress(BaseModel):
    """Progress from the onboarding weight toward the target."""

    start_weight: float
    latest_weight: float
    target_weight: float
    weight_lost: float = Field(description="Negative if weight was gained")
    weight_to_go: float
    progress_percent: float


class HabitProgress(BaseModel):
    day: DateType
    completed: list[str]
    completed_count: int
    total: int
    percent: int


# ==================== Coach Requests ====================


class CoachProfile(BaseModel):
    """Profile snapshot sent along with coach requests."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    current_weight: float
    target_weight: float
    height: float
    age: int
    gender: str
    activity_level: str
    daily_calories: Optional[float] = None

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "CoachProfile":
        return cls(
            name=profile.name,
            current_weight=profile.current_weight,
            target_weight=profile.target_weight,
            height=profile.height,
            age=profile.age,
            gender=profile.gender,
            activity_level=profile.activity_level,
            daily_calories=profile.daily_calorie_goal,
        )


class CoachWeight(BaseModel):
    weight: float
    date: DateType


class CoachMeal(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    calories: float
    protein: float = 0
    carbs: float = 0
    fats: float = 0
    meal_type: str = "snack"

    @classmethod
    def from_entry(cls, entry: MealEntry) -> "CoachMeal":
        return cls(
            name=entry.name,
            calories=entry.calories,
            protein=entry.protein or 0,
            carbs=entry.carbs or 0,
            fats=entry.fats or 0,
            meal_type=entry.meal_type,
        )


class DailyInsightRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    profile: CoachProfile
    recent_weight_entries: list[CoachWeight] = Field(default_factory=list)
    todays_meals: list[CoachMeal] = Field(default_factory=list)


class MotivationRequest(BaseModel):
    profile: CoachProfile
    context: Optional[str] = None


class QuestionRequest(BaseModel):
    question: str = Field(min_length=1)
    profile: Optional[CoachProfile] = None


class MealSuggestionRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    calorie_target: float
    meal_type: str
    dietary_preferences: list[str] = Field(default_factory=list)
