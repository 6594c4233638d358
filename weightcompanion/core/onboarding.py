"""Onboarding - derive a UserProfile from the wizard answers."""

from datetime import date

from .dates import today_utc
from .formulas import (
    calculate_bmr,
    calculate_tdee,
    calculate_daily_calorie_goal,
    calculate_water_goal,
    round_half_up,
)
from .models import OnboardingInput, UserProfile


def build_profile(
    inputs: OnboardingInput,
    start_date: date | None = None,
    weekly_loss_lbs: float = 1,
) -> UserProfile:
    """Calculate goals and assemble the profile.

    Args:
        inputs: Validated onboarding answers
        start_date: Journey start (defaults to today)
        weekly_loss_lbs: Target loss per week used for the calorie deficit

    Returns:
        UserProfile with calorie goal (kcal) and water goal (ml)
    """
    bmr = calculate_bmr(inputs.current_weight, inputs.height, inputs.age, inputs.gender)
    tdee = calculate_tdee(bmr, inputs.activity_level)
    calorie_goal = calculate_daily_calorie_goal(tdee, weekly_loss_lbs)
    water_liters = calculate_water_goal(inputs.current_weight)

    return UserProfile(
        name=inputs.name.strip(),
        current_weight=inputs.current_weight,
        target_weight=inputs.target_weight,
        height=inputs.height,
        age=inputs.age,
        gender=inputs.gender,
        activity_level=inputs.activity_level,
        start_date=start_date or today_utc(),
        daily_calorie_goal=calorie_goal,
        daily_water_goal=round_half_up(water_liters * 1000),
    )
