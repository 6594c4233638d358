"""Body Metric Formulas - Pure functions for calorie and water goals.

All functions are pure: same input always produces same output, no side effects.
Inputs are imperial (lbs, inches) and are not validated; NaN or negative
values flow through to the result.
"""

import math

from .models import ActivityLevel


LBS_TO_KG = 0.453592
INCHES_TO_CM = 2.54
CALORIES_PER_LB_FAT = 3500
OUNCES_TO_LITERS = 0.0295735

ACTIVITY_MULTIPLIERS: dict[str, float] = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}


def round_half_up(value: float) -> float:
    """Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2).

    Non-finite values are returned unchanged.
    """
    if math.isnan(value) or math.isinf(value):
        return value
    return math.floor(value + 0.5)


def calculate_bmr(weight_lbs: float, height_inches: float, age: float, gender: str) -> float:
    """Calculate basal metabolic rate with the Mifflin-St Jeor equation.

    Args:
        weight_lbs: Body weight in pounds
        height_inches: Height in inches
        age: Age in years
        gender: "male" uses the +5 offset, every other value uses -161

    Returns:
        BMR in kcal/day (unrounded)
    """
    weight_kg = weight_lbs * LBS_TO_KG
    height_cm = height_inches * INCHES_TO_CM

    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    if gender == "male":
        return base + 5
    return base - 161


def calculate_tdee(bmr: float, activity_level: ActivityLevel) -> float:
    """Calculate total daily energy expenditure.

    Args:
        bmr: Basal metabolic rate in kcal/day
        activity_level: One of the ACTIVITY_MULTIPLIERS keys

    Returns:
        TDEE rounded to the nearest integer
    """
    return round_half_up(bmr * ACTIVITY_MULTIPLIERS[activity_level])


def calculate_daily_calorie_goal(tdee: float, target_weekly_loss_lbs: float = 1) -> float:
    """Calculate the daily calorie budget for a weekly loss target.

    Uses 3500 kcal per pound of fat. No minimum is enforced.

    Args:
        tdee: Total daily energy expenditure
        target_weekly_loss_lbs: Desired loss per week in pounds

    Returns:
        Daily calorie goal rounded to the nearest integer
    """
    daily_deficit = target_weekly_loss_lbs * CALORIES_PER_LB_FAT / 7
    return round_half_up(tdee - daily_deficit)


def calculate_water_goal(weight_lbs: float) -> float:
    """Half the body weight in ounces, expressed in liters (2 decimals)."""
    liters = weight_lbs * 0.5 * OUNCES_TO_LITERS
    return round_half_up(liters * 100) / 100
