"""Unit tests for coach prompt rendering."""

from datetime import date

from weightcompanion.core.models import CoachMeal, CoachProfile, CoachWeight
from weightcompanion.core.prompts import (
    render_daily_insight,
    render_meal_suggestions,
    render_motivation,
    render_question,
)


def make_profile(**overrides) -> CoachProfile:
    data = {
        "name": "Sam",
        "current_weight": 200,
        "target_weight": 170,
        "height": 65,
        "age": 40,
        "gender": "female",
        "activity_level": "moderate",
        "daily_calories": 1946,
    }
    data.update(overrides)
    return CoachProfile(**data)


class TestRenderDailyInsight:
    """Tests for render_daily_insight."""

    def test_profile_and_progress(self):
        weights = [
            CoachWeight(weight=198, date=date(2026, 10, 10)),
            CoachWeight(weight=195, date=date(2026, 10, 17)),
        ]
        meals = [
            CoachMeal(name="Oats", calories=300, meal_type="breakfast"),
            CoachMeal(name="Salad", calories=450, meal_type="lunch"),
        ]
        prompt = render_daily_insight(make_profile(), weights, meals)

        assert "daily insight for Sam" in prompt
        assert "- Goal: Lose 30 lbs" in prompt
        assert "- Weight lost so far: 5.0 lbs" in prompt
        assert "- Calories consumed today: 750 / 1946" in prompt
        assert "- Meals logged today: 2" in prompt
        assert "Daily calorie budget: 1946" in prompt

    def test_no_budget(self):
        prompt = render_daily_insight(make_profile(daily_calories=None), [], [])
        assert "Daily calorie budget: not set" in prompt
        assert "Calories consumed today: 0 / 0" in prompt
        assert "Weight lost so far: 0.0 lbs" in prompt

    def test_fractional_weights_kept(self):
        prompt = render_daily_insight(make_profile(current_weight=200.5), [], [])
        assert "Current weight: 200.5 lbs" in prompt
        assert "Lose 30.5 lbs" in prompt


class TestRenderMotivation:
    """Tests for render_motivation."""

    def test_without_context(self):
        prompt = render_motivation(make_profile())
        assert "for Sam who is working to lose 30 lbs. Keep it under 2 sentences" in prompt
        assert "Context:" not in prompt

    def test_with_context(self):
        prompt = render_motivation(make_profile(), "missed two workouts")
        assert "lbs. Context: missed two workouts Keep it" in prompt


class TestRenderQuestion:
    """Tests for render_question."""

    def test_with_profile(self):
        prompt = render_question("Is fasting good?", make_profile())
        assert prompt.startswith("User profile: 40 year old female, 65 inches tall")
        assert "Question: Is fasting good?" in prompt

    def test_without_profile(self):
        prompt = render_question("Is fasting good?")
        assert prompt.startswith("\n\nQuestion: Is fasting good?")


class TestRenderMealSuggestions:
    """Tests for render_meal_suggestions."""

    def test_with_preferences(self):
        prompt = render_meal_suggestions(500, "lunch", ["vegetarian", "low sodium"])
        assert "healthy lunch options that fit within 500 calories" in prompt
        assert "Dietary preferences: vegetarian, low sodium." in prompt

    def test_without_preferences(self):
        prompt = render_meal_suggestions(400, "dinner")
        assert "Dietary preferences" not in prompt


class TestNumberFormatting:
    """Numbers are interpolated in full."""

    def test_large_calorie_budget_not_abbreviated(self):
        prompt = render_daily_insight(make_profile(daily_calories=1234567), [], [])
        assert "Daily calorie budget: 1234567" in prompt

    def test_fraction_keeps_all_digits(self):
        prompt = render_meal_suggestions(1234.567, "lunch")
        assert "within 1234.567 calories" in prompt
