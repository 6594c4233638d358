"""Unit tests for profile derivation at onboarding."""

from datetime import date

from weightcompanion.core.models import OnboardingInput
from weightcompanion.core.onboarding import build_profile


def make_inputs(**overrides) -> OnboardingInput:
    data = {
        "name": " Sam ",
        "current_weight": 200,
        "target_weight": 170,
        "height": 65,
        "age": 40,
        "gender": "female",
        "activity_level": "moderate",
    }
    data.update(overrides)
    return OnboardingInput(**data)


class TestBuildProfile:
    """Tests for build_profile."""

    def test_goals_derived_from_formulas(self):
        # BMR 1578.059 -> TDEE 2446 -> goal 1946; water 2.96 L
        profile = build_profile(make_inputs(), start_date=date(2026, 10, 19))

        assert profile.daily_calorie_goal == 1946
        assert profile.daily_water_goal == 2960
        assert profile.start_date == date(2026, 10, 19)

    def test_name_trimmed(self):
        assert build_profile(make_inputs()).name == "Sam"

    def test_weekly_loss_changes_goal(self):
        profile = build_profile(make_inputs(), weekly_loss_lbs=2)
        assert profile.daily_calorie_goal == 1446

    def test_male_goal_is_166_times_multiplier_higher(self):
        female = build_profile(make_inputs())
        male = build_profile(make_inputs(gender="male"))
        # 166 * 1.55 = 257.3
        assert male.daily_calorie_goal - female.daily_calorie_goal in (257, 258)

    def test_inputs_copied(self):
        profile = build_profile(make_inputs())
        assert profile.current_weight == 200
        assert profile.target_weight == 170
        assert profile.activity_level == "moderate"
