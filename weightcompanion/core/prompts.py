"""Coach Prompts - Pure rendering of language-model requests.

Each coach operation has a system prompt, a user prompt renderer, sampling
settings and the fallback text returned when the model is unavailable.
"""

from dataclasses import dataclass

from .models import CoachMeal, CoachProfile, CoachWeight


@dataclass(frozen=True)
class PromptSpec:
    """Static settings for one coach operation."""

    system: str
    temperature: float
    max_tokens: int
    fallback: str
    error_fallback: str


DAILY_INSIGHT = PromptSpec(
    system=(
        "You are an encouraging weight loss coach who provides brief, "
        "actionable, and positive daily insights."
    ),
    temperature=0.7,
    max_tokens=150,
    fallback="Stay focused on your goals today! Every healthy choice counts.",
    error_fallback="Stay focused on your goals today! Every healthy choice counts.",
)

MOTIVATION = PromptSpec(
    system="You are an encouraging weight loss coach.",
    temperature=0.8,
    max_tokens=100,
    fallback="You've got this! Keep pushing forward.",
    error_fallback="You've got this! Keep pushing forward.",
)

QUESTION = PromptSpec(
    system=(
        "You are a knowledgeable weight loss and nutrition expert. Provide "
        "evidence-based, safe, and practical advice. Always emphasize "
        "sustainable healthy habits over quick fixes."
    ),
    temperature=0.6,
    max_tokens=250,
    fallback="I recommend consulting with a healthcare professional for personalized advice.",
    error_fallback=(
        "I'm having trouble answering right now. Please try again or consult "
        "with a healthcare professional."
    ),
)

MEAL_SUGGESTIONS = PromptSpec(
    system="You are a nutrition expert who suggests healthy, practical meal ideas.",
    temperature=0.7,
    max_tokens=200,
    fallback="Consider a balanced meal with lean protein, vegetables, and whole grains.",
    error_fallback="Consider a balanced meal with lean protein, vegetables, and whole grains.",
)


def _num(value: float) -> str:
    """Format a number in full, without a trailing .0 (180.0 -> "180")."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _goal_loss(profile: CoachProfile) -> str:
    return _num(profile.current_weight - profile.target_weight)


def render_daily_insight(
    profile: CoachProfile,
    recent_weights: list[CoachWeight],
    todays_meals: list[CoachMeal],
) -> str:
    """Render the daily insight prompt.

    Weight lost is measured against the last entry of recent_weights.
    """
    weight_lost = 0.0
    if recent_weights:
        weight_lost = profile.current_weight - recent_weights[-1].weight

    calories_today = sum(m.calories for m in todays_meals)
    budget = _num(profile.daily_calories) if profile.daily_calories else "not set"
    budget_value = _num(profile.daily_calories) if profile.daily_calories else "0"

    return f"""You are a supportive weight loss coach. Generate a personalized daily insight for {profile.name}.

Profile:
- Current weight: {_num(profile.current_weight)} lbs
- Target weight: {_num(profile.target_weight)} lbs
- Goal: Lose {_goal_loss(profile)} lbs
- Height: {_num(profile.height)} inches
- Age: {profile.age}
- Gender: {profile.gender}
- Activity level: {profile.activity_level}
- Daily calorie budget: {budget}

Progress:
- Weight lost so far: {weight_lost:.1f} lbs
- Calories consumed today: {_num(calories_today)} / {budget_value}
- Meals logged today: {len(todays_meals)}

Generate a brief (2-3 sentences), encouraging, and actionable daily insight. Focus on:
1. Acknowledging their progress or current status
2. Providing one specific, actionable tip for today
3. Keeping a positive, motivational tone

Do not use markdown formatting. Return plain text only."""


def render_motivation(profile: CoachProfile, context: str | None = None) -> str:
    context_text = f" Context: {context}" if context else ""
    return (
        f"Generate a brief motivational message for {profile.name} who is working "
        f"to lose {_goal_loss(profile)} lbs.{context_text} Keep it under 2 sentences, "
        "positive and encouraging."
    )


def render_question(question: str, profile: CoachProfile | None = None) -> str:
    """Render a free-form question, optionally prefixed with the profile."""
    profile_context = ""
    if profile is not None:
        profile_context = (
            f"User profile: {profile.age} year old {profile.gender}, "
            f"{_num(profile.height)} inches tall, current weight "
            f"{_num(profile.current_weight)} lbs, target {_num(profile.target_weight)} lbs, "
            f"{profile.activity_level} activity level."
        )

    return (
        f"{profile_context}\n\nQuestion: {question}\n\n"
        "Provide a helpful, evidence-based answer about weight loss. "
        "Keep it concise (3-4 sentences) and actionable."
    )


def render_meal_suggestions(
    calorie_target: float,
    meal_type: str,
    dietary_preferences: list[str] | None = None,
) -> str:
    preferences_text = ""
    if dietary_preferences:
        preferences_text = f"Dietary preferences: {', '.join(dietary_preferences)}."

    return (
        f"Suggest 2-3 healthy {meal_type} options that fit within {_num(calorie_target)} "
        f"calories. {preferences_text} For each suggestion, include the meal name and "
        "approximate calories. Keep it brief and practical."
    )
