"""AI Coach Gateway - Forwards rendered prompts to a chat completion API.

Any OpenAI-compatible endpoint works; the default is xAI's Grok API. Every
operation returns text: failures are absorbed here and replaced with the
operation's fallback message.
"""

import logging
from dataclasses import dataclass

from openai import OpenAI

from ..core import prompts
from ..core.models import CoachMeal, CoachProfile, CoachWeight


logger = logging.getLogger(__name__)


@dataclass
class CoachConfig:
    """Configuration for the coach gateway.

    Attributes:
        api_key: API credential for the completion service
        base_url: OpenAI-compatible endpoint
        model: Chat model name
    """

    api_key: str | None = None
    base_url: str = "https://api.x.ai/v1"
    model: str = "grok-2-1212"


@dataclass
class CoachReply:
    """Text returned to the caller.

    Attributes:
        text: Model output (trimmed) or the fallback message
        degraded: True when the fallback was used
    """

    text: str
    degraded: bool = False


class CoachGateway:
    """Client for the four coach operations."""

    def __init__(self, config: CoachConfig | None = None, client: OpenAI | None = None) -> None:
        """Initialize the gateway.

        Args:
            config: Gateway configuration
            client: Preconfigured completion client (created lazily if omitted)
        """
        self.config = config or CoachConfig()
        self._client = client

    @property
    def client(self) -> OpenAI:
        """Lazy initialization of the completion client."""
        if self._client is None:
            self._client = OpenAI(api_key=self.config.api_key, base_url=self.config.base_url)
        return self._client

    def _complete(self, spec: prompts.PromptSpec, prompt: str, operation: str) -> CoachReply:
        """Run one completion, substituting the fallback on any failure."""
        try:
            completion = self.client.chat.completions.create(
                model=self.config.model,
                messages=[
                    {"role": "system", "content": spec.system},
                    {"role": "user", "content": prompt},
                ],
                temperature=spec.temperature,
                max_tokens=spec.max_tokens,
            )
        except Exception as e:
            logger.error("Error generating %s: %s", operation, str(e))
            return CoachReply(spec.error_fallback, degraded=True)

        try:
            content = completion.choices[0].message.content
        except (AttributeError, IndexError, TypeError):
            content = None

        text = content.strip() if isinstance(content, str) else ""
        if not text:
            logger.warning("Empty or malformed %s response, using fallback", operation)
            return CoachReply(spec.fallback, degraded=True)

        return CoachReply(text)

    def daily_insight(
        self,
        profile: CoachProfile,
        recent_weights: list[CoachWeight] | None = None,
        todays_meals: list[CoachMeal] | None = None,
    ) -> CoachReply:
        """Personalized insight from profile, recent weigh-ins and today's meals."""
        prompt = prompts.render_daily_insight(profile, recent_weights or [], todays_meals or [])
        return self._complete(prompts.DAILY_INSIGHT, prompt, "daily insight")

    def motivation(self, profile: CoachProfile, context: str | None = None) -> CoachReply:
        prompt = prompts.render_motivation(profile, context)
        return self._complete(prompts.MOTIVATION, prompt, "motivation")

    def answer_question(self, question: str, profile: CoachProfile | None = None) -> CoachReply:
        """Answer a weight loss question, personalized when a profile is given."""
        prompt = prompts.render_question(question, profile)
        return self._complete(prompts.QUESTION, prompt, "answer")

    def meal_suggestions(
        self,
        calorie_target: float,
        meal_type: str,
        dietary_preferences: list[str] | None = None,
    ) -> CoachReply:
        prompt = prompts.render_meal_suggestions(calorie_target, meal_type, dietary_preferences)
        return self._complete(prompts.MEAL_SUGGESTIONS, prompt, "meal suggestions")
