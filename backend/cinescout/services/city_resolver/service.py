"""City resolver ("vibe router").

Turns raw user input into a single city name. Short inputs are taken as
literal city names; anything longer, or anything mentioning a vibe, is sent
to the LLM once to pick the one real city that best matches the description.
"""

import logging

from cinescout.services.text_generation import GenerationError, TextGenerationService

logger = logging.getLogger(__name__)

# Lowercase substrings that mark the input as a vibe even when it is short.
VIBE_MARKERS = ("vibe", "vibra")

MAX_LITERAL_TOKENS = 2

ROUTER_PROMPT = (
    "ROLE: You are a film location scout with expert knowledge of world geography.\n"
    "TASK: The user describes a vibe, a climate, an architectural style or a movie.\n"
    "Identify the ONE real-world city that best matches that description.\n\n"
    "STRICT RULES:\n"
    "1. Return ONLY the city name. Do NOT include the country. Nothing else.\n"
    "2. No explanations, no greetings, no quotes, no punctuation.\n"
    '3. If the user names a clear city (e.g. "I want to go to Madrid"), return "Madrid".\n\n'
    'USER INPUT: "{user_input}"\n\n'
    "CITY:"
)


class CityResolver:
    """Resolves a city name or vibe description into a city name."""

    def __init__(self, text_service: TextGenerationService, model: str | None = None) -> None:
        self._text_service = text_service
        self._model = model

    @staticmethod
    def is_literal_city(text: str) -> bool:
        """True if ``text`` should be used as a city name without asking the LLM."""
        trimmed = text.strip()
        if len(trimmed.split()) > MAX_LITERAL_TOKENS:
            return False
        lowered = trimmed.lower()
        return not any(marker in lowered for marker in VIBE_MARKERS)

    async def resolve(self, user_input: str) -> str:
        """Return the city to build a guide for.

        Never raises on LLM failure: the trimmed input is returned instead.
        """
        trimmed = user_input.strip()
        if self.is_literal_city(trimmed):
            logger.info(f"[ROUTER] Short input, using it as the city: {trimmed!r}")
            return trimmed

        prompt = ROUTER_PROMPT.format(
            user_input=TextGenerationService.sanitize_input(trimmed)
        )
        try:
            raw = await self._text_service.generate(prompt, model=self._model, expect_json=False)
        except GenerationError as e:
            logger.warning(f"[ROUTER] Vibe routing failed, falling back to raw input: {e}")
            return trimmed

        city = raw.strip().replace("\r", "").replace("\n", "")
        if not city:
            logger.warning("[ROUTER] Empty routing answer, falling back to raw input")
            return trimmed
        logger.info(f"[ROUTER] Vibe {trimmed!r} resolved to {city!r}")
        return city
