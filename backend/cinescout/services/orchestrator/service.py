"""Trip orchestrator: the cache-first guide building flow.

Steps, strictly in sequence:
1. Resolve the user input (city or vibe) into a city name
2. Check the guide cache (any cache error counts as a miss)
3. On miss, ask the LLM for the guide JSON and parse it
4. Enrich the guide with photos
5. Write the guide to the cache (failures are logged, never raised)

Only a failure to build the guide itself reaches the caller.
"""

import json
import logging

from pydantic import ValidationError

from cinescout.models import TravelGuide
from cinescout.services.cache import GuideCache
from cinescout.services.city_resolver import CityResolver
from cinescout.services.enrichment import ImageEnrichmentService
from cinescout.services.text_generation import GenerationError, TextGenerationService

logger = logging.getLogger(__name__)

GUIDE_PROMPT = """ROLE: Expert travel guide and film location scout.
TASK: Create a guide for "{city}" aimed at travellers who love cinema and photography.

Respond ONLY with valid JSON using EXACTLY this structure:
{{
  "destination": "{city}",
  "description_intro": "Short inspiring summary.",
  "best_month_to_visit": "Best season and why.",
  "spots": [
    {{
      "name": "Place name",
      "country": "Country",
      "city": "City",
      "category": "History/Nature/Urban",
      "coordinates": {{ "latitude": 0.0, "longitude": 0.0 }},
      "description": "Tourist description.",
      "best_time_to_visit": "Best time of day (e.g. Sunset).",
      "visitor_tip": "Practical tip.",
      "movie_connection": "Film shot here (e.g. Inception).",
      "camera_settings": {{
        "iso": "ISO 100",
        "shutter_speed": "1/500",
        "aperture": "f/8",
        "focal_length": "24mm",
        "lens_recommendation": "Wide angle"
      }}
    }}
  ]
}}"""


class GuideBuildError(Exception):
    """The travel guide could not be generated or parsed."""

    user_message = "Could not build the travel guide."

    def __init__(self, city: str, reason: str) -> None:
        super().__init__(f"Could not build guide for '{city}': {reason}")
        self.city = city
        self.reason = reason


class TripOrchestrator:
    """Builds cinematic travel guides, cache first."""

    def __init__(
        self,
        resolver: CityResolver,
        text_service: TextGenerationService,
        enrichment: ImageEnrichmentService,
        cache: GuideCache,
        model: str | None = None,
    ) -> None:
        self._resolver = resolver
        self._text_service = text_service
        self._enrichment = enrichment
        self._cache = cache
        self._model = model

    @staticmethod
    def build_prompt(city: str) -> str:
        safe_city = TextGenerationService.sanitize_input(city, max_length=100).replace('"', "'")
        return GUIDE_PROMPT.format(city=safe_city)

    @staticmethod
    def parse_guide(text: str) -> TravelGuide:
        """Parse LLM output into a guide.

        Raises:
            ValueError: If the text is empty, not JSON, or not a guide.
        """
        body = TextGenerationService.extract_json(text or "")
        if not body:
            raise ValueError("empty response")
        data = json.loads(body)
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        return TravelGuide.model_validate(data)

    async def _cache_get(self, key: str) -> TravelGuide | None:
        try:
            return await self._cache.get(key)
        except Exception as e:
            logger.warning(f"[CACHE] Read failed for '{key}', continuing without cache: {e}")
            return None

    async def _cache_put(self, key: str, guide: TravelGuide) -> bool:
        try:
            await self._cache.put(key, guide)
        except Exception as e:
            logger.error(f"[CACHE] Write failed for '{key}': {e}")
            return False
        logger.info(f"[CACHE] Stored guide for '{key}'")
        return True

    async def _generate_guide(self, city: str) -> TravelGuide:
        prompt = self.build_prompt(city)
        try:
            text = await self._text_service.generate(prompt, model=self._model, expect_json=True)
        except GenerationError as e:
            logger.error(f"[ORCHESTRATOR] Generation failed for '{city}': {e}")
            raise GuideBuildError(city, "generation failed") from e

        try:
            return self.parse_guide(text)
        except (ValueError, ValidationError) as e:
            logger.error(f"[ORCHESTRATOR] Unparseable guide for '{city}': {e}")
            raise GuideBuildError(city, "invalid guide JSON") from e

    async def plan_trip(self, user_input: str) -> TravelGuide:
        """Return the travel guide for a city name or vibe.

        Raises:
            GuideBuildError: If the guide could not be generated.
        """
        logger.info(f"[ORCHESTRATOR] Planning trip for input: {user_input!r}")

        city = await self._resolver.resolve(user_input)
        key = GuideCache.build_key(city)

        cached = await self._cache_get(key)
        if cached is not None:
            logger.info(f"[CACHE] HIT: serving '{key}' from cache")
            return cached

        logger.info(f"[CACHE] MISS: generating guide for '{city}'")
        guide = await self._generate_guide(city)

        guide = await self._enrichment.enrich(guide)

        await self._cache_put(key, guide)
        return guide
