"""Shared fakes and fixtures for the unit tests.

The external collaborators (LLM, image search, cache store) are replaced by
small in-memory fakes that record how they were called.
"""

import asyncio
import copy
import json
from typing import Optional

import pytest

from cinescout.models import CacheEntry, TravelGuide
from cinescout.services.cache import GuideCache
from cinescout.services.images import ImageLookupService
from cinescout.services.text_generation import TextGenerationService


class FakeTextService(TextGenerationService):
    """Returns queued responses; raises ``error`` when set."""

    def __init__(
        self,
        responses: list[str] | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
        timeout: float = 5.0,
    ) -> None:
        self._responses = list(responses or [])
        self._error = error
        self._delay = delay
        self._timeout = timeout
        self._model_name = "fake-model"
        self.calls: list[dict] = []

    @property
    def provider_name(self) -> str:
        return "Fake"

    async def _generate(self, prompt: str, model: str, expect_json: bool) -> str:
        self.calls.append({"prompt": prompt, "model": model, "expect_json": expect_json})
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        if not self._responses:
            return ""
        return self._responses.pop(0)


class FakeImageService(ImageLookupService):
    """Looks queries up in a table; records every query it receives."""

    def __init__(
        self,
        results: dict[str, str] | None = None,
        errors: set[str] | None = None,
        default: Optional[str] = None,
    ) -> None:
        super().__init__(timeout=1.0)
        self.results = results or {}
        self.errors = errors or set()
        self.default = default
        self.queries: list[str] = []

    @property
    def provider_name(self) -> str:
        return "FakeImages"

    async def _fetch(self, client, query: str) -> Optional[str]:  # pragma: no cover
        raise NotImplementedError

    async def search(self, query: str) -> Optional[str]:
        self.queries.append(query)
        if query in self.errors:
            raise RuntimeError(f"lookup exploded for {query}")
        return self.results.get(query, self.default)


class FakeGuideCache(GuideCache):
    """Dict-backed cache with switchable read/write failures."""

    def __init__(self, fail_get: bool = False, fail_put: bool = False) -> None:
        self.store: dict[str, str] = {}
        self.order: list[str] = []
        self.fail_get = fail_get
        self.fail_put = fail_put
        self.get_calls: list[str] = []
        self.put_calls: list[str] = []

    async def get(self, key: str) -> TravelGuide | None:
        self.get_calls.append(key)
        if self.fail_get:
            raise ConnectionError("cache unreachable")
        raw = self.store.get(key)
        return TravelGuide.model_validate_json(raw) if raw else None

    async def put(self, key: str, guide: TravelGuide) -> None:
        self.put_calls.append(key)
        if self.fail_put:
            raise ConnectionError("cache unreachable")
        self.store[key] = guide.model_dump_json()
        if key in self.order:
            self.order.remove(key)
        self.order.insert(0, key)

    async def recent(self, limit: int = 12) -> list[CacheEntry]:
        if self.fail_get:
            raise ConnectionError("cache unreachable")
        return [
            CacheEntry(search_key=k, guide=TravelGuide.model_validate_json(self.store[k]))
            for k in self.order[:limit]
        ]


GUIDE_DATA = {
    "destination": "Kyoto",
    "description_intro": "Temples, lanterns and the ghosts of old Japan.",
    "best_month_to_visit": "November, for the autumn leaves.",
    "spots": [
        {
            "name": "Kinkaku-ji (Golden Pavilion)",
            "country": "Japan",
            "city": "Kyoto",
            "category": "Temple",
            "coordinates": {"latitude": 35.0394, "longitude": 135.7292},
            "description": "A Zen temple covered in gold leaf.",
            "best_time_to_visit": "Early morning",
            "visitor_tip": "Arrive at opening time.",
            "movie_connection": "Memoirs of a Geisha",
            "camera_settings": {
                "iso": "ISO 100",
                "shutter_speed": "1/250",
                "aperture": "f/8",
                "focal_length": "35mm",
                "lens_recommendation": "Standard zoom",
            },
        },
        {
            "name": "Fushimi Inari Taisha",
            "country": "Japan",
            "city": "Kyoto",
            "category": "Shrine",
            "coordinates": {"latitude": 34.9671, "longitude": 135.7727},
            "description": "Thousands of vermilion torii gates.",
            "best_time_to_visit": "Sunset",
            "visitor_tip": "Hike past the first gates to lose the crowds.",
            "movie_connection": "Memoirs of a Geisha",
            "camera_settings": {
                "iso": "ISO 400",
                "shutter_speed": "1/60",
                "aperture": "f/2.8",
                "focal_length": "50mm",
                "lens_recommendation": "Fast prime",
            },
        },
        {
            "name": "Arashiyama Bamboo Grove",
            "country": "Japan",
            "city": "Kyoto",
            "category": "Nature",
            "coordinates": {"latitude": 35.017, "longitude": 135.6713},
            "description": "Towering bamboo stalks.",
            "best_time_to_visit": "Dawn",
            "visitor_tip": "Go before 7am.",
            "movie_connection": "Crouching Tiger, Hidden Dragon",
            "camera_settings": {
                "iso": "ISO 800",
                "shutter_speed": "1/125",
                "aperture": "f/4",
                "focal_length": "16mm",
                "lens_recommendation": "Wide angle",
            },
        },
    ],
}


@pytest.fixture
def guide_data() -> dict:
    return copy.deepcopy(GUIDE_DATA)


@pytest.fixture
def guide_json(guide_data) -> str:
    return json.dumps(guide_data)


@pytest.fixture
def guide(guide_data) -> TravelGuide:
    return TravelGuide.model_validate(guide_data)
