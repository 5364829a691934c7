"""Image enrichment for travel guides.

Attaches a cover photo to the guide and a photo to every spot.

Per spot, queries run as a cascade and stop at the first hit:
1. "<clean name> <city>"       e.g. "Kinkaku-ji Kyoto"
2. "<clean name>"              the city tag sometimes confuses the search
3. "<category> <city>"         something of the same style, e.g. "Temple Kyoto"
4. FALLBACK_IMAGE_URL          never leaves a spot without a photo

Spots are enriched concurrently (bounded by a semaphore); the cascade within
a spot is sequential. Spot order is never changed.
"""

import asyncio
import logging
import re
from typing import Optional

from cinescout.models import Spot, TravelGuide
from cinescout.services.images import ImageLookupService

logger = logging.getLogger(__name__)

FALLBACK_IMAGE_URL = (
    "https://images.unsplash.com/photo-1469854523086-cc02fe5d8800"
    "?q=80&w=2021&auto=format&fit=crop"
)

DEFAULT_CATEGORY = "tourist attraction"

# "(" or a dash with whitespace on at least one side.
_SUFFIX_SEPARATOR = re.compile(r"\(|\s[-–—]|[-–—]\s")


def clean_spot_name(name: str) -> str:
    """Drop parenthetical and dash-separated suffixes from a spot name.

    Hyphens inside a word (Kinkaku-ji) are part of the name and are kept.

    >>> clean_spot_name("Kinkaku-ji (Golden Pavilion)")
    'Kinkaku-ji'
    >>> clean_spot_name("Tokyo Tower - Night View")
    'Tokyo Tower'
    """
    cleaned = _SUFFIX_SEPARATOR.split(name, maxsplit=1)[0].strip()
    return cleaned or name.strip()


def build_spot_queries(spot: Spot) -> list[str]:
    """Search queries for a spot, in cascade order (stages 1-3)."""
    clean_name = clean_spot_name(spot.name)
    city = spot.city.strip()
    category = spot.category.strip() or DEFAULT_CATEGORY
    return [
        f"{clean_name} {city}".strip(),
        clean_name,
        f"{category} {city}".strip(),
    ]


class ImageEnrichmentService:
    """Attaches image URLs to a guide using an image lookup service."""

    def __init__(
        self,
        image_service: ImageLookupService | None,
        max_concurrency: int = 4,
    ) -> None:
        self._image_service = image_service
        self._semaphore = asyncio.Semaphore(max(1, max_concurrency))

    @property
    def enabled(self) -> bool:
        return self._image_service is not None

    async def _lookup(self, query: str) -> Optional[str]:
        """One cascade stage. Any failure counts as no result."""
        if not query:
            return None
        try:
            url = await self._image_service.search(query)  # type: ignore[union-attr]
        except Exception as e:
            logger.warning(f"[IMAGES] Lookup error for \"{query}\": {type(e).__name__}: {e}")
            return None
        return url or None

    async def _image_for_spot(self, spot: Spot) -> str:
        async with self._semaphore:
            queries = build_spot_queries(spot)
            for stage, query in enumerate(queries, 1):
                url = await self._lookup(query)
                if url:
                    if stage > 1:
                        logger.info(f"[IMAGES] {spot.name}: found at stage {stage} (\"{query}\")")
                    return url
            logger.info(f"[IMAGES] {spot.name}: no photo found, using generic fallback")
            return FALLBACK_IMAGE_URL

    async def enrich(self, guide: TravelGuide) -> TravelGuide:
        """Attach image URLs to ``guide`` in place and return it.

        Never raises. Without an image service this is a no-op.
        """
        if not self.enabled:
            logger.warning("[IMAGES] No image provider configured, skipping enrichment")
            return guide

        cover = await self._lookup(f"{guide.destination} travel")
        if cover:
            guide.destination_image_url = cover

        urls = await asyncio.gather(*(self._image_for_spot(spot) for spot in guide.spots))
        for spot, url in zip(guide.spots, urls):
            spot.image_url = url

        logger.info(
            f"[IMAGES] {guide.destination}: cover={'yes' if cover else 'no'}, "
            f"{len(guide.spots)} spots enriched"
        )
        return guide
