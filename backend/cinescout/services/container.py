"""Service container for explicit dependency wiring.

All external clients are constructed once at startup by ``build_services``
and handed to the components that need them. The FastAPI lifespan owns the
container and closes it on shutdown.
"""

import logging
from dataclasses import dataclass

from cinescout.config import Settings
from cinescout.services.cache import GuideCache, NullGuideCache, RedisGuideCache
from cinescout.services.city_resolver import CityResolver
from cinescout.services.enrichment import ImageEnrichmentService
from cinescout.services.images import ImageLookupService, create_image_service
from cinescout.services.orchestrator import TripOrchestrator
from cinescout.services.text_generation import (
    TextGenerationService,
    create_text_generation_service,
)

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Constructed collaborators, shared by every request."""

    settings: Settings
    text_service: TextGenerationService
    image_service: ImageLookupService | None
    cache: GuideCache
    resolver: CityResolver
    enrichment: ImageEnrichmentService
    orchestrator: TripOrchestrator

    async def aclose(self) -> None:
        """Close HTTP and Redis connections."""
        if self.image_service is not None:
            await self.image_service.close()
        await self.cache.close()


def create_guide_cache(settings: Settings) -> GuideCache:
    """Redis when ``REDIS_URL`` is set, otherwise a cache that never hits."""
    if settings.redis_url:
        return RedisGuideCache(settings.redis_url)
    logger.warning("[CACHE] No REDIS_URL configured; caching disabled")
    return NullGuideCache()


def build_services(
    settings: Settings,
    text_service: TextGenerationService | None = None,
    image_service: ImageLookupService | None = None,
    cache: GuideCache | None = None,
) -> ServiceContainer:
    """Wire the application services.

    Explicit arguments replace the clients that would otherwise be built from
    ``settings``.
    """
    text_service = text_service or create_text_generation_service(settings)
    if image_service is None:
        image_service = create_image_service(settings)
    cache = cache or create_guide_cache(settings)

    resolver = CityResolver(text_service)
    enrichment = ImageEnrichmentService(image_service, max_concurrency=settings.image_concurrency)
    orchestrator = TripOrchestrator(
        resolver=resolver,
        text_service=text_service,
        enrichment=enrichment,
        cache=cache,
    )
    return ServiceContainer(
        settings=settings,
        text_service=text_service,
        image_service=image_service,
        cache=cache,
        resolver=resolver,
        enrichment=enrichment,
        orchestrator=orchestrator,
    )
