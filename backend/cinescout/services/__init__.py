"""CineScout Services.

Service layer components:
- Text generation: Gemini (primary) + Groq (alternative) LLM calls
- Images: Pixabay (primary) + Unsplash (alternative) photo search
- Cache: Redis-backed guide cache, no-op when unconfigured
- City resolver: literal city names or LLM-routed vibes
- Enrichment: cover photo plus per-spot fallback cascade
- Orchestrator: resolve → cache → generate → enrich → cache
"""

from .cache import CacheReadError, GuideCache, NullGuideCache, RedisGuideCache
from .city_resolver import CityResolver
from .container import ServiceContainer, build_services
from .enrichment import FALLBACK_IMAGE_URL, ImageEnrichmentService
from .images import (
    ImageLookupService,
    PixabayImageService,
    UnsplashImageService,
    create_image_service,
)
from .orchestrator import GuideBuildError, TripOrchestrator
from .text_generation import (
    GeminiTextGenerationService,
    GenerationError,
    GroqTextGenerationService,
    TextGenerationService,
    create_text_generation_service,
)

__all__ = [
    # Cache
    "CacheReadError",
    "GuideCache",
    "NullGuideCache",
    "RedisGuideCache",
    # City resolver
    "CityResolver",
    # Container
    "ServiceContainer",
    "build_services",
    # Enrichment
    "FALLBACK_IMAGE_URL",
    "ImageEnrichmentService",
    # Images
    "ImageLookupService",
    "PixabayImageService",
    "UnsplashImageService",
    "create_image_service",
    # Orchestrator
    "GuideBuildError",
    "TripOrchestrator",
    # Text generation
    "GeminiTextGenerationService",
    "GenerationError",
    "GroqTextGenerationService",
    "TextGenerationService",
    "create_text_generation_service",
]
