"""Image enrichment: cover photo plus a per-spot fallback cascade."""

from .service import (
    FALLBACK_IMAGE_URL,
    ImageEnrichmentService,
    build_spot_queries,
    clean_spot_name,
)

__all__ = [
    "FALLBACK_IMAGE_URL",
    "ImageEnrichmentService",
    "build_spot_queries",
    "clean_spot_name",
]
