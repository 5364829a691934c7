"""Image search: Pixabay (primary) + Unsplash (alternative)."""

from .service import (
    ImageLookupService,
    PixabayImageService,
    UnsplashImageService,
    create_image_service,
)

__all__ = [
    "ImageLookupService",
    "PixabayImageService",
    "UnsplashImageService",
    "create_image_service",
]
