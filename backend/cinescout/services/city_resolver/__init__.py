"""City resolver: literal city names or LLM-routed vibes."""

from .service import VIBE_MARKERS, CityResolver

__all__ = [
    "CityResolver",
    "VIBE_MARKERS",
]
