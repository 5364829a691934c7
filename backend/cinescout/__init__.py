"""CineScout: cinematic travel guides from a city name or a vibe."""

__version__ = "0.1.0"
