"""Data models for CineScout."""

from .core import (
    AppError,
    CacheEntry,
    CameraSettings,
    Coordinates,
    ErrorCode,
    Spot,
    TravelGuide,
)

__all__ = [
    "AppError",
    "CacheEntry",
    "CameraSettings",
    "Coordinates",
    "ErrorCode",
    "Spot",
    "TravelGuide",
]
