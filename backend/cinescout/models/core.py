"""Core data models for CineScout.

This module contains the Pydantic models used throughout the application for
representing cinematic travel guides, their spots, cache entries and the
error envelope returned by the API.

Field names follow the JSON document the LLM is asked to produce, so a guide
can be parsed straight from the model output and stored in the cache verbatim.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ErrorCode(str, Enum):
    """Error codes exposed in API error responses."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    GENERATION_ERROR = "GENERATION_ERROR"
    CACHE_ERROR = "CACHE_ERROR"
    API_ERROR = "API_ERROR"


class AppError(BaseModel):
    """Error payload returned inside the ``error`` field of a failed response."""

    code: ErrorCode
    message: str = Field(..., description="Technical error message")
    user_message: str = Field(..., description="Message safe to show to users")


class LenientModel(BaseModel):
    """Base for models filled from LLM output.

    A null field takes its default and numbers are accepted for text fields.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class Coordinates(LenientModel):
    """Geographic coordinates of a spot.

    Values come from the LLM and are not range-checked; a guide with a slightly
    off coordinate is still a usable guide.
    """

    latitude: float = Field(0.0, description="Latitude in degrees")
    longitude: float = Field(0.0, description="Longitude in degrees")


class CameraSettings(LenientModel):
    """Suggested photography parameters for recreating a shot.

    Free text only, never validated for photographic plausibility.
    """

    iso: str = ""
    shutter_speed: str = ""
    aperture: str = ""
    focal_length: str = ""
    lens_recommendation: str = ""


class Spot(LenientModel):
    """A single point of interest within a guide."""

    name: str = Field("", description="Display name of the place")
    country: str = ""
    city: str = ""
    category: str = Field("", description="e.g. History, Nature, Urban")
    coordinates: Coordinates = Field(default_factory=Coordinates)
    description: str = ""
    best_time_to_visit: str = ""
    visitor_tip: str = ""
    movie_connection: str = Field("", description="Film shot at or inspired by this place")
    camera_settings: CameraSettings = Field(default_factory=CameraSettings)
    image_url: Optional[str] = Field(None, description="Photo attached by image enrichment")


class TravelGuide(BaseModel):
    """A cinematic travel guide for one destination.

    Born from one LLM call, mutated once by image enrichment, then cached.
    The order of ``spots`` is the order the model returned them in.
    """

    destination: str = Field(..., min_length=1, description="City the guide is about")
    description_intro: str = Field("", description="Short inspiring introduction")
    best_month_to_visit: str = Field("", description="Best season and why")
    destination_image_url: Optional[str] = Field(None, description="Cover photo URL")
    spots: list[Spot] = Field(default_factory=list)

    model_config = ConfigDict(coerce_numbers_to_str=True)

    @field_validator("description_intro", "best_month_to_visit", mode="before")
    @classmethod
    def _null_text_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class CacheEntry(BaseModel):
    """A guide as stored in the cache, keyed by its normalized search term."""

    search_key: str = Field(..., description="Lowercased, trimmed search term")
    guide: TravelGuide
