"""Runtime configuration read from the environment (and an optional .env file).

Every external collaborator is optional: a missing image key disables image
enrichment and a missing Redis URL disables caching. Only an LLM key is
required to actually build guides.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:3001",
    "http://localhost:5173",
]


def _env_str(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"[CONFIG] Ignoring invalid {name}={raw!r}, using {default}")
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"[CONFIG] Ignoring invalid {name}={raw!r}, using {default}")
        return default


@dataclass
class Settings:
    """Application settings."""

    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.5-flash"
    groq_api_key: str | None = None
    groq_model: str = "llama-3.3-70b-versatile"
    llm_timeout_seconds: float = 60.0

    redis_url: str | None = None

    pixabay_api_key: str | None = None
    unsplash_access_key: str | None = None
    image_timeout_seconds: float = 5.0
    image_concurrency: int = 4

    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, loading .env first."""
        load_dotenv()

        origins_raw = _env_str("CORS_ORIGINS")
        origins = (
            [o.strip() for o in origins_raw.split(",") if o.strip()]
            if origins_raw
            else list(DEFAULT_CORS_ORIGINS)
        )

        return cls(
            gemini_api_key=_env_str("GEMINI_API_KEY"),
            gemini_model=_env_str("GEMINI_MODEL", cls.gemini_model),
            groq_api_key=_env_str("GROQ_API_KEY"),
            groq_model=_env_str("GROQ_MODEL", cls.groq_model),
            llm_timeout_seconds=_env_float("LLM_TIMEOUT_SECONDS", cls.llm_timeout_seconds),
            redis_url=_env_str("REDIS_URL"),
            pixabay_api_key=_env_str("PIXABAY_API_KEY"),
            unsplash_access_key=_env_str("UNSPLASH_ACCESS_KEY"),
            image_timeout_seconds=_env_float("IMAGE_TIMEOUT_SECONDS", cls.image_timeout_seconds),
            image_concurrency=max(1, _env_int("IMAGE_CONCURRENCY", cls.image_concurrency)),
            cors_origins=origins,
            log_level=(_env_str("LOG_LEVEL", "INFO") or "INFO").upper(),
        )
