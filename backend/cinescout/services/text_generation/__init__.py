"""Text generation: Gemini (primary) + Groq (alternative)."""

from .service import (
    GeminiTextGenerationService,
    GenerationError,
    GroqTextGenerationService,
    TextGenerationService,
    create_text_generation_service,
)

__all__ = [
    "GeminiTextGenerationService",
    "GenerationError",
    "GroqTextGenerationService",
    "TextGenerationService",
    "create_text_generation_service",
]
