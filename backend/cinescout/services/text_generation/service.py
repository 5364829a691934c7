"""Text generation service: Gemini (primary) + Groq (alternative).

Provider-agnostic base class with two concrete implementations:
- GeminiTextGenerationService: Google Gemini, gemini-2.5-flash
- GroqTextGenerationService:   Groq LPU, llama-3.3-70b-versatile

Each call is a single request to the provider. Callers decide whether a
``GenerationError`` is fatal (guide building) or recoverable (city routing).
"""

import asyncio
import logging
import re
from abc import ABC, abstractmethod

from cinescout.config import Settings

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """Raised when the LLM provider fails to produce text."""


class TextGenerationService(ABC):
    """Base class for LLM text generation.

    Subclasses only implement ``_generate()`` for their specific API client;
    timeouts and error wrapping live here.
    """

    _timeout: float
    _model_name: str

    @abstractmethod
    async def _generate(self, prompt: str, model: str, expect_json: bool) -> str:
        """Send prompt to the provider and return raw text."""
        ...

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Human-readable provider name for logging."""
        ...

    @property
    def default_model(self) -> str:
        return self._model_name

    async def generate(
        self,
        prompt: str,
        model: str | None = None,
        expect_json: bool = False,
    ) -> str:
        """Generate text for ``prompt``.

        Args:
            prompt: The full prompt to send.
            model: Model name; the provider default is used when omitted.
            expect_json: Ask the provider for a JSON document.

        Returns:
            The stripped response text (may be empty).

        Raises:
            GenerationError: If the provider errors or times out.
        """
        model_name = model or self._model_name
        try:
            text = await asyncio.wait_for(
                self._generate(prompt, model_name, expect_json),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            logger.warning(f"[{self.provider_name}] Timeout after {self._timeout}s")
            raise GenerationError(f"{self.provider_name} timed out") from e
        except Exception as e:
            logger.warning(f"[{self.provider_name}] Error: {e}")
            raise GenerationError(f"{self.provider_name} generation failed") from e
        return (text or "").strip()

    # ── Utilities ─────────────────────────────────────────────────────

    @staticmethod
    def sanitize_input(text: str, max_length: int = 300) -> str:
        """Strip control characters and cap length before embedding in a prompt."""
        cleaned = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]", "", text)
        return cleaned[:max_length].strip()

    @staticmethod
    def extract_json(text: str) -> str:
        """Return the JSON body of ``text``, dropping Markdown code fences."""
        if "```json" in text:
            return text.split("```json")[1].split("```")[0].strip()
        if "```" in text:
            return text.split("```")[1].split("```")[0].strip()
        return text.strip()


# ═══════════════════════════════════════════════════════════════════════
# Provider: Gemini  (primary)
# ═══════════════════════════════════════════════════════════════════════

class GeminiTextGenerationService(TextGenerationService):
    """Google Gemini via the google-genai SDK."""

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-2.5-flash",
        timeout_seconds: float = 60.0,
        temperature: float = 0.5,
    ) -> None:
        from google import genai

        if not api_key:
            raise ValueError("GEMINI_API_KEY not provided")
        self._client = genai.Client(api_key=api_key)
        self._model_name = model_name
        self._timeout = timeout_seconds
        self._temperature = temperature
        logger.info(f"[AI] Gemini ready: {self._model_name}")

    @property
    def provider_name(self) -> str:
        return "Gemini"

    async def _generate(self, prompt: str, model: str, expect_json: bool) -> str:
        from google.genai import types

        config = types.GenerateContentConfig(
            temperature=self._temperature,
            response_mime_type="application/json" if expect_json else None,
        )
        resp = await self._client.aio.models.generate_content(
            model=model,
            contents=prompt,
            config=config,
        )
        return resp.text or ""


# ═══════════════════════════════════════════════════════════════════════
# Provider: Groq  (alternative)
# ═══════════════════════════════════════════════════════════════════════

class GroqTextGenerationService(TextGenerationService):
    """Groq LPU chat completions."""

    def __init__(
        self,
        api_key: str,
        model_name: str = "llama-3.3-70b-versatile",
        timeout_seconds: float = 60.0,
        temperature: float = 0.5,
    ) -> None:
        from groq import AsyncGroq

        if not api_key:
            raise ValueError("GROQ_API_KEY not provided")
        self._client = AsyncGroq(api_key=api_key)
        self._model_name = model_name
        self._timeout = timeout_seconds
        self._temperature = temperature
        logger.info(f"[AI] Groq ready: {self._model_name}")

    @property
    def provider_name(self) -> str:
        return "Groq"

    async def _generate(self, prompt: str, model: str, expect_json: bool) -> str:
        kwargs = {}
        if expect_json:
            kwargs["response_format"] = {"type": "json_object"}
        resp = await self._client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self._temperature,
            max_tokens=8192,
            **kwargs,
        )
        return resp.choices[0].message.content or ""


# ═══════════════════════════════════════════════════════════════════════
# Factory: Gemini → Groq
# ═══════════════════════════════════════════════════════════════════════

def create_text_generation_service(settings: Settings) -> TextGenerationService:
    """Create the best available text service.  Gemini first, Groq fallback."""
    if settings.gemini_api_key:
        try:
            return GeminiTextGenerationService(
                api_key=settings.gemini_api_key,
                model_name=settings.gemini_model,
                timeout_seconds=settings.llm_timeout_seconds,
            )
        except Exception as e:
            logger.info(f"[AI] Gemini init failed: {e}")

    if settings.groq_api_key:
        try:
            return GroqTextGenerationService(
                api_key=settings.groq_api_key,
                model_name=settings.groq_model,
                timeout_seconds=settings.llm_timeout_seconds,
            )
        except Exception as e:
            logger.info(f"[AI] Groq init failed: {e}")

    raise ValueError("No LLM provider available. Set GEMINI_API_KEY or GROQ_API_KEY in .env")
