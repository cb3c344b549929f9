"""LLM completion service — Groq (primary) + Gemini (fallback).

Provider-agnostic base class with two concrete implementations:
- GroqLLMService:   Groq LPU, llama-3.1-8b-instant
- GeminiLLMService: Google Gemini, gemma-3-4b-it

Callers hand over a prompt plus an optional assistant prefill. The
returned text is the model's continuation only; the prefill is NOT
included, so callers reconstruct the full reply themselves.
"""

import asyncio
import logging
import re
from abc import ABC, abstractmethod

from waypoint_planner.config import Settings, get_settings

logger = logging.getLogger(__name__)


class LLMService(ABC):
    """Base class for text-generation providers.

    Subclasses only implement ``_generate()`` for their specific API client.
    """

    _timeout: float

    @abstractmethod
    async def _generate(
        self,
        prompt: str,
        prefill: str | None,
        max_tokens: int,
        temperature: float,
        timeout: float,
    ) -> str:
        """Send prompt to the provider and return the raw continuation."""
        ...

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Human-readable provider name for logging."""
        ...

    @staticmethod
    def sanitize_input(text: str, max_length: int = 500) -> str:
        """Strip control characters and limit length before prompting."""
        cleaned = re.sub(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]', '', text)
        return cleaned[:max_length].strip()

    async def complete(
        self,
        prompt: str,
        prefill: str | None = None,
        max_tokens: int = 64,
        temperature: float = 0.0,
        timeout: float | None = None,
    ) -> str:
        t = timeout or self._timeout
        try:
            return await self._generate(prompt, prefill, max_tokens, temperature, t)
        except asyncio.TimeoutError:
            logger.warning(f"[LLM] {self.provider_name} timeout after {t}s")
            raise
        except Exception as e:
            logger.warning(f"[LLM] {self.provider_name} error: {e}")
            raise


# ═══════════════════════════════════════════════════════════════════════
# Provider: Groq  (primary, fast LPU inference)
# ═══════════════════════════════════════════════════════════════════════

class GroqLLMService(LLMService):
    """Groq LPU with Llama 3.1 8B Instant."""

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str | None = None,
        timeout_seconds: float = 15.0,
    ) -> None:
        from groq import AsyncGroq

        settings = get_settings()
        self._api_key = api_key or settings.groq_api_key
        if not self._api_key:
            raise ValueError("GROQ_API_KEY not provided")
        self._client = AsyncGroq(api_key=self._api_key)
        self._model_name = model_name or settings.groq_model
        self._timeout = timeout_seconds
        logger.info(f"[LLM] Groq ready: {self._model_name}")

    @property
    def provider_name(self) -> str:
        return "Groq"

    async def _generate(
        self,
        prompt: str,
        prefill: str | None,
        max_tokens: int,
        temperature: float,
        timeout: float,
    ) -> str:
        messages = [{"role": "user", "content": prompt}]
        if prefill:
            messages.append({"role": "assistant", "content": prefill})
        resp = await asyncio.wait_for(
            self._client.chat.completions.create(
                model=self._model_name,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            ),
            timeout=timeout,
        )
        return (resp.choices[0].message.content or "").strip()


# ═══════════════════════════════════════════════════════════════════════
# Provider: Gemini  (fallback)
# ═══════════════════════════════════════════════════════════════════════

class GeminiLLMService(LLMService):
    """Google Gemini with Gemma 3 4B."""

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        from google import genai

        settings = get_settings()
        self._api_key = api_key or settings.gemini_api_key
        if not self._api_key:
            raise ValueError("GEMINI_API_KEY not provided")
        self._client = genai.Client(api_key=self._api_key)
        self._model_name = model_name or settings.gemini_model
        self._timeout = timeout_seconds
        logger.info(f"[LLM] Gemini ready: {self._model_name}")

    @property
    def provider_name(self) -> str:
        return "Gemini"

    async def _generate(
        self,
        prompt: str,
        prefill: str | None,
        max_tokens: int,
        temperature: float,
        timeout: float,
    ) -> str:
        from google.genai import types

        contents = [{"role": "user", "parts": [{"text": prompt}]}]
        if prefill:
            # A trailing model turn is continued by the model
            contents.append({"role": "model", "parts": [{"text": prefill}]})
        resp = await asyncio.wait_for(
            self._client.aio.models.generate_content(
                model=self._model_name,
                contents=contents,
                config=types.GenerateContentConfig(
                    temperature=temperature,
                    max_output_tokens=max_tokens,
                ),
            ),
            timeout=timeout,
        )
        return (resp.text or "").strip()


# ═══════════════════════════════════════════════════════════════════════
# Factory: Groq → Gemini
# ═══════════════════════════════════════════════════════════════════════

def create_llm_service(settings: Settings | None = None) -> LLMService:
    """Create the best available LLM service.  Groq first, Gemini fallback."""
    settings = settings or get_settings()
    if settings.groq_api_key:
        try:
            return GroqLLMService(api_key=settings.groq_api_key, model_name=settings.groq_model)
        except Exception as e:
            logger.info(f"[LLM] Groq init failed: {e}")

    if settings.gemini_api_key:
        try:
            return GeminiLLMService(
                api_key=settings.gemini_api_key, model_name=settings.gemini_model
            )
        except Exception as e:
            logger.info(f"[LLM] Gemini init failed: {e}")

    raise ValueError("No LLM provider available. Set GROQ_API_KEY or GEMINI_API_KEY in .env")
