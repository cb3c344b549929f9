"""LLM completion — Groq (primary) + Gemini (fallback)."""

from .service import (
    GeminiLLMService,
    GroqLLMService,
    LLMService,
    create_llm_service,
)

__all__ = [
    "GeminiLLMService",
    "GroqLLMService",
    "LLMService",
    "create_llm_service",
]
