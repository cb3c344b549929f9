"""Runtime configuration read from the environment (and ``.env``)."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

try:
    load_dotenv()
except Exception:
    pass  # Python 3.14+ compat


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


def _list_env(name: str, default: str) -> list[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


class Settings(BaseModel):
    model_config = ConfigDict(validate_default=True)

    groq_api_key: str = Field(default_factory=lambda: os.getenv("GROQ_API_KEY", ""))
    groq_model: str = Field(
        default_factory=lambda: os.getenv("GROQ_MODEL", "llama-3.1-8b-instant")
    )
    gemini_api_key: str = Field(default_factory=lambda: os.getenv("GEMINI_API_KEY", ""))
    gemini_model: str = Field(
        default_factory=lambda: os.getenv("GEMINI_MODEL", "gemma-3-4b-it")
    )
    google_maps_api_key: str = Field(
        default_factory=lambda: os.getenv("GOOGLE_MAPS_API_KEY", "")
    )
    prompt_style: str = Field(default_factory=lambda: os.getenv("PROMPT_STYLE", "pattern"))
    backend_base_url: str = Field(
        default_factory=lambda: os.getenv("BACKEND_BASE_URL", "http://localhost:3000")
    )
    port: int = Field(default_factory=lambda: _int_env("PORT", 3000))
    osrm_url: str = Field(
        default_factory=lambda: os.getenv("OSRM_URL", "https://router.project-osrm.org")
    )
    nominatim_url: str = Field(
        default_factory=lambda: os.getenv(
            "NOMINATIM_URL", "https://nominatim.openstreetmap.org/search"
        )
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: _list_env(
            "CORS_ORIGINS", "http://localhost:3000,http://localhost:5173"
        )
    )

    # Search-space limits. Tunable; they only bound provider calls.
    max_filter_candidates: int = Field(
        default_factory=lambda: _int_env("MAX_FILTER_CANDIDATES", 15), ge=1
    )
    max_options_per_category: int = Field(
        default_factory=lambda: _int_env("MAX_OPTIONS_PER_CATEGORY", 5), ge=1
    )
    max_combinations: int = Field(
        default_factory=lambda: _int_env("MAX_COMBINATIONS", 10), ge=1
    )
    max_concurrent_routes: int = Field(
        default_factory=lambda: _int_env("MAX_CONCURRENT_ROUTES", 10), ge=1
    )


def get_settings() -> Settings:
    return Settings()
