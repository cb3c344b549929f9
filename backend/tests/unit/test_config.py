"""Unit tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from waypoint_planner.config import get_settings


class TestSettings:
    def test_defaults(self, monkeypatch) -> None:
        for name in (
            "PROMPT_STYLE", "PORT", "MAX_FILTER_CANDIDATES", "MAX_OPTIONS_PER_CATEGORY",
            "MAX_COMBINATIONS", "MAX_CONCURRENT_ROUTES", "CORS_ORIGINS", "OSRM_URL",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = get_settings()

        assert settings.prompt_style == "pattern"
        assert settings.port == 3000
        assert settings.max_filter_candidates == 15
        assert settings.max_options_per_category == 5
        assert settings.max_combinations == 10
        assert settings.max_concurrent_routes == 10
        assert settings.osrm_url == "https://router.project-osrm.org"
        assert "http://localhost:5173" in settings.cors_origins

    def test_env_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("PROMPT_STYLE", "fewshot")
        monkeypatch.setenv("MAX_COMBINATIONS", "25")
        monkeypatch.setenv("PORT", " ")
        monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example,")

        settings = get_settings()

        assert settings.prompt_style == "fewshot"
        assert settings.max_combinations == 25
        assert settings.port == 3000
        assert settings.cors_origins == ["https://a.example", "https://b.example"]

    def test_limits_must_be_positive(self, monkeypatch) -> None:
        monkeypatch.setenv("MAX_COMBINATIONS", "0")
        with pytest.raises(ValidationError):
            get_settings()
