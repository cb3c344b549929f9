"""Relevance filter — LLM-judged primary-purpose matching."""

from .prompts import DEFAULT_PROMPT_STYLE, PROMPT_TEMPLATES, build_prompt
from .service import (
    LLMRelevanceFilter,
    RelevanceFilter,
    RemoteRelevanceFilter,
    parse_index_list,
    render_places_list,
)

__all__ = [
    "DEFAULT_PROMPT_STYLE",
    "PROMPT_TEMPLATES",
    "build_prompt",
    "LLMRelevanceFilter",
    "RelevanceFilter",
    "RemoteRelevanceFilter",
    "parse_index_list",
    "render_places_list",
]
