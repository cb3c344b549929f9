"""Prompt templates for the relevance filter.

Each template takes the user query and the rendered, numbered place list
and returns the user-turn prompt. The assistant turn is pre-filled with
``[`` so none of them end with an opening bracket.

``pattern`` is the default: it states the primary-purpose rule instead
of listing chains.
"""

from typing import Callable

PromptTemplate = Callable[[str, str], str]


def _pattern(query: str, places_list: str) -> str:
    return (
        f"{places_list}\n\n"
        f'"{query}" → JSON indices where query matches PRIMARY purpose.\n'
        f"Rule: Include if query IS what they do. "
        f"Exclude if query is just something they ALSO offer.\n"
        f'Specific Brands: If query is a brand name (e.g., "World Market", "Dunkin"), '
        f"ONLY match that specific chain.\n"
        f"Examples:\n"
        f'- "coffee" ✓ coffee shops, ✗ restaurants with coffee\n'
        f'- "grocery" ✓ supermarkets, ✗ convenience stores\n'
        f'- "bank" ✓ financial banks, ✗ places with "bank" in name'
    )


def _minimal(query: str, places_list: str) -> str:
    return f'{places_list}\n\n"{query}" → JSON indices of matches:'


def _primary(query: str, places_list: str) -> str:
    return (
        f"{places_list}\n\n"
        f'Query: "{query}"\n'
        f"Return JSON array of indices where query is the place's PRIMARY purpose "
        f"(not secondary). Retail only."
    )


def _verbose(query: str, places_list: str) -> str:
    return (
        f'Filter these Google Places results. User wants: "{query}"\n\n'
        f"Places:\n{places_list}\n\n"
        f"STRICT RULES - only include RETAIL STORES where you can BUY things:\n"
        f'- "coffee" = coffee shops ONLY (Starbucks, Colectivo, Stone Creek). '
        f"EXCLUDE restaurants/cafes that just serve coffee.\n"
        f'- "craft store" = RETAIL arts & crafts supply stores ONLY '
        f"(Michaels, Joann, Hobby Lobby, Blick Art Materials). EXCLUDE: university "
        f"facilities, community centers, hardware stores, variety stores, bead shops.\n"
        f'- "grocery" = grocery stores/supermarkets ONLY.\n\n'
        f"Return ONLY a JSON array of indices. No explanation, no text, just the array.\n"
        f"Example: [0, 3]"
    )


def _fewshot(query: str, places_list: str) -> str:
    return (
        f"{places_list}\n\n"
        f'"{query}" → indices where PRIMARY purpose matches. Retail only.\n'
        f'✓ Starbucks for "coffee" (coffee shop)\n'
        f'✗ Panera for "coffee" (bakery-cafe)\n'
        f"JSON:"
    )


PROMPT_TEMPLATES: dict[str, PromptTemplate] = {
    "pattern": _pattern,
    "minimal": _minimal,
    "primary": _primary,
    "verbose": _verbose,
    "fewshot": _fewshot,
}

DEFAULT_PROMPT_STYLE = "pattern"


def build_prompt(style: str, query: str, places_list: str) -> str:
    """Render ``style`` and drop a trailing ``[`` (the prefill supplies it)."""
    try:
        template = PROMPT_TEMPLATES[style]
    except KeyError:
        raise ValueError(
            f"Unknown prompt style '{style}'. Choose from: {', '.join(PROMPT_TEMPLATES)}"
        ) from None
    prompt = template(query, places_list).strip()
    if prompt.endswith("["):
        prompt = prompt[:-1].rstrip()
    return prompt
