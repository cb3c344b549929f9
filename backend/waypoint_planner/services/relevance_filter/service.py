"""Relevance filter: keep only places whose primary purpose matches a query.

Place search returns noisy results ("Target" for "target practice",
diners for "coffee", public markets for "World Market"). The filter asks
an LLM for the indices of the genuine matches and parses the reply with
a narrow grammar:

    reply   := "[" + completion
    result  := first substring matching  "[" (digit | "," | whitespace)* "]"

Anything around that substring is ignored. No match means zero matches,
never an error. Only a failed provider call raises ``FilterTransportError``.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Sequence

import httpx

from waypoint_planner.config import get_settings
from waypoint_planner.exceptions import FilterTransportError
from waypoint_planner.models import PlaceCandidate
from waypoint_planner.services.llm import LLMService

from .prompts import DEFAULT_PROMPT_STYLE, PROMPT_TEMPLATES, build_prompt

logger = logging.getLogger(__name__)

MAX_FILTER_CANDIDATES = 15
RESPONSE_PREFILL = "["
MAX_RESPONSE_TOKENS = 64

_INDEX_LIST_RE = re.compile(r"\[[\d,\s]*\]")


def parse_index_list(text: str) -> list[int]:
    """Extract the first bracketed integer list from model text.

    >>> parse_index_list("Based on analysis: [0, 1, 2]")
    [0, 1, 2]
    >>> parse_index_list("I cannot filter these results.")
    []
    """
    match = _INDEX_LIST_RE.search(text)
    if not match:
        return []
    return [int(token) for token in match.group(0)[1:-1].replace(",", " ").split()]


def render_places_list(places: Sequence[PlaceCandidate]) -> str:
    """Numbered ``"<i>. <name> - Types: <tags>"`` lines, tags omitted when empty."""
    lines = []
    for i, place in enumerate(places):
        line = f"{i}. {place.name}"
        if place.category_tags:
            line += f" - Types: {', '.join(place.category_tags)}"
        lines.append(line)
    return "\n".join(lines)


class RelevanceFilter(ABC):
    """Base class for relevance filters.

    ``filter_indices`` returns the raw indices the model produced (possibly
    out of range or repeated). ``filter`` maps them back onto the input,
    dropping indices that point nowhere and repeats of the same place.
    """

    max_candidates: int = MAX_FILTER_CANDIDATES

    @abstractmethod
    async def filter_indices(self, query: str, places: Sequence[PlaceCandidate]) -> list[int]:
        pass

    async def filter(
        self, query: str, candidates: Sequence[PlaceCandidate]
    ) -> list[PlaceCandidate]:
        candidates = list(candidates)[: self.max_candidates]
        if not candidates:
            return []
        indices = await self.filter_indices(query, candidates)
        kept: list[PlaceCandidate] = []
        seen: set[int] = set()
        for idx in indices:
            if 0 <= idx < len(candidates) and idx not in seen:
                seen.add(idx)
                kept.append(candidates[idx])
        logger.info(f"[FILTER] '{query}': kept {len(kept)}/{len(candidates)}")
        return kept


class LLMRelevanceFilter(RelevanceFilter):
    """Relevance filter backed by a single deterministic LLM call."""

    def __init__(
        self,
        llm: LLMService,
        prompt_style: str = DEFAULT_PROMPT_STYLE,
        max_candidates: int = MAX_FILTER_CANDIDATES,
    ) -> None:
        if prompt_style not in PROMPT_TEMPLATES:
            raise ValueError(
                f"Unknown prompt style '{prompt_style}'. "
                f"Choose from: {', '.join(PROMPT_TEMPLATES)}"
            )
        self._llm = llm
        self._prompt_style = prompt_style
        self.max_candidates = max_candidates

    @property
    def prompt_style(self) -> str:
        return self._prompt_style

    async def filter_indices(self, query: str, places: Sequence[PlaceCandidate]) -> list[int]:
        places = list(places)[: self.max_candidates]
        if not places:
            return []

        query = self._llm.sanitize_input(query, max_length=100)
        prompt = build_prompt(self._prompt_style, query, render_places_list(places))
        logger.info(f"[FILTER] Style: {self._prompt_style} | Query: {query}")

        try:
            completion = await self._llm.complete(
                prompt,
                prefill=RESPONSE_PREFILL,
                max_tokens=MAX_RESPONSE_TOKENS,
                temperature=0.0,
            )
        except Exception as e:
            raise FilterTransportError(str(e)) from e

        reply = RESPONSE_PREFILL + completion
        logger.debug(f"[FILTER] Response: {reply}")
        if not _INDEX_LIST_RE.search(reply):
            logger.info("[FILTER] No JSON array found in response")
        return parse_index_list(reply)


class RemoteRelevanceFilter(RelevanceFilter):
    """Client for a backend's ``POST /api/filter-places`` endpoint.

    The endpoint fails open (returns every index plus an ``error``); that
    answer is unfiltered, so it is reported here as a transport failure.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 20.0,
        max_candidates: int = MAX_FILTER_CANDIDATES,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or get_settings().backend_base_url).rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self.max_candidates = max_candidates

    async def filter_indices(self, query: str, places: Sequence[PlaceCandidate]) -> list[int]:
        places = list(places)[: self.max_candidates]
        if not places:
            return []

        payload = {
            "userQuery": query,
            "places": [
                {"name": p.name, "types": p.category_tags, "vicinity": p.vicinity}
                for p in places
            ],
        }
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(f"{self._base_url}/api/filter-places", json=payload)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise FilterTransportError(str(e)) from e

        if not isinstance(data, dict):
            raise FilterTransportError(f"Unexpected response body: {type(data).__name__}")
        if data.get("error"):
            raise FilterTransportError(str(data["error"]))
        try:
            return [int(i) for i in data.get("filteredIndices") or []]
        except (TypeError, ValueError) as e:
            raise FilterTransportError(f"Malformed filteredIndices: {e}") from e
