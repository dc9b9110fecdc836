"""
"Did you mean" suggestions for unsupported steps.

Each intent detected in the step proposes canonical phrasings filled
with the literals found in the original text. A phrasing is offered
only when the caller's support check accepts it. Confidence blends the
phrasing's rank with its fuzzy similarity to the original step.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from types import MappingProxyType

import structlog

from stepwise.utils.text import collapse_whitespace, fuzzy_ratio, quoted_values, strip_keyword, strip_quotes

logger = structlog.get_logger(__name__)

MAX_SUGGESTIONS = 5

# Share of confidence taken from similarity to the original step
SIMILARITY_WEIGHT = 0.25


@dataclass(frozen=True)
class StepSuggestion:
    """A supported rewrite of an unsupported step."""

    step: str
    reason: str
    confidence: float

    def __str__(self) -> str:
        return f"{self.confidence:.0%} - {self.step} ({self.reason})"


@dataclass(frozen=True)
class SuggestionTemplate:
    template: str
    reason: str
    weight: float


_INTENT_TRIGGERS: MappingProxyType[str, re.Pattern[str]] = MappingProxyType({
    "click": re.compile(r"\b(?:click|press|tap|hit|push|button|link)\b"),
    "fill": re.compile(r"\b(?:enter|type|fill|input|put|write|field|textbox|box)\b"),
    "select": re.compile(r"\b(?:select|choose|pick|dropdown|option)\b"),
    "navigate": re.compile(r"\b(?:navigate|go to|open|visit|load|url|page|website|site)\b|https?://"),
    "verify": re.compile(r"\b(?:verify|check|assert|validate|see|should|expect)\b"),
})

TEMPLATES: MappingProxyType[str, tuple[SuggestionTemplate, ...]] = MappingProxyType({
    "click": (
        SuggestionTemplate('When I click "{element}"', "Standard click", 0.95),
        SuggestionTemplate('When I click on "{element}" button', "Click a button", 0.90),
        SuggestionTemplate('When I press "{element}"', "Alternative click", 0.85),
    ),
    "fill": (
        SuggestionTemplate('When I enter "{value}" in "{field}"', "Standard fill", 0.95),
        SuggestionTemplate('When I fill {field} with "{value}"', "Fill with value", 0.90),
        SuggestionTemplate('When I enter {field} "{value}"', "Field then value", 0.85),
    ),
    "select": (
        SuggestionTemplate('When I select "{option}" from "{dropdown}"', "Standard select", 0.95),
        SuggestionTemplate('When I choose "{option}" from "{dropdown}"', "Alternative select", 0.90),
    ),
    "navigate": (
        SuggestionTemplate('Given I navigate to "{url}"', "Standard navigation", 0.95),
        SuggestionTemplate('When I open "{url}"', "Alternative navigation", 0.90),
    ),
    "verify": (
        SuggestionTemplate('Then I should see "{text}"', "Standard verification", 0.95),
        SuggestionTemplate('Then I verify "{text}" is displayed', "Alternative verification", 0.90),
    ),
})

_CLICK_TARGET = re.compile(
    r"\b(?:click|press|tap|hit|push)\s+(?:on\s+)?(?:the\s+)?(?P<element>.+?)(?:\s+(?:button|link|icon))?$",
    re.IGNORECASE,
)
_FILL_FIELD = re.compile(r"\b(?:in|into|to|for)\s+(?:the\s+)?(?P<field>[^\"']+?|[\"'][^\"']+[\"'])$", re.IGNORECASE)
_SELECT_SOURCE = re.compile(r"\b(?:from|in)\s+(?:the\s+)?(?P<dropdown>[^\"']+?|[\"'][^\"']+[\"'])$", re.IGNORECASE)
_URL = re.compile(r"https?://[^\s\"']+", re.IGNORECASE)
_FIELD_NOISE = re.compile(r"\s+(?:text\s*box|textbox|field|box|input|dropdown|list|menu)$", re.IGNORECASE)


def _clean_name(text: str | None) -> str | None:
    if not text:
        return None
    name = _FIELD_NOISE.sub("", strip_quotes(text.strip()) or "").strip()
    return name or None


def extract_fields(intent: str, step: str) -> dict[str, str] | None:
    """
    Pull the literals a template for ``intent`` needs out of ``step``.

    Returns:
        Template fields, or None when the step lacks them
    """
    text = collapse_whitespace(strip_keyword(step))
    quotes = quoted_values(text)

    match intent:
        case "click":
            if quotes:
                return {"element": quotes[0]}
            m = _CLICK_TARGET.search(text)
            element = _clean_name(m.group("element")) if m else None
            return {"element": element} if element else None
        case "fill":
            m = _FILL_FIELD.search(text)
            field = _clean_name(m.group("field")) if m else None
            if not quotes or field is None or field == quotes[0]:
                return None
            return {"value": quotes[0], "field": field}
        case "select":
            m = _SELECT_SOURCE.search(text)
            dropdown = _clean_name(m.group("dropdown")) if m else None
            if not quotes or dropdown is None or dropdown == quotes[0]:
                return None
            return {"option": quotes[0], "dropdown": dropdown}
        case "navigate":
            m = _URL.search(text)
            return {"url": m.group(0)} if m else None
        case "verify":
            return {"text": quotes[0]} if quotes else None
    return None


class StepSuggestionEngine:
    """
    Proposes supported rewrites for a step no tier handles.

    Args:
        supports: Predicate telling whether a phrasing would be handled
        limit: Maximum number of suggestions returned
    """

    def __init__(self, supports: Callable[[str], bool], limit: int = MAX_SUGGESTIONS) -> None:
        self._supports = supports
        self._limit = limit
        self._log = logger.bind(component="suggestion_engine")

    def detect_intents(self, step: str) -> list[str]:
        lower = (step or "").lower()
        return [intent for intent, trigger in _INTENT_TRIGGERS.items() if trigger.search(lower)]

    def generate_suggestions(self, step: str) -> list[StepSuggestion]:
        """
        Suggest supported phrasings for ``step``, best first.

        Returns:
            Up to ``limit`` suggestions; empty when nothing fits
        """
        step = (step or "").strip()
        if not step:
            return []

        suggestions: dict[str, StepSuggestion] = {}
        for intent in self.detect_intents(step):
            fields = extract_fields(intent, step)
            if fields is None:
                continue
            for template in TEMPLATES[intent]:
                candidate = template.template.format(**fields)
                if candidate == step or candidate in suggestions or not self._supports(candidate):
                    continue
                similarity = fuzzy_ratio(step, candidate) / 100
                confidence = template.weight * ((1 - SIMILARITY_WEIGHT) + SIMILARITY_WEIGHT * similarity)
                suggestions[candidate] = StepSuggestion(candidate, template.reason, round(confidence, 3))

        ranked = sorted(suggestions.values(), key=lambda s: s.confidence, reverse=True)[: self._limit]
        self._log.debug("Generated suggestions", step=step, count=len(ranked))
        return ranked
