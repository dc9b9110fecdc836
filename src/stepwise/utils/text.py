"""Small text helpers shared by the planner, analyzer and scorers."""

from __future__ import annotations

import json
import re
from difflib import SequenceMatcher

GHERKIN_KEYWORDS: tuple[str, ...] = ("Given", "When", "Then", "And", "But")

_KEYWORD_PREFIX = re.compile(r"^(?:Given|When|Then|And|But)\s+", re.IGNORECASE)
_QUOTED = re.compile(r"[\"']([^\"']+)[\"']")
_WHITESPACE = re.compile(r"\s+")


def strip_keyword(step: str) -> str:
    """Remove a leading Gherkin keyword from a step."""
    return _KEYWORD_PREFIX.sub("", step.strip(), count=1)


def extract_keyword(step: str, default: str = "And") -> str:
    """Return the leading Gherkin keyword of a step, or ``default``."""
    text = step.strip()
    for keyword in GHERKIN_KEYWORDS:
        if re.match(rf"^{keyword}\s", text, re.IGNORECASE):
            return keyword
    return default


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def strip_quotes(text: str | None) -> str | None:
    """Remove one pair of surrounding quotes, if present."""
    if text is None:
        return None
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        return text[1:-1]
    return text


def quoted_values(text: str) -> list[str]:
    """Return every quoted literal in order of appearance."""
    return _QUOTED.findall(text)


def first_quoted(text: str) -> str | None:
    match = _QUOTED.search(text)
    return match.group(1) if match else None


def fuzzy_ratio(a: str | None, b: str | None) -> float:
    """
    Similarity of two strings on a 0-100 scale (case-insensitive).

    Empty inputs score 0 so that blank attributes never look similar.
    """
    if not a or not b:
        return 0.0
    return SequenceMatcher(None, a.lower(), b.lower()).ratio() * 100


def selector_literal(value: str) -> str:
    """Quote a literal for use inside a selector (``:has-text(...)``, ``text=...``)."""
    return json.dumps(value, ensure_ascii=False)
