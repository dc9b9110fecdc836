"""Verify matcher: text-bearing elements, matched on the value being verified."""

from __future__ import annotations

import re

from stepwise.intelligence.intent import IntentCategory, StepIntent
from stepwise.locator.candidate import ElementCandidate
from stepwise.locator.query import quote
from stepwise.matchers.base import SemanticMatcher, action_affinity, element_kind, text_similarity
from stepwise.utils.text import collapse_whitespace

_HEADING_TAG = re.compile(r"h[1-6]")
_MODAL_WORDS = ("modal", "dialog", "form")
_MESSAGE_CLASS_HINTS = ("message", "notification", "alert")


class VerifyMatcher(SemanticMatcher):
    """
    Scores headings, alerts and generic text elements.

    The quoted value is what must appear on the page, so it is matched
    before the target description. Empty elements never qualify.
    """

    category = IntentCategory.VERIFY
    selectors = (
        "h1, h2, h3, h4, h5, h6",
        "p",
        "span",
        "div",
        "label",
        "[role='heading']",
        "[role='alert']",
        ".message, .notification",
    )
    per_selector_limit = 10
    text_match_limit = 20

    @staticmethod
    def verification_text(intent: StepIntent) -> str:
        return intent.value or intent.target_description or ""

    def candidate_selectors(self, intent: StepIntent) -> list[tuple[str, int]]:
        pairs = super().candidate_selectors(intent)
        text = self.verification_text(intent)
        if text:
            pairs.insert(0, (f"text={quote(text)}", self.text_match_limit))
        return pairs

    def accepts(self, candidate: ElementCandidate) -> bool:
        return bool(candidate.text.strip())

    def score_candidate(self, candidate: ElementCandidate, intent: StepIntent) -> float:
        text = collapse_whitespace(candidate.text)
        if not text:
            return -50

        score = 0.0
        search = collapse_whitespace(self.verification_text(intent))
        if search:
            text_lower, search_lower = text.lower(), search.lower()
            if text_lower == search_lower:
                score += 100
            elif search_lower in text_lower:
                score += 80
                if len(search_lower) / len(text_lower) > 0.5:
                    score += 20
            else:
                score += text_similarity(text, search) * 40

            if _HEADING_TAG.fullmatch(candidate.tag):
                score += 30
            if candidate.role.lower() in ("heading", "alert", "status"):
                score += 25
            classes = candidate.class_name.lower()
            if any(hint in classes for hint in _MESSAGE_CLASS_HINTS):
                score += 20
            score += 15 if candidate.visible else -50

            description = intent.target_description.lower()
            if candidate.inside_open_modal and any(word in description for word in _MODAL_WORDS):
                score += 40

        return score + action_affinity(element_kind(candidate), self.category) * 20
