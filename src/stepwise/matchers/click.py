"""Click matcher: interactive elements, modal-aware submit handling."""

from __future__ import annotations

import re

from stepwise.intelligence.intent import IntentCategory, StepIntent
from stepwise.locator.candidate import ElementCandidate
from stepwise.matchers.base import SemanticMatcher, matches_text

_CONFIRM_TARGET = re.compile(r"submit|save|\bok\b")
_DISMISS_WORDS = ("close", "cancel")


class ClickMatcher(SemanticMatcher):
    """
    Scores buttons, links and other clickable elements.

    When the target reads like a confirmation ("Submit", "Save", "OK"),
    close/cancel buttons are heavily penalized and, if a modal is open,
    submit buttons inside it are strongly preferred over anything outside.
    """

    category = IntentCategory.CLICK
    selectors = ("button", "a", "input", "select", "[role='button']", "[onclick]")
    per_selector_limit = 5

    def score_candidate(self, candidate: ElementCandidate, intent: StepIntent) -> float:
        score = 0.0
        target = intent.search_text

        if target:
            if not candidate.text.strip():
                score -= 30
            else:
                score += matches_text(candidate.text, target)

            if _CONFIRM_TARGET.search(target.lower()):
                score += self._confirmation_score(candidate)

        return score + self.type_score(candidate, intent)

    @staticmethod
    def _confirmation_score(candidate: ElementCandidate) -> float:
        text = candidate.text.strip().lower()
        element_id = candidate.id.lower()
        classes = candidate.class_name.lower()
        score = 0.0

        if "×" in text or any(word in value for word in _DISMISS_WORDS for value in (text, element_id, classes)):
            score -= 100

        if candidate.page_has_modal:
            if candidate.inside_open_modal:
                if candidate.type == "submit" or any("submit" in value for value in (text, element_id, classes)):
                    score += 150
            else:
                score -= 80
        return score
