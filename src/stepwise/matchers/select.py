"""Select matcher: native selects and custom dropdown widgets."""

from __future__ import annotations

from stepwise.intelligence.intent import IntentCategory, StepIntent
from stepwise.locator.candidate import ElementCandidate
from stepwise.matchers.base import SemanticMatcher, action_affinity, matches_text
from stepwise.utils.text import collapse_whitespace


class SelectMatcher(SemanticMatcher):
    """Scores ``<select>`` elements, ARIA comboboxes/listboxes and dropdown-classed wrappers."""

    category = IntentCategory.SELECT
    selectors = (
        "select",
        "[role='combobox']",
        "[role='listbox']",
        ".select, .dropdown",
        "[class*='select']",
        "input[type='search']",
    )
    per_selector_limit = 20

    def score_candidate(self, candidate: ElementCandidate, intent: StepIntent) -> float:
        score = 0.0
        target = collapse_whitespace(intent.target_description).lower()

        if target:
            if candidate.text.strip():
                score += matches_text(candidate.text, target)
            if candidate.tag == "select":
                score += 60
            if candidate.role.lower() in ("combobox", "listbox"):
                score += 50
            if candidate.inside_open_modal:
                score += 80
            if candidate.label_text and target in candidate.label_text.lower():
                score += 40
            if target in candidate.label.lower():
                score += 35
            if target in candidate.name.lower() or target in candidate.id.lower():
                score += 30

        return score + action_affinity("select", self.category) * 30
