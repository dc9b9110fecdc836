"""Fill matcher: text inputs, prioritized by how the field is labelled."""

from __future__ import annotations

import re

from stepwise.intelligence.intent import IntentCategory, StepIntent
from stepwise.locator.candidate import ElementCandidate
from stepwise.matchers.base import SemanticMatcher, matches_text
from stepwise.utils.text import collapse_whitespace

_SEPARATORS = re.compile(r"[-_]")

# Exact attribute matches, highest priority first
EXACT_ID_SCORE = 300
EXACT_NAME_SCORE = 280
EXACT_LABEL_SCORE = 250
EXACT_PLACEHOLDER_SCORE = 240

# Per-word containment
WORD_ID_SCORE = 60
WORD_NAME_SCORE = 50
WORD_LABEL_SCORE = 45
WORD_PLACEHOLDER_SCORE = 40

MODAL_SCORE = 80
EMPTY_INPUT_SCORE = 50
UNRELATED_TEXT_PENALTY = -60
NOT_A_FIELD_PENALTY = -70
DISABLED_PENALTY = -40

_FORM_TAGS = frozenset({"input", "textarea", "select"})


class FillMatcher(SemanticMatcher):
    """
    Scores inputs, textareas, selects and contenteditable regions.

    Evidence, strongest first: id, name, associated label, placeholder.
    Empty inputs are preferred since they are likely still unfilled, and
    elements showing unrelated text are treated as existing data.
    """

    category = IntentCategory.FILL
    selectors = ("input", "textarea", "select", "[contenteditable='true']", "[contenteditable]")

    def score_candidate(self, candidate: ElementCandidate, intent: StepIntent) -> float:
        score = 0.0
        target = collapse_whitespace(intent.target_description)

        if target:
            target_lower = target.lower()
            text = candidate.text.strip()
            if text:
                score += matches_text(text, target)
                if target_lower not in text.lower():
                    score += UNRELATED_TEXT_PENALTY
            score += self._attribute_score(candidate, target_lower)

            is_form_control = candidate.tag in _FORM_TAGS
            if candidate.inside_open_modal:
                score += MODAL_SCORE
            if is_form_control and not text and not candidate.value.strip():
                score += EMPTY_INPUT_SCORE
            if "field" in target_lower and not is_form_control:
                score += NOT_A_FIELD_PENALTY
            if candidate.disabled:
                score += DISABLED_PENALTY
            if "email" in target_lower and (candidate.type == "email" or "@" in candidate.placeholder):
                score += 30

        return score + self.type_score(candidate, intent)

    @staticmethod
    def _attribute_score(candidate: ElementCandidate, target: str) -> float:
        compact = target.replace(" ", "")
        element_id = candidate.id.lower()
        name = candidate.name.lower()
        label = candidate.label_text.lower()
        placeholder = candidate.placeholder.lower()
        aria = candidate.label.lower()
        score = 0.0

        # "First Name" must prefer firstName over lastName
        if compact in (element_id, _SEPARATORS.sub("", element_id)):
            score += EXACT_ID_SCORE
        if compact in (name, _SEPARATORS.sub("", name)):
            score += EXACT_NAME_SCORE
        if label and label in (target, compact):
            score += EXACT_LABEL_SCORE
        if placeholder and placeholder in (target, compact):
            score += EXACT_PLACEHOLDER_SCORE

        for word in target.split():
            if word == "field":
                continue
            if word in element_id:
                score += WORD_ID_SCORE
            if word in name:
                score += WORD_NAME_SCORE
            if label and word in label:
                score += WORD_LABEL_SCORE
            if word in placeholder:
                score += WORD_PLACEHOLDER_SCORE

        if label and target in label:
            score += 40
        if target in aria:
            score += 35
        if target in placeholder or target in name or target in element_id:
            score += 30
        return score
