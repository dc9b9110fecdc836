"""Step intent model produced by the Intent Analyzer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class IntentCategory(StrEnum):
    """Action category of a step."""

    CLICK = "click"
    FILL = "fill"
    VERIFY = "verify"
    SELECT = "select"
    NAVIGATE = "navigate"
    WAIT = "wait"
    UNKNOWN = "unknown"


@dataclass
class StepIntent:
    """
    Decomposed semantic reading of one step.

    Built fresh per step and discarded after use. ``verb`` is the lexicon
    verb that decided the category, or None when the category is the
    default Click.
    """

    original_step: str
    clean_step: str
    action_type: IntentCategory = IntentCategory.UNKNOWN
    target_description: str = ""
    value: str | None = None
    values: list[str] = field(default_factory=list)
    element_type: str | None = None
    modifiers: dict[str, str] = field(default_factory=dict)
    negated: bool = False
    verb: str | None = None

    def modifier(self, key: str) -> str | None:
        return self.modifiers.get(key)

    @property
    def search_text(self) -> str:
        """Text used when matching elements: the target, else the value."""
        return self.target_description or self.value or ""
