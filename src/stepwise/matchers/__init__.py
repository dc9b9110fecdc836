"""
Category semantic matchers used by the intent pipeline.

Provides:
- SemanticMatcher: shared candidate collection, scoring loop and threshold
- ClickMatcher / FillMatcher / SelectMatcher / VerifyMatcher
"""

from stepwise.matchers.base import (
    SemanticMatcher,
    action_affinity,
    element_kind,
    text_similarity,
    type_similarity,
)
from stepwise.matchers.click import ClickMatcher
from stepwise.matchers.fill import FillMatcher
from stepwise.matchers.select import SelectMatcher
from stepwise.matchers.verify import VerifyMatcher

__all__ = [
    # Base
    "SemanticMatcher",
    "action_affinity",
    "element_kind",
    "text_similarity",
    "type_similarity",
    # Matchers
    "ClickMatcher",
    "FillMatcher",
    "SelectMatcher",
    "VerifyMatcher",
]
