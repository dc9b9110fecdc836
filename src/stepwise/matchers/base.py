"""
Base class for the category semantic matchers.

A matcher collects a capped pool of action-relevant elements, snapshots
each one, scores it with category-specific heuristics and returns the
arg-max candidate if it clears the category threshold.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import structlog

from stepwise.config import Settings, get_settings
from stepwise.intelligence.intent import IntentCategory, StepIntent
from stepwise.locator.candidate import DESCRIBE_ELEMENT_JS, ElementCandidate, ScoredElement
from stepwise.utils.text import collapse_whitespace

if TYPE_CHECKING:
    from stepwise.driver.protocols import ElementHandle, QueryRoot


def text_similarity(text1: str | None, text2: str | None) -> float:
    """
    Similarity of two strings in [0, 1].

    Equal strings score 1.0 and containment 0.8; otherwise the word-set
    Jaccard overlap.
    """
    if text1 is None or text2 is None:
        return 0.0
    t1 = collapse_whitespace(text1).lower()
    t2 = collapse_whitespace(text2).lower()
    if t1 == t2:
        return 1.0
    if t1 in t2 or t2 in t1:
        return 0.8
    words1, words2 = set(t1.split()), set(t2.split())
    union = words1 | words2
    return len(words1 & words2) / len(union) if union else 0.0


def type_similarity(actual: str | None, expected: str | None) -> float:
    """How well an element kind matches the element type named in the step."""
    if not actual or not expected:
        return 0.0
    actual, expected = actual.lower(), expected.lower()
    if actual == expected:
        return 1.0
    if actual in expected or expected in actual:
        return 0.7
    if expected == "field" and actual in ("input", "textarea"):
        return 0.9
    return 0.0


def action_affinity(element_kind: str | None, category: IntentCategory) -> float:
    """How natural it is to perform ``category`` on an element of this kind."""
    if not element_kind:
        return 0.5
    kind = element_kind.lower()
    match category:
        case IntentCategory.CLICK:
            if kind in ("button", "link"):
                return 1.0
            if "button" in kind or "link" in kind:
                return 0.8
            return 0.5
        case IntentCategory.FILL:
            if kind in ("input", "textarea", "field"):
                return 1.0
            if "input" in kind or "field" in kind:
                return 0.8
            return 0.3
        case IntentCategory.VERIFY:
            return 0.7
        case _:
            return 0.5


def element_kind(candidate: ElementCandidate) -> str:
    """Coarse kind of a candidate: button, link, input or its tag."""
    match candidate.tag:
        case "button":
            return "button"
        case "a":
            return "link"
        case "input":
            return "button" if candidate.type in ("submit", "button") else "input"
        case _:
            return candidate.tag or "unknown"


def matches_text(candidate_text: str, target: str) -> float:
    """Shared text evidence: weighted similarity plus exact/contains bonus."""
    text = collapse_whitespace(candidate_text).lower()
    target = collapse_whitespace(target).lower()
    score = text_similarity(text, target) * 40
    if text == target:
        score += 20
    elif target in text:
        score += 10
    return score


class SemanticMatcher(ABC):
    """
    Category-specific candidate finder and scorer.

    Subclasses set ``category`` and ``selectors`` and implement
    ``score_candidate``. Ties on the top score keep the candidate that
    was collected first.

    Args:
        settings: Thresholds and candidate caps
    """

    category: IntentCategory
    selectors: tuple[str, ...] = ()
    per_selector_limit: int = 30

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._log = structlog.get_logger(__name__).bind(component=f"{self.category.value}_matcher")

    @property
    def threshold(self) -> float:
        return self.settings.threshold_for(self.category.value)

    @property
    def max_candidates(self) -> int:
        return getattr(self.settings, f"{self.category.value}_max_candidates")

    def find_best_match(self, root: QueryRoot, intent: StepIntent) -> ScoredElement | None:
        """
        Find the best element for ``intent`` under ``root``.

        Returns:
            The winning ScoredElement, or None when no candidate clears
            the threshold
        """
        best: ScoredElement | None = None
        for handle, candidate in self.collect(root, intent):
            try:
                score = self.score_candidate(candidate, intent)
            except Exception as e:
                self._log.debug("Skipping candidate", tag=candidate.tag, error=str(e))
                continue
            if best is None or score > best.score:
                best = ScoredElement(candidate=candidate, handle=handle, score=score)

        if best is None:
            self._log.debug("No candidates", target=intent.search_text)
            return None

        self._log.info(
            "Best match",
            score=best.score,
            tag=best.candidate.tag,
            id=best.candidate.id,
            text=best.candidate.text[:40],
        )
        if best.score >= self.threshold:
            return best

        self._log.warning("Best match below threshold", score=best.score, threshold=self.threshold)
        return None

    def candidate_selectors(self, intent: StepIntent) -> list[tuple[str, int]]:
        """(selector, per-selector limit) pairs to query, in order."""
        return [(selector, self.per_selector_limit) for selector in self.selectors]

    def accepts(self, candidate: ElementCandidate) -> bool:
        return True

    def collect(self, root: QueryRoot, intent: StepIntent) -> list[tuple[ElementHandle, ElementCandidate]]:
        """Query, snapshot and filter candidates up to ``max_candidates``."""
        pool: list[tuple[ElementHandle, ElementCandidate]] = []
        for selector, limit in self.candidate_selectors(intent):
            if len(pool) >= self.max_candidates:
                break
            try:
                handles = root.query_all(selector)[:limit]
            except Exception as e:
                self._log.debug("Selector query failed", selector=selector, error=str(e))
                continue
            for handle in handles:
                if len(pool) >= self.max_candidates:
                    break
                try:
                    candidate = self.inspect(handle)
                except Exception as e:
                    self._log.debug("Candidate inspection failed", selector=selector, error=str(e))
                    continue
                if self.accepts(candidate):
                    pool.append((handle, candidate))

        self._log.debug("Collected candidates", count=len(pool))
        return pool

    @staticmethod
    def inspect(handle: ElementHandle) -> ElementCandidate:
        return ElementCandidate.from_snapshot(handle.evaluate(DESCRIBE_ELEMENT_JS))

    def type_score(self, candidate: ElementCandidate, intent: StepIntent, weight: float = 30) -> float:
        """Element-type evidence: named type if the step gives one, else action affinity."""
        kind = element_kind(candidate)
        if intent.element_type:
            return type_similarity(kind, intent.element_type) * weight
        return action_affinity(kind, self.category) * weight

    @abstractmethod
    def score_candidate(self, candidate: ElementCandidate, intent: StepIntent) -> float:
        """Score one candidate for ``intent``."""
