"""
Orchestrator for the intent pipeline.

Decides per step whether the intent pipeline is eligible, runs the
matching category matcher when a query root is available, and converts
the intent into an ActionPlan. Returning None tells the caller to fall
back to the pattern cascade.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from stepwise.config import Settings, get_settings
from stepwise.intelligence.capabilities import ELEMENT_CATEGORIES, ineligibility_reason
from stepwise.intelligence.intent import IntentCategory, StepIntent
from stepwise.intelligence.intent_analyzer import IntentAnalyzer
from stepwise.planner.models import ActionPlan, LocatorStrategy
from stepwise.utils.text import extract_keyword

if TYPE_CHECKING:
    from stepwise.driver.protocols import QueryRoot
    from stepwise.locator.candidate import ScoredElement
    from stepwise.matchers.base import SemanticMatcher

logger = structlog.get_logger(__name__)


class IntelligentStepProcessor:
    """
    Intent Analyzer plus category matchers behind an eligibility gate.

    Args:
        settings: Thresholds and candidate caps for the matchers
        analyzer: Intent Analyzer instance
        matchers: Optional override of the category → matcher mapping
    """

    def __init__(
        self,
        settings: Settings | None = None,
        analyzer: IntentAnalyzer | None = None,
        matchers: dict[IntentCategory, SemanticMatcher] | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.analyzer = analyzer or IntentAnalyzer()
        self.matchers: dict[IntentCategory, SemanticMatcher] = matchers or self._default_matchers()
        self._log = logger.bind(component="intelligent_processor")

    def _default_matchers(self) -> dict[IntentCategory, SemanticMatcher]:
        from stepwise.matchers import ClickMatcher, FillMatcher, SelectMatcher, VerifyMatcher

        return {
            IntentCategory.CLICK: ClickMatcher(self.settings),
            IntentCategory.FILL: FillMatcher(self.settings),
            IntentCategory.SELECT: SelectMatcher(self.settings),
            IntentCategory.VERIFY: VerifyMatcher(self.settings),
        }

    def can_process(self, step: str) -> bool:
        """True when the intent pipeline is eligible for ``step``. Never raises."""
        try:
            if ineligibility_reason(step) is not None:
                return False
            return ineligibility_reason(step, self.analyzer.analyze(step)) is None
        except Exception as e:
            self._log.debug("Eligibility check failed", step=step, error=str(e))
            return False

    def process(self, step: str, root: QueryRoot | None = None) -> ActionPlan | None:
        """
        Resolve a step through the intent pipeline.

        Args:
            step: Raw step text
            root: Optional query root; when given, an element must be found

        Returns:
            ActionPlan, or None to signal a fallback
        """
        try:
            reason = ineligibility_reason(step)
            if reason is not None:
                self._log.debug("Step delegated to pattern cascade", reason=reason)
                return None

            intent = self.analyzer.analyze(step)
            reason = ineligibility_reason(step, intent)
            if reason is not None:
                self._log.debug("Step delegated to pattern cascade", reason=reason)
                return None

            match: ScoredElement | None = None
            if root is not None and intent.action_type in ELEMENT_CATEGORIES:
                match = self.find_element(root, intent)
                if match is None:
                    self._log.debug("No semantic match", target=intent.target_description)
                    return None

            return self.to_plan(intent, match)
        except Exception as e:
            self._log.debug("Intent pipeline failed", step=step, error=str(e))
            return None

    def find_element(self, root: QueryRoot, intent: StepIntent) -> ScoredElement | None:
        matcher = self.matchers.get(intent.action_type)
        if matcher is None:
            self._log.warning("No matcher for category", category=intent.action_type.value)
            return None
        return matcher.find_best_match(root, intent)

    @staticmethod
    def to_plan(intent: StepIntent, match: ScoredElement | None = None) -> ActionPlan:
        """Convert an intent (and optional matched element) into an ActionPlan."""
        plan = ActionPlan(
            action_type=intent.action_type.value,
            target=intent.original_step,
            value=intent.value,
            element_name=intent.target_description or None,
            keyword=extract_keyword(intent.original_step),
            negated=intent.negated,
            locator_strategy=LocatorStrategy.INTELLIGENT,
        )
        if intent.values and len(intent.values) > 1:
            plan.metadata["values"] = list(intent.values)
        if intent.element_type:
            plan.metadata["element_type"] = intent.element_type
        if match is not None:
            plan.metadata["intelligent_locator"] = match.handle
            plan.metadata["match_score"] = match.score
        return plan
