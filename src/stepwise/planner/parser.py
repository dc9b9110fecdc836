"""
Multi-Tier Parser: the step resolution cascade.

Strategies, in order:
0. Intent pipeline (when enabled and the step is eligible)
1. Combined-action detection ("enter X and click Y")
2. Frame scoping ("in iframe 'x', click 'y'")
3. Table / window / frame / alert rules
4. General Pattern Table rules (Step Planner)
5. Fuzzy keyword intent
6. ``unknown`` sentinel
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

from stepwise.intelligence.suggestions import StepSuggestion, StepSuggestionEngine
from stepwise.planner.models import (
    COMPOSITE,
    UNKNOWN,
    ActionPlan,
    CompositeActionPlan,
    LocatorStrategy,
    unknown_plan,
)
from stepwise.planner.patterns import COMBINED_ACTION_RULES, GENERAL_RULES, TABLE_RULES, PatternRule
from stepwise.planner.step_planner import StepPlanner, build_table_plan
from stepwise.utils.text import extract_keyword, strip_keyword

if TYPE_CHECKING:
    from stepwise.driver.protocols import QueryRoot
    from stepwise.intelligence.processor import IntelligentStepProcessor

logger = structlog.get_logger(__name__)

_ACTION_VERBS = r"(enter|click|select|type|fill|choose|check|uncheck|close)"
_COMBINED = re.compile(_ACTION_VERBS + r".*?\s+(?:and|also|then|,|&)\s+" + _ACTION_VERBS, re.IGNORECASE)
# Delimiter outside double quotes (even number of quotes ahead)
_SPLIT = re.compile(r"\s+(?:and|also|then|,|&)\s+(?=(?:[^\"]*\"[^\"]*\")*[^\"]*$)", re.IGNORECASE)
_FRAME_SCOPE = re.compile(
    r"""^(?:given|when|then|and|but)?\s*(?:in|within|inside)\s+(?:the\s+)?(?:iframe|frame)\s+["']?([^"']+)["']?[\s,]+(.+)""",
    re.IGNORECASE,
)
_LEADING_KEYWORD = re.compile(r"^(Given|When|Then|And|But)\s+", re.IGNORECASE)

# (action type, trigger substrings) checked in order by the fuzzy tier
FUZZY_INTENTS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("sort_table", ("sort", "order by")),
    ("filter_table", ("filter", "where")),
    ("navigate_to_page", ("page", "pagination", "navigate")),
    ("bulk_select", ("select all", "deselect all")),
)


class StepParser:
    """
    Cascading parser producing one ActionPlan per step.

    Args:
        processor: Intent pipeline; None disables strategy 0
        planner: General-rule planner
        table_rules: Rules tried before the general rules
        intelligence_enabled: Master switch for strategy 0
    """

    def __init__(
        self,
        processor: IntelligentStepProcessor | None = None,
        planner: StepPlanner | None = None,
        table_rules: Sequence[PatternRule] = TABLE_RULES,
        intelligence_enabled: bool = True,
    ) -> None:
        self._processor = processor
        self._planner = planner or StepPlanner()
        self._table_rules = tuple(table_rules)
        self._intelligence_enabled = intelligence_enabled
        self._suggestions = StepSuggestionEngine(self.is_step_supported)
        self._log = logger.bind(component="step_parser")

    @property
    def intelligence_enabled(self) -> bool:
        return self._intelligence_enabled and self._processor is not None

    @intelligence_enabled.setter
    def intelligence_enabled(self, enabled: bool) -> None:
        self._intelligence_enabled = enabled
        self._log.info("Intelligence layer toggled", enabled=enabled)

    def parse(self, step: str, root: QueryRoot | None = None) -> ActionPlan:
        """
        Resolve a step through the full cascade.

        Args:
            step: Raw step text
            root: Optional query root enabling semantic element matching

        Returns:
            ActionPlan; never raises
        """
        step = (step or "").strip()
        try:
            return self._parse(step, root)
        except Exception as e:
            self._log.warning("Could not parse step", step=step, error=str(e))
            return unknown_plan(step)

    def _parse(self, step: str, root: QueryRoot | None) -> ActionPlan:
        self._log.debug("Parsing step", step=step)

        if self.intelligence_enabled:
            plan = self._processor.process(step, root)
            if plan is not None and plan.is_valid:
                self._log.info("Parsed via intent pipeline", action=plan.action_type)
                return plan
            self._log.debug("Intent pipeline did not match")

        if self._is_combined(step):
            return self._parse_combined(step)

        plan = self._try_frame_scope(step, root)
        if plan is not None:
            return plan

        plan = self._try_table_rules(step)
        if plan is not None:
            self._log.info("Parsed via table rule", action=plan.action_type)
            return plan

        plan = self._planner.plan(step)
        if plan.action_type != UNKNOWN:
            self._log.info("Parsed via pattern rule", action=plan.action_type)
            return plan

        plan = self._try_fuzzy_intent(step)
        if plan is not None:
            self._log.warning("Parsed via fuzzy intent", action=plan.action_type, step=step)
            return plan

        self._log.warning("Could not parse step", step=step)
        return unknown_plan(step, keyword=extract_keyword(step))

    def parse_single_action(self, step: str) -> ActionPlan:
        """Parse without combined-action or frame detection."""
        plan = self._try_table_rules(step)
        if plan is not None:
            return plan
        plan = self._planner.plan(step)
        if plan.action_type != UNKNOWN:
            return plan
        plan = self._try_fuzzy_intent(step)
        if plan is not None:
            return plan
        return unknown_plan(step, keyword=extract_keyword(step))

    def is_step_supported(self, step: str) -> bool:
        """Report whether any tier would handle ``step``, without resolving elements."""
        step = (step or "").strip()
        if not step:
            return False
        try:
            if self.intelligence_enabled and self._processor.can_process(step):
                return True
            if any(p.fullmatch(step) for p in COMBINED_ACTION_RULES):
                return True
            if any(rule.fullmatch(step) for rule in self._table_rules):
                return True
            return any(rule.fullmatch(step) for rule in GENERAL_RULES)
        except Exception as e:
            self._log.warning("Support check failed", step=step, error=str(e))
            return False

    def suggest_alternatives(self, step: str) -> list[StepSuggestion]:
        """Supported rewrites for ``step``; empty when the step is already supported."""
        if self.is_step_supported(step):
            return []
        try:
            return self._suggestions.generate_suggestions(step)
        except Exception as e:
            self._log.warning("Suggestion failed", step=step, error=str(e))
            return []

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def _is_combined(self, step: str) -> bool:
        return _COMBINED.search(strip_keyword(step)) is not None

    def _parse_combined(self, step: str) -> CompositeActionPlan:
        match = _LEADING_KEYWORD.match(step)
        keyword = match.group(1) if match else None
        parts = [p.strip() for p in _SPLIT.split(strip_keyword(step)) if p.strip()]

        plans: list[ActionPlan] = []
        for index, part in enumerate(parts):
            prefixed = f"{keyword} {part}" if index == 0 and keyword else f"And {part}"
            sub_plan = self.parse_single_action(prefixed)
            if sub_plan.action_type == UNKNOWN:
                self._log.warning("Failed to parse sub-action", part=part)
            plans.append(sub_plan)

        self._log.info("Parsed combined step", actions=len(plans))
        return CompositeActionPlan(
            action_type=COMPOSITE,
            target=step,
            keyword=keyword or "And",
            locator_strategy=LocatorStrategy.COMPOSITE,
            steps=plans,
        )

    def _try_frame_scope(self, step: str, root: QueryRoot | None) -> ActionPlan | None:
        match = _FRAME_SCOPE.search(step)
        if match is None:
            return None
        frame_name = match.group(1).strip()
        inner = match.group(2).strip()
        self._log.info("Frame-scoped step", frame=frame_name)

        frame_root = root.frame(frame_name) if root is not None else None
        plan = self.parse(inner, frame_root)
        plan.frame_anchor = frame_name
        return plan

    def _try_table_rules(self, step: str) -> ActionPlan | None:
        clean = strip_keyword(step)
        for rule in self._table_rules:
            match = rule.search(clean)
            if match is not None:
                plan = build_table_plan(rule, match, step)
                plan.keyword = extract_keyword(step)
                return plan
        return None

    def _try_fuzzy_intent(self, step: str) -> ActionPlan | None:
        lower = step.lower()
        for action_type, triggers in FUZZY_INTENTS:
            if any(trigger in lower for trigger in triggers):
                return ActionPlan(
                    action_type=action_type,
                    target=step,
                    keyword=extract_keyword(step),
                    locator_strategy=LocatorStrategy.INTENT,
                )
        return None
