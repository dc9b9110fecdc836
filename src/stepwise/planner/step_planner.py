"""
Step Planner: applies the general Pattern Table in registration order.

The first matching rule wins. When nothing matches, a coarse keyword
fallback produces a best-effort plan. ``plan`` never raises.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

import structlog

from stepwise.planner.models import UNKNOWN, ActionPlan, LocatorStrategy, unknown_plan
from stepwise.planner.patterns import GENERAL_RULES, INTEGER_FIELDS, PatternRule
from stepwise.utils.text import extract_keyword, first_quoted, quoted_values, strip_keyword, strip_quotes

logger = structlog.get_logger(__name__)

_CLICK_VERB = re.compile(r"^(?:click|tap|press|hit)(?:\s+on)?\s+", re.IGNORECASE)


class StepPlanner:
    """
    First-match-wins planner over an ordered rule table.

    Args:
        rules: Rules to apply, in priority order. Defaults to GENERAL_RULES.
    """

    def __init__(self, rules: Sequence[PatternRule] = GENERAL_RULES) -> None:
        self._rules = tuple(rules)
        self._log = logger.bind(component="step_planner")

    @property
    def rules(self) -> tuple[PatternRule, ...]:
        return self._rules

    def plan(self, step: str) -> ActionPlan:
        """
        Plan a single step.

        Args:
            step: Raw step text, optionally prefixed by a Gherkin keyword

        Returns:
            ActionPlan; ``action_type`` is ``"unknown"`` when nothing applied
        """
        step = (step or "").strip()
        keyword = extract_keyword(step)
        try:
            clean = strip_keyword(step)
            for rule in self._rules:
                match = rule.search(clean)
                if match is None:
                    continue
                plan = build_positional_plan(rule, match, step, clean)
                plan.keyword = keyword
                self._log.debug("Rule matched", action=plan.action_type, pattern=rule.regex.pattern[:60])
                return plan
            return self._fallback(step, clean, keyword)
        except Exception as e:
            self._log.warning("Planning failed", step=step, error=str(e))
            return unknown_plan(step, keyword=keyword)

    def _fallback(self, step: str, clean: str, keyword: str) -> ActionPlan:
        lower = step.lower()
        plan = ActionPlan(action_type=UNKNOWN, target=step, keyword=keyword)

        if "click" in lower:
            plan.action_type = "click"
            plan.element_name = first_quoted(step) or _CLICK_VERB.sub("", clean).strip()
        elif "enter" in lower or "fill" in lower:
            plan.action_type = "fill"
            quotes = quoted_values(step)
            if quotes:
                plan.value = quotes[0]
            if len(quotes) > 1:
                plan.element_name = quotes[1]
        elif "wait" in lower or "load" in lower:
            plan.action_type = "wait"
        elif "screen" in lower or "shot" in lower:
            plan.action_type = "screenshot"

        if plan.is_valid:
            plan.locator_strategy = LocatorStrategy.REGEX
            self._log.debug("Keyword fallback", action=plan.action_type)
        else:
            plan.locator_strategy = LocatorStrategy.FAILED
        return plan


def build_positional_plan(rule: PatternRule, match: re.Match[str], step: str, clean: str) -> ActionPlan:
    """Map a rule's capture groups onto a new ActionPlan."""
    plan = ActionPlan(action_type=rule.action_type, target=step, locator_strategy=LocatorStrategy.REGEX)

    if rule.element_group is not None:
        plan.element_name = strip_quotes(match.group(rule.element_group))
    if rule.value_group is not None:
        plan.value = strip_quotes(match.group(rule.value_group))
    if rule.row_anchor_group is not None:
        plan.row_anchor = strip_quotes(match.group(rule.row_anchor_group))

    if rule.collect_quoted:
        options = quoted_values(clean)
        if options and plan.element_name is not None and options[-1] == plan.element_name:
            options = options[:-1]
        if options:
            plan.value = ";".join(options)
        plan.action_type = "select"

    return plan


def build_table_plan(rule: PatternRule, match: re.Match[str], step: str) -> ActionPlan:
    """Map a table rule's named fields onto a new ActionPlan."""
    plan = ActionPlan(action_type=rule.action_type, target=step, locator_strategy=LocatorStrategy.TABLE)

    for name, source in rule.fields.items():
        raw = match.group(source) if isinstance(source, int) else source
        if raw is None:
            continue
        setattr(plan, name, int(raw) if name in INTEGER_FIELDS else raw)

    if plan.condition_value is not None:
        plan.row_anchor = plan.condition_value
    return plan
