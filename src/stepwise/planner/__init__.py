"""
Step planning: Pattern Table, Step Planner and the Multi-Tier Parser.

Provides:
- ActionPlan / CompositeActionPlan: structured action descriptions
- PatternRule, GENERAL_RULES, TABLE_RULES: the ordered rule tables
- StepPlanner: first-match-wins planner with keyword fallback
- StepParser: the full resolution cascade
"""

from stepwise.planner.models import (
    COMPOSITE,
    UNKNOWN,
    ActionPlan,
    CompositeActionPlan,
    LocatorStrategy,
    unknown_plan,
)
from stepwise.planner.parser import FUZZY_INTENTS, StepParser
from stepwise.planner.patterns import COMBINED_ACTION_RULES, GENERAL_RULES, TABLE_RULES, PatternRule
from stepwise.planner.step_planner import StepPlanner

__all__ = [
    # Models
    "ActionPlan",
    "CompositeActionPlan",
    "LocatorStrategy",
    "COMPOSITE",
    "UNKNOWN",
    "unknown_plan",
    # Pattern Table
    "PatternRule",
    "GENERAL_RULES",
    "TABLE_RULES",
    "COMBINED_ACTION_RULES",
    # Planning
    "StepPlanner",
    "StepParser",
    "FUZZY_INTENTS",
]
