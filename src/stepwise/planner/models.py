"""
Action plan data model.

An ActionPlan is the structured, executable reading of one step. It is
produced by exactly one source: a Pattern Table rule, the keyword
fallback, the fuzzy intent tier, or the intent pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

UNKNOWN = "unknown"
COMPOSITE = "composite"


class LocatorStrategy(StrEnum):
    """Diagnostic tag recording which tier produced a plan."""

    REGEX = "regex-smart"  # General Pattern Table rule or keyword fallback
    TABLE = "smart-table"  # Table/window/frame/alert rule
    INTENT = "intent-based"  # Fuzzy keyword intent
    INTELLIGENT = "intelligent"  # Intent Analyzer pipeline
    COMPOSITE = "composite"  # Multi-action step
    FAILED = "failed"  # Nothing matched


@dataclass
class ActionPlan:
    """Resolved, structured description of one executable UI action."""

    action_type: str
    target: str
    value: str | None = None
    element_name: str | None = None
    keyword: str | None = None
    row_anchor: str | None = None
    frame_anchor: str | None = None
    negated: bool = False
    locator_strategy: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    # Named payload for table/window/frame rules
    table_name: str | None = None
    column_name: str | None = None
    condition_column: str | None = None
    condition_value: str | None = None
    target_column: str | None = None
    expected_value: str | None = None
    row_number: int | None = None
    row_count: int | None = None
    row_position: str | None = None
    row_action: str | None = None
    sort_order: str | None = None
    filter_value: str | None = None
    page_number: int | None = None
    bulk_action: str | None = None

    def __post_init__(self) -> None:
        if not self.action_type:
            self.action_type = UNKNOWN

    @property
    def is_valid(self) -> bool:
        """True when the plan names a concrete action."""
        return bool(self.action_type) and self.action_type != UNKNOWN

    def to_dict(self) -> dict[str, Any]:
        """Serialize non-empty fields; metadata values are stringified."""
        data: dict[str, Any] = {"action_type": self.action_type, "target": self.target}
        for name in (
            "value", "element_name", "keyword", "row_anchor", "frame_anchor",
            "locator_strategy", "table_name", "column_name", "condition_column",
            "condition_value", "target_column", "expected_value", "row_number",
            "row_count", "row_position", "row_action", "sort_order",
            "filter_value", "page_number", "bulk_action",
        ):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        if self.negated:
            data["negated"] = True
        if self.metadata:
            data["metadata"] = {k: str(v) for k, v in self.metadata.items()}
        return data


@dataclass
class CompositeActionPlan(ActionPlan):
    """A step that chains several actions ("enter X and click Y")."""

    steps: list[ActionPlan] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["steps"] = [step.to_dict() for step in self.steps]
        return data


def unknown_plan(step: str, *, keyword: str | None = None) -> ActionPlan:
    """Build the ``unknown`` sentinel carrying the original text."""
    return ActionPlan(
        action_type=UNKNOWN,
        target=step,
        keyword=keyword,
        locator_strategy=LocatorStrategy.FAILED,
    )
