"""
Per-category capability table for the intent pipeline.

Each CapabilityRule names a family of step phrasings and whether that
family is delegated to the pattern cascade. A step matching any
delegated rule never enters the intent pipeline. Keeping the table
declarative makes coverage gaps visible and testable one rule at a time.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from stepwise.intelligence.intent import IntentCategory, StepIntent

# Keywords this short are matched as whole words ("url" must not hit "curly")
_SHORT_KEYWORD_LENGTH = 3


@dataclass(frozen=True)
class CapabilityRule:
    """A named phrasing family and who owns it."""

    name: str
    keywords: tuple[str, ...]
    delegate_to_legacy: bool = True
    pattern: str | None = None

    def matches(self, lower: str) -> bool:
        if self.pattern is not None and re.search(self.pattern, lower):
            return True
        for keyword in self.keywords:
            if len(keyword) <= _SHORT_KEYWORD_LENGTH:
                if re.search(rf"\b{re.escape(keyword)}\b", lower):
                    return True
            elif keyword in lower:
                return True
        return False


CAPABILITY_RULES: tuple[CapabilityRule, ...] = (
    CapabilityRule("alerts_and_dialogs", (
        "alert", "confirm", "prompt", "dialog", "popup",
    )),
    CapabilityRule("keyboard_keys", (
        "press escape", "press enter", "press tab", "press space", "press delete",
        "press backspace", "hit escape", "hit enter", "type escape",
    )),
    CapabilityRule("page_refresh", ("refresh", "reload")),
    CapabilityRule("history_navigation", (
        "go back", "navigate back", "browser back",
        "go forward", "navigate forward", "browser forward",
    )),
    CapabilityRule("special_clicks", (
        "double click", "double tap", "right click", "right tap",
        "context click", "secondary click",
    )),
    CapabilityRule("placeholder_verification", ("placeholder", "place holder")),
    CapabilityRule("selection_state", (
        "multiple items", "is selected", "are selected", "not selected", "items are",
        "unchecked", "is checked", "not checked", "not chosen", "is on", "is off",
        "is chosen", "should be selected", "should not be selected", "not be selected",
        "not be checked", "should not be checked",
    )),
    CapabilityRule("enabled_state", (
        "is enabled", "is disabled", "should be enabled", "should be disabled",
        "is active", "is clickable", "is interactive", "isenabled", "isdisabled",
        "isclickable", "isinteractive", "is not disabled", "is not enabled",
        "greyed out", "grayed out", "inactive", "read-only", "readonly", "restricted",
    )),
    CapabilityRule("table_rows", (
        "new row", "row is added", "row added", "in column", "table row", "table cell",
        "table data", "row where", "column value", "get all column",
    )),
    CapabilityRule("field_validation", (
        "is invalid", "has red border", "shows error", "is required", "is filled in",
    )),
    CapabilityRule("page_location", (
        "url", "title", "homepage", "base url", "root url", "start page", "domain",
        "path", "parameter", "query", "hash", "anchor", "fragment", "host",
    )),
    CapabilityRule("windows_and_tabs", (
        "switch to", "new window", "new tab", "close window", "close tab",
        "window exists", "tab exists", "click and switch", "main window",
        "tab count", "window count", "original tab",
    )),
    CapabilityRule("tooltips", ("tooltip",)),
    CapabilityRule("hover_and_scroll", (
        "hover", "mouse over", "mouseover", "scroll",
    )),
    CapabilityRule("sliders_and_progress", (
        "slider", "progress",
    )),
    CapabilityRule("frames", ("iframe", "frame")),
    CapabilityRule("deselection", ("deselect", "remove", "unselect")),
    # "select X from Y" lexes as a click; dropdowns belong to the pattern cascade
    CapabilityRule(
        "dropdown_selection",
        ("dropdown", "drop-down", "drop down"),
        pattern=r"\b(?:select|choose|pick)\b.+\bfrom\b",
    ),
)

# Categories the intent pipeline resolves itself
SUPPORTED_CATEGORIES: frozenset[IntentCategory] = frozenset({
    IntentCategory.CLICK,
    IntentCategory.FILL,
    IntentCategory.VERIFY,
    IntentCategory.NAVIGATE,
    IntentCategory.WAIT,
})

# Categories that need a page element before a plan can be built
ELEMENT_CATEGORIES: frozenset[IntentCategory] = frozenset({
    IntentCategory.CLICK,
    IntentCategory.FILL,
    IntentCategory.SELECT,
    IntentCategory.VERIFY,
})

_CONJUNCTIONS: tuple[str, ...] = (" and ", " also ", " then ", ",")


def delegating_rule(step: str) -> CapabilityRule | None:
    """Return the first delegated capability rule matching ``step``."""
    lower = step.lower()
    for rule in CAPABILITY_RULES:
        if rule.delegate_to_legacy and rule.matches(lower):
            return rule
    return None


def is_composite(step: str) -> bool:
    """Two or more double-quoted literals joined by a conjunction."""
    lower = step.lower()
    return step.count('"') // 2 >= 2 and any(c in lower for c in _CONJUNCTIONS)


def ineligibility_reason(step: str, intent: StepIntent | None = None) -> str | None:
    """
    Explain why the intent pipeline must not handle ``step``.

    Returns:
        A short reason, or None when the step is eligible
    """
    if not step or not step.strip():
        return "empty"
    if is_composite(step):
        return "composite"
    rule = delegating_rule(step)
    if rule is not None:
        return rule.name
    if intent is not None:
        if intent.verb is None:
            return "no_verb"
        if intent.action_type not in SUPPORTED_CATEGORIES:
            return f"category_{intent.action_type.value}"
    return None
