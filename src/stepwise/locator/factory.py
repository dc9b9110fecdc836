"""
Locator Factory: turns a winning candidate into a resilient query.

Base query decision order:
1. Stable id: ``tag[id=...]``, filtered by text when the text is short
2. Button or link without a stable id: exact visible text
3. Progress indicators: ``[role=progressbar]`` (their text changes)
4. Short visible text: exact text for exact-scored matches, else a text filter
5. aria-label, then name attribute, then placeholder
6. Generic tag plus text filter

The base query is then refined when the matched node is not the kind of
element the action needs (a label or wrapper matched for a fill, select,
slider or progress request).
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import TYPE_CHECKING

import structlog

from stepwise.locator.candidate import ElementCandidate, TargetKind
from stepwise.locator.query import LocatorQuery, quote

if TYPE_CHECKING:
    from stepwise.driver.protocols import QueryRoot

logger = structlog.get_logger(__name__)

MAX_TEXT_LENGTH = 100
EXACT_SCORE = 150

WIDGET_SELECTORS: dict[TargetKind, str] = {
    TargetKind.INPUT: "input, textarea",
    TargetKind.SELECT: "select",
    TargetKind.SLIDER: "input[type='range'], [role='slider']",
    TargetKind.PROGRESSBAR: "[role='progressbar']",
}

_CUSTOM_DROPDOWN_XPATH = (
    "contains(@class, 'container') or contains(@class, 'select') or "
    "contains(@class, 'dropdown') or @role='combobox' or @role='listbox'"
)
_CUSTOM_DROPDOWN_CSS = (
    "div[class*='container'], div[class*='select'], div[class*='dropdown'], "
    "[role='combobox'], [role='listbox']"
)
_CUSTOM_DROPDOWN_CLASS_HINTS = ("select", "dropdown", "combobox", "-container")

_HAS_DIGIT = re.compile(r"\d")
_HAS_LETTER = re.compile(r"[A-Za-z]")


def looks_dynamic_id(element_id: str) -> bool:
    """Short ids mixing letters and digits are assumed to be framework-generated."""
    if not element_id or not 5 <= len(element_id) <= 10:
        return False
    return bool(_HAS_DIGIT.search(element_id) and _HAS_LETTER.search(element_id))


def is_custom_dropdown(candidate: ElementCandidate) -> bool:
    if candidate.role.lower() in ("combobox", "listbox"):
        return True
    classes = candidate.class_name.lower()
    return any(hint in classes for hint in _CUSTOM_DROPDOWN_CLASS_HINTS)


class LocatorFactory:
    """
    Builds LocatorQuery objects from scored candidates.

    Args:
        is_dynamic_id: Predicate deciding whether an id is unstable.
            Defaults to ``looks_dynamic_id``.
    """

    def __init__(self, is_dynamic_id: Callable[[str], bool] = looks_dynamic_id) -> None:
        self.is_dynamic_id = is_dynamic_id
        self._log = logger.bind(component="locator_factory")

    def build(
        self,
        candidate: ElementCandidate,
        score: float,
        kind: TargetKind = TargetKind.ANY,
        root: QueryRoot | None = None,
    ) -> LocatorQuery | None:
        """
        Build a query for ``candidate``.

        Args:
            candidate: Winning candidate
            score: Its score; exact-scored text matches get exact text queries
            kind: Element kind the action needs
            root: Root used to probe refinement queries; without one the
                base query is returned unrefined

        Returns:
            LocatorQuery, or None when a fill or select match cannot be
            refined to a real form control
        """
        base = self.base_query(candidate, score, kind)
        self._log.debug(
            "Base query",
            tag=candidate.tag,
            text=candidate.text[:40],
            id=candidate.id,
            score=score,
            selector=base.selector,
        )
        if root is None:
            return base
        return self.refine(base, candidate, kind, root)

    def base_query(self, candidate: ElementCandidate, score: float, kind: TargetKind) -> LocatorQuery:
        c = candidate
        text = c.text.strip()
        short_text = bool(text) and len(text) < MAX_TEXT_LENGTH

        if c.id and not self.is_dynamic_id(c.id):
            query = LocatorQuery.attribute("id", c.id, tag=c.tag, strategy="id")
            if short_text and kind != TargetKind.PROGRESSBAR:
                query = LocatorQuery(f"{query.selector}:has-text({quote(text)})", "id")
            return query.first()

        if c.tag in ("button", "a") and text:
            return LocatorQuery.exact_text(text).first()

        if kind == TargetKind.PROGRESSBAR or c.role.lower() == "progressbar":
            return LocatorQuery.css(WIDGET_SELECTORS[TargetKind.PROGRESSBAR], "role").first()

        if short_text:
            if score >= EXACT_SCORE:
                return LocatorQuery.exact_text(text).first()
            return LocatorQuery.has_text(c.tag, text).first()

        if c.label:
            return LocatorQuery.attribute("aria-label", c.label, strategy="label").first()
        if c.name:
            return LocatorQuery.attribute("name", c.name).first()
        if c.placeholder:
            return LocatorQuery.attribute("placeholder", c.placeholder).first()

        return LocatorQuery.has_text(c.tag, text, strategy="tag").first()

    def refine(
        self,
        base: LocatorQuery,
        candidate: ElementCandidate,
        kind: TargetKind,
        root: QueryRoot,
    ) -> LocatorQuery | None:
        """Walk from a label or wrapper to the element kind the action needs."""
        if kind not in WIDGET_SELECTORS or self._is_target_kind(candidate, kind):
            return base

        if candidate.tag == "label" and candidate.for_attr and kind != TargetKind.PROGRESSBAR:
            self._log.debug("Refined via label target", for_attr=candidate.for_attr)
            return LocatorQuery.attribute("id", candidate.for_attr, strategy="label-for")

        widget = WIDGET_SELECTORS[kind]
        steps: list[tuple[str, LocatorQuery]] = [
            ("nested", base.then(widget)),
            ("sibling", base.then("xpath=..").then(widget)),
        ]
        if kind != TargetKind.PROGRESSBAR:
            steps.append(("parent_next_sibling", base.then("xpath=../following-sibling::*[1]").then(widget)))
        if kind == TargetKind.SELECT:
            steps.extend(self._custom_dropdown_steps(base))
        if kind != TargetKind.PROGRESSBAR:
            steps.append(("cousin", base.then("xpath=../..").then(widget)))

        for name, query in steps:
            query = query.first()
            if _exists(root, query):
                self._log.debug("Refined match", via=name, selector=query.selector)
                return LocatorQuery(query.selector, f"refined-{name}")

        if kind == TargetKind.INPUT:
            self._log.debug("Match is not an input; discarding", tag=candidate.tag)
            return None
        if kind == TargetKind.SELECT:
            if is_custom_dropdown(candidate):
                self._log.debug("Returning custom dropdown wrapper", tag=candidate.tag)
                return LocatorQuery(base.selector, "custom-dropdown")
            self._log.debug("Match is not a dropdown; discarding", tag=candidate.tag)
            return None
        return base

    @staticmethod
    def _custom_dropdown_steps(base: LocatorQuery) -> list[tuple[str, LocatorQuery]]:
        return [
            ("dropdown_sibling", base.then(f"xpath=following-sibling::*[1][{_CUSTOM_DROPDOWN_XPATH}]")),
            ("dropdown_parent_sibling", base.then(f"xpath=../following-sibling::*[1][{_CUSTOM_DROPDOWN_XPATH}]")),
            ("dropdown_nested", base.then("xpath=../following-sibling::*[1]").then(_CUSTOM_DROPDOWN_CSS)),
        ]

    @staticmethod
    def _is_target_kind(candidate: ElementCandidate, kind: TargetKind) -> bool:
        match kind:
            case TargetKind.INPUT:
                return candidate.is_input
            case TargetKind.SELECT:
                return candidate.tag == "select"
            case TargetKind.SLIDER:
                return candidate.tag == "input"
            case TargetKind.PROGRESSBAR:
                return candidate.role.lower() == "progressbar"
            case _:
                return True


def _exists(root: QueryRoot, query: LocatorQuery) -> bool:
    try:
        return root.count(query.selector) > 0
    except Exception as e:
        logger.debug("Refinement probe failed", selector=query.selector, error=str(e))
        return False
