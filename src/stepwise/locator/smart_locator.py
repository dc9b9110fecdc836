"""
Broad-search Smart Locator: scan, score, build.

Used when the intent pipeline is bypassed or finds nothing. Every
visible candidate under the root is scored by the Candidate Scorer; the
strictly best one (first in document order on ties) is handed to the
Locator Factory if it clears the minimum score.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

import structlog

from stepwise.config import Settings, get_settings
from stepwise.driver.rows import resolve_row
from stepwise.locator.candidate import ElementCandidate, TargetKind
from stepwise.locator.factory import LocatorFactory
from stepwise.locator.scanner import DomScanner
from stepwise.locator.scorer import CandidateScorer
from stepwise.utils.polling import poll_until

if TYPE_CHECKING:
    from stepwise.driver.protocols import QueryRoot, RowResolver
    from stepwise.locator.query import LocatorQuery
    from stepwise.planner.models import ActionPlan

logger = structlog.get_logger(__name__)

# Action type -> element kind the action operates on
ACTION_KINDS = MappingProxyType({
    "fill": TargetKind.INPUT,
    "fill_autocomplete": TargetKind.INPUT,
    "enter_stored_reference": TargetKind.INPUT,
    "set_date": TargetKind.INPUT,
    "verify_value": TargetKind.INPUT,
    "verify_validation": TargetKind.INPUT,
    "verify_placeholder": TargetKind.INPUT,
    "select": TargetKind.SELECT,
    "select_menu": TargetKind.SELECT,
    "select_with_criteria": TargetKind.SELECT,
    "deselect": TargetKind.SELECT,
    "check": TargetKind.CHECK,
    "uncheck": TargetKind.CHECK,
    "toggle_setting": TargetKind.CHECK,
    "verify_selected": TargetKind.CHECK,
    "verify_not_selected": TargetKind.CHECK,
    "verify_enabled": TargetKind.CHECK,
    "verify_disabled": TargetKind.CHECK,
    "select_checkbox_in_row": TargetKind.CHECK,
    "set_slider": TargetKind.SLIDER,
    "wait_for_progress": TargetKind.PROGRESSBAR,
    "click": TargetKind.BUTTON,
    "double_click": TargetKind.BUTTON,
    "right_click": TargetKind.BUTTON,
    "click_in_row": TargetKind.BUTTON,
    "click_specific_in_row": TargetKind.BUTTON,
    "click_and_switch_window": TargetKind.BUTTON,
    "wait_appear": TargetKind.BUTTON,
    "wait_disappear": TargetKind.BUTTON,
})


def kind_for(action_type: str) -> TargetKind:
    return ACTION_KINDS.get(action_type, TargetKind.ANY)


class SmartLocator:
    """
    Scan → score → build for one target name.

    Args:
        settings: Minimum score and polling settings
        scanner: DOM scanner
        scorer: Candidate Scorer
        factory: Locator Factory
        row_resolver: Maps a row anchor to a scoped root
    """

    def __init__(
        self,
        settings: Settings | None = None,
        scanner: DomScanner | None = None,
        scorer: CandidateScorer | None = None,
        factory: LocatorFactory | None = None,
        row_resolver: RowResolver = resolve_row,
    ) -> None:
        self.settings = settings or get_settings()
        self.scanner = scanner or DomScanner()
        self.scorer = scorer or CandidateScorer()
        self.factory = factory or LocatorFactory()
        self.row_resolver = row_resolver
        self._log = logger.bind(component="smart_locator")

    def best_candidate(
        self,
        candidates: list[ElementCandidate],
        target: str,
        kind: TargetKind,
    ) -> tuple[ElementCandidate | None, float]:
        """Return the strictly best candidate and its score; ties keep the earlier one."""
        best: ElementCandidate | None = None
        best_score = 0.0
        for candidate in candidates:
            try:
                score = self.scorer.score(candidate, target, kind)
            except Exception as e:
                self._log.debug("Skipping candidate", tag=candidate.tag, error=str(e))
                continue
            if score > best_score:
                best, best_score = candidate, score
        return best, best_score

    def find(
        self,
        root: QueryRoot,
        target: str | None,
        kind: TargetKind = TargetKind.ANY,
    ) -> LocatorQuery | None:
        """
        Find a query for ``target`` under ``root``.

        Returns:
            LocatorQuery, or None when nothing scores above the minimum
        """
        if not target:
            return None

        candidates = self.scanner.scan(root)
        best, score = self.best_candidate(candidates, target, kind)
        if best is None or score <= self.settings.smart_locator_min_score:
            self._log.info("No strong match", target=target, kind=kind.value, best_score=score)
            return None

        self._log.debug("Best candidate", target=target, tag=best.tag, text=best.text[:40], score=score)
        try:
            return self.factory.build(best, score, kind, root)
        except Exception as e:
            self._log.warning("Locator build failed", target=target, error=str(e))
            return None

    def wait_for(
        self,
        root: QueryRoot,
        target: str | None,
        kind: TargetKind = TargetKind.ANY,
        timeout_seconds: float | None = None,
    ) -> LocatorQuery | None:
        """Poll ``find`` at the configured interval until it succeeds or times out."""
        timeout = self.settings.element_wait_timeout_seconds if timeout_seconds is None else timeout_seconds
        return poll_until(
            lambda: self.find(root, target, kind),
            timeout_seconds=timeout,
            interval_seconds=self.settings.poll_interval_seconds,
        )

    def scoped_root(self, plan: ActionPlan, root: QueryRoot) -> QueryRoot | None:
        """Apply the plan's frame and row anchors to ``root``."""
        scoped: QueryRoot | None = root
        if plan.frame_anchor:
            scoped = root.frame(plan.frame_anchor)
            if scoped is None:
                self._log.info("Frame not found", frame=plan.frame_anchor)
                return None
        if plan.row_anchor:
            scoped = self.row_resolver(scoped, plan.row_anchor)
        return scoped

    def locate(self, plan: ActionPlan, root: QueryRoot, *, wait: bool = False) -> LocatorQuery | None:
        """
        Locate the element a plan acts on.

        Args:
            plan: Resolved plan; ``element_name`` is the search target
            root: Page or frame root
            wait: Poll until the element appears instead of a single scan
        """
        target = plan.element_name
        if not target:
            return None
        scoped = self.scoped_root(plan, root)
        if scoped is None:
            return None
        kind = kind_for(plan.action_type)
        if wait:
            return self.wait_for(scoped, target, kind)
        return self.find(scoped, target, kind)
