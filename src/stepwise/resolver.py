"""
StepResolver: single entry point for an executor.

``resolve(step, root)`` parses the step through the full cascade, applies
session context (active frame, stored values, credentials) and, when a
query root is available, finds the element the plan acts on: either the
element the intent pipeline already matched, or a Smart Locator query.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog

from stepwise.config import Settings, get_settings
from stepwise.intelligence.processor import IntelligentStepProcessor
from stepwise.locator.candidate import TargetKind
from stepwise.locator.smart_locator import SmartLocator
from stepwise.planner.models import ActionPlan, CompositeActionPlan
from stepwise.planner.parser import StepParser
from stepwise.session import StepSession

if TYPE_CHECKING:
    from stepwise.driver.protocols import QueryRoot
    from stepwise.locator.query import LocatorQuery

logger = structlog.get_logger(__name__)

# Field names tried, in order, when entering a stored reference
REFERENCE_FIELD_VARIANTS: tuple[str, ...] = (
    "booking reference",
    "reference number",
    "booking number",
    "reference",
    "booking id",
    "confirmation number",
)


@dataclass
class ResolvedStep:
    """A plan plus whatever element resolution produced."""

    plan: ActionPlan
    query: LocatorQuery | None = None
    element: Any = None
    parts: list[ResolvedStep] = field(default_factory=list)

    @property
    def located(self) -> bool:
        return self.element is not None or self.query is not None


class StepResolver:
    """
    Parse + locate façade over the Multi-Tier Parser and Smart Locator.

    Args:
        settings: Shared settings; defaults to ``get_settings()``
        parser: Multi-Tier Parser; built with an intent processor by default
        locator: Broad-search Smart Locator
        session: Per-browser-session state
    """

    def __init__(
        self,
        settings: Settings | None = None,
        parser: StepParser | None = None,
        locator: SmartLocator | None = None,
        session: StepSession | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.parser = parser or StepParser(
            processor=IntelligentStepProcessor(self.settings),
            intelligence_enabled=self.settings.intelligence_enabled,
        )
        self.locator = locator or SmartLocator(self.settings)
        self.session = session or StepSession(settings=self.settings)
        self._log = logger.bind(component="step_resolver")

    def plan(self, step: str, root: QueryRoot | None = None) -> ActionPlan:
        """Parse ``step`` and apply session context to the resulting plan."""
        plan = self.parser.parse(step, root)
        self.apply_context(plan)
        return plan

    def resolve(self, step: str, root: QueryRoot | None = None, *, wait: bool = False) -> ResolvedStep:
        """
        Resolve a step to a plan and, given a root, its target element.

        Args:
            step: Raw step text
            root: Page or frame to search; None resolves the plan only
            wait: Poll for the element instead of a single scan

        Returns:
            ResolvedStep; ``located`` is False when no element was found
        """
        plan = self.plan(step, root)
        if isinstance(plan, CompositeActionPlan):
            parts = [self._locate(sub_plan, root, wait) for sub_plan in plan.steps]
            return ResolvedStep(plan=plan, parts=parts)
        return self._locate(plan, root, wait)

    def apply_context(self, plan: ActionPlan) -> None:
        """Fill context-dependent values into ``plan``."""
        if isinstance(plan, CompositeActionPlan):
            for sub_plan in plan.steps:
                self.apply_context(sub_plan)

        if plan.frame_anchor is None and self.session.frame_anchor:
            plan.frame_anchor = self.session.frame_anchor

        match plan.action_type:
            case "enter_stored_reference":
                plan.value = self.session.recall()
                if plan.value is None:
                    self._log.warning("No stored reference in session")
            case "fill_credentials":
                plan.metadata["username"] = self.settings.username
                plan.metadata["password"] = self.settings.password
            case _:
                pass

    def _locate(self, plan: ActionPlan, root: QueryRoot | None, wait: bool) -> ResolvedStep:
        element = plan.metadata.get("intelligent_locator")
        if element is not None:
            return ResolvedStep(plan=plan, element=element)
        if root is None or not plan.is_valid:
            return ResolvedStep(plan=plan)

        if plan.action_type == "enter_stored_reference":
            return ResolvedStep(plan=plan, query=self._locate_reference_field(plan, root))

        if not plan.element_name:
            return ResolvedStep(plan=plan)

        query = self.locator.locate(plan, root, wait=wait)
        if query is None:
            self._log.info("Element not located", action=plan.action_type, target=plan.element_name)
        return ResolvedStep(plan=plan, query=query)

    def _locate_reference_field(self, plan: ActionPlan, root: QueryRoot) -> LocatorQuery | None:
        scoped = self.locator.scoped_root(plan, root)
        if scoped is None:
            return None
        for variant in REFERENCE_FIELD_VARIANTS:
            query = self.locator.find(scoped, variant, TargetKind.INPUT)
            if query is not None:
                self._log.debug("Reference field found", variant=variant)
                return query
        return None
