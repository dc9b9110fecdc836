"""
Tests for the Multi-Tier Parser.

These tests walk the resolution cascade end to end: intent pipeline,
combined actions, frame scoping, table rules, general rules, fuzzy
intent and the unknown sentinel.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from conftest import FakeRoot
from stepwise.config import Settings
from stepwise.intelligence import IntelligentStepProcessor
from stepwise.planner import UNKNOWN, ActionPlan, CompositeActionPlan, LocatorStrategy, StepParser


@pytest.fixture
def parser(settings: Settings) -> StepParser:
    """Create a parser with the intent pipeline enabled."""
    return StepParser(processor=IntelligentStepProcessor(settings))


@pytest.fixture
def legacy_parser() -> StepParser:
    """Create a parser that only uses the pattern cascade."""
    return StepParser(processor=None)


class TestReferenceScenarios:
    """End-to-end resolution of representative steps."""

    def test_click_via_intent_pipeline(self, parser: StepParser) -> None:
        """A plain click is resolved by the intent pipeline."""
        plan = parser.parse('When I click "Submit" button')

        assert plan.action_type == "click"
        assert plan.element_name == "Submit"
        assert plan.locator_strategy == LocatorStrategy.INTELLIGENT
        assert plan.metadata["element_type"] == "button"

    def test_fill_via_intent_pipeline(self, parser: StepParser) -> None:
        """The field name after 'in' is the target."""
        plan = parser.parse('When I enter "John" in First Name')

        assert plan.action_type == "fill"
        assert plan.value == "John"
        assert plan.element_name == "First Name"

    def test_delegated_verify_uses_pattern_table(self, parser: StepParser) -> None:
        """'confirm' is a delegated keyword, so the pattern table answers."""
        plan = parser.parse('Then I should see "Order Confirmed"')

        assert plan.action_type == "verify"
        assert plan.value == "Order Confirmed"
        assert plan.locator_strategy == LocatorStrategy.REGEX

    def test_multi_select_skips_intent_pipeline(self, parser: StepParser) -> None:
        """Several quoted literals joined by 'and' go to the pattern table."""
        plan = parser.parse('When I select "Red" and "Blue" from "Colors"')

        assert plan.action_type == "select"
        assert plan.element_name == "Colors"
        assert plan.value == "Red;Blue"

    def test_select_from_skips_intent_pipeline(self, parser: StepParser) -> None:
        """'select X from Y' is a dropdown selection, not a click."""
        plan = parser.parse('When I select "Red" from "Colors"')

        assert plan.action_type == "select"
        assert plan.element_name == "Colors"
        assert plan.value == "Red"
        assert plan.locator_strategy != LocatorStrategy.INTELLIGENT

    def test_choose_from_dropdown_skips_intent_pipeline(self, parser: StepParser) -> None:
        """'choose' with a named dropdown is also left to the pattern table."""
        plan = parser.parse('When I choose "Red" from "Colors" dropdown')

        assert plan.action_type == "select"
        assert plan.value == "Red"
        assert plan.locator_strategy != LocatorStrategy.INTELLIGENT

    def test_unknown_step(self, parser: StepParser) -> None:
        """A step nothing understands yields the unknown sentinel."""
        plan = parser.parse("When I teleport to the moon")

        assert plan.action_type == UNKNOWN
        assert plan.target == "When I teleport to the moon"

    def test_never_raises(self, settings: Settings) -> None:
        """Failures inside a tier degrade to unknown."""
        processor = MagicMock()
        processor.process.side_effect = RuntimeError("boom")
        parser = StepParser(processor=processor)

        plan = parser.parse('When I click "Submit"')

        assert plan.action_type == UNKNOWN


class TestIntentTier:
    """Test how the parser consults the intent pipeline."""

    def test_disabled_intelligence_uses_pattern_table(self, settings: Settings) -> None:
        """With intelligence off the click comes from a pattern rule."""
        parser = StepParser(processor=IntelligentStepProcessor(settings), intelligence_enabled=False)

        plan = parser.parse('When I click "Submit" button')

        assert plan.action_type == "click"
        assert plan.locator_strategy == LocatorStrategy.REGEX

    def test_toggle_intelligence(self, parser: StepParser) -> None:
        """The intent tier can be switched off at runtime."""
        parser.intelligence_enabled = False
        assert parser.intelligence_enabled is False

        plan = parser.parse('When I click "Submit" button')
        assert plan.locator_strategy == LocatorStrategy.REGEX

    def test_no_processor_means_disabled(self, legacy_parser: StepParser) -> None:
        """A parser without a processor never reports intelligence on."""
        assert legacy_parser.intelligence_enabled is False

    def test_intent_fallthrough_when_no_element_matches(self, parser: StepParser) -> None:
        """With a root and no matching element, the cascade takes over."""
        plan = parser.parse('When I click "Submit" button', FakeRoot())

        assert plan.action_type == "click"
        assert plan.locator_strategy == LocatorStrategy.REGEX

    def test_invalid_intent_plan_is_ignored(self) -> None:
        """An unknown plan from the processor does not stop the cascade."""
        processor = MagicMock()
        processor.process.return_value = ActionPlan(action_type=UNKNOWN, target="x")
        parser = StepParser(processor=processor)

        plan = parser.parse('When I click "Submit" button')

        assert plan.action_type == "click"
        assert plan.locator_strategy == LocatorStrategy.REGEX


class TestCombinedActions:
    """Test multi-action step splitting."""

    def test_fill_and_click(self, parser: StepParser) -> None:
        """Each part is parsed independently into a composite plan."""
        plan = parser.parse('When I enter "john" in "Username" and click "Login"')

        assert isinstance(plan, CompositeActionPlan)
        assert plan.action_type == "composite"
        assert plan.keyword == "When"
        assert [step.action_type for step in plan.steps] == ["fill", "click"]
        assert plan.steps[0].value == "john"
        assert plan.steps[0].element_name == "Username"
        assert plan.steps[1].element_name == "Login"

    def test_delimiter_inside_quotes_is_not_split(self, legacy_parser: StepParser) -> None:
        """'and' inside a quoted literal is part of the literal."""
        plan = legacy_parser.parse('When I click "Terms and Conditions"')

        assert plan.action_type == "click"
        assert plan.element_name == "Terms and Conditions"


class TestFrameScope:
    """Test frame-scoped steps."""

    def test_frame_anchor_is_recorded(self, parser: StepParser) -> None:
        """The inner step is parsed and tagged with the frame."""
        plan = parser.parse('When in iframe "payment", I enter "4242" in "Card Number"')

        assert plan.action_type == "fill"
        assert plan.value == "4242"
        assert plan.element_name == "Card Number"
        assert plan.frame_anchor == "payment"

    def test_frame_root_is_used_for_inner_step(self) -> None:
        """The inner step is resolved against the named frame."""
        processor = MagicMock()
        processor.process.return_value = None
        frame = FakeRoot()
        root = FakeRoot(frames={"checkout": frame})
        parser = StepParser(processor=processor)

        parser.parse('When inside frame "checkout", I click "Pay"', root)

        assert processor.process.call_args_list[-1].args[1] is frame


class TestTableTier:
    """Test table/window/frame/alert rules."""

    def test_table_column_rule(self, legacy_parser: StepParser) -> None:
        """Named fields are mapped onto the plan."""
        plan = legacy_parser.parse('Then the "Users" table should have column "Email"')

        assert plan.action_type == "table_has_column"
        assert plan.table_name == "Users"
        assert plan.column_name == "Email"
        assert plan.locator_strategy == LocatorStrategy.TABLE

    def test_integer_fields_are_parsed(self, legacy_parser: StepParser) -> None:
        """Row numbers become integers."""
        plan = legacy_parser.parse('Then the cell at row 2 and column "Status" should be "Active"')

        assert plan.action_type == "cell_value_by_position"
        assert plan.row_number == 2
        assert plan.expected_value == "Active"

    def test_condition_value_becomes_row_anchor(self, legacy_parser: StepParser) -> None:
        """Row conditions scope the element lookup."""
        plan = legacy_parser.parse('When I click "Delete" in the row where "Name" is "Bob"')

        assert plan.action_type == "click_in_row"
        assert plan.element_name == "Delete"
        assert plan.condition_column == "Name"
        assert plan.row_anchor == "Bob"

    def test_window_switch(self, parser: StepParser) -> None:
        """Window management is delegated away from the intent pipeline."""
        plan = parser.parse("When I switch to the new tab")

        assert plan.action_type == "switch_to_new_window"


class TestFuzzyIntent:
    """Test the keyword-based fuzzy tier."""

    def test_sort_keyword(self, legacy_parser: StepParser) -> None:
        """An otherwise unparseable sort request is guessed."""
        plan = legacy_parser.parse("When the grid gets sorted somehow")

        assert plan.action_type == "sort_table"
        assert plan.locator_strategy == LocatorStrategy.INTENT

    def test_pagination_keyword(self, legacy_parser: StepParser) -> None:
        """Page mentions map to pagination."""
        plan = legacy_parser.parse("When the results page advances")

        assert plan.action_type == "navigate_to_page"


class TestParseSingleAction:
    """Test the single-action entry point."""

    def test_skips_combined_detection(self, legacy_parser: StepParser) -> None:
        """A combined-looking step is parsed as one action."""
        plan = legacy_parser.parse_single_action('When I enter "a" in "B" and click "C"')

        assert not isinstance(plan, CompositeActionPlan)
        assert plan.action_type == "fill"


class TestIsStepSupported:
    """Test the support check."""

    def test_supported_click(self, parser: StepParser) -> None:
        """Steps handled by the intent pipeline are supported."""
        assert parser.is_step_supported('When I click "Submit" button') is True

    def test_supported_by_full_match(self, legacy_parser: StepParser) -> None:
        """Steps fully matched by a pattern rule are supported."""
        assert legacy_parser.is_step_supported('When I should see "Welcome"') is True

    def test_click_and_switch_is_supported(self, legacy_parser: StepParser) -> None:
        """The click-and-switch shape counts as one supported step."""
        assert legacy_parser.is_step_supported('When I click "Docs" and switch to new tab') is True

    def test_unsupported(self, legacy_parser: StepParser) -> None:
        """A nonsense step is unsupported."""
        assert legacy_parser.is_step_supported("When I teleport to the moon") is False

    def test_empty_is_unsupported(self, parser: StepParser) -> None:
        """Empty text is never supported."""
        assert parser.is_step_supported("") is False

    def test_suggestions_for_unsupported_step(self, legacy_parser: StepParser) -> None:
        """Every suggested rewrite is itself supported."""
        step = 'When I put "John" into the First Name box'
        assert legacy_parser.is_step_supported(step) is False

        suggestions = legacy_parser.suggest_alternatives(step)

        assert 'When I fill First Name with "John"' in [s.step for s in suggestions]
        assert all(legacy_parser.is_step_supported(s.step) for s in suggestions)

    def test_no_suggestions_for_supported_step(self, legacy_parser: StepParser) -> None:
        """Supported steps need no rewrite."""
        assert legacy_parser.suggest_alternatives('When I should see "Welcome"') == []
