"""
Tests for the broad-search Smart Locator, the DOM scanner and row scoping.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from conftest import FakeRoot, snapshot
from stepwise.config import Settings
from stepwise.driver import resolve_row, row_selector
from stepwise.locator import DomScanner, ElementCandidate, SmartLocator, TargetKind, kind_for
from stepwise.locator.scanner import SCAN_JS, SCAN_SELECTOR
from stepwise.planner import ActionPlan


@pytest.fixture
def locator(settings: Settings) -> SmartLocator:
    """Create a locator with default collaborators."""
    return SmartLocator(settings)


class TestDomScanner:
    """Test candidate snapshots from a root."""

    def test_script_embeds_selector(self) -> None:
        """The scan script queries the candidate selector."""
        assert repr(SCAN_SELECTOR) in SCAN_JS

    def test_scan_builds_candidates_in_order(self) -> None:
        """Snapshots become visible candidates in document order."""
        root = FakeRoot(scan=[snapshot(tag="BUTTON", text="Save"), snapshot(tag="a", text="Home")])
        candidates = DomScanner().scan(root)

        assert [c.tag for c in candidates] == ["button", "a"]
        assert all(c.visible for c in candidates)

    def test_malformed_items_are_skipped(self) -> None:
        """Non-mapping items are ignored."""
        root = FakeRoot(scan=[None, "junk", snapshot(tag="span", text="Ok")])
        assert len(DomScanner().scan(root)) == 1

    def test_failed_scan_is_empty(self) -> None:
        """Driver errors yield no candidates."""
        root = MagicMock()
        root.evaluate.side_effect = RuntimeError("navigated away")
        assert DomScanner().scan(root) == []


class TestBestCandidate:
    """Test strict-best selection."""

    def test_tie_keeps_earlier_candidate(self, locator: SmartLocator) -> None:
        """Equal scores keep document order."""
        first = ElementCandidate(tag="button", id="first-save", text="Save", visible=True)
        second = ElementCandidate(tag="button", id="second-save", text="Save", visible=True)

        best, score = locator.best_candidate([first, second], "Save", TargetKind.BUTTON)

        assert best is first
        assert score > 0

    def test_higher_score_wins(self, locator: SmartLocator) -> None:
        """A later, stronger candidate replaces an earlier one."""
        partial = ElementCandidate(tag="span", text="Save draft copy", visible=True)
        exact = ElementCandidate(tag="button", text="Save", visible=True)

        best, _ = locator.best_candidate([partial, exact], "Save", TargetKind.BUTTON)

        assert best is exact

    def test_search_field_is_not_chosen(self, locator: SmartLocator) -> None:
        """A search box listed first is passed over for the real field."""
        search = ElementCandidate(
            tag="input", id="city-search", name="city_q", placeholder="Search cities", visible=True
        )
        plain = ElementCandidate(tag="input", id="txtCity", visible=True)

        best, score = locator.best_candidate([search, plain], "City", TargetKind.INPUT)

        assert best is plain
        assert score == 195

    def test_scoring_errors_skip_candidate(self, settings: Settings) -> None:
        """A candidate that cannot be scored is skipped."""
        scorer = MagicMock()
        scorer.score.side_effect = [RuntimeError("bad"), 42.0]
        locator = SmartLocator(settings, scorer=scorer)
        a, b = ElementCandidate(tag="a"), ElementCandidate(tag="b")

        assert locator.best_candidate([a, b], "x", TargetKind.ANY) == (b, 42.0)


class TestFind:
    """Test scan, score and build."""

    def test_finds_exact_button(self, locator: SmartLocator) -> None:
        """The best candidate becomes a query."""
        root = FakeRoot(scan=[snapshot(tag="span", text="Cancel"), snapshot(tag="button", text="Submit")])
        query = locator.find(root, "Submit", TargetKind.BUTTON)

        assert query is not None
        assert query.selector == 'text="Submit" >> nth=0'

    def test_tie_uses_first_in_document_order(self, locator: SmartLocator) -> None:
        """Two equal buttons resolve to the first."""
        root = FakeRoot(
            scan=[
                snapshot(tag="button", id="first-save", text="Save"),
                snapshot(tag="button", id="second-save", text="Save"),
            ]
        )
        query = locator.find(root, "Save", TargetKind.BUTTON)

        assert query is not None
        assert query.selector.startswith('button[id="first-save"]')

    def test_weak_match_is_rejected(self, locator: SmartLocator) -> None:
        """Nothing above the minimum score means no query."""
        root = FakeRoot(scan=[snapshot(tag="span", text="Cancel")])
        assert locator.find(root, "Nonexistent", TargetKind.BUTTON) is None

    def test_empty_target_skips_scan(self, locator: SmartLocator) -> None:
        """No target, no scan."""
        root = FakeRoot()
        assert locator.find(root, "") is None
        assert root.evaluations == 0

    def test_fill_on_label_without_input_is_discarded(self, locator: SmartLocator) -> None:
        """A fill never resolves to a plain label."""
        root = FakeRoot(scan=[snapshot(tag="span", text="Nickname")])
        assert locator.find(root, "Nickname", TargetKind.INPUT) is None

    def test_build_failure_is_contained(self, settings: Settings) -> None:
        """Factory errors become a missing match."""
        factory = MagicMock()
        factory.build.side_effect = RuntimeError("boom")
        locator = SmartLocator(settings, factory=factory)
        root = FakeRoot(scan=[snapshot(tag="button", text="Submit")])

        assert locator.find(root, "Submit", TargetKind.BUTTON) is None


class TestWaitFor:
    """Test polling for late elements."""

    def test_element_appears_on_second_scan(self, fast_settings: Settings) -> None:
        """Polling continues until the element shows up."""
        root = MagicMock()
        root.evaluate.side_effect = [[], [snapshot(tag="button", text="Continue")]]
        locator = SmartLocator(fast_settings)

        query = locator.wait_for(root, "Continue", TargetKind.BUTTON)

        assert query is not None
        assert root.evaluate.call_count == 2

    def test_times_out(self, fast_settings: Settings) -> None:
        """A missing element gives None after the timeout."""
        root = FakeRoot()
        locator = SmartLocator(fast_settings)

        assert locator.wait_for(root, "Continue", TargetKind.BUTTON) is None
        assert root.evaluations > 1


class TestLocate:
    """Test plan-driven location with frame and row scoping."""

    def test_kind_for_actions(self) -> None:
        """Actions map to the element kind they operate on."""
        assert kind_for("fill") == TargetKind.INPUT
        assert kind_for("select") == TargetKind.SELECT
        assert kind_for("check") == TargetKind.CHECK
        assert kind_for("click_in_row") == TargetKind.BUTTON
        assert kind_for("take_screenshot") == TargetKind.ANY

    def test_row_anchor_scopes_the_scan(self, locator: SmartLocator) -> None:
        """Only the anchored row is scanned."""
        row = FakeRoot(scan=[snapshot(tag="button", text="Edit")])
        selector = row_selector("Alice")
        root = FakeRoot(counts={selector: 1}, scopes={selector: row})
        plan = ActionPlan(action_type="click", target="Edit", element_name="Edit", row_anchor="Alice")

        query = locator.locate(plan, root)

        assert query is not None
        assert row.evaluations == 1
        assert root.evaluations == 0

    def test_missing_row_gives_none(self, locator: SmartLocator) -> None:
        """An anchor no row contains yields no query."""
        plan = ActionPlan(action_type="click", target="Edit", element_name="Edit", row_anchor="Zed")
        assert locator.locate(plan, FakeRoot()) is None

    def test_frame_anchor_scopes_the_scan(self, locator: SmartLocator) -> None:
        """Frame-anchored plans scan the frame."""
        frame = FakeRoot(scan=[snapshot(tag="button", text="Pay")])
        root = FakeRoot(frames={"checkout": frame})
        plan = ActionPlan(action_type="click", target="Pay", element_name="Pay", frame_anchor="checkout")

        assert locator.locate(plan, root) is not None
        assert frame.evaluations == 1

    def test_missing_frame_gives_none(self, locator: SmartLocator) -> None:
        """An unknown frame yields no query."""
        plan = ActionPlan(action_type="click", target="Pay", element_name="Pay", frame_anchor="nowhere")
        assert locator.locate(plan, FakeRoot()) is None

    def test_plan_without_element_name(self, locator: SmartLocator) -> None:
        """Element-less plans are not located."""
        root = FakeRoot()
        assert locator.locate(ActionPlan(action_type="refresh", target="page"), root) is None
        assert root.evaluations == 0


class TestResolveRow:
    """Test the default row resolver."""

    def test_native_rows_first(self) -> None:
        """A matching <tr> is preferred."""
        scoped = FakeRoot()
        selector = 'tr:has-text("Alice")'
        root = FakeRoot(counts={selector: 1}, scopes={selector: scoped})

        assert resolve_row(root, "Alice") is scoped

    def test_aria_rows_second(self) -> None:
        """ARIA grid rows are used when no <tr> matches."""
        scoped = FakeRoot()
        selector = "[role='row']:has-text(\"Alice\")"
        root = FakeRoot(counts={selector: 1}, scopes={selector: scoped})

        assert resolve_row(root, "Alice") is scoped
        assert root.counted[0] == 'tr:has-text("Alice")'

    def test_no_row(self) -> None:
        """No match, no scope."""
        assert resolve_row(FakeRoot(), "Alice") is None

    def test_empty_anchor(self) -> None:
        """An empty anchor is never resolved."""
        root = FakeRoot()
        assert resolve_row(root, "") is None
        assert root.counted == []
