"""
Tests for the category semantic matchers.

These tests verify the shared similarity helpers, candidate collection
limits and each matcher's category-specific evidence.
"""

from __future__ import annotations

import pytest

from conftest import FakeElement, FakeRoot, snapshot
from stepwise.config import Settings
from stepwise.intelligence import IntentCategory, StepIntent
from stepwise.locator import ElementCandidate
from stepwise.matchers import (
    ClickMatcher,
    FillMatcher,
    SelectMatcher,
    VerifyMatcher,
    action_affinity,
    element_kind,
    text_similarity,
    type_similarity,
)


def intent_for(
    category: IntentCategory,
    target: str = "",
    value: str | None = None,
    element_type: str | None = None,
) -> StepIntent:
    return StepIntent(
        original_step="step",
        clean_step="step",
        action_type=category,
        target_description=target,
        value=value,
        element_type=element_type,
    )


class TestSimilarityHelpers:
    """Test the shared scoring helpers."""

    @pytest.mark.parametrize(
        ("a", "b", "expected"),
        [
            ("Submit", "submit", 1.0),
            ("Sub", "Submit", 0.8),
            ("first  name", "First Name", 1.0),
            (None, "x", 0.0),
        ],
    )
    def test_text_similarity(self, a: str | None, b: str | None, expected: float) -> None:
        """Equality, containment and missing values."""
        assert text_similarity(a, b) == expected

    def test_text_similarity_word_overlap(self) -> None:
        """Otherwise the word-set overlap is used."""
        assert text_similarity("first name", "last name") == pytest.approx(1 / 3)

    def test_type_similarity(self) -> None:
        """Named element types are compared loosely."""
        assert type_similarity("button", "button") == 1.0
        assert type_similarity("button", "submit button") == 0.7
        assert type_similarity("input", "field") == 0.9
        assert type_similarity("link", "button") == 0.0
        assert type_similarity(None, "button") == 0.0

    def test_action_affinity(self) -> None:
        """Kinds suit some actions better than others."""
        assert action_affinity("link", IntentCategory.CLICK) == 1.0
        assert action_affinity("textarea", IntentCategory.FILL) == 1.0
        assert action_affinity("div", IntentCategory.FILL) == 0.3
        assert action_affinity("div", IntentCategory.VERIFY) == 0.7
        assert action_affinity(None, IntentCategory.CLICK) == 0.5

    def test_element_kind(self) -> None:
        """Submit inputs are buttons; anchors are links."""
        assert element_kind(ElementCandidate(tag="input", type="submit")) == "button"
        assert element_kind(ElementCandidate(tag="input", type="text")) == "input"
        assert element_kind(ElementCandidate(tag="a")) == "link"
        assert element_kind(ElementCandidate()) == "unknown"


class TestCollection:
    """Test candidate pool limits and failure handling."""

    def test_per_selector_limit(self, settings: Settings) -> None:
        """Click only looks at the first few elements per selector."""
        buttons = [FakeElement(snapshot(tag="button", text=f"B{i}")) for i in range(8)]
        root = FakeRoot(elements={"button": buttons})

        pool = ClickMatcher(settings).collect(root, intent_for(IntentCategory.CLICK, "B1"))

        assert len(pool) == ClickMatcher.per_selector_limit

    def test_max_candidates_cap(self) -> None:
        """The pool never exceeds the configured cap."""
        settings = Settings(click_max_candidates=2)
        buttons = [FakeElement(snapshot(tag="button", text=f"B{i}")) for i in range(4)]
        root = FakeRoot(elements={"button": buttons, "a": buttons})

        pool = ClickMatcher(settings).collect(root, intent_for(IntentCategory.CLICK, "B1"))

        assert len(pool) == 2
        assert "a" not in root.queried

    def test_failing_element_is_skipped(self, settings: Settings) -> None:
        """Detached elements do not stop collection."""
        good = FakeElement(snapshot(tag="button", text="Save"))
        root = FakeRoot(elements={"button": [FakeElement(fail=True), good]})

        pool = ClickMatcher(settings).collect(root, intent_for(IntentCategory.CLICK, "Save"))

        assert [handle for handle, _ in pool] == [good]

    def test_threshold(self, settings: Settings) -> None:
        """A weak best match is rejected."""
        root = FakeRoot(elements={"button": [FakeElement(snapshot(tag="button", text="Help"))]})
        matcher = ClickMatcher(settings)

        assert matcher.find_best_match(root, intent_for(IntentCategory.CLICK, "Submit")) is None

    def test_empty_root(self, settings: Settings, empty_root: FakeRoot) -> None:
        """No candidates, no match."""
        assert FillMatcher(settings).find_best_match(empty_root, intent_for(IntentCategory.FILL, "Email")) is None


class TestClickMatcher:
    """Test click scoring."""

    def test_submit_button(self, settings: Settings, login_form_root: FakeRoot) -> None:
        """The labelled button beats the other one."""
        intent = intent_for(IntentCategory.CLICK, "Submit", element_type="button")
        match = ClickMatcher(settings).find_best_match(login_form_root, intent)

        assert match is not None
        assert match.candidate.id == "submit-btn"
        assert match.score == 90

    def test_modal_submit_preferred(self, settings: Settings) -> None:
        """With a modal open, its submit button wins over the page's."""
        outside = FakeElement(snapshot(tag="button", text="Submit", pageHasModal=True))
        inside = FakeElement(
            snapshot(tag="button", type="submit", text="Submit", pageHasModal=True, inModal=True, insideOpenModal=True)
        )
        root = FakeRoot(elements={"button": [outside, inside]})

        match = ClickMatcher(settings).find_best_match(root, intent_for(IntentCategory.CLICK, "Submit", element_type="button"))

        assert match is not None
        assert match.handle is inside

    def test_cancel_penalized_for_confirm_targets(self, settings: Settings) -> None:
        """Dismiss buttons are pushed down when confirming."""
        matcher = ClickMatcher(settings)
        intent = intent_for(IntentCategory.CLICK, "Save")

        cancel = matcher.score_candidate(ElementCandidate(tag="button", text="Cancel"), intent)
        close = matcher.score_candidate(ElementCandidate(tag="button", text="×"), intent)

        assert cancel < 0
        assert close < 0

    def test_empty_text_penalty(self, settings: Settings) -> None:
        """Text-less elements lose points when a target is named."""
        matcher = ClickMatcher(settings)
        intent = intent_for(IntentCategory.CLICK, "Go")

        assert matcher.score_candidate(ElementCandidate(tag="button"), intent) == -30 + 30


class TestFillMatcher:
    """Test fill scoring."""

    def test_first_name_beats_last_name(self, settings: Settings, login_form_root: FakeRoot) -> None:
        """Exact id evidence decides between similar fields."""
        match = FillMatcher(settings).find_best_match(login_form_root, intent_for(IntentCategory.FILL, "First Name"))

        assert match is not None
        assert match.candidate.id == "firstName"

    def test_empty_input_preferred(self, settings: Settings) -> None:
        """An empty input beats one already holding data."""
        matcher = FillMatcher(settings)
        intent = intent_for(IntentCategory.FILL, "Email")
        empty = ElementCandidate(tag="input", name="email")
        filled = ElementCandidate(tag="input", name="email", value="old@example.com")

        assert matcher.score_candidate(empty, intent) > matcher.score_candidate(filled, intent)

    def test_field_word_penalizes_non_controls(self, settings: Settings) -> None:
        """'field' in the target means a form control is wanted."""
        matcher = FillMatcher(settings)
        intent = intent_for(IntentCategory.FILL, "Notes field")
        editor = ElementCandidate(tag="div", id="notes")
        textarea = ElementCandidate(tag="textarea", id="notes")

        assert matcher.score_candidate(textarea, intent) > matcher.score_candidate(editor, intent)

    def test_disabled_penalty(self, settings: Settings) -> None:
        """Read-only fields lose points."""
        matcher = FillMatcher(settings)
        intent = intent_for(IntentCategory.FILL, "Email")
        enabled = ElementCandidate(tag="input", name="email")
        disabled = ElementCandidate(tag="input", name="email", disabled=True)

        assert matcher.score_candidate(enabled, intent) - matcher.score_candidate(disabled, intent) == 40


class TestSelectMatcher:
    """Test dropdown scoring."""

    def test_native_select(self, settings: Settings) -> None:
        """A labelled native select is found."""
        country = FakeElement(snapshot(tag="select", id="country", name="country", labelText="Country"))
        root = FakeRoot(elements={"select": [country]})

        match = SelectMatcher(settings).find_best_match(root, intent_for(IntentCategory.SELECT, "Country"))

        assert match is not None
        assert match.handle is country
        assert match.score == 60 + 40 + 30 + 15

    def test_combobox_role(self, settings: Settings) -> None:
        """ARIA comboboxes earn role evidence."""
        matcher = SelectMatcher(settings)
        intent = intent_for(IntentCategory.SELECT, "Country")
        combo = ElementCandidate(tag="div", role="combobox", label="Country")
        plain = ElementCandidate(tag="div", label="Country")

        assert matcher.score_candidate(combo, intent) - matcher.score_candidate(plain, intent) == 50


class TestVerifyMatcher:
    """Test verification scoring."""

    def test_text_query_comes_first(self, settings: Settings) -> None:
        """The literal being verified is queried before generic tags."""
        pairs = VerifyMatcher(settings).candidate_selectors(
            intent_for(IntentCategory.VERIFY, value="Order Confirmed")
        )

        assert pairs[0] == ('text="Order Confirmed"', VerifyMatcher.text_match_limit)
        assert pairs[1][0] == "h1, h2, h3, h4, h5, h6"

    def test_heading_with_exact_text(self, settings: Settings) -> None:
        """An exact heading beats a longer paragraph."""
        heading = FakeElement(snapshot(tag="h1", text="Order Confirmed"))
        paragraph = FakeElement(snapshot(tag="p", text="Your order confirmed email is on its way"))
        root = FakeRoot(elements={'text="Order Confirmed"': [heading], "p": [paragraph]})

        match = VerifyMatcher(settings).find_best_match(
            root, intent_for(IntentCategory.VERIFY, value="Order Confirmed")
        )

        assert match is not None
        assert match.handle is heading

    def test_empty_elements_rejected(self, settings: Settings) -> None:
        """Elements without text never enter the pool."""
        root = FakeRoot(elements={"span": [FakeElement(snapshot(tag="span", text=""))]})
        pool = VerifyMatcher(settings).collect(root, intent_for(IntentCategory.VERIFY, value="Hi"))

        assert pool == []

    def test_hidden_text_loses(self, settings: Settings) -> None:
        """Visibility is part of the evidence."""
        matcher = VerifyMatcher(settings)
        intent = intent_for(IntentCategory.VERIFY, value="Saved")
        shown = ElementCandidate(tag="span", text="Saved", visible=True)
        hidden = ElementCandidate(tag="span", text="Saved", visible=False)

        assert matcher.score_candidate(shown, intent) - matcher.score_candidate(hidden, intent) == 65
