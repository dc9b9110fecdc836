"""
Named scoring rules for the broad-search Candidate Scorer.

Every heuristic is a ScoringRule: a name plus a function returning the
points it contributes for one candidate (0 when it does not apply).
Rules are grouped into ordered ScoringStages. A stage has a gate that
decides whether it runs given the score so far, and may be
``first_hit_only`` so only its strongest applicable rule counts.

Provides:
- ScoringContext: normalized target and candidate fields
- ScoringRule / ScoringStage: rule table building blocks
- SCORING_STAGES: the default ordered stage table
- clean_target_name: strip trailing UI-noise words from a target
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field

from stepwise.locator.candidate import ElementCandidate, TargetKind
from stepwise.utils.text import collapse_whitespace, fuzzy_ratio

_NOISE_SUFFIX = re.compile(
    r"\s+(?:button|btn|link|input|field|tab|icon|radio\s+button|radio|check\s+box|checkbox|"
    r"drop\s+down|dropdown|select|box|menu|card|item|element|option|header|title|label|"
    r"slider|range|text\s+area|textarea|progress\s+bar|progressbar)$"
)

EXACT_TEXT_SCORE = 150
EXACT_ATTRIBUTE_SCORE = 140
LABEL_LIKE_SCORE = 30
CONTAINS_TITLE_SCORE = 120
CONTAINS_TEXT_SCORE = 110
EQUALS_ID_SCORE = 100
SOLID_MATCH_SCORE = 100
FUZZY_CUTOFF = 85
VISIBLE_SCORE = 100
DECOY_PENALTY = -150
OVERSIZED_PENALTY = -150

_LABEL_LIKE_TAGS = frozenset({"label", "b", "strong", "p", "span"})
_SEARCH_NAMES = frozenset({"s", "search", "q", "query"})
_SEARCH_PLACEHOLDER_HINTS = ("search", "filter", "type here", "start typing")
_NON_TEXT_INPUT_TYPES = frozenset({"checkbox", "radio", "range"})


def clean_target_name(target: str) -> str:
    """Lowercase ``target`` and iteratively strip trailing UI-noise words."""
    clean = collapse_whitespace(target).lower()
    previous = None
    while previous != clean:
        previous = clean
        clean = _NOISE_SUFFIX.sub("", clean).strip()
    return clean


@dataclass(frozen=True)
class ScoringContext:
    """Normalized inputs shared by every rule for one candidate."""

    candidate: ElementCandidate
    target: str
    kind: TargetKind
    lower: str = field(init=False)
    clean: str = field(init=False)
    text: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "lower", collapse_whitespace(self.target).lower())
        object.__setattr__(self, "clean", clean_target_name(self.target))
        object.__setattr__(self, "text", collapse_whitespace(self.candidate.text).lower())

    def names(self) -> tuple[str, str]:
        return self.lower, self.clean

    def equals(self, value: str) -> bool:
        value = collapse_whitespace(value).lower()
        return bool(value) and value in self.names()

    def contained_in(self, value: str) -> bool:
        """Either form of the target appears inside ``value``."""
        value = value.lower()
        return bool(value) and any(name and name in value for name in self.names())

    def fuzzy(self, value: str) -> bool:
        return any(fuzzy_ratio(name, value) > FUZZY_CUTOFF for name in self.names() if name)

    @property
    def is_buttonish(self) -> bool:
        c = self.candidate
        return c.tag in ("button", "a") or c.type == "submit" or c.role.lower() == "button"


ScoreFn = Callable[[ScoringContext], float]


@dataclass(frozen=True)
class ScoringRule:
    """One named heuristic."""

    name: str
    score: ScoreFn

    def __call__(self, ctx: ScoringContext) -> float:
        return self.score(ctx)


StageGate = Callable[[ScoringContext, float, bool], bool]


def _always(ctx: ScoringContext, score: float, matched_exact: bool) -> bool:
    return True


@dataclass(frozen=True)
class ScoringStage:
    """
    An ordered group of rules behind a gate.

    Attributes:
        name: Stage label used in score breakdowns
        rules: Rules evaluated in order
        gate: Called with (context, running score, exact matched); the
            stage is skipped when it returns False
        first_hit_only: Only the first rule with a non-zero result counts
        marks_exact: A hit in this stage counts as an exact match
    """

    name: str
    rules: tuple[ScoringRule, ...]
    gate: StageGate = _always
    first_hit_only: bool = False
    marks_exact: bool = False


# Stage 1: exact matches

def _exact_text(ctx: ScoringContext) -> float:
    return EXACT_TEXT_SCORE if ctx.text and ctx.text in ctx.names() else 0


def _exact_aria_label(ctx: ScoringContext) -> float:
    return EXACT_TEXT_SCORE if ctx.equals(ctx.candidate.label) else 0


def _exact_placeholder(ctx: ScoringContext) -> float:
    return EXACT_ATTRIBUTE_SCORE if ctx.equals(ctx.candidate.placeholder) else 0


def _exact_title(ctx: ScoringContext) -> float:
    return EXACT_ATTRIBUTE_SCORE if ctx.equals(ctx.candidate.title) else 0


# Stage 2: indicator tags for form-element lookups

def _label_like_tag(ctx: ScoringContext) -> float:
    if ctx.kind in (TargetKind.INPUT, TargetKind.SELECT, TargetKind.SLIDER):
        return LABEL_LIKE_SCORE if ctx.candidate.tag in _LABEL_LIKE_TAGS else 0
    return 0


# Stage 3: bidirectional containment

def _bidirectional(value: str, ctx: ScoringContext) -> bool:
    value = value.lower()
    return bool(value) and (value in ctx.lower or ctx.lower in value)


def _contains_title(ctx: ScoringContext) -> float:
    return CONTAINS_TITLE_SCORE if _bidirectional(ctx.candidate.title, ctx) else 0


def _contains_aria_label(ctx: ScoringContext) -> float:
    return CONTAINS_TITLE_SCORE if _bidirectional(ctx.candidate.label, ctx) else 0


def _contains_text(ctx: ScoringContext) -> float:
    return CONTAINS_TEXT_SCORE if ctx.contained_in(ctx.text) else 0


def _equals_id(ctx: ScoringContext) -> float:
    return EQUALS_ID_SCORE if ctx.equals(ctx.candidate.id) else 0


def _equals_name(ctx: ScoringContext) -> float:
    return EQUALS_ID_SCORE if ctx.equals(ctx.candidate.name) else 0


# Stage 4: weak and fuzzy evidence

def _weak_contains(attribute: str, points: int) -> ScoreFn:
    def rule(ctx: ScoringContext) -> float:
        return points if ctx.contained_in(getattr(ctx.candidate, attribute)) else 0

    return rule


def _fuzzy(attribute: str) -> ScoreFn:
    def rule(ctx: ScoringContext) -> float:
        value = getattr(ctx.candidate, attribute)
        return 30 if value and ctx.fuzzy(value) else 0

    return rule


# Stage 5: decoys

def _search_decoy(ctx: ScoringContext) -> float:
    if ctx.kind != TargetKind.INPUT:
        return 0
    if "search" in ctx.lower or "filter" in ctx.lower:
        return 0
    c = ctx.candidate
    placeholder = c.placeholder.lower()
    is_search = c.name.lower() in _SEARCH_NAMES or any(h in placeholder for h in _SEARCH_PLACEHOLDER_HINTS)
    return DECOY_PENALTY if is_search else 0


# Stage 6: contextual kind rules, only for relevant candidates

def _fill_affinity(ctx: ScoringContext) -> float:
    if ctx.kind != TargetKind.INPUT:
        return 0
    c = ctx.candidate
    if c.is_input and c.type not in _NON_TEXT_INPUT_TYPES:
        return 50
    return -100


def _check_affinity(ctx: ScoringContext) -> float:
    if ctx.kind != TargetKind.CHECK:
        return 0
    c = ctx.candidate
    if c.tag == "input" and c.type in ("checkbox", "radio"):
        return 100
    # Custom checkbox widgets hide the input behind a linked label
    if c.tag == "label" and c.for_attr:
        return 80
    return -100


def _click_affinity(ctx: ScoringContext) -> float:
    if ctx.kind == TargetKind.BUTTON:
        return 50 if ctx.is_buttonish or "btn" in ctx.candidate.class_name else 0
    return 10 if ctx.is_buttonish else 0


def _visible(ctx: ScoringContext) -> float:
    return VISIBLE_SCORE if ctx.candidate.visible else 0


# Stage 7: widget roles

def _slider_role(ctx: ScoringContext) -> float:
    if ctx.kind != TargetKind.SLIDER:
        return 0
    c = ctx.candidate
    if c.type == "range" or c.role.lower() == "slider":
        return 500
    classes = c.class_name.lower()
    if "slider" in classes or "range" in classes:
        return 100
    return -200


def _progress_role(ctx: ScoringContext) -> float:
    if ctx.kind != TargetKind.PROGRESSBAR:
        return 0
    c = ctx.candidate
    if c.type == "progressbar" or c.role.lower() == "progressbar" or c.tag == "progress":
        return 500
    if "progress" in c.class_name.lower():
        return 100
    return -200


# Stage 8: whole-page wrappers

def _oversized_text(ctx: ScoringContext) -> float:
    length = len(ctx.candidate.text.strip())
    if length > 100 and length > len(ctx.target.strip()) * 5:
        return OVERSIZED_PENALTY
    return 0


SCORING_STAGES: tuple[ScoringStage, ...] = (
    ScoringStage(
        "exact",
        (
            ScoringRule("exact_text", _exact_text),
            ScoringRule("exact_aria_label", _exact_aria_label),
            ScoringRule("exact_placeholder", _exact_placeholder),
            ScoringRule("exact_title", _exact_title),
        ),
        first_hit_only=True,
        marks_exact=True,
    ),
    ScoringStage("indicator", (ScoringRule("label_like_tag", _label_like_tag),)),
    ScoringStage(
        "substring",
        (
            ScoringRule("contains_title", _contains_title),
            ScoringRule("contains_aria_label", _contains_aria_label),
            ScoringRule("contains_text", _contains_text),
            ScoringRule("equals_id", _equals_id),
            ScoringRule("equals_name", _equals_name),
        ),
        gate=lambda ctx, score, exact: not exact,
        first_hit_only=True,
    ),
    ScoringStage(
        "fuzzy",
        (
            ScoringRule("weak_text", _weak_contains("text", 45)),
            ScoringRule("weak_id", _weak_contains("id", 45)),
            ScoringRule("weak_name", _weak_contains("name", 45)),
            ScoringRule("weak_title", _weak_contains("title", 35)),
            ScoringRule("fuzzy_text", _fuzzy("text")),
            ScoringRule("fuzzy_id", _fuzzy("id")),
            ScoringRule("fuzzy_title", _fuzzy("title")),
        ),
        gate=lambda ctx, score, exact: score < SOLID_MATCH_SCORE,
    ),
    ScoringStage(
        "decoy",
        (ScoringRule("search_decoy", _search_decoy),),
        gate=lambda ctx, score, exact: score < SOLID_MATCH_SCORE,
    ),
    ScoringStage(
        "context",
        (
            ScoringRule("fill_affinity", _fill_affinity),
            ScoringRule("check_affinity", _check_affinity),
            ScoringRule("click_affinity", _click_affinity),
            ScoringRule("visible", _visible),
        ),
        gate=lambda ctx, score, exact: score > 0,
    ),
    ScoringStage(
        "widget",
        (
            ScoringRule("slider_role", _slider_role),
            ScoringRule("progress_role", _progress_role),
        ),
    ),
    ScoringStage("size", (ScoringRule("oversized_text", _oversized_text),)),
)
