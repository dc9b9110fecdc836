"""
Intent Analyzer: rule- and lexicon-based decomposition of a step.

Extracts the action category, a target description, quoted literal
values, an element-type hint and spatial/visual/ordinal modifiers.
``analyze`` is a pure function of its input and the static lexicon.
"""

from __future__ import annotations

import re

import structlog

from stepwise.intelligence.intent import IntentCategory, StepIntent
from stepwise.intelligence.lexicon import (
    CONTAINER_PHRASE,
    ELEMENT_TYPES,
    NAVIGATION_VERBS,
    NEGATION_KEYWORDS,
    PROGRESS_WORDS,
    SLIDER_WORDS,
    SUBJECT_PRONOUNS,
    TYPE_NOISE_WORDS,
    VERB_LEXICON,
)
from stepwise.utils.text import collapse_whitespace, quoted_values, strip_keyword

logger = structlog.get_logger(__name__)

_QUOTED = re.compile(r"[\"']([^\"']+)[\"']")
_CONTAINER = re.compile(CONTAINER_PHRASE, re.IGNORECASE)
_SPATIAL = re.compile(r"\b(next to|below|above|inside|near|beside|under|over)\s+(.+?)(?:\s|$)", re.IGNORECASE)
_COLOR = re.compile(r"\b(red|blue|green|yellow|orange|purple|black|white|gray|grey)\s", re.IGNORECASE)
_SIZE = re.compile(r"\b(large|small|big|tiny|huge)\s", re.IGNORECASE)
_POSITION = re.compile(r"\b(first|second|third|fourth|fifth|last|1st|2nd|3rd|\d+th)\s", re.IGNORECASE)

_PRONOUN_ALT = "|".join(SUBJECT_PRONOUNS)
_SLIDER_VERBS = re.compile(r"\b(set|adjust|move|slide|drag)\s", re.IGNORECASE)
_WAIT_VERBS = re.compile(r"\b(wait|pause|monitor)\b", re.IGNORECASE)
_SELECTISH_VERBS = re.compile(r"\b(set|choose|select|pick)\b", re.IGNORECASE)
_FILL_CLAUSE = re.compile(r"(?:^|\s)(?:in|into)\s+(.+)$", re.IGNORECASE)
_QUOTED_FILL_CLAUSE = re.compile(r"""(?:^|\s)(?:in|into)\s+(?:the\s+)?["']([^"']+)["'](.*)$""", re.IGNORECASE)
_LEADING_NOISE = re.compile(
    r"^(?:i|user|we|you|he|she|they|it|this|that|the|a|an|my|your|our|their|"
    r"should|must|to|on|at|from|is|are|be|with|for|by|in|into)\s+",
    re.IGNORECASE,
)
_TRAILING_PREPOSITION = re.compile(r"\s+(?:with|for|by|to|on|at|from|in|into|of|the|as)$", re.IGNORECASE)
_TRAILING_TYPE_NOISE = re.compile(r"\s+(?:" + "|".join(TYPE_NOISE_WORDS) + r")$", re.IGNORECASE)
_TRAILING_VISIBILITY = re.compile(
    r"\s+(?:is\s+|are\s+|should\s+be\s+)?(?:displayed|visible|present|shown)$", re.IGNORECASE
)
_ELEMENT_TYPE_PATTERNS = tuple((t, re.compile(rf"\b{t}s?\b")) for t in ELEMENT_TYPES)


class IntentAnalyzer:
    """Stateless analyzer mapping step text to a StepIntent."""

    def __init__(self) -> None:
        self._log = logger.bind(component="intent_analyzer")

    def analyze(self, step: str) -> StepIntent:
        """
        Analyze a step.

        Args:
            step: Raw step text

        Returns:
            StepIntent; never raises. An internal failure yields an
            UNKNOWN intent.
        """
        step = step or ""
        clean = collapse_whitespace(strip_keyword(step))
        intent = StepIntent(original_step=step, clean_step=clean)
        try:
            lower = clean.lower()
            intent.negated = any(keyword in lower for keyword in NEGATION_KEYWORDS)
            intent.action_type, intent.verb = self.classify(clean)
            intent.values = quoted_values(clean)
            intent.value = intent.values[0] if intent.values else None
            intent.target_description = self.extract_target(clean, intent.action_type, intent.verb)
            intent.modifiers = extract_modifiers(clean)
            intent.element_type = extract_element_type(lower)
        except Exception as e:
            self._log.warning("Intent analysis failed", step=step, error=str(e))
            return StepIntent(original_step=step, clean_step=clean)

        self._log.debug(
            "Intent",
            action=intent.action_type.value,
            verb=intent.verb,
            target=intent.target_description,
            values=intent.values,
            element_type=intent.element_type,
        )
        return intent

    def classify(self, clean: str) -> tuple[IntentCategory, str | None]:
        """
        Classify the action category of a keyword-stripped step.

        Returns:
            (category, deciding verb). The verb is None for the default Click.
        """
        lower = clean.lower()

        # Explicit navigation first, so "open"/"load" never collide with looser verbs
        for verb in NAVIGATION_VERBS:
            if lower.startswith(verb + " "):
                return IntentCategory.NAVIGATE, verb
            if re.search(rf"(?:^| )(?:{_PRONOUN_ALT}) {re.escape(verb)}(?: to)? ", lower):
                return IntentCategory.NAVIGATE, verb

        if ("select " in lower or "choose " in lower) and any(
            phrase in lower
            for phrase in ("from list", "from grid", "from the list", "from the grid", "multiple items")
        ):
            return IntentCategory.SELECT, "select" if "select " in lower else "choose"

        if "check" in lower:
            if "checkbox" in lower or "check box" in lower or "radio" in lower:
                return IntentCategory.SELECT, "check"
            if " that " in lower or " if " in lower or " whether " in lower:
                return IntentCategory.VERIFY, "check"
            if lower.startswith("check ") or " check " in lower:
                return IntentCategory.VERIFY, "check"

        if "remove" in lower and re.search(r"remove.*from", lower):
            return IntentCategory.SELECT, "remove"

        # Slider and progress shapes belong to dedicated pattern rules
        slider_verb = _SLIDER_VERBS.search(lower)
        if slider_verb and any(word in lower for word in SLIDER_WORDS):
            return IntentCategory.UNKNOWN, slider_verb.group(1)
        wait_verb = _WAIT_VERBS.search(lower)
        if wait_verb and any(word in lower for word in PROGRESS_WORDS):
            return IntentCategory.UNKNOWN, wait_verb.group(1)

        selectish = _SELECTISH_VERBS.search(lower)
        if selectish:
            preliminary = self.extract_target(clean, IntentCategory.UNKNOWN, selectish.group(1)).lower()
            if "select" in preliminary or "menu" in preliminary or "dropdown" in preliminary:
                return IntentCategory.SELECT, selectish.group(1)

        for verb, category in VERB_LEXICON:
            if verb in NAVIGATION_VERBS:
                continue
            if lower.startswith(verb + " ") or f" {verb} " in lower or lower.endswith(" " + verb):
                return category, verb

        return IntentCategory.CLICK, None

    def extract_target(self, clean: str, category: IntentCategory, verb: str | None) -> str:
        """
        Derive the target description from a keyword-stripped step.

        Only the single primary verb occurrence is removed. Quoted literals
        are values for Fill/Select and are dropped (except a quoted field
        name after "in"/"into" in a Fill step); elsewhere they are kept
        without their quotes.
        """
        target = clean
        primary = verb or find_primary_verb(clean)
        if primary:
            target = re.sub(rf"\b{re.escape(primary)}\b", " ", target, count=1, flags=re.IGNORECASE)

        if category == IntentCategory.FILL:
            # A quoted field name after "in"/"into" is the target, not a value
            quoted_clause = _QUOTED_FILL_CLAUSE.search(target)
            if quoted_clause:
                target = quoted_clause.group(1) + quoted_clause.group(2)

        if category in (IntentCategory.FILL, IntentCategory.SELECT):
            target = _QUOTED.sub(" ", target)
        else:
            target = _QUOTED.sub(r"\1", target)

        target = _CONTAINER.sub(" ", target)
        target = collapse_whitespace(target)

        if category == IntentCategory.FILL:
            clause = _FILL_CLAUSE.search(target)
            if clause:
                target = clause.group(1)

        previous = None
        while previous != target:
            previous = target
            target = _LEADING_NOISE.sub("", target).strip()

        if category == IntentCategory.VERIFY:
            target = _TRAILING_VISIBILITY.sub("", target).strip()

        previous = None
        while previous != target:
            previous = target
            target = _TRAILING_TYPE_NOISE.sub("", target).strip()
            target = _TRAILING_PREPOSITION.sub("", target).strip()

        return collapse_whitespace(target)


def find_primary_verb(text: str) -> str | None:
    """Return the first lexicon verb present in ``text`` as a whole word."""
    lower = text.lower()
    for verb, _ in VERB_LEXICON:
        if re.search(rf"\b{re.escape(verb)}\b", lower):
            return verb
    return None


def extract_modifiers(text: str) -> dict[str, str]:
    """Collect optional container, spatial, color, size and position hints."""
    modifiers: dict[str, str] = {}

    if container := _CONTAINER.search(text):
        modifiers["container"] = container.group(2).lower()
    if spatial := _SPATIAL.search(text):
        modifiers["spatial_relation"] = spatial.group(1).lower()
        modifiers["spatial_reference"] = spatial.group(2)
    if color := _COLOR.search(text):
        modifiers["color"] = color.group(1).lower()
    if size := _SIZE.search(text):
        modifiers["size"] = size.group(1).lower()
    if position := _POSITION.search(text):
        modifiers["position"] = position.group(1).lower()

    return modifiers


def extract_element_type(lower: str) -> str | None:
    """Return the first vocabulary element type mentioned in the step."""
    for element_type, pattern in _ELEMENT_TYPE_PATTERNS:
        if pattern.search(lower):
            return element_type
    return None
