"""
Verb lexicon and vocabularies for intent analysis.

All tables are immutable and built once at import time. Lexicon order
matters: the first verb found in a step decides its category.
"""

from __future__ import annotations

from types import MappingProxyType

from stepwise.intelligence.intent import IntentCategory

_C = IntentCategory

# (verb, category) in priority order
VERB_LEXICON: tuple[tuple[str, IntentCategory], ...] = (
    # Click
    ("click", _C.CLICK),
    ("press", _C.CLICK),
    ("tap", _C.CLICK),
    ("hit", _C.CLICK),
    ("push", _C.CLICK),
    ("select", _C.CLICK),
    ("choose", _C.CLICK),
    ("activate", _C.CLICK),
    ("trigger", _C.CLICK),
    ("invoke", _C.CLICK),
    ("execute", _C.CLICK),
    ("submit", _C.CLICK),
    ("apply", _C.CLICK),
    # Modal and dialog buttons
    ("close", _C.CLICK),
    ("dismiss", _C.CLICK),
    ("cancel", _C.CLICK),
    ("reject", _C.CLICK),
    ("deny", _C.CLICK),
    # Scrolling targets an element the same way a click does
    ("scroll", _C.CLICK),
    ("move", _C.CLICK),
    ("slide", _C.CLICK),
    ("swipe", _C.CLICK),
    # Toggles
    ("toggle", _C.CLICK),
    ("switch", _C.CLICK),
    ("enable", _C.CLICK),
    ("disable", _C.CLICK),
    # Expand / collapse
    ("expand", _C.CLICK),
    ("collapse", _C.CLICK),
    ("show", _C.CLICK),
    ("hide", _C.CLICK),
    ("reveal", _C.CLICK),
    ("unfold", _C.CLICK),
    ("fold", _C.CLICK),
    # Fill
    ("fill", _C.FILL),
    ("enter", _C.FILL),
    ("type", _C.FILL),
    ("input", _C.FILL),
    ("write", _C.FILL),
    ("provide", _C.FILL),
    ("set", _C.FILL),
    ("populate", _C.FILL),
    ("insert", _C.FILL),
    ("add", _C.FILL),
    ("specify", _C.FILL),
    ("supply", _C.FILL),
    ("key", _C.FILL),
    ("put", _C.FILL),
    ("update", _C.FILL),
    ("modify", _C.FILL),
    ("change", _C.FILL),
    ("edit", _C.FILL),
    ("amend", _C.FILL),
    ("revise", _C.FILL),
    ("clear", _C.FILL),
    ("erase", _C.FILL),
    ("delete", _C.FILL),
    ("remove", _C.FILL),
    ("empty", _C.FILL),
    ("paste", _C.FILL),
    ("copy", _C.FILL),
    ("upload", _C.FILL),
    ("attach", _C.FILL),
    # Verify
    ("verify", _C.VERIFY),
    ("check", _C.VERIFY),
    ("assert", _C.VERIFY),
    ("validate", _C.VERIFY),
    ("confirm", _C.VERIFY),
    ("ensure", _C.VERIFY),
    ("see", _C.VERIFY),
    ("find", _C.VERIFY),
    ("expect", _C.VERIFY),
    ("observe", _C.VERIFY),
    ("notice", _C.VERIFY),
    ("should", _C.VERIFY),
    ("must", _C.VERIFY),
    ("display", _C.VERIFY),
    ("displays", _C.VERIFY),
    ("shown", _C.VERIFY),
    ("showing", _C.VERIFY),
    ("visible", _C.VERIFY),
    ("contain", _C.VERIFY),
    ("contains", _C.VERIFY),
    ("include", _C.VERIFY),
    ("includes", _C.VERIFY),
    ("match", _C.VERIFY),
    ("matches", _C.VERIFY),
    ("equal", _C.VERIFY),
    ("equals", _C.VERIFY),
    ("inspect", _C.VERIFY),
    ("examine", _C.VERIFY),
    ("review", _C.VERIFY),
    ("test", _C.VERIFY),
    # Hovering targets an element the same way a click does
    ("hover", _C.CLICK),
    ("mouseover", _C.CLICK),
    ("mouse-over", _C.CLICK),
    # Select
    ("pick", _C.SELECT),
    ("opt", _C.SELECT),
    ("decide", _C.SELECT),
    ("mark", _C.SELECT),
    ("designate", _C.SELECT),
    ("uncheck", _C.SELECT),
    ("tick", _C.SELECT),
    ("untick", _C.SELECT),
    ("dropdown", _C.SELECT),
    ("deselect", _C.SELECT),
    ("filter", _C.SELECT),
    ("sort", _C.SELECT),
    # Navigate
    ("navigate", _C.NAVIGATE),
    ("goto", _C.NAVIGATE),
    ("go", _C.NAVIGATE),
    ("open", _C.NAVIGATE),
    ("visit", _C.NAVIGATE),
    ("access", _C.NAVIGATE),
    ("load", _C.NAVIGATE),
    ("browse", _C.NAVIGATE),
    ("reach", _C.NAVIGATE),
    ("launch", _C.NAVIGATE),
    ("start", _C.NAVIGATE),
    ("redirect", _C.NAVIGATE),
    ("transfer", _C.NAVIGATE),
    # Wait
    ("wait", _C.WAIT),
    ("pause", _C.WAIT),
    ("delay", _C.WAIT),
    ("hold", _C.WAIT),
    ("sleep", _C.WAIT),
    ("idle", _C.WAIT),
    ("rest", _C.WAIT),
)

VERB_CATEGORIES: MappingProxyType[str, IntentCategory] = MappingProxyType(dict(VERB_LEXICON))

# Checked before the lexicon, at sentence start or after a subject pronoun
NAVIGATION_VERBS: tuple[str, ...] = (
    "navigate", "goto", "go to", "open", "visit", "access", "load", "browse",
)

SUBJECT_PRONOUNS: tuple[str, ...] = ("i", "user", "we", "you", "he", "she", "they")

SLIDER_WORDS: tuple[str, ...] = ("slider", "range", "volume", "brightness", "zoom", "percentage")
PROGRESS_WORDS: tuple[str, ...] = ("progress", "loading")

# Ordered by specificity; first occurrence in the step wins
ELEMENT_TYPES: tuple[str, ...] = (
    # Form elements
    "button", "link", "field", "input", "checkbox", "radio",
    "dropdown", "select", "textarea", "label", "image", "icon",
    # Interactive widgets
    "toggle", "switch", "slider", "accordion", "tooltip",
    # Layout
    "menu", "tab", "modal", "dialog", "popup", "form",
    "sidebar", "navbar", "footer", "header", "panel",
    # Components
    "chip", "badge", "card", "breadcrumb", "notification",
    "alert", "banner", "carousel", "spinner",
)

NEGATION_KEYWORDS: tuple[str, ...] = (
    "not displayed", "not visible", "not shown", "not present",
    "not exist", "not exists", "not appear", "not appears",
    "should not", "shouldn't", "must not", "mustn't",
    "never", "no longer", "doesn't", "don't",
    "is not", "isn't", "are not", "aren't", "was not", "wasn't",
    "not be", "cannot", "can't",
)

CONTAINER_PHRASE = (
    r"\b(in|on|within|inside)\s+(?:the\s+)?"
    r"(left\s+menu|right\s+menu|sidebar|navbar|header|footer|menu|top\s+bar|toolbar|main\s+content)\b"
)

# Trailing words describing the element kind rather than naming it
TYPE_NOISE_WORDS: tuple[str, ...] = (
    "button", "link", "card", "field", "input", "checkbox", "radio", "dropdown",
    "select", "tab", "menu", "sidebar", "navbar", "header", "footer", "icon",
    "image", "svg", "box", "panel", "item", "text", "message",
)
