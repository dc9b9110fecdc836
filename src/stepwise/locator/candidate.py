"""
Element candidate model shared by the scanner, scorer and matchers.

An ElementCandidate is a plain snapshot of one DOM node's
matching-relevant attributes. Snapshots are taken with a single
evaluate call per node (``DESCRIBE_ELEMENT_JS``) or per root
(``stepwise.locator.scanner.SCAN_JS``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from stepwise.errors import CandidateInspectionError


class TargetKind(StrEnum):
    """Kind of element a plan needs, used for contextual scoring and refinement."""

    INPUT = "input"  # text-like input or textarea
    SELECT = "select"  # native or custom dropdown
    SLIDER = "slider"  # range input / role=slider
    PROGRESSBAR = "progressbar"  # progress indicator
    CHECK = "check"  # checkbox or radio
    BUTTON = "button"  # anything clickable
    ANY = "any"


# Returns the attribute snapshot of one element; modal flags included
DESCRIBE_ELEMENT_JS = """
el => {
  const modalSel = '[role="dialog"], [aria-modal="true"], dialog[open], .modal.show, .modal.in, .modal[style*="display: block"]';
  const isShown = n => {
    const r = n.getBoundingClientRect();
    const s = window.getComputedStyle(n);
    return r.width > 0 && r.height > 0 && s.visibility !== 'hidden' && s.display !== 'none';
  };
  let labelText = '';
  if (el.id) {
    const lbl = document.querySelector('label[for="' + CSS.escape(el.id) + '"]');
    if (lbl) labelText = (lbl.innerText || '').trim();
  }
  if (!labelText && el.closest('label')) labelText = (el.closest('label').innerText || '').trim();
  const modal = el.closest(modalSel);
  const openModals = Array.from(document.querySelectorAll(modalSel)).filter(isShown);
  return {
    tag: el.tagName.toLowerCase(),
    id: el.id || '',
    name: el.getAttribute('name') || '',
    role: el.getAttribute('role') || '',
    type: el.getAttribute('type') || el.type || '',
    className: typeof el.className === 'string' ? el.className : '',
    text: (el.innerText || el.textContent || '').trim(),
    title: el.getAttribute('title') || '',
    ariaLabel: el.getAttribute('aria-label') || '',
    labelText: labelText,
    placeholder: el.getAttribute('placeholder') || '',
    forAttr: el.getAttribute('for') || '',
    value: el.value === undefined || el.value === null ? '' : String(el.value),
    visible: isShown(el),
    disabled: !!el.disabled || !!el.readOnly || el.getAttribute('aria-disabled') === 'true',
    inModal: !!modal,
    pageHasModal: openModals.length > 0,
    insideOpenModal: !!modal && openModals.includes(modal),
  };
}
"""


@dataclass
class ElementCandidate:
    """Attribute snapshot of one DOM node."""

    tag: str = ""
    id: str = ""
    name: str = ""
    role: str = ""
    type: str = ""
    class_name: str = ""
    text: str = ""
    title: str = ""
    label: str = ""
    """aria-label attribute."""
    label_text: str = ""
    """Text of the associated ``<label>``."""
    placeholder: str = ""
    for_attr: str = ""
    """``for`` attribute, set on labels."""
    value: str = ""
    visible: bool = False
    disabled: bool = False
    in_modal: bool = False
    page_has_modal: bool = False
    inside_open_modal: bool = False

    @property
    def classes(self) -> list[str]:
        return self.class_name.split()

    @property
    def is_input(self) -> bool:
        return self.tag in ("input", "textarea")

    @classmethod
    def from_snapshot(cls, data: Any) -> ElementCandidate:
        """
        Build a candidate from a snapshot mapping.

        Raises:
            CandidateInspectionError: If ``data`` is not a mapping
        """
        if not isinstance(data, dict):
            raise CandidateInspectionError(f"Expected snapshot mapping, got {type(data).__name__}")

        def text(key: str, *fallbacks: str) -> str:
            for name in (key, *fallbacks):
                raw = data.get(name)
                if raw:
                    return str(raw)
            return ""

        return cls(
            tag=text("tag").lower(),
            id=text("id"),
            name=text("name"),
            role=text("role"),
            type=text("type").lower(),
            class_name=text("className", "class"),
            text=text("text"),
            title=text("title"),
            label=text("ariaLabel", "label"),
            label_text=text("labelText"),
            placeholder=text("placeholder"),
            for_attr=text("forAttr"),
            value=text("value"),
            visible=bool(data.get("visible", False)),
            disabled=bool(data.get("disabled", False)),
            in_modal=bool(data.get("inModal", False)),
            page_has_modal=bool(data.get("pageHasModal", False)),
            inside_open_modal=bool(data.get("insideOpenModal", False)),
        )


@dataclass
class ScoredElement:
    """A candidate, its query handle (if any) and its score."""

    candidate: ElementCandidate
    handle: Any = None
    score: float = 0.0
    reasons: list[str] = field(default_factory=list)
