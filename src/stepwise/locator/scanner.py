"""DOM scanner: snapshot every visible candidate under a root in one call."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from stepwise.errors import CandidateInspectionError
from stepwise.locator.candidate import ElementCandidate

if TYPE_CHECKING:
    from stepwise.driver.protocols import QueryRoot

logger = structlog.get_logger(__name__)

SCAN_SELECTOR = (
    'button, a, input, textarea, select, [role="button"], [role="slider"], '
    '[role="progressbar"], label, li, span, div, p, h1, h2, h3, h4, h5, h6'
)

# Called with the scope element, or nothing for the whole document
SCAN_JS = """
(scope) => {
  const base = scope || document;
  const nodes = Array.from(base.querySelectorAll(%s));
  return nodes.map(el => {
    const rect = el.getBoundingClientRect();
    const visible = rect.width > 0 && rect.height > 0 && window.getComputedStyle(el).visibility !== 'hidden';
    if (!visible) return null;
    return {
      tag: el.tagName.toLowerCase(),
      id: el.id || '',
      forAttr: el.getAttribute('for') || '',
      name: el.getAttribute('name') || '',
      text: el.innerText || '',
      placeholder: el.getAttribute('placeholder') || '',
      ariaLabel: el.getAttribute('aria-label') || '',
      title: el.getAttribute('title') || '',
      type: el.getAttribute('type') || el.type || '',
      role: el.getAttribute('role') || '',
      className: typeof el.className === 'string' ? el.className : '',
      visible: true,
    };
  }).filter(item => item !== null);
}
""" % repr(SCAN_SELECTOR)


class DomScanner:
    """Collects ElementCandidate snapshots for the broad-search path."""

    def __init__(self) -> None:
        self._log = logger.bind(component="dom_scanner")

    def scan(self, root: QueryRoot) -> list[ElementCandidate]:
        """
        Snapshot visible candidates under ``root`` in document order.

        Returns:
            Candidates; an empty list when the scan itself fails
        """
        try:
            raw = root.evaluate(SCAN_JS)
        except Exception as e:
            self._log.warning("DOM scan failed", error=str(e))
            return []

        candidates: list[ElementCandidate] = []
        for item in raw or []:
            try:
                candidate = ElementCandidate.from_snapshot(item)
            except CandidateInspectionError as e:
                self._log.debug("Skipping malformed snapshot", error=str(e))
                continue
            candidate.visible = True
            candidates.append(candidate)

        self._log.debug("Scanned candidates", count=len(candidates))
        return candidates
