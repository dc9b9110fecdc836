"""Default table-row resolver."""

from __future__ import annotations

import structlog

from stepwise.driver.protocols import QueryRoot
from stepwise.utils.text import selector_literal

logger = structlog.get_logger(__name__)

ROW_SELECTORS: tuple[str, ...] = ("tr", "[role='row']")


def row_selector(anchor: str, base: str = "tr") -> str:
    return f"{base}:has-text({selector_literal(anchor)})"


def resolve_row(root: QueryRoot, anchor: str) -> QueryRoot | None:
    """
    Scope ``root`` to the first table row containing ``anchor``.

    Native ``<tr>`` rows are preferred over ARIA grid rows.

    Returns:
        Scoped root, or None when no row contains the anchor text
    """
    if not anchor:
        return None
    for base in ROW_SELECTORS:
        selector = row_selector(anchor, base)
        try:
            if root.count(selector) > 0:
                logger.debug("Row scope resolved", anchor=anchor, selector=selector)
                return root.scope(selector)
        except Exception as e:
            logger.debug("Row lookup failed", selector=selector, error=str(e))
    logger.info("No row contains anchor", anchor=anchor)
    return None
