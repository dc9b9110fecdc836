"""
Driver boundary: protocols the pipeline consumes and concrete adapters.

Provides:
- QueryRoot / ElementHandle / RowResolver: driver protocols
- resolve_row: default table-row resolver
- PlaywrightRoot / attach_window_events: sync Playwright adapter
"""

from stepwise.driver.protocols import ElementHandle, QueryRoot, RowResolver
from stepwise.driver.rows import resolve_row, row_selector
from stepwise.driver.playwright_adapter import PlaywrightRoot, attach_window_events

__all__ = [
    # Protocols
    "ElementHandle",
    "QueryRoot",
    "RowResolver",
    # Rows
    "resolve_row",
    "row_selector",
    # Playwright
    "PlaywrightRoot",
    "attach_window_events",
]
