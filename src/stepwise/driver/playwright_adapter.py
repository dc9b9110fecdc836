"""
Playwright adapter: exposes a sync Playwright Page, Frame or Locator as
a QueryRoot.

Requires the ``browser`` extra (``pip install stepwise[browser]``).
Playwright objects are only used through their public methods, so this
module imports nothing from Playwright at runtime.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from playwright.sync_api import BrowserContext, Frame, Locator, Page

    from stepwise.locator.query import LocatorQuery
    from stepwise.session import WindowTracker

logger = structlog.get_logger(__name__)


class PlaywrightRoot:
    """
    QueryRoot over a Playwright page, frame or scoped locator.

    Args:
        target: Page, Frame or Locator to resolve selectors against
    """

    def __init__(self, target: Page | Frame | Locator) -> None:
        self.target = target

    @property
    def is_scoped(self) -> bool:
        # Pages and frames expose ``frames``/``child_frames``; locators do not
        return not (hasattr(self.target, "frames") or hasattr(self.target, "child_frames"))

    def locator(self, selector: str) -> Locator:
        return self.target.locator(selector)

    def query_all(self, selector: str) -> list[Locator]:
        return self.locator(selector).all()

    def count(self, selector: str) -> int:
        return self.locator(selector).count()

    def evaluate(self, script: str, arg: Any = None) -> Any:
        # A scoped locator passes its element as the script's first argument
        return self.target.evaluate(script, arg)

    def scope(self, selector: str) -> PlaywrightRoot:
        return PlaywrightRoot(self.locator(selector).first)

    def frame(self, name: str) -> PlaywrightRoot | None:
        """Find a child frame by name, then by URL fragment."""
        frames = getattr(self.target, "frames", None) or getattr(self.target, "child_frames", None) or []
        for frame in frames:
            if frame.name == name:
                return PlaywrightRoot(frame)
        for frame in frames:
            if name and name in (frame.url or ""):
                return PlaywrightRoot(frame)
        logger.debug("Frame not found", frame=name)
        return None

    def resolve(self, query: LocatorQuery) -> Locator:
        return self.locator(query.selector)


def attach_window_events(context: BrowserContext, page: Page, tracker: WindowTracker) -> None:
    """
    Feed page open/close events of ``context`` into ``tracker``.

    ``page`` becomes the main window. The tracker is given a pump that
    lets Playwright dispatch events while it waits for a new window.
    """
    tracker.start(page)
    tracker.pump = lambda seconds: page.wait_for_timeout(seconds * 1000)

    def on_page(new_page: Page) -> None:
        tracker.on_window_opened(new_page)
        new_page.on("close", lambda closed: tracker.on_window_closed(closed))

    context.on("page", on_page)
    page.on("close", lambda closed: tracker.on_window_closed(closed))
    logger.debug("Window events attached")
