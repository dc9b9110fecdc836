"""
Interfaces the resolution pipeline needs from a browser driver.

The pipeline never imports a driver directly. Anything that satisfies
these protocols (a Playwright page, a frame, an in-memory fake) can be
matched against.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from stepwise.locator.query import LocatorQuery


class ElementHandle(Protocol):
    """One concrete element returned by a query."""

    def evaluate(self, script: str, arg: Any = None) -> Any:
        """Run ``script`` with the element as its first argument."""


class QueryRoot(Protocol):
    """A page, frame or scoped subtree that selectors are resolved against."""

    def query_all(self, selector: str) -> list[ElementHandle]:
        """Return every element matching ``selector`` in document order."""

    def count(self, selector: str) -> int:
        """Return how many elements match ``selector``."""

    def evaluate(self, script: str, arg: Any = None) -> Any:
        """Run ``script`` in the root's document context."""

    def scope(self, selector: str) -> QueryRoot:
        """Return a root restricted to the first element matching ``selector``."""

    def frame(self, name: str) -> QueryRoot | None:
        """Return the child frame named or titled ``name``, if any."""

    def resolve(self, query: LocatorQuery) -> Any:
        """Turn a LocatorQuery into the driver's own locator object."""


class RowResolver(Protocol):
    """Maps a row anchor to a query root scoped to that row."""

    def __call__(self, root: QueryRoot, anchor: str) -> QueryRoot | None:
        """Return the scoped root, or None when no row contains ``anchor``."""
