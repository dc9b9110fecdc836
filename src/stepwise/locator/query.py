"""
Driver-neutral locator query.

A LocatorQuery is a chain of selector segments in the ``a >> b >> c``
syntax understood by Playwright. Queries are always relative to the
QueryRoot they are resolved against (page, frame or row scope).
"""

from __future__ import annotations

from dataclasses import dataclass

from stepwise.utils.text import selector_literal as quote

SEPARATOR = " >> "


@dataclass(frozen=True)
class LocatorQuery:
    """Selector chain plus the strategy that produced it."""

    selector: str
    strategy: str = ""

    def then(self, selector: str, strategy: str | None = None) -> LocatorQuery:
        return LocatorQuery(f"{self.selector}{SEPARATOR}{selector}", strategy or self.strategy)

    def first(self) -> LocatorQuery:
        if self.selector.endswith("nth=0"):
            return self
        return self.then("nth=0")

    def __rshift__(self, selector: str) -> LocatorQuery:
        return self.then(selector)

    def __str__(self) -> str:
        return self.selector

    # Common query shapes

    @classmethod
    def css(cls, selector: str, strategy: str = "css") -> LocatorQuery:
        return cls(selector, strategy)

    @classmethod
    def exact_text(cls, text: str) -> LocatorQuery:
        return cls(f"text={quote(text)}", "text-exact")

    @classmethod
    def has_text(cls, tag: str, text: str, strategy: str = "text") -> LocatorQuery:
        return cls(f"{tag or '*'}:has-text({quote(text)})", strategy)

    @classmethod
    def attribute(cls, name: str, value: str, tag: str = "", strategy: str | None = None) -> LocatorQuery:
        return cls(f"{tag}[{name}={quote(value)}]", strategy or name)
