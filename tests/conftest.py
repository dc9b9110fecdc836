"""Pytest fixtures for stepwise tests."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from typing import Any

import pytest
import structlog

from stepwise.config import Settings
from stepwise.locator.query import LocatorQuery


@pytest.fixture(autouse=True)
def _structlog_to_stderr() -> Iterator[None]:
    """Keep structlog output off stdout so CLI output can be asserted."""
    structlog.configure(logger_factory=structlog.PrintLoggerFactory(file=sys.stderr))
    yield
    structlog.reset_defaults()


def snapshot(**attrs: Any) -> dict[str, Any]:
    """Build an element snapshot in the shape the browser scripts return."""
    data: dict[str, Any] = {
        "tag": "div",
        "id": "",
        "name": "",
        "role": "",
        "type": "",
        "className": "",
        "text": "",
        "title": "",
        "ariaLabel": "",
        "labelText": "",
        "placeholder": "",
        "forAttr": "",
        "value": "",
        "visible": True,
        "disabled": False,
        "inModal": False,
        "pageHasModal": False,
        "insideOpenModal": False,
    }
    data.update(attrs)
    return data


class FakeElement:
    """Element handle whose evaluate returns a fixed snapshot."""

    def __init__(self, data: dict[str, Any] | None = None, fail: bool = False) -> None:
        self.data = data or snapshot()
        self.fail = fail

    def evaluate(self, script: str, arg: Any = None) -> Any:
        if self.fail:
            raise RuntimeError("element detached")
        return self.data

    def __repr__(self) -> str:
        return f"FakeElement({self.data.get('tag')}#{self.data.get('id')})"


class FakeRoot:
    """
    In-memory QueryRoot.

    Args:
        elements: selector -> handles returned by ``query_all``
        scan: snapshots returned by a DOM scan (``evaluate``)
        counts: selector -> count overrides; defaults to len(elements[selector])
        frames: frame name -> root
        scopes: selector -> scoped root
    """

    def __init__(
        self,
        elements: dict[str, list[FakeElement]] | None = None,
        scan: list[Any] | None = None,
        counts: dict[str, int] | None = None,
        frames: dict[str, FakeRoot] | None = None,
        scopes: dict[str, FakeRoot] | None = None,
    ) -> None:
        self.elements = elements or {}
        self.scan = scan or []
        self.counts = counts or {}
        self.frames = frames or {}
        self.scopes = scopes or {}
        self.queried: list[str] = []
        self.counted: list[str] = []
        self.evaluations = 0

    def query_all(self, selector: str) -> list[FakeElement]:
        self.queried.append(selector)
        return list(self.elements.get(selector, []))

    def count(self, selector: str) -> int:
        self.counted.append(selector)
        if selector in self.counts:
            return self.counts[selector]
        return len(self.elements.get(selector, []))

    def evaluate(self, script: str, arg: Any = None) -> Any:
        self.evaluations += 1
        return self.scan

    def scope(self, selector: str) -> FakeRoot:
        return self.scopes.get(selector) or FakeRoot()

    def frame(self, name: str) -> FakeRoot | None:
        return self.frames.get(name)

    def resolve(self, query: LocatorQuery) -> str:
        return query.selector


@pytest.fixture
def settings() -> Settings:
    """Create default settings without reading the environment."""
    return Settings()


@pytest.fixture
def fast_settings() -> Settings:
    """Create settings with short waits for polling tests."""
    return Settings(
        poll_interval_seconds=0.01,
        element_wait_timeout_seconds=0.05,
        window_timeout_seconds=0.05,
    )


@pytest.fixture
def empty_root() -> FakeRoot:
    """Create a root with no elements."""
    return FakeRoot()


@pytest.fixture
def login_form_root() -> FakeRoot:
    """Create a root holding a simple name form with a submit button."""
    first = FakeElement(snapshot(tag="input", id="firstName", name="firstName", type="text", labelText="First Name"))
    last = FakeElement(snapshot(tag="input", id="lastName", name="lastName", type="text", labelText="Last Name"))
    search = FakeElement(snapshot(tag="input", name="q", type="search", placeholder="Search"))
    submit = FakeElement(snapshot(tag="button", id="submit-btn", type="submit", text="Submit"))
    cancel = FakeElement(snapshot(tag="button", id="cancel-btn", type="button", text="Cancel"))
    return FakeRoot(
        elements={
            "input": [search, first, last],
            "button": [cancel, submit],
        }
    )
