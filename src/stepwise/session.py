"""
Per-browser-session state passed through the resolution chain.

Replaces process-wide statics: window handles, the pending new-window
completion handle, the active frame anchor and stored context values
all live on a StepSession whose lifetime matches the browser session.
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from typing import Any

import structlog

from stepwise.config import Settings, get_settings
from stepwise.errors import WindowTimeoutError
from stepwise.utils.polling import poll_until

logger = structlog.get_logger(__name__)


class WindowTracker:
    """
    Tracks the main, known and current window handles.

    A single pending Future represents "the next window to open". The
    driver reports openings through ``on_window_opened``; callers block
    on ``await_new_window`` with an explicit timeout.

    Args:
        timeout_seconds: Default wait for a new window
        pump: Optional callable that lets the driver dispatch events while
            waiting (Playwright's sync API only delivers events while it
            is running). Called with a wait slice in seconds.
    """

    PUMP_INTERVAL_SECONDS = 0.1

    def __init__(self, timeout_seconds: float = 10.0, pump: Callable[[float], None] | None = None) -> None:
        self.timeout_seconds = timeout_seconds
        self.pump = pump
        self.main_handle: Any = None
        self.current_handle: Any = None
        self.handles: list[Any] = []
        self._pending: Future[Any] | None = None
        self._log = logger.bind(component="window_tracker")

    @property
    def window_count(self) -> int:
        return len(self.handles)

    def start(self, main_handle: Any) -> None:
        """Register the session's first window."""
        self.main_handle = main_handle
        self.current_handle = main_handle
        if main_handle not in self.handles:
            self.handles.append(main_handle)

    def expect_new_window(self) -> Future[Any]:
        """Arm the completion handle before triggering the action that opens a window."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = Future()
        return self._pending

    def on_window_opened(self, handle: Any) -> None:
        if handle not in self.handles:
            self.handles.append(handle)
        self._log.info("Window opened", count=self.window_count)
        if self._pending is not None and not self._pending.done():
            self._pending.set_result(handle)

    def on_window_closed(self, handle: Any) -> None:
        if handle in self.handles:
            self.handles.remove(handle)
        if self.current_handle is handle:
            self.current_handle = self.main_handle
        self._log.info("Window closed", count=self.window_count)

    def await_new_window(self, timeout_seconds: float | None = None) -> Any:
        """
        Wait for the armed new window and make it current.

        Raises:
            WindowTimeoutError: If no window opens in time, or nothing was armed
        """
        timeout = self.timeout_seconds if timeout_seconds is None else timeout_seconds
        pending = self._pending
        if pending is None:
            raise WindowTimeoutError("No new window was expected")

        try:
            if self.pump is None:
                handle = pending.result(timeout=timeout)
            else:
                handle = poll_until(
                    lambda: pending.result() if pending.done() else None,
                    timeout_seconds=timeout,
                    interval_seconds=self.PUMP_INTERVAL_SECONDS,
                    sleep=self.pump,
                )
                if handle is None:
                    raise FutureTimeoutError()
        except FutureTimeoutError as e:
            self._log.warning("New window did not open", timeout=timeout)
            raise WindowTimeoutError(f"No new window opened within {timeout}s") from e
        finally:
            self._pending = None

        self.current_handle = handle
        return handle

    def switch_to(self, handle: Any) -> None:
        if handle not in self.handles:
            raise WindowTimeoutError("Unknown window handle")
        self.current_handle = handle

    def switch_to_main(self) -> Any:
        self.current_handle = self.main_handle
        return self.main_handle


@dataclass
class StepSession:
    """State shared by the steps of one browser session."""

    settings: Settings = field(default_factory=get_settings)
    windows: WindowTracker = field(init=False)
    frame_anchor: str | None = None
    stored_values: dict[str, str] = field(default_factory=dict)
    last_stored_key: str | None = None

    def __post_init__(self) -> None:
        self.windows = WindowTracker(timeout_seconds=self.settings.window_timeout_seconds)
        for key, value in self.settings.stored_values.items():
            self.stored_values.setdefault(key.lower(), value)

    def store(self, key: str, value: str) -> None:
        key = key.strip().lower()
        self.stored_values[key] = value
        self.last_stored_key = key
        logger.debug("Stored context value", key=key)

    def recall(self, key: str | None = None) -> str | None:
        """Return a stored value; without a key, the most recently stored one."""
        if key is None:
            key = self.last_stored_key
        if key is None:
            return None
        return self.stored_values.get(key.strip().lower())

    def enter_frame(self, name: str) -> None:
        self.frame_anchor = name

    def exit_frame(self) -> None:
        self.frame_anchor = None

    def reset(self) -> None:
        """Forget all per-session state, keeping the settings."""
        self.frame_anchor = None
        self.stored_values.clear()
        self.last_stored_key = None
        self.__post_init__()
