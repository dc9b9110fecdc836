"""Fixed-interval polling used by element waits."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TypeVar

import structlog

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def poll_until(
    probe: Callable[[], T | None],
    timeout_seconds: float,
    interval_seconds: float,
    *,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> T | None:
    """
    Call ``probe`` until it returns a non-None value or the deadline passes.

    The probe is always called at least once. There is no early cancellation:
    the loop runs to success or to its deadline.

    Args:
        probe: Zero-argument callable returning a result or None
        timeout_seconds: Total time budget
        interval_seconds: Sleep between attempts
        sleep: Injectable sleep function
        clock: Injectable monotonic clock

    Returns:
        The first non-None probe result, or None on timeout
    """
    deadline = clock() + timeout_seconds
    attempts = 0
    while True:
        attempts += 1
        result = probe()
        if result is not None:
            return result
        if clock() >= deadline:
            logger.debug("Polling timed out", attempts=attempts, timeout=timeout_seconds)
            return None
        sleep(interval_seconds)
