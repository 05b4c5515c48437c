"""Cancellation signals for reconciliation polls.

A poll checks its signal before every fetch and before every sleep, and
sleeps through the signal's wait() so that a cancel() or an expired
deadline wakes it immediately instead of after the full interval.
"""

from __future__ import annotations

import threading
from typing import Protocol

from splunkacs.engine.clock import DEFAULT_CLOCK, Clock


class CancellationSignal(Protocol):
    """What the poller needs from a cancellation source."""

    def is_cancelled(self) -> bool:
        """Return True once the operation should stop."""
        ...

    def wait(self, seconds: float) -> bool:
        """Block for up to ``seconds``, waking early on cancellation.

        Returns:
            True if the signal is cancelled when the wait ends.
        """
        ...


class CancellationToken:
    """Thread-safe cancellation flag with an optional deadline.

    cancel() may be called from any thread (a signal handler, a supervising
    thread). The deadline is measured on ``clock`` from construction time.

    Example:
        token = CancellationToken(deadline_seconds=300)
        outcome = poll(fetch, ExistenceOnly(), budget, cancel=token)
    """

    def __init__(self, *, deadline_seconds: float | None = None, clock: Clock = DEFAULT_CLOCK) -> None:
        if deadline_seconds is not None and deadline_seconds < 0:
            raise ValueError(f"deadline_seconds must be >= 0, got {deadline_seconds}")
        self._event = threading.Event()
        self._clock = clock
        self._deadline = None if deadline_seconds is None else clock.monotonic() + deadline_seconds

    def cancel(self) -> None:
        self._event.set()

    def remaining(self) -> float | None:
        """Seconds until the deadline, or None without one. Never negative."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock.monotonic())

    def is_cancelled(self) -> bool:
        if self._event.is_set():
            return True
        remaining = self.remaining()
        return remaining is not None and remaining <= 0.0

    def wait(self, seconds: float) -> bool:
        if self.is_cancelled():
            return True
        timeout = seconds
        remaining = self.remaining()
        if remaining is not None:
            timeout = min(timeout, remaining)
        self._event.wait(timeout)
        return self.is_cancelled()
