"""Deadline tracking for condition polling and test execution."""

import time
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

# Deadline of the test currently executing on this thread of control
_current_deadline: ContextVar[Optional["Deadline"]] = ContextVar(
    "current_deadline", default=None
)


class Deadline:
    """Tracks elapsed and remaining time against an overall timeout.

    A deadline without a timeout never expires.
    """

    def __init__(self, timeout: Optional[float] = None, parent: Optional["Deadline"] = None):
        """Initialize deadline.

        Args:
            timeout: Seconds until expiry. None or <= 0 means unbounded.
            parent: Enclosing deadline; the effective expiry is never later
                than the parent's.
        """
        self.timeout = timeout if timeout and timeout > 0 else None
        self._start_time = time.monotonic()
        self._expires_at: Optional[float] = None

        if self.timeout is not None:
            self._expires_at = self._start_time + self.timeout
        if parent is not None and parent._expires_at is not None:
            if self._expires_at is None or parent._expires_at < self._expires_at:
                self._expires_at = parent._expires_at

    @property
    def elapsed(self) -> float:
        """Seconds elapsed since the deadline was created."""
        return time.monotonic() - self._start_time

    @property
    def remaining(self) -> Optional[float]:
        """Seconds remaining before expiry, or None when unbounded."""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    @property
    def budget(self) -> Optional[float]:
        """Effective seconds between creation and expiry, after parent clamping."""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - self._start_time)

    @property
    def bounded(self) -> bool:
        return self._expires_at is not None

    @property
    def is_expired(self) -> bool:
        """Whether the deadline has passed."""
        remaining = self.remaining
        return remaining is not None and remaining <= 0

    def __repr__(self) -> str:
        if not self.bounded:
            return "Deadline(unbounded)"
        return f"Deadline(remaining={self.remaining:.3f}s)"


def current_deadline() -> Optional[Deadline]:
    """Return the deadline of the test currently being executed, if any.

    Test bodies that want to honour their configured timeout read this and
    bound their own waits with it; the runner never interrupts them.
    """
    return _current_deadline.get()


@contextmanager
def deadline_scope(deadline: Optional[Deadline]) -> Iterator[Optional[Deadline]]:
    """Publish a deadline as the current one for the duration of the block."""
    token = _current_deadline.set(deadline)
    try:
        yield deadline
    finally:
        _current_deadline.reset(token)
