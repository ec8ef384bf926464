"""Sliding-window debouncer for bursts of file changes."""

from collections import deque


class Debouncer:
    """Decides when a burst of qualifying events has gone quiet.

    Keeps the timestamps of recent events inside a trailing ``window``. The
    burst fires once at least one event is recorded and ``quiet_period`` has
    elapsed since the most recent one. A new event always pushes the fire
    time out again, so a half-written file never triggers a run mid-burst.

    Timestamps are plain floats from a monotonic clock; any unit works as
    long as ``window`` and ``quiet_period`` use the same one.

    Not thread-safe: only the watch loop touches it.
    """

    def __init__(self, window: float = 1.0, quiet_period: float = 0.5):
        """Initialize debouncer.

        Args:
            window: Trailing duration of retained timestamps
            quiet_period: Silence required after the last event before firing
        """
        if window < 0 or quiet_period < 0:
            raise ValueError("window and quiet_period must be non-negative")
        self.window = window
        self.quiet_period = quiet_period
        self._events: deque[float] = deque()

    def record(self, now: float) -> None:
        """Record a qualifying event at ``now``, pruning entries outside the window."""
        while self._events and now - self._events[0] > self.window:
            self._events.popleft()
        self._events.append(now)

    def should_fire(self, now: float) -> bool:
        """Check whether the pending burst has gone quiet. Does not mutate state.

        Args:
            now: Current clock reading

        Returns:
            True if events are pending and the last one is at least
            ``quiet_period`` old
        """
        if not self._events:
            return False
        return now - self._events[-1] >= self.quiet_period

    def reset(self) -> None:
        """Forget all recorded events (back to idle)."""
        self._events.clear()

    @property
    def is_pending(self) -> bool:
        return bool(self._events)

    @property
    def pending_count(self) -> int:
        return len(self._events)

    @property
    def last_event(self) -> float | None:
        return self._events[-1] if self._events else None
