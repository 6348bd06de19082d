"""
Timers
======

Single-threaded cooperative scheduling for the game's periodic tasks
(game tick, item spawning, input sampling).

Nothing here sleeps or spawns threads: the embedding layer reports elapsed
time through ``Scheduler.advance`` and every due callback runs to completion
before the next one starts.
"""

from __future__ import annotations

from typing import Callable, List, Optional


class PeriodicTimer:
    """A repeating callback owned by a Scheduler."""

    def __init__(
        self,
        interval_ms: float,
        callback: Callable[[], None],
        start_ms: float,
        order: int,
        name: str = ""
    ):
        if interval_ms <= 0:
            raise ValueError(f"Timer interval must be positive, got {interval_ms}")

        self._interval_ms = float(interval_ms)
        self._callback = callback
        self._next_due = start_ms + self._interval_ms
        self._order = order
        self._active = True
        self._fired = 0
        self.name = name

    @property
    def interval_ms(self) -> float:
        return self._interval_ms

    @property
    def next_due(self) -> float:
        """Scheduler time at which this timer fires next."""
        return self._next_due

    @property
    def active(self) -> bool:
        return self._active

    @property
    def fired(self) -> int:
        """Number of times the callback has run."""
        return self._fired

    def cancel(self) -> None:
        """Stop the timer. Safe to call more than once."""
        self._active = False

    def _fire(self) -> None:
        self._next_due += self._interval_ms
        self._fired += 1
        self._callback()

    def __repr__(self) -> str:
        state = "active" if self._active else "cancelled"
        return f"PeriodicTimer({self.name or '?'}, every {self._interval_ms:g}ms, {state})"


class Scheduler:
    """
    Cooperative clock driving any number of PeriodicTimers.

    ``advance`` fires due timers in chronological order; ties go to the timer
    registered first. A timer cancelled by another callback during the same
    ``advance`` does not fire again.
    """

    def __init__(self):
        self._now_ms: float = 0.0
        self._timers: List[PeriodicTimer] = []
        self._registered: int = 0

    @property
    def now_ms(self) -> float:
        """Current scheduler time."""
        return self._now_ms

    @property
    def timers(self) -> List[PeriodicTimer]:
        """Active timers in registration order."""
        return [t for t in self._timers if t.active]

    def schedule(
        self,
        interval_ms: float,
        callback: Callable[[], None],
        name: str = ""
    ) -> PeriodicTimer:
        """
        Register a repeating callback.

        Args:
            interval_ms: Period in milliseconds. First fire is one period from now.
            callback: Called with no arguments on every period.
            name: Label for debugging.

        Returns:
            The timer handle; call ``cancel()`` on it to stop.
        """
        timer = PeriodicTimer(interval_ms, callback, self._now_ms, self._registered, name)
        self._registered += 1
        self._timers.append(timer)
        return timer

    def advance(self, elapsed_ms: float) -> int:
        """
        Move the clock forward, firing every callback that falls due.

        Args:
            elapsed_ms: Milliseconds of time to simulate.

        Returns:
            Number of callbacks fired.
        """
        if elapsed_ms < 0:
            raise ValueError(f"Cannot advance by negative time: {elapsed_ms}")

        target = self._now_ms + elapsed_ms
        fired = 0

        while True:
            timer = self._next_due_timer(target)
            if timer is None:
                break
            self._now_ms = timer.next_due
            timer._fire()
            fired += 1

        self._now_ms = target
        self._prune()
        return fired

    def cancel_all(self) -> None:
        """Cancel every timer."""
        for timer in self._timers:
            timer.cancel()
        self._timers = []

    def _next_due_timer(self, target: float) -> Optional[PeriodicTimer]:
        best: Optional[PeriodicTimer] = None
        for timer in self._timers:
            if not timer.active or timer.next_due > target:
                continue
            if best is None or (timer.next_due, timer._order) < (best.next_due, best._order):
                best = timer
        return best

    def _prune(self) -> None:
        self._timers = [t for t in self._timers if t.active]
