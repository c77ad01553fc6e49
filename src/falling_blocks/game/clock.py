"""Schedulers that drive the engine's drop tick.

The engine never reads wall-clock time. It asks a ``Scheduler`` for
repeating or one-shot tasks, and the host decides when time passes. The
pygame loop advances a ``ManualClock`` by each frame's elapsed time; tests
advance it by exact amounts.
"""

from __future__ import annotations

import itertools
from typing import Callable, List, Optional, Protocol


Callback = Callable[[], None]


class ScheduledTask:
    """Handle for a pending callback. ``cancel()`` is idempotent."""

    def __init__(self, callback: Callback, due: float, interval: Optional[float], seq: int) -> None:
        self.callback = callback
        self.due = due
        self.interval = interval
        self.seq = seq
        self.cancelled = False

    @property
    def repeating(self) -> bool:
        return self.interval is not None

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else f"due={self.due:.3f}"
        return f"ScheduledTask({state}, interval={self.interval})"


class Scheduler(Protocol):
    def call_every(self, interval: float, callback: Callback) -> ScheduledTask: ...

    def call_later(self, delay: float, callback: Callback) -> ScheduledTask: ...


class ManualClock:
    """Virtual-time scheduler advanced explicitly by its owner.

    Callbacks run synchronously inside ``advance`` on the caller's thread, in
    due-time order (ties in scheduling order). A task cancelled by an earlier
    callback during the same ``advance`` does not fire.
    """

    def __init__(self, start: float = 0.0) -> None:
        self.now = float(start)
        self._tasks: List[ScheduledTask] = []
        self._seq = itertools.count()

    def call_every(self, interval: float, callback: Callback) -> ScheduledTask:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        return self._add(ScheduledTask(callback, self.now + interval, interval, next(self._seq)))

    def call_later(self, delay: float, callback: Callback) -> ScheduledTask:
        if delay < 0:
            raise ValueError(f"delay must be non-negative, got {delay}")
        return self._add(ScheduledTask(callback, self.now + delay, None, next(self._seq)))

    def _add(self, task: ScheduledTask) -> ScheduledTask:
        self._tasks.append(task)
        return task

    @property
    def pending(self) -> List[ScheduledTask]:
        return [t for t in self._tasks if not t.cancelled]

    def advance(self, seconds: float) -> int:
        """Move time forward, firing every callback that comes due.

        Returns the number of callbacks fired.
        """
        if seconds < 0:
            raise ValueError(f"cannot advance by a negative amount: {seconds}")
        target = self.now + seconds
        fired = 0
        while True:
            task = self._next_due(target)
            if task is None:
                break
            self.now = task.due
            if task.repeating:
                task.due += task.interval
            else:
                task.cancelled = True
            task.callback()
            fired += 1
        self.now = target
        self._tasks = self.pending
        return fired

    def _next_due(self, target: float) -> Optional[ScheduledTask]:
        due = [t for t in self._tasks if not t.cancelled and t.due <= target]
        if not due:
            return None
        return min(due, key=lambda t: (t.due, t.seq))
