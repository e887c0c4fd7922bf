"""Cancellable periodic tasks.

Engines never call ``threading`` directly; they ask a scheduler for a
``PeriodicTask`` and keep the handle.  Cancelling a handle is idempotent and
flips a liveness flag that every delivery checks, so a tick that was already
queued when ``cancel()`` ran is dropped instead of mutating state.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Protocol

from taskdeck.utils.logger import get_logger

logger = get_logger("scheduler")

TickCallback = Callable[[], None]


class PeriodicTask:
    """Handle for a repeating callback."""

    def __init__(self, callback: TickCallback, interval: float):
        self.callback = callback
        self.interval = interval
        self._alive = True

    @property
    def alive(self) -> bool:
        return self._alive

    def cancel(self) -> None:
        """Stop further deliveries. Safe to call more than once."""
        self._alive = False

    def fire(self) -> bool:
        """Deliver one tick. Returns False when the task was already cancelled."""
        if not self._alive:
            return False
        self.callback()
        return True


class Scheduler(Protocol):
    def every(self, interval: float, callback: TickCallback) -> PeriodicTask: ...


class ManualScheduler:
    """Deterministic scheduler: ticks are delivered only by ``advance()``.

    Used by one-shot CLI commands (which never wait for a tick) and by tests.
    """

    def __init__(self) -> None:
        self._tasks: list[PeriodicTask] = []

    def every(self, interval: float, callback: TickCallback) -> PeriodicTask:
        task = PeriodicTask(callback, interval)
        self._tasks.append(task)
        return task

    @property
    def active_tasks(self) -> list[PeriodicTask]:
        return [task for task in self._tasks if task.alive]

    def advance(self, ticks: int = 1) -> int:
        """Deliver *ticks* rounds to every live task; returns deliveries made."""
        delivered = 0
        for _ in range(ticks):
            self._tasks = [task for task in self._tasks if task.alive]
            for task in list(self._tasks):
                if task.fire():
                    delivered += 1
        return delivered


class _ThreadedTask(PeriodicTask):
    """PeriodicTask driven by a chain of ``threading.Timer`` objects."""

    def __init__(self, callback: TickCallback, interval: float, lock: threading.RLock):
        super().__init__(callback, interval)
        self._lock = lock
        self._timer: threading.Timer | None = None

    def start(self) -> None:
        self._schedule()

    def _schedule(self) -> None:
        if not self.alive:
            return
        self._timer = threading.Timer(self.interval, self._run)
        self._timer.daemon = True
        self._timer.start()

    def _run(self) -> None:
        with self._lock:
            try:
                self.fire()
            except Exception:
                logger.exception("Periodic task raised; cancelling it")
                self.cancel()
        self._schedule()

    def cancel(self) -> None:
        super().cancel()
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


class ThreadingScheduler:
    """Real-time scheduler.

    Every delivery runs while holding *lock*, the same lock the foreground
    takes around user actions, so ticks and actions never interleave.
    """

    def __init__(self, lock: threading.RLock | None = None):
        self.lock = lock or threading.RLock()

    def every(self, interval: float, callback: TickCallback) -> PeriodicTask:
        task = _ThreadedTask(callback, interval, self.lock)
        task.start()
        return task
