"""Cooperative timers driven by the render loop.

Nothing here starts threads. The loop calls ``tick(now)`` once per frame and
every task whose deadline has passed runs right there, on the main thread.
"""

from __future__ import annotations

import logging
import time

_LOGGER = logging.getLogger('driftplay.scheduler')


class ScheduledTask:
    def __init__(self, deadline, callback, interval=None):
        self.deadline = deadline
        self.callback = callback
        self.interval = interval
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    @property
    def pending(self):
        return not self.cancelled


class FrameScheduler:
    def __init__(self, clock=None):
        self._clock = clock or time.monotonic
        self._tasks = []

    def now(self):
        return self._clock()

    def call_later(self, delay, callback):
        task = ScheduledTask(self.now() + delay, callback)
        self._tasks.append(task)
        return task

    def call_every(self, interval, callback):
        """Run ``callback`` every ``interval`` seconds until cancelled."""
        if interval <= 0:
            raise ValueError('interval must be positive')
        task = ScheduledTask(self.now() + interval, callback, interval=interval)
        self._tasks.append(task)
        return task

    def tick(self, now=None):
        """Run due tasks in deadline order; returns how many ran."""
        now = self.now() if now is None else now
        due = sorted((t for t in self._tasks if not t.cancelled and t.deadline <= now), key=lambda t: t.deadline)
        ran = 0
        for task in due:
            # an earlier callback may have cancelled this one
            if task.cancelled:
                continue
            if task.interval is None:
                task.cancelled = True
            else:
                task.deadline = now + task.interval
            task.callback()
            ran += 1
        self._tasks = [t for t in self._tasks if not t.cancelled]
        return ran

    def pending(self):
        return [t for t in self._tasks if not t.cancelled]


class Debouncer:
    """Run ``callback`` once events have been quiet for ``delay`` seconds.

    Each trigger cancels the outstanding task and schedules a fresh one, so
    at most one recomputation is ever pending.
    """

    def __init__(self, scheduler, delay, callback):
        self.scheduler = scheduler
        self.delay = delay
        self.callback = callback
        self._task = None

    def trigger(self):
        if self._task is not None:
            self._task.cancel()
        self._task = self.scheduler.call_later(self.delay, self._fire)
        return self._task

    def _fire(self):
        self._task = None
        _LOGGER.debug('debounced recompute')
        self.callback()

    @property
    def pending(self):
        return self._task is not None and self._task.pending

    def cancel(self):
        if self._task is not None:
            self._task.cancel()
            self._task = None
