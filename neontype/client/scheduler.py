"""Repeating tick schedulers for the session countdown.

A scheduler hands out one handle per repeating timer; cancelling the handle
guarantees the callback never runs again, even if a tick was already due.
"""

from __future__ import annotations

import asyncio
from typing import Callable, List, Optional, Protocol


class TickHandle(Protocol):
    def cancel(self) -> None: ...

    @property
    def cancelled(self) -> bool: ...


class Scheduler(Protocol):
    def every(self, interval: float, callback: Callable[[], None]) -> TickHandle: ...


class _LoopTimer:
    """Fires on absolute deadlines ``origin + n * interval`` so ticks never drift."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        interval: float,
        callback: Callable[[], None],
    ) -> None:
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._origin = loop.time()
        self._count = 0
        self._cancelled = False
        self._handle: Optional[asyncio.TimerHandle] = None
        self._arm()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def _arm(self) -> None:
        self._count += 1
        self._handle = self._loop.call_at(self._origin + self._count * self._interval, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        # Re-arm first: the callback may cancel us.
        self._arm()
        self._callback()

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class AsyncioScheduler:
    """Schedules ticks on an asyncio event loop (the running one by default)."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def every(self, interval: float, callback: Callable[[], None]) -> _LoopTimer:
        loop = self._loop or asyncio.get_running_loop()
        return _LoopTimer(loop, interval, callback)


class _ManualTimer:
    def __init__(self, interval: float, callback: Callable[[], None]) -> None:
        self.interval = interval
        self.callback = callback
        self.elapsed = 0.0
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class ManualScheduler:
    """Deterministic scheduler driven by :meth:`advance`; used by tests and headless tools."""

    def __init__(self) -> None:
        self._timers: List[_ManualTimer] = []

    def every(self, interval: float, callback: Callable[[], None]) -> _ManualTimer:
        timer = _ManualTimer(interval, callback)
        self._timers.append(timer)
        return timer

    @property
    def active(self) -> int:
        """Number of timers that can still fire."""
        return sum(1 for timer in self._timers if not timer.cancelled)

    def advance(self, seconds: float) -> int:
        """Move simulated time forward, firing every due tick. Returns ticks fired."""

        fired = 0
        for timer in list(self._timers):
            timer.elapsed += seconds
            while not timer.cancelled and timer.elapsed >= timer.interval:
                timer.elapsed -= timer.interval
                timer.callback()
                fired += 1
        self._timers = [timer for timer in self._timers if not timer.cancelled]
        return fired


__all__ = ["AsyncioScheduler", "ManualScheduler", "Scheduler", "TickHandle"]
