"""Timer scheduling on top of the asyncio event loop.

Components never touch the loop directly; they receive a :class:`Scheduler`
so timer-driven behaviour (polling, backoff, simulation ticks, cooldowns)
can be driven by a virtual clock in tests.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from typing import Protocol


def wall_clock_ms() -> float:
    """Current epoch timestamp in milliseconds."""
    return time.time() * 1000


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Structural scheduler interface used by the trackers and the limiter."""

    def now_ms(self) -> float:
        ...

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        ...


class LoopScheduler:
    """Scheduler backed by ``loop.call_later``.

    Parameters
    ----------
    loop : asyncio.AbstractEventLoop or None
        Loop to schedule on.  Defaults to the running loop, so construct
        this from within a coroutine.
    clock : callable
        Wall-clock source in epoch milliseconds.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop | None = None,
        *,
        clock: Callable[[], float] = wall_clock_ms,
    ) -> None:
        self._loop = loop or asyncio.get_running_loop()
        self._clock = clock

    def now_ms(self) -> float:
        return self._clock()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self._loop.call_later(max(0.0, delay_ms) / 1000.0, callback)


def cancel_timer(handle: TimerHandle | None) -> None:
    if handle is not None:
        handle.cancel()
