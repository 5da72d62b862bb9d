from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

import pytest

from pyroadwatch.models.location import LocationFix, LocationRequestOptions


@dataclass
class FakeTimer:
    due: float
    seq: int
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Virtual clock: timers only fire when the test advances time."""

    def __init__(self, start_ms: float = 1_700_000_000_000.0) -> None:
        self.now = start_ms
        self._timers: list[FakeTimer] = []
        self._seq = 0

    def now_ms(self) -> float:
        return self.now

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> FakeTimer:
        self._seq += 1
        timer = FakeTimer(due=self.now + max(0.0, delay_ms), seq=self._seq, callback=callback)
        self._timers.append(timer)
        return timer

    def pending(self) -> list[FakeTimer]:
        return sorted((t for t in self._timers if not t.cancelled), key=lambda t: (t.due, t.seq))

    def next_delay(self) -> float | None:
        timers = self.pending()
        return timers[0].due - self.now if timers else None

    def advance(self, ms: float) -> int:
        """Move the clock forward, firing due timers in order.  Returns fired count."""
        target = self.now + ms
        fired = 0
        while True:
            due = [t for t in self.pending() if t.due <= target]
            if not due:
                break
            timer = due[0]
            self._timers.remove(timer)
            self.now = timer.due
            timer.callback()
            fired += 1
        self.now = target
        return fired


@dataclass
class PendingRequest:
    on_position: Callable[[LocationFix], None]
    on_error: Callable[..., None]
    options: LocationRequestOptions

    def succeed(self, lat: float, lon: float) -> None:
        self.on_position(LocationFix(lat=lat, lon=lon))

    def fail(self, code: int, message: str | None = None) -> None:
        self.on_error(code, message)


@dataclass
class ScriptedSource:
    """Location source whose answers are driven by the test."""

    requests: list[PendingRequest] = field(default_factory=list)

    def request(self, on_position, on_error, options) -> None:  # type: ignore[no-untyped-def]
        self.requests.append(PendingRequest(on_position, on_error, options))

    @property
    def last(self) -> PendingRequest:
        return self.requests[-1]


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def source() -> ScriptedSource:
    return ScriptedSource()
