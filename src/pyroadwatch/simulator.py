"""Virtual car: deterministic movement along a straight corridor.

Progress is derived from wall-clock time elapsed since a *virtual epoch*
(``now - progress * duration``), so pausing and resuming continues the
timeline instead of restarting it.  Ticks only sample that timeline.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from pyroadwatch import geo
from pyroadwatch._constants import SIM_LON_EPSILON
from pyroadwatch._scheduler import Scheduler, TimerHandle, cancel_timer
from pyroadwatch.config import RoadwatchConfig
from pyroadwatch.models.location import (
    UNKNOWN_DIRECTION,
    Cardinal,
    DirectionEstimate,
    LocationStatus,
    Position,
    SimPath,
)

_logger = logging.getLogger(__name__)


class VirtualCarSimulator:
    """Tick-driven linear interpolation between ``path.start`` and ``path.end``.

    Parameters
    ----------
    scheduler : Scheduler
        Timer and clock provider.
    path : SimPath or None
        Corridor to drive.  :meth:`start` does nothing without one.
    duration_ms : int or None
        Time to drive the whole path.  Defaults to ``config.sim_duration_ms``.
    tick_ms : int or None
        Sampling interval.  Defaults to ``config.sim_tick_ms``.
    config : RoadwatchConfig or None
        Source of the defaults above.
    on_update : callable or None
        Called with the simulator after every state change.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        path: SimPath | None = None,
        duration_ms: int | None = None,
        tick_ms: int | None = None,
        config: RoadwatchConfig | None = None,
        on_update: Callable[[VirtualCarSimulator], None] | None = None,
    ) -> None:
        config = config or RoadwatchConfig()
        self._scheduler = scheduler
        self._path = path
        self._duration_ms = duration_ms if duration_ms is not None else config.sim_duration_ms
        self._tick_ms = tick_ms if tick_ms is not None else config.sim_tick_ms
        _validate_interval("duration_ms", self._duration_ms)
        _validate_interval("tick_ms", self._tick_ms)
        self.on_update = on_update

        self._generation = 0
        self._timer: TimerHandle | None = None
        self._progress = 0.0
        self._running = False
        self._started = False
        self._direction = UNKNOWN_DIRECTION
        self._epoch_ms: float | None = None
        self._last_lon: float | None = None

    @property
    def path(self) -> SimPath | None:
        return self._path

    @property
    def duration_ms(self) -> int:
        return self._duration_ms

    @property
    def tick_ms(self) -> int:
        return self._tick_ms

    @property
    def progress(self) -> float:
        """Fraction of the path driven, in [0, 1]."""
        return self._progress

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def direction(self) -> DirectionEstimate:
        return self._direction

    @property
    def position(self) -> Position | None:
        if self._path is None:
            return None
        return geo.interpolate(self._path.start, self._path.end, self._progress)

    @property
    def status(self) -> LocationStatus:
        if self._progress >= 1.0:
            return LocationStatus.READY
        if self._started:
            return LocationStatus.TRACKING
        return LocationStatus.IDLE

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start or resume driving."""
        if self._path is None:
            _logger.debug("Simulator start ignored: no path selected")
            return
        if self._progress >= 1.0:
            self._clear_run()

        self._cancel()
        self._epoch_ms = self._scheduler.now_ms() - self._progress * self._duration_ms
        self._running = True
        self._started = True
        _logger.info("Simulating %s from %.0f%%", self._path.id, self._progress * 100)
        self._schedule_tick()
        self._notify()

    def pause(self) -> None:
        """Stop ticking but keep progress so :meth:`start` resumes."""
        self._cancel()
        self._running = False
        self._notify()

    def reset(self) -> None:
        """Stop and rewind to the start of the path."""
        self._cancel()
        self._running = False
        self._started = False
        self._clear_run()
        self._notify()

    def set_path(self, path: SimPath | None) -> None:
        if path == self._path:
            return
        self._path = path
        self._invalidate()

    def set_duration(self, duration_ms: int) -> None:
        _validate_interval("duration_ms", duration_ms)
        if duration_ms == self._duration_ms:
            return
        self._duration_ms = duration_ms
        self._invalidate()

    def set_tick_interval(self, tick_ms: int) -> None:
        _validate_interval("tick_ms", tick_ms)
        if tick_ms == self._tick_ms:
            return
        self._tick_ms = tick_ms
        self._invalidate()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _cancel(self) -> None:
        self._generation += 1
        cancel_timer(self._timer)
        self._timer = None

    def _clear_run(self) -> None:
        self._progress = 0.0
        self._direction = UNKNOWN_DIRECTION
        self._epoch_ms = None
        self._last_lon = None

    def _invalidate(self) -> None:
        # Reconfiguration never restarts on its own.
        self._cancel()
        self._running = False
        self._epoch_ms = None
        self._last_lon = None
        self._notify()

    def _schedule_tick(self) -> None:
        generation = self._generation

        def _fire() -> None:
            if generation != self._generation:
                return
            self._timer = None
            self._tick()

        self._timer = self._scheduler.call_later(self._tick_ms, _fire)

    def _tick(self) -> None:
        path = self._path
        if path is None:
            return
        now = self._scheduler.now_ms()
        epoch = self._epoch_ms if self._epoch_ms is not None else now
        elapsed = max(0.0, now - epoch)
        next_progress = min(1.0, elapsed / self._duration_ms)
        next_position = geo.interpolate(path.start, path.end, next_progress)

        if self._last_lon is not None:
            diff = next_position.lon - self._last_lon
            if abs(diff) > SIM_LON_EPSILON:
                # Corridors are east-west; the sign of the longitude delta is enough.
                self._direction = DirectionEstimate(cardinal=Cardinal.EAST if diff > 0 else Cardinal.WEST)
        self._last_lon = next_position.lon
        self._progress = next_progress

        if next_progress >= 1.0:
            self._cancel()
            self._running = False
            _logger.info("Simulation of %s complete", path.id)
        else:
            self._schedule_tick()
        self._notify()

    def _notify(self) -> None:
        if self.on_update is None:
            return
        try:
            self.on_update(self)
        except Exception:
            _logger.debug("on_update callback failed", exc_info=True)


def _validate_interval(name: str, value: int) -> None:
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
