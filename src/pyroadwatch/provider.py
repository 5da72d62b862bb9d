"""Mode-switchable facade over the real tracker and the virtual car."""

from __future__ import annotations

import logging
from collections.abc import Callable

from pyroadwatch.models.location import (
    DirectionEstimate,
    GpsQuality,
    LocationStatus,
    Position,
    PositionSnapshot,
    TrackingMode,
)
from pyroadwatch.simulator import VirtualCarSimulator
from pyroadwatch.tracker import RealPositionTracker

_logger = logging.getLogger(__name__)


class UnifiedPositionProvider:
    """Single source of position and direction for the rest of the app.

    Only the source selected by :attr:`mode` is ever read.  Switching modes
    tears down the active source's timers before the other one is
    activated, so a deactivated source can no longer change what this
    provider reports.

    Usage::

        provider = UnifiedPositionProvider(tracker, simulator, mode=TrackingMode.SIM)
        provider.sim_controls.start()
        ...
        provider.set_mode(TrackingMode.REAL)
    """

    def __init__(
        self,
        tracker: RealPositionTracker,
        simulator: VirtualCarSimulator,
        *,
        mode: TrackingMode = TrackingMode.REAL,
        on_update: Callable[[PositionSnapshot], None] | None = None,
    ) -> None:
        self._tracker = tracker
        self._simulator = simulator
        self._mode = TrackingMode(mode)
        self._on_update = on_update
        tracker.on_update = self._on_tracker_update
        simulator.on_update = self._on_simulator_update

    @property
    def mode(self) -> TrackingMode:
        return self._mode

    @property
    def tracker(self) -> RealPositionTracker:
        return self._tracker

    @property
    def sim_controls(self) -> VirtualCarSimulator | None:
        """The simulator while in SIM mode, otherwise ``None``."""
        if self._mode is TrackingMode.SIM:
            return self._simulator
        return None

    @property
    def position(self) -> Position | None:
        if self._mode is TrackingMode.SIM:
            return self._simulator.position
        return self._tracker.position

    @property
    def direction(self) -> DirectionEstimate:
        if self._mode is TrackingMode.SIM:
            return self._simulator.direction
        return self._tracker.direction

    @property
    def status(self) -> LocationStatus:
        if self._mode is TrackingMode.SIM:
            return self._simulator.status
        return self._tracker.status

    @property
    def gps_quality(self) -> GpsQuality:
        if self._mode is TrackingMode.SIM:
            return GpsQuality.NONE
        return self._tracker.gps_quality

    def snapshot(self) -> PositionSnapshot:
        error = self._tracker.error if self._mode is TrackingMode.REAL else None
        return PositionSnapshot(
            mode=self._mode,
            position=self.position,
            direction=self.direction,
            status=self.status,
            gps_quality=self.gps_quality,
            error=str(error) if error is not None else None,
        )

    def activate(self) -> None:
        """Start the current mode's source (REAL starts polling)."""
        if self._mode is TrackingMode.REAL:
            self._tracker.start()

    def set_mode(self, mode: TrackingMode | str) -> None:
        """Switch the active source, tearing the previous one down first."""
        new_mode = TrackingMode(mode)
        if new_mode is self._mode:
            return
        self._deactivate()
        self._mode = new_mode
        _logger.info("Position mode switched to %s", new_mode)
        self.activate()
        self._notify()

    def close(self) -> None:
        """Tear down both sources."""
        self._tracker.stop()
        self._simulator.pause()

    def _deactivate(self) -> None:
        if self._mode is TrackingMode.REAL:
            self._tracker.stop()
        else:
            self._simulator.pause()

    def _on_tracker_update(self, _tracker: RealPositionTracker) -> None:
        if self._mode is TrackingMode.REAL:
            self._notify()

    def _on_simulator_update(self, _simulator: VirtualCarSimulator) -> None:
        if self._mode is TrackingMode.SIM:
            self._notify()

    def _notify(self) -> None:
        if self._on_update is None:
            return
        try:
            self._on_update(self.snapshot())
        except Exception:
            _logger.debug("on_update callback failed", exc_info=True)
