"""Sensor-driven position tracking with accuracy fallback and backoff.

The tracker owns an explicit poll loop on top of a one-shot
:class:`~pyroadwatch.location.LocationSource`:

* a successful fix replaces the retained position, refreshes the heading
  when the car moved far enough, and schedules the next poll;
* a retryable failure first downgrades from high to low accuracy and
  retries at once, then backs off exponentially up to a cap;
* while a previous position exists, retryable failures are absorbed and
  only reflected as ``GpsQuality.LAST_KNOWN``.

Every timer and sensor callback captures the tracker generation (and the
attempt number); anything that fires after :meth:`stop` is ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from pydantic import ValidationError

from pyroadwatch import geo
from pyroadwatch._scheduler import Scheduler, TimerHandle, cancel_timer
from pyroadwatch.config import RoadwatchConfig
from pyroadwatch.exceptions import (
    LocationError,
    LocationTimeoutError,
    NoLocationCapabilityError,
    PositionUnavailableError,
    UnknownLocationError,
    location_error_from_code,
)
from pyroadwatch.location import LocationSource
from pyroadwatch.models.location import (
    UNKNOWN_DIRECTION,
    DirectionEstimate,
    GpsQuality,
    LocationFix,
    LocationRequestOptions,
    LocationStatus,
    Position,
)

_logger = logging.getLogger(__name__)


class RealPositionTracker:
    """Poll-and-callback position tracker for device location sensors.

    Parameters
    ----------
    source : LocationSource or None
        Platform location capability.  ``None`` means the platform has
        none; :meth:`start` then fails fatally.
    scheduler : Scheduler
        Timer provider.
    config : RoadwatchConfig or None
        Poll/backoff tuning.  Defaults to :class:`RoadwatchConfig`.
    on_update : callable or None
        Called with the tracker after every state change.
    """

    def __init__(
        self,
        source: LocationSource | None,
        scheduler: Scheduler,
        *,
        config: RoadwatchConfig | None = None,
        on_update: Callable[[RealPositionTracker], None] | None = None,
    ) -> None:
        self._source = source
        self._scheduler = scheduler
        self._config = config or RoadwatchConfig()
        self.on_update = on_update

        self._generation = 0
        self._attempt = 0
        self._active = False
        self._timer: TimerHandle | None = None
        self._watchdog: TimerHandle | None = None

        self._status = LocationStatus.IDLE
        self._gps_quality = GpsQuality.NONE
        self._position: Position | None = None
        self._direction = UNKNOWN_DIRECTION
        self._error: LocationError | None = None
        self._high_accuracy = True
        self._retry_delay_ms: float = self._config.retry_floor_ms

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def position(self) -> Position | None:
        return self._position

    @property
    def direction(self) -> DirectionEstimate:
        return self._direction

    @property
    def status(self) -> LocationStatus:
        return self._status

    @property
    def gps_quality(self) -> GpsQuality:
        return self._gps_quality

    @property
    def error(self) -> LocationError | None:
        """Last surfaced (user-visible) error, ``None`` when healthy."""
        return self._error

    @property
    def high_accuracy(self) -> bool:
        return self._high_accuracy

    @property
    def retry_delay_ms(self) -> float:
        return self._retry_delay_ms

    @property
    def is_active(self) -> bool:
        return self._active

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Begin polling the location source."""
        if self._active:
            return
        if self._source is None:
            _logger.info("No location capability; tracking unavailable")
            self._surface(NoLocationCapabilityError())
            self._notify()
            return

        self._generation += 1
        self._active = True
        self._error = None
        if self._position is None or self._status is LocationStatus.ERROR:
            self._status = LocationStatus.REQUESTING
        _logger.info("Location tracking started")
        self._notify()
        self._request_fix()

    def stop(self) -> None:
        """Cancel pending poll, backoff and watchdog timers.  Idempotent."""
        self._generation += 1
        cancel_timer(self._timer)
        cancel_timer(self._watchdog)
        self._timer = None
        self._watchdog = None
        if self._active:
            _logger.info("Location tracking stopped")
        self._active = False

    def reset(self) -> None:
        """Stop and return to ``IDLE``, forgetting position and heading."""
        self.stop()
        self._status = LocationStatus.IDLE
        self._gps_quality = GpsQuality.NONE
        self._position = None
        self._direction = UNKNOWN_DIRECTION
        self._error = None
        self._high_accuracy = True
        self._retry_delay_ms = self._config.retry_floor_ms
        self._notify()

    # ------------------------------------------------------------------
    # Poll loop
    # ------------------------------------------------------------------

    def _request_options(self) -> LocationRequestOptions:
        if self._high_accuracy:
            max_age = self._config.high_accuracy_max_age_ms
        else:
            max_age = self._config.low_accuracy_max_age_ms
        return LocationRequestOptions(
            high_accuracy=self._high_accuracy,
            timeout_ms=self._config.acquisition_timeout_ms,
            max_cache_age_ms=max_age,
        )

    def _request_fix(self) -> None:
        source = self._source
        # A listener may have stopped the tracker from inside _notify.
        if source is None or not self._active:
            return
        generation = self._generation
        self._attempt += 1
        attempt = self._attempt
        options = self._request_options()

        def _is_current() -> bool:
            return generation == self._generation and attempt == self._attempt

        def _on_position(fix: LocationFix) -> None:
            if not _is_current():
                _logger.debug("Ignoring fix from superseded attempt %d", attempt)
                return
            self._handle_fix(fix)

        def _on_error(code: int, message: str | None = None) -> None:
            if not _is_current():
                _logger.debug("Ignoring error from superseded attempt %d", attempt)
                return
            self._handle_error(location_error_from_code(code, message))

        def _on_watchdog() -> None:
            if not _is_current():
                return
            self._handle_error(LocationTimeoutError())

        _logger.debug("Requesting fix #%d (high_accuracy=%s)", attempt, options.high_accuracy)
        cancel_timer(self._watchdog)
        self._watchdog = self._scheduler.call_later(options.timeout_ms, _on_watchdog)
        try:
            source.request(_on_position, _on_error, options)
        except Exception as exc:  # noqa: BLE001
            _logger.debug("Location source raised", exc_info=True)
            if _is_current():
                self._handle_error(UnknownLocationError(str(exc) or None))

    def _finish_attempt(self) -> None:
        # Retire the attempt so duplicate callbacks are ignored.
        self._attempt += 1
        cancel_timer(self._watchdog)
        self._watchdog = None

    def _schedule_poll(self, delay_ms: float) -> None:
        generation = self._generation

        def _fire() -> None:
            if generation != self._generation or not self._active:
                return
            self._timer = None
            self._request_fix()

        cancel_timer(self._timer)
        self._timer = self._scheduler.call_later(delay_ms, _fire)

    def _handle_fix(self, fix: LocationFix) -> None:
        self._finish_attempt()
        try:
            new_position = fix.position
        except ValidationError:
            self._handle_error(PositionUnavailableError(f"Invalid coordinates {fix.lat}, {fix.lon}"), finished=True)
            return

        previous = self._position
        if previous is not None:
            moved_km = geo.distance(previous, new_position)
            if moved_km >= self._config.min_displacement_km:
                heading = geo.bearing(previous, new_position)
                self._direction = DirectionEstimate(cardinal=geo.classify(heading), bearing=heading)

        self._position = new_position
        self._retry_delay_ms = self._config.retry_floor_ms
        self._gps_quality = GpsQuality.HIGH if self._high_accuracy else GpsQuality.LOW
        self._status = LocationStatus.READY
        self._error = None
        self._schedule_poll(self._config.poll_interval_ms)
        self._notify()

    def _handle_error(self, error: LocationError, *, finished: bool = False) -> None:
        if not finished:
            self._finish_attempt()

        if error.retryable:
            if self._high_accuracy:
                _logger.warning("High accuracy location failed (%s); switching to low accuracy", error)
                self._high_accuracy = False
                self._request_fix()
                return
            self._retry_delay_ms = min(
                self._retry_delay_ms * self._config.backoff_factor,
                self._config.retry_cap_ms,
            )

        if error.retryable and self._position is not None:
            _logger.warning("Transient location error, using last known position: %s", error)
            self._gps_quality = GpsQuality.LAST_KNOWN
            self._status = LocationStatus.READY
        else:
            self._surface(error)

        if error.retryable:
            _logger.debug("Retrying location in %.0f ms", self._retry_delay_ms)
            self._schedule_poll(self._retry_delay_ms)
        else:
            self._active = False
        self._notify()

    def _surface(self, error: LocationError) -> None:
        _logger.warning("Location error: %s", error)
        self._error = error
        self._status = LocationStatus.ERROR
        self._gps_quality = GpsQuality.NONE

    def _notify(self) -> None:
        if self.on_update is None:
            return
        try:
            self.on_update(self)
        except Exception:
            _logger.debug("on_update callback failed", exc_info=True)
