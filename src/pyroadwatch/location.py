"""Device location capability interface and a route replay source."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Protocol

from pyroadwatch._scheduler import Scheduler
from pyroadwatch.models.location import LocationFix, LocationRequestOptions, Position

_logger = logging.getLogger(__name__)

PositionCallback = Callable[[LocationFix], None]
ErrorCallback = Callable[[int, "str | None"], None]


class LocationSource(Protocol):
    """One-shot location capability.

    Each call to :meth:`request` must eventually invoke exactly one of the
    callbacks.  ``on_error`` receives a platform error code (1 permission
    denied, 2 position unavailable, 3 timeout, anything else unknown) and
    an optional message.
    """

    def request(
        self,
        on_position: PositionCallback,
        on_error: ErrorCallback,
        options: LocationRequestOptions,
    ) -> None:
        ...


# Sample drives used to exercise real-mode tracking without hardware.
DUMMY_ROUTES: dict[str, tuple[Position, ...]] = {
    "hwy401East": (
        Position(lat=43.6415, lon=-79.3802),
        Position(lat=43.6477, lon=-79.3601),
        Position(lat=43.6611, lon=-79.3304),
        Position(lat=43.6698, lon=-79.3003),
        Position(lat=43.6805, lon=-79.2701),
        Position(lat=43.6924, lon=-79.2401),
    ),
    "hwy400North": (
        Position(lat=43.7902, lon=-79.5201),
        Position(lat=43.8204, lon=-79.5503),
        Position(lat=43.8608, lon=-79.5805),
        Position(lat=43.9001, lon=-79.6004),
        Position(lat=43.9403, lon=-79.6202),
    ),
    "qewTorontoBound": (
        Position(lat=43.2001, lon=-79.0601),
        Position(lat=43.2504, lon=-79.1002),
        Position(lat=43.3008, lon=-79.1504),
        Position(lat=43.3509, lon=-79.2003),
        Position(lat=43.4002, lon=-79.2501),
    ),
}

DUMMY_ROUTE_LABELS: dict[str, str] = {
    "hwy401East": "HWY 401 Eastbound (Dummy)",
    "hwy400North": "HWY 400 Northbound (Dummy)",
    "qewTorontoBound": "QEW Toronto Bound (Dummy)",
}


class RouteReplaySource:
    """Location source that replays a fixed list of positions.

    Every request answers with the next sample after *latency_ms*; once the
    samples are exhausted the last one is repeated (the car is parked).
    """

    def __init__(
        self,
        scheduler: Scheduler,
        samples: Sequence[Position],
        *,
        latency_ms: float = 0.0,
    ) -> None:
        if not samples:
            raise ValueError("samples must not be empty")
        self._scheduler = scheduler
        self._samples = tuple(samples)
        self._latency_ms = latency_ms
        self._index = 0

    @classmethod
    def from_dummy_route(cls, scheduler: Scheduler, route_key: str, **kwargs: float) -> RouteReplaySource:
        samples = DUMMY_ROUTES.get(route_key)
        if samples is None:
            raise KeyError(f"unknown dummy route {route_key!r}; expected one of {sorted(DUMMY_ROUTES)}")
        return cls(scheduler, samples, **kwargs)

    @property
    def remaining(self) -> int:
        return max(0, len(self._samples) - self._index)

    def request(
        self,
        on_position: PositionCallback,
        on_error: ErrorCallback,
        options: LocationRequestOptions,
    ) -> None:
        sample = self._samples[min(self._index, len(self._samples) - 1)]
        self._index += 1
        fix = LocationFix(lat=sample.lat, lon=sample.lon, timestamp=self._scheduler.now_ms())
        _logger.debug("Replaying fix %s (high_accuracy=%s)", sample, options.high_accuracy)
        self._scheduler.call_later(self._latency_ms, lambda: on_position(fix))
