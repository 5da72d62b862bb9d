from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from pyroadwatch.models.location import Cardinal, LocationStatus, Position, SimPath
from pyroadwatch.paths import HWY401_PROVIDED_EAST, HWY401_PROVIDED_WEST, find_path
from pyroadwatch.simulator import VirtualCarSimulator

if TYPE_CHECKING:
    from conftest import FakeScheduler

STATIONARY = SimPath(
    id="parked",
    name="Parked",
    start=Position(lat=43.7, lon=-79.4),
    end=Position(lat=43.7, lon=-79.4),
)


def _sim(scheduler: FakeScheduler, path: SimPath | None = HWY401_PROVIDED_EAST) -> VirtualCarSimulator:
    return VirtualCarSimulator(scheduler, path=path, duration_ms=10_000, tick_ms=1_000)


def test_idle_before_start(scheduler: FakeScheduler) -> None:
    sim = _sim(scheduler)

    assert sim.status is LocationStatus.IDLE
    assert sim.progress == 0.0
    assert sim.position == HWY401_PROVIDED_EAST.start
    assert sim.direction.cardinal is Cardinal.UNKNOWN
    assert not sim.is_running


def test_run_completes_in_duration(scheduler: FakeScheduler) -> None:
    sim = _sim(scheduler)
    sim.start()
    assert sim.status is LocationStatus.TRACKING

    ticks = scheduler.advance(10_000)

    assert 9 <= ticks <= 11
    assert sim.progress == 1.0
    assert not sim.is_running
    assert sim.status is LocationStatus.READY
    assert sim.position == HWY401_PROVIDED_EAST.end
    assert scheduler.pending() == []


def test_progress_is_monotonic(scheduler: FakeScheduler) -> None:
    sim = _sim(scheduler)
    sim.start()

    seen = []
    for _ in range(12):
        scheduler.advance(1_000)
        seen.append(sim.progress)

    assert seen == sorted(seen)
    assert all(0.0 <= p <= 1.0 for p in seen)


def test_pause_and_resume_continues_timeline(scheduler: FakeScheduler) -> None:
    sim = _sim(scheduler)
    sim.start()
    scheduler.advance(4_000)
    assert sim.progress == pytest.approx(0.4)

    sim.pause()
    scheduler.advance(5_000)
    assert sim.progress == pytest.approx(0.4)
    assert not sim.is_running
    assert scheduler.pending() == []

    sim.start()
    scheduler.advance(1_000)
    assert sim.progress == pytest.approx(0.5)
    scheduler.advance(5_000)
    assert sim.progress == 1.0
    assert sim.status is LocationStatus.READY


def test_eastbound_path_reports_east(scheduler: FakeScheduler) -> None:
    sim = _sim(scheduler)
    sim.start()

    scheduler.advance(1_000)
    assert sim.direction.cardinal is Cardinal.UNKNOWN
    scheduler.advance(1_000)

    assert sim.direction.cardinal is Cardinal.EAST
    assert sim.direction.bearing is None


def test_westbound_path_reports_west(scheduler: FakeScheduler) -> None:
    sim = _sim(scheduler, HWY401_PROVIDED_WEST)
    sim.start()

    scheduler.advance(3_000)

    assert sim.direction.cardinal is Cardinal.WEST
    assert sim.direction.label == "Westbound"


def test_stationary_path_keeps_direction_unknown(scheduler: FakeScheduler) -> None:
    sim = _sim(scheduler, STATIONARY)
    sim.start()

    scheduler.advance(10_000)

    assert sim.progress == 1.0
    assert sim.direction.cardinal is Cardinal.UNKNOWN


def test_start_after_completion_restarts(scheduler: FakeScheduler) -> None:
    sim = _sim(scheduler)
    sim.start()
    scheduler.advance(10_000)

    sim.start()

    assert sim.progress == 0.0
    assert sim.is_running
    assert sim.status is LocationStatus.TRACKING
    assert sim.direction.cardinal is Cardinal.UNKNOWN
    scheduler.advance(2_000)
    assert sim.progress == pytest.approx(0.2)


def test_reset_rewinds(scheduler: FakeScheduler) -> None:
    sim = _sim(scheduler)
    sim.start()
    scheduler.advance(3_000)

    sim.reset()

    assert sim.progress == 0.0
    assert not sim.is_running
    assert sim.status is LocationStatus.IDLE
    assert sim.direction.cardinal is Cardinal.UNKNOWN
    assert scheduler.pending() == []


def test_set_path_while_running_stops_without_restart(scheduler: FakeScheduler) -> None:
    sim = _sim(scheduler)
    sim.start()
    scheduler.advance(3_000)

    sim.set_path(HWY401_PROVIDED_WEST)

    assert not sim.is_running
    assert scheduler.pending() == []
    assert sim.progress == pytest.approx(0.3)
    scheduler.advance(5_000)
    assert sim.progress == pytest.approx(0.3)

    sim.start()
    scheduler.advance(1_000)
    assert sim.progress == pytest.approx(0.4)
    assert sim.path == HWY401_PROVIDED_WEST


def test_set_duration_and_tick_interval_stop_the_run(scheduler: FakeScheduler) -> None:
    sim = _sim(scheduler)
    sim.start()
    scheduler.advance(2_000)

    sim.set_duration(20_000)
    assert not sim.is_running
    sim.start()
    sim.set_tick_interval(500)

    assert not sim.is_running
    assert sim.duration_ms == 20_000
    assert sim.tick_ms == 500
    assert scheduler.pending() == []


def test_non_positive_intervals_rejected(scheduler: FakeScheduler) -> None:
    with pytest.raises(ValueError):
        VirtualCarSimulator(scheduler, path=HWY401_PROVIDED_EAST, tick_ms=0)
    sim = _sim(scheduler)
    with pytest.raises(ValueError):
        sim.set_duration(-1)


def test_start_without_path_is_noop(scheduler: FakeScheduler) -> None:
    sim = _sim(scheduler, None)

    sim.start()

    assert sim.position is None
    assert not sim.is_running
    assert sim.status is LocationStatus.IDLE
    assert scheduler.pending() == []


def test_on_update_called_per_tick(scheduler: FakeScheduler) -> None:
    updates: list[float] = []
    sim = _sim(scheduler)
    sim.on_update = lambda s: updates.append(s.progress)

    sim.start()
    scheduler.advance(3_000)

    assert updates == pytest.approx([0.0, 0.1, 0.2, 0.3])


def test_find_path() -> None:
    path = find_path("401_provided_west")

    assert path is HWY401_PROVIDED_WEST
    assert find_path("nope") is None
