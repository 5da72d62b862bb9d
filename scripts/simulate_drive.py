#!/usr/bin/env python3
"""Drive a simulated (or replayed) car and print the incidents ahead.

Default behavior:
1) drive the selected Highway 401 corridor with the virtual car,
2) correlate its position with a small built-in incident list,
3) print position, direction and the closest incident ahead every few seconds.

``--live`` queries the real incident feed instead (subject to the call
budget), ``--replay`` drives real-mode tracking from a recorded dummy route.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyroadwatch import (  # noqa: E402
    IncidentFetchError,
    IncidentRecord,
    LoopScheduler,
    RoadwatchClient,
    RoadwatchConfig,
    RouteReplaySource,
    TrackingMode,
)
from pyroadwatch.location import DUMMY_ROUTES  # noqa: E402
from pyroadwatch.paths import DEFAULT_SIM_PATHS, find_path  # noqa: E402

_SAMPLE_INCIDENTS: list[dict[str, object]] = [
    {
        "ID": "SAMPLE-1",
        "RoadwayName": "Highway 401",
        "DirectionOfTravel": "Eastbound",
        "Latitude": 43.7601,
        "Longitude": -79.3283,
        "Description": "Collision blocking the right lane near Victoria Park",
        "LanesAffected": "Right Lane Closed",
    },
    {
        "ID": "SAMPLE-2",
        "RoadwayName": "Highway 401",
        "DirectionOfTravel": "Westbound",
        "Latitude": 43.7803,
        "Longitude": -79.2508,
        "Description": "Slow traffic approaching Markham Rd",
    },
    {
        "ID": "SAMPLE-3",
        "RoadwayName": "Highway 401",
        "DirectionOfTravel": "Eastbound",
        "Latitude": 43.8421,
        "Longitude": -79.0877,
        "Description": "Planned maintenance, shoulder closed",
    },
    {
        "ID": "SAMPLE-4",
        "RoadwayName": "Highway 400",
        "DirectionOfTravel": "Northbound",
        "Latitude": 43.8608,
        "Longitude": -79.5805,
        "Description": "All lanes closed for bridge work",
        "IsFullClosure": True,
    },
]


class _CannedIncidents:
    async def fetch_events(self) -> list[IncidentRecord]:
        return [IncidentRecord.model_validate(item) for item in _SAMPLE_INCIDENTS]


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument(
        "--path",
        default=DEFAULT_SIM_PATHS[0].id,
        choices=[p.id for p in DEFAULT_SIM_PATHS],
        help="simulation corridor",
    )
    parser.add_argument("--duration-ms", type=int, default=30_000, help="time to drive the corridor")
    parser.add_argument("--tick-ms", type=int, default=500, help="simulation tick interval")
    parser.add_argument("--report-every", type=float, default=2.0, help="seconds between reports")
    parser.add_argument(
        "--replay",
        choices=sorted(DUMMY_ROUTES),
        help="track in real mode, replaying a dummy route instead of simulating",
    )
    parser.add_argument("--live", action="store_true", help="query the live incident feed")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace) -> int:
    scheduler = LoopScheduler()
    config = RoadwatchConfig.from_env(
        initial_mode=TrackingMode.REAL if args.replay else TrackingMode.SIM,
        sim_duration_ms=args.duration_ms,
        sim_tick_ms=args.tick_ms,
        poll_interval_ms=1000,
    )
    source = RouteReplaySource.from_dummy_route(scheduler, args.replay) if args.replay else None

    async with RoadwatchClient(
        config,
        location_source=source,
        incident_source=None if args.live else _CannedIncidents(),
        scheduler=scheduler,
        sim_path=find_path(args.path),
    ) as client:
        provider = client.provider
        if provider.mode is TrackingMode.SIM:
            assert provider.sim_controls is not None  # noqa: S101
            provider.sim_controls.start()
        else:
            provider.activate()

        try:
            await client.refresh_incidents()
        except IncidentFetchError as exc:
            print(f"incident fetch failed: {exc}", file=sys.stderr)
            return 1

        while True:
            await asyncio.sleep(args.report_every)
            snap = provider.snapshot()
            if snap.position is None:
                print(f"[{snap.status}] waiting for position ({snap.error or 'no fix yet'})")
                continue
            ahead = client.whats_ahead()
            first = ahead[0] if ahead else None
            summary = (
                f"{first.record.roadway_name} {first.record.direction_of_travel}: "
                f"{first.record.description} [{first.record.impact}] {first.distance_km:.1f} km"
                if first is not None
                else "nothing reported"
            )
            print(
                f"{snap.position.lat:.5f},{snap.position.lon:.5f} "
                f"{snap.direction.label:<10} quality={snap.gps_quality} | {summary}"
            )
            sim = provider.sim_controls
            if sim is not None and not sim.is_running:
                return 0
            if args.replay and source is not None and source.remaining == 0:
                return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return asyncio.run(_run(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
