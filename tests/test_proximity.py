from __future__ import annotations

import math

import pytest

from pyroadwatch import geo
from pyroadwatch.models.incident import IncidentRecord
from pyroadwatch.models.location import Cardinal, Position
from pyroadwatch.proximity import (
    ProximityCorrelator,
    filter_by_direction,
    filter_by_road,
    nearest_road,
    rank_by_distance,
    whats_ahead,
)

HERE = Position(lat=43.72, lon=-79.42)


def _record(id_: str, lat: float | None, lon: float | None, road: str | None, direction: str | None) -> IncidentRecord:
    return IncidentRecord(id=id_, lat=lat, lon=lon, roadway_name=road, direction_of_travel=direction)


EAST_401 = _record("a", 43.70, -79.40, "401", "EAST")
WEST_401 = _record("b", 43.90, -78.95, "401", "WEST")
NO_COORDS = _record("c", None, None, "401", "Eastbound")
DVP_SOUTH = _record("d", 43.71, -79.41, "Don Valley Parkway", "Southbound")


def test_nearest_road_picks_closest() -> None:
    nearest = nearest_road(HERE, [WEST_401, EAST_401, NO_COORDS])

    assert nearest is not None
    assert nearest.record is EAST_401
    assert nearest.road == "401"
    assert nearest.distance_km == pytest.approx(geo.distance(HERE, EAST_401.position))  # type: ignore[arg-type]


def test_nearest_road_tie_keeps_first() -> None:
    twin = _record("twin", 43.70, -79.40, "Highway 401", "WEST")

    nearest = nearest_road(HERE, [EAST_401, twin])

    assert nearest is not None
    assert nearest.record is EAST_401


def test_nearest_road_without_position_or_coordinates() -> None:
    assert nearest_road(None, [EAST_401]) is None
    assert nearest_road(HERE, [NO_COORDS]) is None
    assert nearest_road(HERE, []) is None


def test_zero_coordinates_are_usable() -> None:
    null_island = _record("z", 0.0, 0.0, "Null Rd", None)

    assert null_island.has_coordinates
    assert nearest_road(HERE, [null_island]) is not None


def test_filter_by_road_is_case_insensitive_substring() -> None:
    records = [EAST_401, DVP_SOUTH, _record("e", 43.0, -79.0, "Highway 401 Collectors", "EAST")]

    assert [r.id for r in filter_by_road(records, "highway 401")] == ["e"]
    assert [r.id for r in filter_by_road(records, "401")] == ["a", "e"]
    assert filter_by_road(records, None) == records
    assert filter_by_road(records, "") == records
    assert filter_by_road(records, "ALL") == records


def test_filter_by_direction_substring_match() -> None:
    records = [EAST_401, WEST_401, NO_COORDS, DVP_SOUTH]

    assert [r.id for r in filter_by_direction(records, Cardinal.EAST)] == ["a", "c"]
    assert [r.id for r in filter_by_direction(records, "south")] == ["d"]
    assert filter_by_direction(records, Cardinal.UNKNOWN) == records
    assert filter_by_direction(records, "ALL") == records
    assert filter_by_direction(records, None) == records


def test_rank_by_distance_puts_missing_coordinates_last() -> None:
    ranked = rank_by_distance(HERE, [NO_COORDS, WEST_401, EAST_401])

    assert [item.record.id for item in ranked] == ["a", "b", "c"]
    assert math.isinf(ranked[-1].distance_km)
    assert ranked[0].distance_km < ranked[1].distance_km


def test_rank_without_position_keeps_order() -> None:
    ranked = rank_by_distance(None, [WEST_401, EAST_401, NO_COORDS])

    assert [item.record.id for item in ranked] == ["b", "a", "c"]
    assert all(math.isinf(item.distance_km) for item in ranked)


def test_out_of_range_coordinates_rank_as_unknown() -> None:
    bogus = _record("x", 95.0, -79.4, "401", "EAST")

    assert bogus.position is None
    assert math.isinf(rank_by_distance(HERE, [bogus])[0].distance_km)


def test_whats_ahead_eastbound_on_401() -> None:
    result = whats_ahead(HERE, Cardinal.EAST, [EAST_401, WEST_401])

    assert len(result) == 1
    assert result[0].record is EAST_401
    assert result[0].distance_km == pytest.approx(2.7, abs=0.2)


def test_whats_ahead_restricts_to_nearest_road() -> None:
    result = whats_ahead(HERE, Cardinal.SOUTH, [EAST_401, WEST_401, DVP_SOUTH])

    # The DVP incident is the closest one, so its road wins.
    assert [item.record.id for item in result] == ["d"]


def test_whats_ahead_no_match_for_direction() -> None:
    assert whats_ahead(HERE, Cardinal.NORTH, [EAST_401, WEST_401]) == []


def test_whats_ahead_unknown_direction_is_capped() -> None:
    records = [_record(str(i), 43.70 + i * 0.001, -79.40, "401", "EAST") for i in range(60)]

    result = whats_ahead(HERE, Cardinal.UNKNOWN, records)

    assert len(result) == 50
    distances = [item.distance_km for item in result]
    assert distances == sorted(distances)


def test_whats_ahead_without_position() -> None:
    result = whats_ahead(None, None, [WEST_401, EAST_401])

    assert [item.record.id for item in result] == ["b", "a"]


def test_correlator_uses_configured_cap() -> None:
    records = [_record(str(i), 43.70, -79.40 + i * 0.001, "401", "WEST") for i in range(10)]
    correlator = ProximityCorrelator(max_results=3)

    assert correlator.max_results == 3
    assert len(correlator.whats_ahead(HERE, None, records)) == 3
    assert len(correlator.whats_ahead(HERE, Cardinal.WEST, records)) == 1
    assert correlator.nearest_road(HERE, records) is not None
