"""Direction-aware filtering and ranking of incidents around a position."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from pyroadwatch import geo
from pyroadwatch._constants import MATCH_ALL, MAX_RESULTS
from pyroadwatch.models.incident import IncidentRecord, NearestRoad, RankedIncident
from pyroadwatch.models.location import Cardinal, Position


def _is_pass_through(value: str | None) -> bool:
    return value is None or not value.strip() or value.strip().upper() == MATCH_ALL


def nearest_road(position: Position | None, records: Iterable[IncidentRecord]) -> NearestRoad | None:
    """Closest record to *position* among those with coordinates.

    Ties keep the first record encountered.  ``None`` when *position* is
    absent or no record has coordinates.
    """
    if position is None:
        return None
    best: NearestRoad | None = None
    for record in records:
        location = record.position
        if location is None:
            continue
        km = geo.distance(position, location)
        if best is None or km < best.distance_km:
            best = NearestRoad(record=record, distance_km=km)
    return best


def filter_by_road(records: Iterable[IncidentRecord], name: str | None) -> list[IncidentRecord]:
    """Records whose roadway name contains *name*, ignoring case."""
    if _is_pass_through(name):
        return list(records)
    needle = name.strip().upper()  # type: ignore[union-attr]
    return [r for r in records if needle in (r.roadway_name or "").upper()]


def filter_by_direction(records: Iterable[IncidentRecord], cardinal: Cardinal | str | None) -> list[IncidentRecord]:
    """Records whose direction of travel contains *cardinal*, ignoring case.

    ``"EAST"`` matches ``"Eastbound"`` and ``"EAST"`` alike.
    """
    value = cardinal.value if isinstance(cardinal, Cardinal) else cardinal
    if _is_pass_through(value) or value == Cardinal.UNKNOWN.value:
        return list(records)
    needle = value.strip().upper()  # type: ignore[union-attr]
    return [r for r in records if needle in (r.direction_of_travel or "").upper()]


def rank_by_distance(position: Position | None, records: Iterable[IncidentRecord]) -> list[RankedIncident]:
    """Attach distances and sort ascending; stable on ties.

    Records without coordinates, or every record when *position* is
    absent, get ``inf`` and therefore keep their relative order at the end.
    """
    ranked: list[RankedIncident] = []
    for record in records:
        location = record.position
        if position is None or location is None:
            km = math.inf
        else:
            km = geo.distance(position, location)
        ranked.append(RankedIncident(record=record, distance_km=km))
    ranked.sort(key=lambda item: item.distance_km)
    return ranked


def whats_ahead(
    position: Position | None,
    cardinal: Cardinal | str | None,
    records: Sequence[IncidentRecord],
    *,
    limit: int = MAX_RESULTS,
) -> list[RankedIncident]:
    """Incidents relevant to a car at *position* heading *cardinal*.

    Narrows to the road of the nearest incident, then to the travel
    direction, then ranks by distance.  With a known direction only the
    closest match is returned; otherwise up to *limit* ranked incidents.
    """
    nearest = nearest_road(position, records)
    filtered: list[IncidentRecord] = list(records)
    if nearest is not None and nearest.road:
        filtered = filter_by_road(filtered, nearest.road)
    filtered = filter_by_direction(filtered, cardinal)
    ranked = rank_by_distance(position, filtered)

    value = cardinal.value if isinstance(cardinal, Cardinal) else cardinal
    if not _is_pass_through(value) and value != Cardinal.UNKNOWN.value:
        return ranked[:1]
    return ranked[:limit]


class ProximityCorrelator:
    """Bundles the proximity functions with a configured result cap."""

    def __init__(self, *, max_results: int = MAX_RESULTS) -> None:
        self._max_results = max_results

    @property
    def max_results(self) -> int:
        return self._max_results

    nearest_road = staticmethod(nearest_road)
    filter_by_road = staticmethod(filter_by_road)
    filter_by_direction = staticmethod(filter_by_direction)
    rank_by_distance = staticmethod(rank_by_distance)

    def whats_ahead(
        self,
        position: Position | None,
        cardinal: Cardinal | str | None,
        records: Sequence[IncidentRecord],
    ) -> list[RankedIncident]:
        return whats_ahead(position, cardinal, records, limit=self._max_results)
