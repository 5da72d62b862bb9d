"""Great-circle distance, bearing and cardinal classification."""

from __future__ import annotations

import math

from pyroadwatch._constants import EARTH_RADIUS_KM
from pyroadwatch.models.location import Cardinal, Position

# Coordinates closer than this (degrees) are treated as the same point.
_SAME_POINT_TOLERANCE = 1e-12


def distance(a: Position, b: Position) -> float:
    """Haversine distance between *a* and *b* in kilometres."""
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.lon - a.lon)
    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    # Rounding can push h marginally outside [0, 1] for near-antipodal points.
    h = min(1.0, max(0.0, h))
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def bearing(a: Position, b: Position) -> float:
    """Initial forward azimuth from *a* to *b*, in degrees within [0, 360).

    Returns ``0.0`` when both points coincide.
    """
    if abs(a.lat - b.lat) <= _SAME_POINT_TOLERANCE and abs(a.lon - b.lon) <= _SAME_POINT_TOLERANCE:
        return 0.0
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    d_lon = math.radians(b.lon - a.lon)
    y = math.sin(d_lon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(d_lon)
    return normalize_bearing(math.degrees(math.atan2(y, x)))


def normalize_bearing(value: float) -> float:
    """Wrap *value* into [0, 360)."""
    result = value % 360.0
    # -1e-15 % 360 rounds to 360.0
    return 0.0 if result >= 360.0 else result


def classify(bearing_deg: float) -> Cardinal:
    """Map a bearing onto its 90° cardinal sector.

    NORTH covers [315, 45), EAST [45, 135), SOUTH [135, 225) and WEST
    [225, 315).  Non-finite input yields ``UNKNOWN``.
    """
    if not math.isfinite(bearing_deg):
        return Cardinal.UNKNOWN
    value = normalize_bearing(bearing_deg)
    if value >= 315.0 or value < 45.0:
        return Cardinal.NORTH
    if value < 135.0:
        return Cardinal.EAST
    if value < 225.0:
        return Cardinal.SOUTH
    return Cardinal.WEST


def interpolate(a: Position, b: Position, fraction: float) -> Position:
    """Componentwise linear interpolation between *a* and *b*.

    Not geodesic; adequate for short corridors.
    """
    return Position(
        lat=a.lat + (b.lat - a.lat) * fraction,
        lon=a.lon + (b.lon - a.lon) * fraction,
    )
