"""Data models for pyroadwatch."""

from pyroadwatch.models._base import RoadwatchBaseModel, RoadwatchIntEnum
from pyroadwatch.models.incident import IncidentImpact, IncidentRecord, NearestRoad, RankedIncident
from pyroadwatch.models.location import (
    UNKNOWN_DIRECTION,
    Cardinal,
    DirectionEstimate,
    GpsQuality,
    LocationErrorCode,
    LocationFix,
    LocationRequestOptions,
    LocationStatus,
    Position,
    PositionSnapshot,
    SimPath,
    TrackingMode,
)
from pyroadwatch.models.rate_limit import RateLimitState

__all__ = [
    "Cardinal",
    "DirectionEstimate",
    "GpsQuality",
    "IncidentImpact",
    "IncidentRecord",
    "LocationErrorCode",
    "LocationFix",
    "LocationRequestOptions",
    "LocationStatus",
    "NearestRoad",
    "Position",
    "PositionSnapshot",
    "RankedIncident",
    "RateLimitState",
    "RoadwatchBaseModel",
    "RoadwatchIntEnum",
    "SimPath",
    "TrackingMode",
    "UNKNOWN_DIRECTION",
]
