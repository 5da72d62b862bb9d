"""Position, direction and tracking state models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from pyroadwatch.models._base import RoadwatchIntEnum


class Cardinal(StrEnum):
    """Coarse 90° sector of a bearing."""

    NORTH = "NORTH"
    EAST = "EAST"
    SOUTH = "SOUTH"
    WEST = "WEST"
    UNKNOWN = "UNKNOWN"


class TrackingMode(StrEnum):
    REAL = "real"
    SIM = "sim"


class LocationStatus(StrEnum):
    IDLE = "idle"
    REQUESTING = "requesting"
    TRACKING = "tracking"
    READY = "ready"
    ERROR = "error"


class GpsQuality(StrEnum):
    """Quality of the position currently served.

    ``LAST_KNOWN`` means the live reading failed but a prior position is
    still being served.
    """

    NONE = "none"
    HIGH = "high"
    LOW = "low"
    LAST_KNOWN = "lastKnown"


class LocationErrorCode(RoadwatchIntEnum):
    """Platform location error codes (W3C geolocation numbering)."""

    UNKNOWN = -1
    PERMISSION_DENIED = 1
    POSITION_UNAVAILABLE = 2
    TIMEOUT = 3


class Position(BaseModel):
    """A fully defined, finite geographic position.

    An absent position is represented by ``None``, never by a partially
    filled instance.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    lat: float = Field(
        ge=-90.0,
        le=90.0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("lat", "latitude", "Latitude"),
    )
    lon: float = Field(
        ge=-180.0,
        le=180.0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("lon", "lng", "longitude", "Longitude"),
    )


_DIRECTION_LABELS: dict[Cardinal, str] = {
    Cardinal.NORTH: "Northbound",
    Cardinal.EAST: "Eastbound",
    Cardinal.SOUTH: "Southbound",
    Cardinal.WEST: "Westbound",
    Cardinal.UNKNOWN: "Unknown",
}


class DirectionEstimate(BaseModel):
    """Direction of travel: a cardinal plus the raw bearing that produced it.

    Parameters
    ----------
    cardinal : Cardinal
        Sector classification; ``UNKNOWN`` until enough displacement has
        been observed.
    bearing : float or None
        Bearing in degrees clockwise from true north, ``None`` when the
        cardinal was not derived from a bearing.
    """

    model_config = ConfigDict(frozen=True)

    cardinal: Cardinal = Cardinal.UNKNOWN
    bearing: float | None = None

    @property
    def is_known(self) -> bool:
        return self.cardinal != Cardinal.UNKNOWN

    @property
    def label(self) -> str:
        """Human label such as ``"Eastbound"``."""
        return _DIRECTION_LABELS[self.cardinal]


UNKNOWN_DIRECTION = DirectionEstimate()


class LocationFix(BaseModel):
    """One reading delivered by a location source."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    lat: float = Field(allow_inf_nan=False, validation_alias=AliasChoices("lat", "latitude"))
    lon: float = Field(allow_inf_nan=False, validation_alias=AliasChoices("lon", "lng", "longitude"))
    timestamp: float | None = None
    accuracy_m: float | None = Field(default=None, validation_alias=AliasChoices("accuracy_m", "accuracy"))

    @property
    def position(self) -> Position:
        return Position(lat=self.lat, lon=self.lon)


class LocationRequestOptions(BaseModel):
    """Options passed with every one-shot location request."""

    model_config = ConfigDict(frozen=True)

    high_accuracy: bool = True
    timeout_ms: int = 10000
    max_cache_age_ms: int = 5000


class SimPath(BaseModel):
    """Straight corridor driven by the virtual car."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    start: Position
    end: Position


class PositionSnapshot(BaseModel):
    """Combined read model of the active position source."""

    model_config = ConfigDict(frozen=True)

    mode: TrackingMode
    position: Position | None = None
    direction: DirectionEstimate = UNKNOWN_DIRECTION
    status: LocationStatus = LocationStatus.IDLE
    gps_quality: GpsQuality = GpsQuality.NONE
    error: str | None = None
