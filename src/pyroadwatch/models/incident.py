"""Roadway incident models."""

from __future__ import annotations

import math
import re
from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from pyroadwatch.ingestion.normalize import safe_bool, safe_float, safe_str
from pyroadwatch.models._base import RoadwatchBaseModel
from pyroadwatch.models.location import Position


class IncidentImpact(StrEnum):
    FULL_CLOSURE = "FULL CLOSURE"
    LANE_BLOCKED = "LANE BLOCKED"
    MINOR_DELAY = "MINOR DELAY"
    LOW_IMPACT = "LOW IMPACT"
    ACTIVE = "ACTIVE"


_MINOR_RE = re.compile(r"minor|delay|slow")
_PLANNED_RE = re.compile(r"planned|schedule|mainten")


class IncidentRecord(RoadwatchBaseModel):
    """Canonical incident record.

    Upstream feeds name the same field in several ways (``Latitude`` vs
    ``latitude``, ``RoadwayName`` vs ``roadway``...).  All variants are
    resolved here, once, so the rest of the library only sees this shape.

    Parameters
    ----------
    id : str or None
        Upstream identifier.
    lat, lon : float or None
        Incident location; both ``None`` when the feed gave none.
    roadway_name : str or None
        Road the incident is on, e.g. ``"Highway 401"``.
    direction_of_travel : str or None
        Affected direction as sent upstream, e.g. ``"Eastbound"``.
    description : str or None
        Free text description.
    lanes_affected : str or None
        Lane impact text, e.g. ``"Two Right Lanes Closed"``.
    is_full_closure : bool
        Whether the roadway is fully closed.
    event_type : str or None
        Upstream category, e.g. ``"roadwork"``.
    raw : dict
        Original payload dict.
    """

    id: str | None = Field(default=None, validation_alias=AliasChoices("ID", "Id", "id"))
    lat: float | None = Field(default=None, validation_alias=AliasChoices("Latitude", "latitude", "lat"))
    lon: float | None = Field(
        default=None,
        validation_alias=AliasChoices("Longitude", "longitude", "lon", "lng"),
    )
    roadway_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("RoadwayName", "roadwayName", "roadway", "roadway_name"),
    )
    direction_of_travel: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "DirectionOfTravel",
            "directionOfTravel",
            "direction",
            "Direction",
            "travel_direction",
            "direction_of_travel",
        ),
    )
    description: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "Description",
            "description",
            "Comment",
            "comment",
            "Headline",
            "headline",
            "EventDescription",
            "eventDescription",
        ),
    )
    lanes_affected: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "LanesAffected",
            "lanesAffected",
            "lanes_affected",
            "LanesBlocked",
            "lanesBlocked",
            "affectedLanes",
            "impactedLanes",
        ),
    )
    is_full_closure: bool = Field(
        default=False,
        validation_alias=AliasChoices("IsFullClosure", "isFullClosure", "fullClosure", "is_full_closure"),
    )
    event_type: str | None = Field(
        default=None,
        validation_alias=AliasChoices("EventType", "eventType", "event_type"),
    )

    @field_validator("lat", "lon", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator(
        "id",
        "roadway_name",
        "direction_of_travel",
        "description",
        "lanes_affected",
        "event_type",
        mode="before",
    )
    @classmethod
    def _coerce_strings(cls, value: Any) -> str | None:
        return safe_str(value)

    @field_validator("is_full_closure", mode="before")
    @classmethod
    def _coerce_closure(cls, value: Any) -> bool:
        return safe_bool(value)

    @property
    def position(self) -> Position | None:
        """Incident location, or ``None`` unless both coordinates are usable."""
        if self.lat is None or self.lon is None:
            return None
        try:
            return Position(lat=self.lat, lon=self.lon)
        except ValidationError:
            return None

    @property
    def has_coordinates(self) -> bool:
        return self.position is not None

    @property
    def impact(self) -> IncidentImpact:
        """Severity bucket derived from closure flags, lanes and description."""
        lanes = (self.lanes_affected or "").lower()
        description = (self.description or "").lower()
        if self.is_full_closure or "all lanes closed" in lanes:
            return IncidentImpact.FULL_CLOSURE
        if "lane" in lanes and ("closed" in lanes or "block" in lanes):
            return IncidentImpact.LANE_BLOCKED
        if _MINOR_RE.search(description):
            return IncidentImpact.MINOR_DELAY
        if _PLANNED_RE.search(description):
            return IncidentImpact.LOW_IMPACT
        return IncidentImpact.ACTIVE


class NearestRoad(BaseModel):
    """Closest incident to a position and the road it sits on."""

    model_config = ConfigDict(frozen=True)

    record: IncidentRecord
    distance_km: float

    @property
    def road(self) -> str | None:
        return self.record.roadway_name


class RankedIncident(BaseModel):
    """Incident paired with its distance from the current position.

    ``distance_km`` is ``inf`` when either side has no coordinates.
    """

    model_config = ConfigDict(frozen=True)

    record: IncidentRecord
    distance_km: float = math.inf
