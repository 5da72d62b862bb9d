from __future__ import annotations

import logging

import pytest

from pyroadwatch.exceptions import IncidentPayloadError
from pyroadwatch.ingestion.incidents import parse_incidents
from pyroadwatch.ingestion.normalize import extract_incident_list, safe_bool, safe_float, safe_str
from pyroadwatch.models.incident import IncidentImpact, IncidentRecord
from pyroadwatch.models.location import Position

_ONTARIO_EVENT = {
    "ID": "ONT-12345",
    "RoadwayName": "Highway 401",
    "DirectionOfTravel": "Eastbound",
    "Description": "Collision. Two right lanes blocked.",
    "LanesAffected": "Two Right Lanes Closed",
    "IsFullClosure": False,
    "EventType": "accidentsAndIncidents",
    "Latitude": 43.7262,
    "Longitude": -79.4717,
}


def test_upstream_field_names_are_resolved() -> None:
    record = IncidentRecord.model_validate(_ONTARIO_EVENT)

    assert record.id == "ONT-12345"
    assert record.roadway_name == "Highway 401"
    assert record.direction_of_travel == "Eastbound"
    assert record.position == Position(lat=43.7262, lon=-79.4717)
    assert record.event_type == "accidentsAndIncidents"
    assert record.raw == _ONTARIO_EVENT


def test_lowercase_variants_are_resolved() -> None:
    record = IncidentRecord.model_validate(
        {
            "id": 77,
            "roadway": "QEW",
            "direction": "Toronto Bound",
            "comment": "Slow traffic",
            "latitude": "43.6",
            "lng": "-79.5",
            "fullClosure": "true",
        }
    )

    assert record.id == "77"
    assert record.roadway_name == "QEW"
    assert record.direction_of_travel == "Toronto Bound"
    assert record.description == "Slow traffic"
    assert record.lat == 43.6
    assert record.lon == -79.5
    assert record.is_full_closure is True


def test_placeholders_fall_through_to_next_alias() -> None:
    record = IncidentRecord.model_validate({"Latitude": "", "latitude": 43.7, "Longitude": "N/A", "lon": -79.4})

    assert record.position == Position(lat=43.7, lon=-79.4)


def test_missing_coordinates() -> None:
    record = IncidentRecord.model_validate({"RoadwayName": "401", "Latitude": "--", "Longitude": float("nan")})

    assert record.lat is None
    assert record.lon is None
    assert record.position is None
    assert not record.has_coordinates


@pytest.mark.parametrize(
    ("fields", "expected"),
    [
        ({"IsFullClosure": True}, IncidentImpact.FULL_CLOSURE),
        ({"LanesAffected": "All Lanes Closed"}, IncidentImpact.FULL_CLOSURE),
        ({"LanesAffected": "Left Lane Blocked"}, IncidentImpact.LANE_BLOCKED),
        ({"Description": "Minor delays near Keele"}, IncidentImpact.MINOR_DELAY),
        ({"Description": "Scheduled bridge maintenance"}, IncidentImpact.LOW_IMPACT),
        ({"Description": "Vehicle fire"}, IncidentImpact.ACTIVE),
        ({}, IncidentImpact.ACTIVE),
    ],
)
def test_impact_classification(fields: dict[str, object], expected: IncidentImpact) -> None:
    assert IncidentRecord.model_validate(fields).impact is expected


def test_safe_helpers() -> None:
    assert safe_float("1.5") == 1.5
    assert safe_float("--") is None
    assert safe_float(True) is None
    assert safe_float("nan") is None
    assert safe_str("  401 ") == "401"
    assert safe_str("   ") is None
    assert safe_bool("Yes") is True
    assert safe_bool(0) is False
    assert safe_bool(None) is False


def test_extract_incident_list_shapes() -> None:
    items = [{"ID": "1"}]

    assert extract_incident_list(items) is items
    assert extract_incident_list({"data": items}) is items
    assert extract_incident_list({"success": True, "data": {"EventList": items}}) is items
    assert extract_incident_list({"Alerts": items}) is items
    assert extract_incident_list({"data": "oops", "events": items}) is items
    assert extract_incident_list({"message": "rate limited"}) is None
    assert extract_incident_list("nope") is None
    assert extract_incident_list({"data": {"data": {"data": {"data": items}}}}) is None


def test_parse_incidents_skips_bad_entries(caplog: pytest.LogCaptureFixture) -> None:
    payload = {"events": [_ONTARIO_EVENT, "garbage", 42, {"ID": "2", "Latitude": "bad"}]}

    with caplog.at_level(logging.DEBUG, logger="pyroadwatch.ingestion.incidents"):
        records = parse_incidents(payload)

    assert [r.id for r in records] == ["ONT-12345", "2"]
    assert records[1].lat is None
    assert "Skipped 2 of 4" in caplog.text


def test_parse_incidents_rejects_payload_without_list() -> None:
    with pytest.raises(IncidentPayloadError) as excinfo:
        parse_incidents({"error": "down"}, endpoint="/event")

    assert excinfo.value.endpoint == "/event"
    assert excinfo.value.status_code is None
