"""Incident payload ingestion + parsing."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from pyroadwatch.exceptions import IncidentPayloadError
from pyroadwatch.ingestion.normalize import extract_incident_list
from pyroadwatch.models.incident import IncidentRecord

_logger = logging.getLogger(__name__)


def parse_incidents(payload: Any, *, endpoint: str = "") -> list[IncidentRecord]:
    """Normalize an upstream incident payload into canonical records.

    Entries that are not objects, or fail validation, are skipped.

    Raises
    ------
    IncidentPayloadError
        When *payload* holds no incident list at all.
    """
    items = extract_incident_list(payload)
    if items is None:
        raise IncidentPayloadError(
            f"No incident list in payload from {endpoint or 'feed'}",
            endpoint=endpoint,
        )

    records: list[IncidentRecord] = []
    skipped = 0
    for item in items:
        if not isinstance(item, dict):
            skipped += 1
            continue
        try:
            records.append(IncidentRecord.model_validate(item))
        except ValidationError:
            skipped += 1
            _logger.debug("Skipping malformed incident entry", exc_info=True)
    if skipped:
        _logger.debug("Skipped %d of %d incident entries", skipped, len(items))
    return records
