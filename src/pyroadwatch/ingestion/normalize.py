"""Normalization helpers.

Centralizes defensive parsing and placeholder handling.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

_TRUE_STRINGS = frozenset({"1", "true", "yes", "y", "on"})

# Keys under which upstream payloads (or a proxy in front of them) wrap the
# incident list, in lookup order.
_LIST_KEYS: tuple[str, ...] = ("data", "events", "EventList", "Events", "alerts", "Alerts")
_MAX_UNWRAP_DEPTH = 3


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--":
        return None
    if isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result):
        return None
    return result


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def safe_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


def extract_incident_list(payload: Any, *, _depth: int = 0) -> list[Any] | None:
    """Find the incident list inside *payload*.

    Accepts a bare list or a mapping wrapping it under one of the known
    keys, possibly nested (``{"success": true, "data": {"EventList": [...]}}``).
    Returns ``None`` when no list can be found.
    """
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, Mapping) or _depth >= _MAX_UNWRAP_DEPTH:
        return None
    for key in _LIST_KEYS:
        if key not in payload:
            continue
        found = extract_incident_list(payload[key], _depth=_depth + 1)
        if found is not None:
            return found
    return None
