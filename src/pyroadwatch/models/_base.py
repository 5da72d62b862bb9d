"""Base model and enum for pyroadwatch data.

Boundary models that are parsed from external payloads inherit from
:class:`RoadwatchBaseModel` which provides:

* A ``model_validator(mode="before")`` that strips placeholder values
  (``""``, ``"--"``, ``"N/A"``, NaN) so the field default is used and
  alias lookups fall through to the next candidate key.
* A ``raw`` dict that captures the original payload.

Integer code enums inherit from :class:`RoadwatchIntEnum` which adds an
``UNKNOWN`` member at ``-1`` and a ``_missing_`` hook that returns
``UNKNOWN`` for any value without a mapped member.
"""

from __future__ import annotations

import enum
import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Placeholder strings upstream feeds use for "not available".
_SENTINELS = frozenset({"", "--", "N/A", "NaN", "nan"})


class RoadwatchIntEnum(enum.IntEnum):
    """Base for integer code enums.

    Every subclass **must** define ``UNKNOWN = -1``.
    """

    @classmethod
    def _missing_(cls, value: object) -> RoadwatchIntEnum:
        # pylint: disable=no-member
        if hasattr(cls, "UNKNOWN"):
            unknown: RoadwatchIntEnum = cls.UNKNOWN  # type: ignore[attr-defined]
            return unknown
        return next(iter(cls))


class RoadwatchBaseModel(BaseModel):
    """Base for models parsed from external payloads.

    Handles:
    * placeholder values (``""``, ``"--"``, NaN) → dropped so the field
      default is used instead
    * Stashes the original dict in ``raw``
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
    """Original payload dict."""

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        """Strip placeholder values from *values*."""
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and value.strip() in _SENTINELS:
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_payload_values(cls, values: Any) -> Any:
        """Strip placeholder values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = RoadwatchBaseModel._clean_dict(values)
        # Keep an explicitly supplied raw= as-is.
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
