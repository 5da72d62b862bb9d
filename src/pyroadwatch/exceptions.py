"""Custom exception hierarchy for pyroadwatch."""

from __future__ import annotations

from pyroadwatch.models.location import LocationErrorCode


class RoadwatchError(Exception):
    """Base exception for all pyroadwatch errors."""


class RoadwatchConfigError(RoadwatchError):
    """Invalid or missing configuration."""


class LocationError(RoadwatchError):
    """A location acquisition attempt failed.

    ``retryable`` errors feed the accuracy-downgrade-then-backoff policy of
    the tracker.  ``fatal`` errors put the tracker in a terminal error state.
    """

    code: LocationErrorCode = LocationErrorCode.UNKNOWN
    retryable: bool = True
    default_message: str = "Unknown location error."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def fatal(self) -> bool:
        return not self.retryable


class PermissionDeniedError(LocationError):
    """The user or platform refused access to location (code 1)."""

    code = LocationErrorCode.PERMISSION_DENIED
    retryable = False
    default_message = "Location permission denied. Please enable location services."


class PositionUnavailableError(LocationError):
    """The sensor could not produce a fix (code 2)."""

    code = LocationErrorCode.POSITION_UNAVAILABLE
    default_message = "GPS signal lost or unavailable. Please check your device settings."


class LocationTimeoutError(LocationError):
    """No fix arrived within the acquisition bound (code 3)."""

    code = LocationErrorCode.TIMEOUT
    default_message = "Location request timed out."


class UnknownLocationError(LocationError):
    """Any other sensor failure; retried conservatively."""


class NoLocationCapabilityError(LocationError):
    """The platform exposes no location capability at all."""

    retryable = False
    default_message = "Geolocation is not supported on this platform."


_ERRORS_BY_CODE: dict[LocationErrorCode, type[LocationError]] = {
    LocationErrorCode.PERMISSION_DENIED: PermissionDeniedError,
    LocationErrorCode.POSITION_UNAVAILABLE: PositionUnavailableError,
    LocationErrorCode.TIMEOUT: LocationTimeoutError,
}


def location_error_from_code(code: int | LocationErrorCode, message: str | None = None) -> LocationError:
    """Map a platform error code to the matching :class:`LocationError`."""
    error_cls = _ERRORS_BY_CODE.get(LocationErrorCode(code), UnknownLocationError)
    return error_cls(message or None)


class IncidentFetchError(RoadwatchError):
    """Incident feed request failed (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class IncidentPayloadError(IncidentFetchError):
    """Incident feed answered with a payload that holds no incident list."""
