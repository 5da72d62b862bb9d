"""pyroadwatch - Position tracking and direction-aware traffic incidents."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyroadwatch")
except PackageNotFoundError:
    __version__ = "0+local"
from pyroadwatch._scheduler import LoopScheduler, Scheduler
from pyroadwatch._transport import IncidentFeed, IncidentSource
from pyroadwatch.client import RoadwatchClient
from pyroadwatch.config import RoadwatchConfig
from pyroadwatch.exceptions import (
    IncidentFetchError,
    IncidentPayloadError,
    LocationError,
    LocationTimeoutError,
    NoLocationCapabilityError,
    PermissionDeniedError,
    PositionUnavailableError,
    RoadwatchConfigError,
    RoadwatchError,
    UnknownLocationError,
)
from pyroadwatch.limiter import CallBudgetLimiter
from pyroadwatch.location import LocationSource, RouteReplaySource
from pyroadwatch.models import (
    Cardinal,
    DirectionEstimate,
    GpsQuality,
    IncidentImpact,
    IncidentRecord,
    LocationFix,
    LocationRequestOptions,
    LocationStatus,
    NearestRoad,
    Position,
    PositionSnapshot,
    RankedIncident,
    RateLimitState,
    SimPath,
    TrackingMode,
)
from pyroadwatch.provider import UnifiedPositionProvider
from pyroadwatch.proximity import ProximityCorrelator
from pyroadwatch.simulator import VirtualCarSimulator
from pyroadwatch.tracker import RealPositionTracker

__all__ = [
    "__version__",
    "CallBudgetLimiter",
    "Cardinal",
    "DirectionEstimate",
    "GpsQuality",
    "IncidentFeed",
    "IncidentFetchError",
    "IncidentImpact",
    "IncidentPayloadError",
    "IncidentRecord",
    "IncidentSource",
    "LocationError",
    "LocationFix",
    "LocationRequestOptions",
    "LocationSource",
    "LocationStatus",
    "LocationTimeoutError",
    "LoopScheduler",
    "NearestRoad",
    "NoLocationCapabilityError",
    "PermissionDeniedError",
    "Position",
    "PositionSnapshot",
    "PositionUnavailableError",
    "ProximityCorrelator",
    "RankedIncident",
    "RateLimitState",
    "RealPositionTracker",
    "RoadwatchClient",
    "RoadwatchConfig",
    "RoadwatchConfigError",
    "RoadwatchError",
    "RouteReplaySource",
    "Scheduler",
    "SimPath",
    "TrackingMode",
    "UnifiedPositionProvider",
    "UnknownLocationError",
    "VirtualCarSimulator",
]
