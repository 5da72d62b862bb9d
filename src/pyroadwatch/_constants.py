"""Internal constants shared across the library."""

EARTH_RADIUS_KM = 6371.0

# ------------------------------------------------------------------
# Real position tracking
# ------------------------------------------------------------------

POLL_INTERVAL_MS = 5000
RETRY_FLOOR_MS = 5000
RETRY_CAP_MS = 30000
BACKOFF_FACTOR = 1.5
ACQUISITION_TIMEOUT_MS = 10000
HIGH_ACCURACY_MAX_AGE_MS = 5000
LOW_ACCURACY_MAX_AGE_MS = 60000

# Minimum displacement between fixes before the heading is recomputed (10 m).
MIN_DISPLACEMENT_KM = 0.01

# ------------------------------------------------------------------
# Virtual car simulation
# ------------------------------------------------------------------

SIM_DURATION_MS = 300000
SIM_TICK_MS = 1000
# Longitude deltas at or below this are treated as stationary.
SIM_LON_EPSILON = 1e-7

# ------------------------------------------------------------------
# Incident feed call budget
# ------------------------------------------------------------------

MAX_CALLS = 10
CALL_WINDOW_MS = 60000
COOLDOWN_SECONDS = 30

INCIDENT_BASE_URL = "https://511on.ca/api/v2/get"
EVENTS_ENDPOINT = "/event"
ALERTS_ENDPOINT = "/alerts"
USER_AGENT = "pyroadwatch"

REQUEST_TIMEOUT_S = 10.0
AUTO_REFRESH_INTERVAL_S = 15.0
MAX_RESULTS = 50

# Road/direction filter value meaning "no filter".
MATCH_ALL = "ALL"
