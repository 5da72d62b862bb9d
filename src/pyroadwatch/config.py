"""Client configuration for pyroadwatch."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyroadwatch import _constants as c
from pyroadwatch.exceptions import RoadwatchConfigError
from pyroadwatch.models.location import TrackingMode


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class RoadwatchConfig:
    """Engine configuration.

    Parameters
    ----------
    poll_interval_ms : int
        Delay between successful location fixes.
    retry_floor_ms : int
        Initial (and post-success) retry delay after a failed fix.
    retry_cap_ms : int
        Upper bound of the retry delay.
    backoff_factor : float
        Multiplier applied to the retry delay on each low-accuracy failure.
    acquisition_timeout_ms : int
        Bound on a single location attempt.
    high_accuracy_max_age_ms : int
        Maximum age of a cached fix accepted in high-accuracy mode.
    low_accuracy_max_age_ms : int
        Maximum age of a cached fix accepted in low-accuracy mode.
    min_displacement_km : float
        Displacement needed before the heading is recomputed.
    sim_duration_ms : int
        Time the virtual car takes to drive its path.
    sim_tick_ms : int
        Virtual car sampling interval.
    max_calls : int
        Incident calls allowed per call window.
    call_window_ms : int
        Length of the sliding call window.
    cooldown_seconds : int
        Cooldown armed when the window fills up.
    incident_base_url : str
        Base URL of the incident feed.
    request_timeout_s : float
        Total timeout of one incident feed request.
    auto_refresh_interval_s : float
        Incident refresh cadence while a position is available.
    max_results : int
        Cap of the ranked incident list when no direction is known.
    initial_mode : TrackingMode
        Position source selected when the client starts.
    """

    poll_interval_ms: int = c.POLL_INTERVAL_MS
    retry_floor_ms: int = c.RETRY_FLOOR_MS
    retry_cap_ms: int = c.RETRY_CAP_MS
    backoff_factor: float = c.BACKOFF_FACTOR
    acquisition_timeout_ms: int = c.ACQUISITION_TIMEOUT_MS
    high_accuracy_max_age_ms: int = c.HIGH_ACCURACY_MAX_AGE_MS
    low_accuracy_max_age_ms: int = c.LOW_ACCURACY_MAX_AGE_MS
    min_displacement_km: float = c.MIN_DISPLACEMENT_KM
    sim_duration_ms: int = c.SIM_DURATION_MS
    sim_tick_ms: int = c.SIM_TICK_MS
    max_calls: int = c.MAX_CALLS
    call_window_ms: int = c.CALL_WINDOW_MS
    cooldown_seconds: int = c.COOLDOWN_SECONDS
    incident_base_url: str = c.INCIDENT_BASE_URL
    request_timeout_s: float = c.REQUEST_TIMEOUT_S
    auto_refresh_interval_s: float = c.AUTO_REFRESH_INTERVAL_S
    max_results: int = c.MAX_RESULTS
    initial_mode: TrackingMode = TrackingMode.REAL

    def __post_init__(self) -> None:
        if self.sim_duration_ms <= 0:
            raise RoadwatchConfigError("sim_duration_ms must be positive")
        if self.sim_tick_ms <= 0:
            raise RoadwatchConfigError("sim_tick_ms must be positive")
        if self.max_calls <= 0:
            raise RoadwatchConfigError("max_calls must be positive")
        if self.retry_floor_ms > self.retry_cap_ms:
            raise RoadwatchConfigError("retry_floor_ms must not exceed retry_cap_ms")
        if self.backoff_factor < 1:
            raise RoadwatchConfigError("backoff_factor must be at least 1")

    @classmethod
    def from_env(cls, **overrides: Any) -> RoadwatchConfig:
        """Create configuration from ``ROADWATCH_*`` environment variables.

        Explicit keyword arguments override environment values.

        Raises
        ------
        RoadwatchConfigError
            When a variable cannot be parsed.
        """
        env = os.environ

        _ENV_INT_MAP = {
            "ROADWATCH_POLL_INTERVAL_MS": "poll_interval_ms",
            "ROADWATCH_RETRY_FLOOR_MS": "retry_floor_ms",
            "ROADWATCH_RETRY_CAP_MS": "retry_cap_ms",
            "ROADWATCH_ACQUISITION_TIMEOUT_MS": "acquisition_timeout_ms",
            "ROADWATCH_HIGH_ACCURACY_MAX_AGE_MS": "high_accuracy_max_age_ms",
            "ROADWATCH_LOW_ACCURACY_MAX_AGE_MS": "low_accuracy_max_age_ms",
            "ROADWATCH_SIM_DURATION_MS": "sim_duration_ms",
            "ROADWATCH_SIM_TICK_MS": "sim_tick_ms",
            "ROADWATCH_MAX_CALLS": "max_calls",
            "ROADWATCH_CALL_WINDOW_MS": "call_window_ms",
            "ROADWATCH_COOLDOWN_SECONDS": "cooldown_seconds",
            "ROADWATCH_MAX_RESULTS": "max_results",
        }
        _ENV_FLOAT_MAP = {
            "ROADWATCH_BACKOFF_FACTOR": "backoff_factor",
            "ROADWATCH_MIN_DISPLACEMENT_KM": "min_displacement_km",
            "ROADWATCH_REQUEST_TIMEOUT_S": "request_timeout_s",
            "ROADWATCH_AUTO_REFRESH_INTERVAL_S": "auto_refresh_interval_s",
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_INT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                try:
                    config_kwargs[field_name] = int(val)
                except ValueError as exc:
                    raise RoadwatchConfigError(f"{env_key} must be an integer, got {val!r}") from exc
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                try:
                    config_kwargs[field_name] = float(val)
                except ValueError as exc:
                    raise RoadwatchConfigError(f"{env_key} must be a number, got {val!r}") from exc

        base_url = env.get("ROADWATCH_INCIDENT_BASE_URL")
        if base_url:
            config_kwargs["incident_base_url"] = base_url.rstrip("/")

        mode = env.get("ROADWATCH_MODE")
        if mode is not None and "initial_mode" not in overrides:
            try:
                config_kwargs["initial_mode"] = TrackingMode(mode.strip().lower())
            except ValueError as exc:
                raise RoadwatchConfigError(f"ROADWATCH_MODE must be 'real' or 'sim', got {mode!r}") from exc
        elif "initial_mode" not in overrides and _env_bool(env.get("ROADWATCH_SIMULATE"), False):
            config_kwargs["initial_mode"] = TrackingMode.SIM

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
